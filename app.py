"""
PackingListWeb - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env, config classes, overrides)
2. Opens the record store and creates the schema
3. Creates the client, packing list and print services
4. Registers route blueprints
5. Sets up error handlers and context processors

ARCHITECTURE:
    Flask request handling
    ├── ClientService / PackingListService  (SQLAlchemy, session per call)
    └── PrintService                        (render -> PrintSurface, per call)

Services are stateless apart from their configuration, so one instance of
each is shared by all requests.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask, redirect, request, session, url_for

from logging_config import setup_logging, get_logger
from core.database import Database
from core.exceptions import StoreError
from services.client_service import ClientService
from services.packing_list_service import PackingListService
from services.print_service import PrintService
from routes import register_blueprints
from routes.messages import flash_t
from modules.i18n import (
    DEFAULT_LANGUAGE,
    create_translation_filter,
    get_supported_languages,
    is_language_supported,
)


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In PyInstaller bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(
    config_object: str = "config.Config",
    overrides: Optional[Mapping[str, Any]] = None,
) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path of the configuration class
        overrides: Extra settings applied last (tests use this for DATABASE_URL)

    Returns:
        Configured Flask application

    Raises:
        StoreError: If the database schema cannot be created
    """
    # Load .env from base path (next to executable in production)
    # Use override=True so .env file always takes precedence over shell environment
    base_path = _get_base_path()
    env_file = base_path / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)  # Default behavior

    # Create Flask app
    app = Flask(__name__)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting PackingListWeb in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # RECORD STORE (FAIL-FAST)
    # =========================================================================

    database = Database(
        app.config["DATABASE_URL"],
        echo=app.config.get("DATABASE_ECHO", False),
    )
    try:
        database.create_schema()
    except StoreError as e:
        logger.error(f"FATAL: Cannot start application - {e}")
        raise

    app.config["DATABASE"] = database

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    app.config["CLIENT_SERVICE"] = ClientService(
        database,
        search_limit=app.config.get("CLIENT_SEARCH_LIMIT", 5),
    )
    app.config["PACKING_LIST_SERVICE"] = PackingListService(database)
    app.config["PRINT_SERVICE"] = PrintService(
        delay_ms=app.config.get("PRINT_DELAY_MS", 500),
        close_delay_ms=app.config.get("PRINT_CLOSE_DELAY_MS", 1000),
    )
    logger.info("Services initialized")

    # =========================================================================
    # CLEANUP REGISTRATION
    # =========================================================================

    def cleanup():
        """Cleanup on application shutdown."""
        logger.info("Shutting down...")
        database.dispose()
        logger.info("Shutdown complete")

    atexit.register(cleanup)

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # CONTEXT PROCESSORS
    # =========================================================================

    default_language = app.config.get("DEFAULT_LANGUAGE", DEFAULT_LANGUAGE)
    if not is_language_supported(default_language):
        logger.warning(f"Unsupported DEFAULT_LANGUAGE {default_language!r}, using {DEFAULT_LANGUAGE}")
        default_language = DEFAULT_LANGUAGE

    @app.before_request
    def ensure_language():
        """Give every new session the configured default language."""
        if "language" not in session:
            session["language"] = default_language

    @app.context_processor
    def inject_i18n():
        """Inject translation function into all templates."""
        current_lang = session.get("language", default_language)
        return {
            "_": create_translation_filter(current_lang),
            "current_language": current_lang,
            "supported_languages": get_supported_languages(),
        }

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(404)
    def handle_not_found(e):
        flash_t("common.error.page_not_found", "warning")
        return redirect(url_for("packing_lists.overview"))

    @app.errorhandler(StoreError)
    def handle_store_error(e):
        logger.error(f"Unhandled store error: {e}")
        flash_t("common.error.generic", "error")
        return redirect(url_for("packing_lists.overview"))

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        flash_t("common.error.unexpected", "error")
        return redirect(url_for("packing_lists.overview"))

    # =========================================================================
    # LANGUAGE ROUTE
    # =========================================================================

    @app.route("/set_language/<lang>", methods=["GET"])
    def set_language(lang: str):
        if is_language_supported(lang):
            session["language"] = lang
            session.modified = True
            flash_t("common.language_changed", "success",
                    language=get_supported_languages()[lang]['name'])
        else:
            flash_t("common.error.unsupported_language", "error", language=lang)
        return redirect(request.referrer or url_for("packing_lists.overview"))

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
