"""
Configuration for PackingListWeb.

Values come from the environment (optionally via a .env file). The record
store defaults to a SQLite file under instance/.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "packing_list_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Record store (any SQLAlchemy URL)
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'packing_lists.db'}"
    )
    DATABASE_ECHO = os.environ.get("DATABASE_ECHO", "0") == "1"

    # Interface language when the session has none ("pt" or "en")
    DEFAULT_LANGUAGE = os.environ.get("DEFAULT_LANGUAGE", "pt")

    # Maximum matches shown by the client picker
    CLIENT_SEARCH_LIMIT = int(os.environ.get("CLIENT_SEARCH_LIMIT", "5"))

    # ==========================================================================
    # Print timing
    # ==========================================================================
    # PRINT_DELAY_MS: wait after the document loads before opening the print
    #   dialog, so the QR image and fonts are painted
    # PRINT_CLOSE_DELAY_MS: wait after the dialog returns before closing the
    #   print window
    # ==========================================================================
    PRINT_DELAY_MS = int(os.environ.get("PRINT_DELAY_MS", "500"))
    PRINT_CLOSE_DELAY_MS = int(os.environ.get("PRINT_CLOSE_DELAY_MS", "1000"))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    SECRET_KEY = "test-secret-key"
    DATABASE_URL = "sqlite://"
    DEFAULT_LANGUAGE = "en"
