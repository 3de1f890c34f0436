"""
Flask route blueprints for PackingListWeb.

This module contains all route handlers organized by functionality:
- main: Home redirect
- packing_lists: Overview, QR search, create/edit form, delete
- clients: Client CRUD
- printing: Label and manifest printing
- api: AJAX endpoints (health, client search, code lookup)

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .packing_lists import packing_lists_bp
from .clients import clients_bp
from .printing import printing_bp
from .api import api_bp

__all__ = [
    "main_bp",
    "packing_lists_bp",
    "clients_bp",
    "printing_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(packing_lists_bp)
    app.register_blueprint(clients_bp)
    app.register_blueprint(printing_bp)
    app.register_blueprint(api_bp)
