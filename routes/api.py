"""
API routes (AJAX endpoints).

Handles:
- /api/health - Health check endpoint
- /api/clients/search - Client picker lookup
- /api/packing-lists/lookup - Resolve a scanned QR code to a packing list
"""

from flask import (
    Blueprint,
    current_app,
    request,
    url_for,
)
from sqlalchemy import text

from core.exceptions import StoreError
from modules.code_generator import is_valid_packing_list_code
from modules.forms import sanitize_text
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint with record store status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    database = current_app.config.get("DATABASE")
    if database is None:
        health_status["checks"]["database"] = "not_configured"
        health_status["status"] = "degraded"
    else:
        try:
            with database.session() as session:
                session.execute(text("SELECT 1"))
            health_status["checks"]["database"] = "ok"
        except StoreError as e:
            logger.error(f"Health check database failure: {e}")
            health_status["checks"]["database"] = "error"
            health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


@api_bp.route("/api/clients/search", methods=["GET"])
def search_clients():
    """
    Search clients by name or email for the client picker.

    Returns at most CLIENT_SEARCH_LIMIT matches; a blank query returns none.
    """
    query = sanitize_text(request.args.get("q", ""), max_length=100)
    client_service = current_app.config["CLIENT_SERVICE"]

    try:
        clients = client_service.search(query)
    except StoreError as e:
        logger.error(f"Client search failed: {e}")
        return {"error": "Client search failed", "results": []}, 500

    return {"query": query, "results": [client.to_dict() for client in clients]}


@api_bp.route("/api/packing-lists/lookup", methods=["GET"])
def lookup_packing_list():
    """
    Resolve a scanned code.

    Responds with the edit URL when the packing list exists so the scanner
    page can jump straight to it.
    """
    code = sanitize_text(request.args.get("code", ""), max_length=64).upper()
    if not is_valid_packing_list_code(code):
        return {"code": code, "valid": False, "found": False}, 400

    packing_list_service = current_app.config["PACKING_LIST_SERVICE"]
    try:
        found = packing_list_service.exists(code)
    except StoreError as e:
        logger.error(f"Packing list lookup failed for {code}: {e}")
        return {"code": code, "valid": True, "found": False, "error": "Lookup failed"}, 500

    response = {"code": code, "valid": True, "found": found}
    if found:
        response["url"] = url_for("packing_lists.edit", code=code)
    return response, (200 if found else 404)
