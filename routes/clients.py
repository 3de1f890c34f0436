"""
Client routes.

Handles:
- /clients - List and search clients
- /clients/new - Create a client
- /clients/<id>/edit - Edit a client
- /clients/<id>/delete - Delete a client
"""

from flask import (
    Blueprint,
    current_app,
    redirect,
    render_template,
    request,
    url_for,
)

from core.exceptions import RecordNotFoundError, StoreError
from models.packing_list import Client
from modules.forms import parse_client_form, sanitize_text
from routes.messages import flash_t
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

clients_bp = Blueprint("clients", __name__)


def _client_service():
    return current_app.config["CLIENT_SERVICE"]


@clients_bp.route("/clients", methods=["GET"])
def list_clients():
    """List clients by name; `q` filters by name or email."""
    query = sanitize_text(request.args.get("q", ""), max_length=100)
    try:
        clients = _client_service().list_clients(query)
    except StoreError as e:
        logger.error(f"Failed to load clients: {e}")
        flash_t("common.error.generic", "error")
        clients = []
    return render_template("clients/list.html", clients=clients, query=query)


@clients_bp.route("/clients/new", methods=["GET", "POST"])
def create():
    """
    Create a client.

    GET: Empty form
    POST: Validate and store
    """
    if request.method == "POST":
        client = parse_client_form(request.form)
        if not client.name:
            flash_t("client.errors.name_required", "error")
            return render_template("clients/form.html", client=client, is_edit=False)

        try:
            client = _client_service().create_client(client)
        except StoreError as e:
            logger.error(f"Failed to create client: {e}")
            flash_t("common.error.generic", "error")
            return render_template("clients/form.html", client=client, is_edit=False)

        flash_t("client.flash.saved", "success", name=client.name)
        return redirect(url_for("clients.list_clients"))

    return render_template("clients/form.html", client=Client(), is_edit=False)


@clients_bp.route("/clients/<client_id>/edit", methods=["GET", "POST"])
def edit(client_id: str):
    """Edit a stored client."""
    service = _client_service()
    try:
        stored = service.get_client(client_id)
    except RecordNotFoundError:
        flash_t("common.error.not_found", "warning")
        return redirect(url_for("clients.list_clients"))

    if request.method == "POST":
        client = parse_client_form(request.form)
        client.id = stored.id
        if not client.name:
            flash_t("client.errors.name_required", "error")
            return render_template("clients/form.html", client=client, is_edit=True)

        try:
            service.update_client(stored.id, client)
        except StoreError as e:
            logger.error(f"Failed to update client {client_id}: {e}")
            flash_t("common.error.generic", "error")
            return render_template("clients/form.html", client=client, is_edit=True)

        flash_t("client.flash.saved", "success", name=client.name)
        return redirect(url_for("clients.list_clients"))

    return render_template("clients/form.html", client=stored, is_edit=True)


@clients_bp.route("/clients/<client_id>/delete", methods=["POST"])
def delete(client_id: str):
    """
    Delete a client.

    Packing lists keep their own copy of the client, so they are unaffected.
    """
    try:
        _client_service().delete_client(client_id)
        flash_t("client.flash.deleted", "success")
    except RecordNotFoundError:
        flash_t("common.error.not_found", "warning")
    except StoreError as e:
        logger.error(f"Failed to delete client {client_id}: {e}")
        flash_t("common.error.generic", "error")
    return redirect(url_for("clients.list_clients"))
