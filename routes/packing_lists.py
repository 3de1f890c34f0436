"""
Packing list routes.

Handles the overview (search / QR scan), the create/edit form and deletion.

The form is server-rendered: every button posts the whole form with an
`action` value, so nothing typed is lost between round trips.

    save                  validate and store, back to overview
    add_box               append a blank box
    add_model:<box>       append a blank model row to a box
    search_client         look up clients by name or email
    select_client:<id>    copy a stored client into the form
    save_client           store the client typed into the form
    print:<kind>          print the form as it is (unsaved)
"""

from typing import Dict, List, Optional

from flask import (
    Blueprint,
    Response,
    current_app,
    redirect,
    render_template,
    request,
    url_for,
)

from core.exceptions import PackingListWebError, RecordNotFoundError, StoreError
from models.packing_list import Box, Carrier, PackingList
from modules.aggregation import distinct_tracking_numbers
from modules.code_generator import generate_packing_list_code
from modules.forms import (
    box_editor,
    form_box_position,
    parse_packing_list_form,
    sanitize_text,
    validate_packing_list_form,
)
from routes.messages import flash_t
from routes.printing import flash_print_error
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

packing_lists_bp = Blueprint("packing_lists", __name__)


def _services():
    return (
        current_app.config["PACKING_LIST_SERVICE"],
        current_app.config["CLIENT_SERVICE"],
    )


@packing_lists_bp.route("/packing-lists", methods=["GET"])
def overview():
    """
    List packing lists, newest first.

    The `q` parameter filters by code; the QR scanner fills it in.
    """
    packing_list_service, _ = _services()
    query = sanitize_text(request.args.get("q", ""), max_length=64)

    try:
        packing_lists = packing_list_service.list_packing_lists(query)
    except StoreError as e:
        logger.error(f"Failed to load packing lists: {e}")
        flash_t("common.error.generic", "error")
        packing_lists = []

    return render_template(
        "packing_lists/list.html",
        packing_lists=packing_lists,
        query=query,
    )


def _tracking_state(packing_list: PackingList) -> Dict[str, object]:
    """Whether the form should show one shared tracking number."""
    distinct = distinct_tracking_numbers(packing_list.tracking_numbers)
    same = len(distinct) == 1 and len(set(packing_list.tracking_numbers)) == 1
    return {
        "same_tracking": same,
        "common_tracking": distinct[0] if same else "",
    }


def _render_form(
    packing_list: PackingList,
    add_box: bool = False,
    extra_models: Optional[Dict[int, int]] = None,
    client_results: Optional[List] = None,
    client_query: str = "",
    tracking: Optional[Dict[str, object]] = None,
):
    extra_models = extra_models or {}
    editors = [
        box_editor(box, extra_models.get(index, 0))
        for index, box in enumerate(packing_list.boxes)
    ]
    if add_box or not editors:
        editors.append(box_editor(Box(box_number=len(editors) + 1)))

    return render_template(
        "packing_lists/form.html",
        packing_list=packing_list,
        editors=editors,
        carriers=list(Carrier),
        client_results=client_results or [],
        client_query=client_query,
        is_edit=bool(packing_list.code),
        **(tracking or _tracking_state(packing_list)),
    )


def _print_unsaved(packing_list: PackingList, kind: str):
    """Print the form contents without storing them."""
    print_service = current_app.config["PRINT_SERVICE"]
    if not packing_list.code:
        packing_list.code = generate_packing_list_code()
    page = print_service.print_document(kind, packing_list)
    return Response(page, mimetype="text/html")


def _action_index(action: str) -> Optional[int]:
    """Box index of an "add_model:<index>" action, or None when malformed."""
    try:
        index = int(action.split(":", 1)[1])
    except ValueError:
        return None
    return index if index >= 0 else None


def _handle_form(code: Optional[str] = None):
    packing_list_service, client_service = _services()
    packing_list = parse_packing_list_form(request.form, code=code or "")
    action = request.form.get("action", "save")
    tracking = {
        "same_tracking": bool(request.form.get("same_tracking")),
        "common_tracking": sanitize_text(request.form.get("common_tracking")),
    }

    try:
        if action == "add_box":
            return _render_form(packing_list, add_box=True, tracking=tracking)

        if action.startswith("add_model:"):
            form_index = _action_index(action)
            if form_index is None:
                return _render_form(packing_list, tracking=tracking)
            position = form_box_position(request.form, form_index)
            if position is None:
                # blank boxes are not parsed; re-add it at the end
                packing_list.boxes.append(Box(box_number=len(packing_list.boxes) + 1))
                position = len(packing_list.boxes) - 1
            return _render_form(packing_list, extra_models={position: 1}, tracking=tracking)

        if action == "search_client":
            query = sanitize_text(request.form.get("client_query"), max_length=100)
            results = client_service.search(query)
            if not results:
                flash_t("client.search_empty", "info")
            return _render_form(
                packing_list, client_results=results, client_query=query, tracking=tracking
            )

        if action.startswith("select_client:"):
            packing_list.client = client_service.get_client(action.split(":", 1)[1])
            return _render_form(packing_list, tracking=tracking)

        if action == "save_client":
            client = packing_list.client
            if client is None or not client.name:
                flash_t("common.error.required", "error")
            else:
                packing_list.client = client_service.save_client(client)
                flash_t("client.flash.saved", "success", name=client.name)
            return _render_form(packing_list, tracking=tracking)

        if action.startswith("print:"):
            kind = action.split(":", 1)[1]
            try:
                return _print_unsaved(packing_list, kind)
            except PackingListWebError as e:
                flash_print_error(e, kind)
                return _render_form(packing_list, tracking=tracking)

        errors = validate_packing_list_form(packing_list)
        if errors:
            for key in errors:
                flash_t(key, "error")
            return _render_form(packing_list, tracking=tracking)

        if code:
            packing_list_service.update_packing_list(code, packing_list)
        else:
            packing_list = packing_list_service.create_packing_list(packing_list)

        logger.info(f"Packing list saved: {packing_list.code}")
        flash_t("packing_list.flash.saved", "success", code=packing_list.code)
        return redirect(url_for("packing_lists.overview"))

    except RecordNotFoundError as e:
        logger.warning(f"Record not found: {e}")
        flash_t("common.error.not_found", "error")
        return _render_form(packing_list, tracking=tracking)
    except PackingListWebError as e:
        logger.error(f"Packing list form action '{action}' failed: {e}")
        flash_t("common.error.generic", "error")
        return _render_form(packing_list, tracking=tracking)


@packing_lists_bp.route("/packing-lists/new", methods=["GET", "POST"])
def create():
    """
    Create a packing list.

    GET: Empty form (optionally pre-filled with ?client_id=)
    POST: Form action (see module docstring)
    """
    if request.method == "POST":
        return _handle_form()

    packing_list = PackingList()
    client_id = request.args.get("client_id")
    if client_id:
        _, client_service = _services()
        try:
            packing_list.client = client_service.get_client(client_id)
        except RecordNotFoundError:
            flash_t("common.error.not_found", "warning")
    return _render_form(packing_list)


@packing_lists_bp.route("/packing-lists/<code>/edit", methods=["GET", "POST"])
def edit(code: str):
    """Edit a stored packing list. The code never changes."""
    packing_list_service, _ = _services()

    try:
        stored = packing_list_service.get_packing_list(code)
    except RecordNotFoundError:
        flash_t("common.error.not_found", "warning")
        return redirect(url_for("packing_lists.overview"))

    if request.method == "POST":
        return _handle_form(code=stored.code)

    return _render_form(stored)


@packing_lists_bp.route("/packing-lists/<code>/delete", methods=["POST"])
def delete(code: str):
    """Delete a packing list (confirmed in the browser)."""
    packing_list_service, _ = _services()
    try:
        packing_list_service.delete_packing_list(code)
        flash_t("packing_list.flash.deleted", "success", code=code)
    except RecordNotFoundError:
        flash_t("common.error.not_found", "warning")
    except StoreError as e:
        logger.error(f"Failed to delete packing list {code}: {e}")
        flash_t("common.error.generic", "error")
    return redirect(url_for("packing_lists.overview"))
