"""
Print routes.

GET /print/<kind>/<code> renders a stored packing list as a label or a
manifest and returns a page that opens the browser print dialog.

Failures never produce a partial document: the user is sent back to the
overview with a message naming the problem.
"""

from flask import (
    Blueprint,
    Response,
    current_app,
    redirect,
    url_for,
)

from core.exceptions import (
    EncodingError,
    PackingListWebError,
    RecordNotFoundError,
    RenderSurfaceError,
    StoreError,
    ValidationError,
)
from routes.messages import flash_t
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

printing_bp = Blueprint("printing", __name__)


def flash_print_error(error: PackingListWebError, kind: str) -> None:
    """Flash the message for a failed print, by error type."""
    if isinstance(error, ValidationError):
        if error.field == "kind":
            flash_t("print.errors.unknown_kind", "error", kind=kind)
        else:
            flash_t("print.errors.validation", "error", message=error.message)
    elif isinstance(error, EncodingError):
        logger.error(f"QR encoding failed: {error}")
        flash_t("print.errors.encoding", "error")
    elif isinstance(error, RenderSurfaceError):
        logger.error(f"Print surface unavailable: {error}")
        flash_t("print.errors.surface", "error")
    else:
        logger.error(f"Print failed: {error}")
        flash_t("common.error.generic", "error")


@printing_bp.route("/print/<kind>/<code>", methods=["GET"])
def print_document(kind: str, code: str):
    """
    Print a stored packing list.

    Args:
        kind: "label" or "manifest"
        code: Packing list code
    """
    packing_list_service = current_app.config["PACKING_LIST_SERVICE"]
    print_service = current_app.config["PRINT_SERVICE"]

    try:
        packing_list = packing_list_service.get_packing_list(code)
        page = print_service.print_document(kind, packing_list)
        return Response(page, mimetype="text/html")

    except RecordNotFoundError:
        flash_t("common.error.not_found", "warning")
    except StoreError as e:
        logger.error(f"Failed to load packing list {code}: {e}")
        flash_t("common.error.generic", "error")
    except PackingListWebError as e:
        flash_print_error(e, kind)

    return redirect(url_for("packing_lists.overview"))
