"""
Print orchestration.

Turns a packing list into a self-printing HTML page:

    1. Render the document (validation, normalization, QR, aggregation)
    2. Create a fresh PrintSurface (only after rendering succeeded)
    3. Present the document on the surface, which attaches the print action
    4. Tear the surface down

Errors are logged and re-raised unchanged: ValidationError, EncodingError
and RenderSurfaceError all reach the caller, which decides how to show them.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

from core.exceptions import PackingListWebError
from models.packing_list import PackingList
from modules import document_renderer
from modules.document_renderer import DocumentKind
from modules.print_surface import PrintSurface
from logging_config import get_logger, get_print_logger


# Module logger
logger = get_logger(__name__)


class PrintService:
    """
    Renders packing lists and hands them to a per-call print surface.

    Stateless apart from its timing settings, so a single instance can be
    shared by all requests.
    """

    def __init__(self, delay_ms: int = 500, close_delay_ms: int = 1000):
        self.delay_ms = delay_ms
        self.close_delay_ms = close_delay_ms

    def print_document(
        self,
        kind: Union[str, DocumentKind],
        packing_list: Union[PackingList, Mapping[str, Any], None],
    ) -> str:
        """
        Render a document and prepare it for the browser print action.

        Args:
            kind: "label" or "manifest"
            packing_list: Packing list snapshot

        Returns:
            HTML page that invokes print when loaded

        Raises:
            ValidationError: Missing mandatory fields (nothing rendered)
            EncodingError: QR identifier could not be generated
            RenderSurfaceError: Print surface could not be provided
        """
        code = ""
        if isinstance(packing_list, PackingList):
            code = packing_list.code
        elif isinstance(packing_list, Mapping):
            code = str(packing_list.get("code") or "")
        print_logger = get_print_logger(code)

        try:
            markup = document_renderer.render(kind, packing_list)
            print_logger.info(f"Rendered {DocumentKind.parse(kind).value} document")

            with PrintSurface(
                code,
                delay_ms=self.delay_ms,
                close_delay_ms=self.close_delay_ms,
            ) as surface:
                page = surface.present(markup)

        except PackingListWebError as e:
            print_logger.warning(f"Print aborted: {e}")
            raise

        return page
