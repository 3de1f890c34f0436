"""
Isolated print surface.

A PrintSurface is the rendering context a document is handed to once it
has been rendered successfully. It attaches the print action (print once
loaded, then close the window) and is torn down when the `with` block
exits. Every print call gets its own surface; nothing is shared between
calls.

Usage:
    with PrintSurface(code="LOMPL191026143005") as surface:
        page = surface.present(markup)
"""

from __future__ import annotations

from typing import Optional

from jinja2 import Environment, TemplateNotFound

from core.exceptions import RenderSurfaceError
from modules.document_renderer import get_environment
from logging_config import get_logger


logger = get_logger(__name__)

TRIGGER_TEMPLATE = "print_trigger.html"


class PrintSurface:
    """
    Scoped rendering context for one print invocation.

    Lifecycle:
        open -> present(markup) -> close

    Using the surface outside the `with` block raises RenderSurfaceError.
    """

    def __init__(
        self,
        code: str,
        environment: Optional[Environment] = None,
        delay_ms: int = 500,
        close_delay_ms: int = 1000,
    ):
        """
        Args:
            code: Packing list code (for logging)
            environment: Jinja2 environment holding the trigger template
                (default: the document renderer's environment)
            delay_ms: Wait after load before invoking print
            close_delay_ms: Wait after print before closing the window
        """
        self.code = code
        self.environment = environment or get_environment()
        self.delay_ms = delay_ms
        self.close_delay_ms = close_delay_ms
        self._trigger: Optional[str] = None
        self._open = False
        self._page: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> "PrintSurface":
        """
        Acquire the surface.

        Raises:
            RenderSurfaceError: If the print trigger cannot be loaded
        """
        try:
            template = self.environment.get_template(TRIGGER_TEMPLATE)
        except TemplateNotFound as e:
            raise RenderSurfaceError(
                f"Print surface unavailable: template {TRIGGER_TEMPLATE} not found",
                resolution="Reinstall the application templates (templates/print)",
            ) from e

        self._trigger = template.render(
            delay_ms=self.delay_ms, close_delay_ms=self.close_delay_ms
        )
        self._open = True
        logger.debug(f"Print surface opened for {self.code}")
        return self

    def present(self, markup: str) -> str:
        """
        Write a rendered document to the surface and attach the print action.

        Args:
            markup: Complete HTML document from the document renderer

        Returns:
            HTML page that prints itself when loaded

        Raises:
            RenderSurfaceError: If the surface is not open or the
                document has no body
        """
        if not self.is_open:
            raise RenderSurfaceError(
                "Print surface is not open",
                resolution="Present documents inside a `with PrintSurface(...)` block",
            )

        position = markup.rfind("</body>")
        if position < 0:
            raise RenderSurfaceError(
                "Rendered document has no <body> to attach the print action to",
                resolution="Check the print templates",
            )

        self._page = markup[:position] + self._trigger + markup[position:]
        return self._page

    def close(self) -> None:
        """Tear down the surface. Safe to call more than once."""
        if self.is_open:
            logger.debug(f"Print surface closed for {self.code}")
        self._open = False
        self._trigger = None
        self._page = None

    def __enter__(self) -> "PrintSurface":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
