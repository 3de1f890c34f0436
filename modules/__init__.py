"""Helper modules for the PackingListWeb application."""

__all__ = [
    "aggregation",
    "code_generator",
    "document_renderer",
    "forms",
    "i18n",
    "print_surface",
    "qr_encoder",
]
