"""
Core module for PackingListWeb.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- database: SQLAlchemy engine and session lifecycle
"""

from .exceptions import (
    PackingListWebError,
    ValidationError,
    EncodingError,
    RenderSurfaceError,
    StoreError,
    RecordNotFoundError,
    DuplicateRecordError,
)
from .database import Database

__all__ = [
    "PackingListWebError",
    "ValidationError",
    "EncodingError",
    "RenderSurfaceError",
    "StoreError",
    "RecordNotFoundError",
    "DuplicateRecordError",
    "Database",
]
