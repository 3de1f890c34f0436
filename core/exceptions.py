"""
Custom exceptions for PackingListWeb.

Exception Hierarchy:
    PackingListWebError (base)
    ├── ValidationError      - Packing list is missing mandatory fields (print aborted)
    ├── EncodingError        - QR identifier image could not be generated (print aborted)
    ├── RenderSurfaceError   - Print surface could not be provided
    └── StoreError           - Record store failure
        ├── RecordNotFoundError  - Client or packing list does not exist
        └── DuplicateRecordError - Primary key already taken

Usage:
    Print errors are terminal for a single render call and are never retried.
    They propagate to the caller (route), which decides how to show them.
"""

from typing import Optional, Dict, Any


class PackingListWebError(Exception):
    """
    Base exception for all PackingListWeb errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# PRINT ERRORS - The render call fails, nothing is printed
# =============================================================================

class ValidationError(PackingListWebError):
    """
    A packing list cannot be printed because a mandatory field is missing.

    The field category is one of:
    - "packing_list": no data was provided at all
    - "boxes": the box list is empty
    - "client": client name or address is missing
    - "code": the packing list has no code
    - "kind": the requested document layout is unknown
    """

    def __init__(self, field: str, message: Optional[str] = None):
        message = message or f"Invalid packing list: missing {field}"
        details = {
            "field": field,
            "resolution": "Complete the packing list before printing",
        }
        super().__init__(message, details)
        self.field = field


class EncodingError(PackingListWebError):
    """
    The QR identifier image could not be generated from the packing list code.

    Rendering is aborted rather than printing a document without its
    scannable identifier.
    """

    def __init__(self, code: str, reason: str = ""):
        message = f"Failed to encode QR code for {code!r}"
        if reason:
            message = f"{message}: {reason}"
        details = {
            "code": code,
            "resolution": "Check that the packing list code is valid and printable",
        }
        super().__init__(message, details)
        self.code = code


class RenderSurfaceError(PackingListWebError):
    """
    The print surface could not be provided or was used outside its scope.

    Typical causes:
    - Print trigger template missing from the installation
    - Rendered document has no <body> to attach the print action to
    - Surface written to after it was torn down
    """

    def __init__(self, message: str, resolution: str = ""):
        details = {
            "resolution": resolution or "Allow pop-ups for this site and retry the print"
        }
        super().__init__(message, details)


# =============================================================================
# STORE ERRORS - Record store operations
# =============================================================================

class StoreError(PackingListWebError):
    """
    Base class for record store failures.

    Wraps driver-level errors so routes never depend on SQLAlchemy types.
    """

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if entity:
            error_details["entity"] = entity
        if key:
            error_details["key"] = key
        super().__init__(message, error_details)
        self.entity = entity
        self.key = key


class RecordNotFoundError(StoreError):
    """The requested client or packing list does not exist."""

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} not found: {key}", entity, key)


class DuplicateRecordError(StoreError):
    """A record with the same primary key already exists."""

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} already exists: {key}", entity, key)
