"""
Travel Crew Backend — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the resource CRUD + asset workflow.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py translate them into JSON
       error responses with the matching HTTP status code.
Who:   Raised by validators, services and store clients; caught by handlers.

Exception Hierarchy:
    TravelCrewError (base)       → 500
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── AssetStoreError          → 400 on create / 500 on update
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class TravelCrewError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only partially returned)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TravelCrewError):
    """
    Raised when client input fails validation.

    When:    Missing/blank required field, invalid number, malformed identifier,
             missing or unacceptable image upload.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "seats must be a number greater than or equal to 1",
            "details": {"field": "seats"}
        }
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(TravelCrewError):
    """
    Raised when an identifier does not resolve to a stored document.

    The document store returns None for missing rows; services convert that
    into this exception so routes never deal with None checks.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class AssetStoreError(TravelCrewError):
    """
    Raised when the external asset host rejects or fails an upload.

    The HTTP status depends on the operation that triggered it: a failed
    upload during create is reported as a request error (400), during update
    as a server error (500). The resource service sets ``status_code``
    before re-raising.

    Destroy failures never raise this; see ``DestroyResult``.
    """

    def __init__(
        self,
        message: str = "Image upload failed",
        status_code: int = 500,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


class DatabaseError(TravelCrewError):
    """
    Raised when a document store operation fails unexpectedly.

    Security Note:
        The message returned to the client is always generic. Details such as
        the SQL statement or constraint name are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
