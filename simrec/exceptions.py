"""Custom exceptions for SimRec.

Every error carries an HTTP status code and a details dictionary so the API
layer can turn it into a uniform JSON error response.
"""

from typing import Any, Dict, Optional


class SimRecError(Exception):
    """Base exception for SimRec errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class UnknownUserError(SimRecError):
    """Raised when a user id has no profile in the rating store."""

    def __init__(self, user_id: int, details: Optional[Dict[str, Any]] = None):
        message = f"User {user_id} not found in rating data."
        super().__init__(
            message=message,
            status_code=404,
            details=details or {"user_id": user_id},
        )
        self.user_id = user_id


class UnknownItemError(SimRecError):
    """Raised when an item id is not in the catalog."""

    def __init__(self, item_id: int, details: Optional[Dict[str, Any]] = None):
        message = f"Item {item_id} not found in item catalog."
        super().__init__(
            message=message,
            status_code=404,
            details=details or {"item_id": item_id},
        )
        self.item_id = item_id


class DuplicateItemError(SimRecError):
    """Raised when two catalog records share the same item id."""

    def __init__(self, item_id: int):
        message = f"Duplicate item id {item_id} in item catalog."
        super().__init__(
            message=message,
            status_code=500,
            details={"item_id": item_id},
        )
        self.item_id = item_id


class InvalidParameterError(SimRecError):
    """Raised when a request or configuration parameter is out of range."""

    def __init__(self, name: str, value: Any, reason: str):
        message = f"Invalid value for '{name}': {value!r} ({reason})"
        super().__init__(
            message=message,
            status_code=400,
            details={"parameter": name, "value": value, "reason": reason},
        )


class InconsistentStateError(SimRecError):
    """Raised when an internal invariant of the engine does not hold."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=500, details=details)


class DataLoadError(SimRecError):
    """Raised when rating or item data cannot be parsed."""

    def __init__(self, path: str, error: str):
        message = f"Failed to load data from '{path}': {error}"
        super().__init__(
            message=message,
            status_code=500,
            details={"path": path, "error": error},
        )


class StoreNotLoadedError(SimRecError):
    """Raised when a request arrives before the rating store is built."""

    def __init__(self, data_dir: Optional[str] = None):
        message = "Rating data is not loaded. Check the data directory and restart the service."
        super().__init__(
            message=message,
            status_code=503,
            details={"data_dir": data_dir} if data_dir else {},
        )
