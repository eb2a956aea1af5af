"""Error taxonomy for the matching engine."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error codes surfaced to the calling layer."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    INVALID_OPERATION = "INVALID_OPERATION"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"


class MatchingError(Exception):
    """Exception raised when a matching engine operation fails."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Any = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        self.original_error = original_error

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}

    @classmethod
    def validation(cls, message: str, details: Any = None) -> MatchingError:
        return cls(ErrorCode.VALIDATION_ERROR, message, details=details)

    @classmethod
    def not_found(cls, entity: str, entity_id: str | None = None) -> MatchingError:
        if entity_id:
            message = f"{entity} with id '{entity_id}' not found"
        else:
            message = f"{entity} not found"
        return cls(ErrorCode.ENTITY_NOT_FOUND, message)

    @classmethod
    def invalid_operation(
        cls, message: str, original_error: Exception | None = None
    ) -> MatchingError:
        return cls(
            ErrorCode.INVALID_OPERATION, message, original_error=original_error
        )


def success_envelope(data: Any) -> dict[str, Any]:
    """Wrap a payload in the ``{success, data}`` response envelope."""
    to_dict = getattr(data, "to_dict", None)
    if callable(to_dict):
        data = to_dict()
    elif isinstance(data, list):
        data = [
            item.to_dict() if callable(getattr(item, "to_dict", None)) else item
            for item in data
        ]
    return {"success": True, "data": data}


def error_envelope(error: MatchingError) -> dict[str, Any]:
    """Wrap an engine failure in the ``{success: false, error}`` envelope."""
    return {"success": False, "error": error.to_dict()}
