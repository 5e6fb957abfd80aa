"""Typed failures raised by the song registry."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    NOT_FOUND = "ERR-NOT-FOUND"
    DUPLICATE_KEY = "ERR-DUPLICATE-KEY"
    INVALID_INPUT = "ERR-INVALID-INPUT"
    UNAUTHORIZED = "ERR-UNAUTHORIZED"

    # Reserved; no operation raises these yet
    ACCESS_DENIED = "ERR-ACCESS-DENIED"
    ADMIN_ONLY = "ERR-ADMIN-ONLY"
    RESTRICTED = "ERR-RESTRICTED"
    DUPLICATE = "ERR-DUPLICATE"


class RegistryError(Exception):
    """Base class for every registry failure; ``code`` is stable across releases."""

    code: ErrorCode
    http_status: int = 500

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        payload = {
            "ok": False,
            "error": self.code.value,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return payload


class NotFoundError(RegistryError):
    code = ErrorCode.NOT_FOUND
    http_status = 404


class DuplicateKeyError(RegistryError):
    code = ErrorCode.DUPLICATE_KEY
    http_status = 409


class InvalidInputError(RegistryError):
    code = ErrorCode.INVALID_INPUT
    http_status = 400


class UnauthorizedError(RegistryError):
    code = ErrorCode.UNAUTHORIZED
    http_status = 403


__all__ = [
    "ErrorCode",
    "RegistryError",
    "NotFoundError",
    "DuplicateKeyError",
    "InvalidInputError",
    "UnauthorizedError",
]
