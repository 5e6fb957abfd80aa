"""Song registry engine, its stores and its typed errors."""

from .errors import (
    ErrorCode,
    RegistryError,
    NotFoundError,
    DuplicateKeyError,
    InvalidInputError,
    UnauthorizedError,
)
from .ledger import LedgerClock
from .models import SongDetails, SongEntry, SongPermissionRecord, SongRegistration
from .service import SongRegistry
from .stores import IdentifierAllocator, PermissionStore, SongStore

__all__ = [
    "ErrorCode",
    "RegistryError",
    "NotFoundError",
    "DuplicateKeyError",
    "InvalidInputError",
    "UnauthorizedError",
    "LedgerClock",
    "SongDetails",
    "SongEntry",
    "SongPermissionRecord",
    "SongRegistration",
    "SongRegistry",
    "IdentifierAllocator",
    "PermissionStore",
    "SongStore",
]
