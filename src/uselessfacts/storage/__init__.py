"""Storage backends for fact collections."""

from .base import FactStorage, Record
from .local import STORAGE_KEYS, LocalFactStorage, LocalStore
from .remote import RemoteFactStorage
from .sqlite import SQLiteFactStorage

__all__ = [
    "FactStorage",
    "LocalFactStorage",
    "LocalStore",
    "Record",
    "RemoteFactStorage",
    "SQLiteFactStorage",
    "STORAGE_KEYS",
]
