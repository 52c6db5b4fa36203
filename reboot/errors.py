"""Error taxonomy shared by the store, validation and the composing dashboard."""
from __future__ import annotations

from typing import Optional


class RebootError(Exception):
    """Base class for every error raised by the reboot core."""


class StorageError(RebootError):
    pass


class StorageUnavailable(StorageError):
    """The storage engine cannot be opened, or the store was used before init()."""


class StorageWriteError(StorageError):
    pass


class StorageReadError(StorageError):
    pass


class ValidationError(RebootError, ValueError):
    """A log draft was rejected before reaching the store."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
