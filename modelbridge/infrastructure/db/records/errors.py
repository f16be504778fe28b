from __future__ import annotations


class RecordError(Exception):
    """Raised when a record cannot be built, loaded, saved or queried."""


class RecordNotFoundError(RecordError):
    """Raised by a non-speculative load when no matching row exists."""
