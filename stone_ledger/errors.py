"""
Error kinds raised by the ledger and its storage.

Every error derives from LedgerError so the UI can catch them in one place
and still branch on the concrete kind to pick the right message.
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvalidInputError(LedgerError):
    """Empty name, or a negative / non-numeric / non-finite weight."""
    pass


class NotFoundError(LedgerError):
    """Operation targeted a record id that is not in the ledger."""

    def __init__(self, record_id: int):
        super().__init__(f"Worker record not found: {record_id}")
        self.record_id = record_id


class InvalidFormatError(LedgerError):
    """
    Import payload is not a well-formed record sequence.

    `issues` holds one entry per offending record (see ValidationIssue).
    """

    def __init__(self, message: str, issues: Optional[list] = None):
        super().__init__(message)
        self.issues = issues or []


class PersistenceFailure(LedgerError):
    """The underlying key-value store could not be read or written."""
    pass
