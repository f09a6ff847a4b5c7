from __future__ import annotations

from typing import Optional

from .enums import RejectionKind, RejectionReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AttendanceRejected(DomainError):
    """A marking attempt was refused for a specific, reportable reason."""

    def __init__(self, reason: RejectionReason, message: Optional[str] = None):
        self.reason = reason
        self.message = message or reason.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> RejectionKind:
        return self.reason.kind

    def to_dict(self) -> dict:
        return {
            "success": False,
            "code": self.reason.value,
            "kind": self.kind.value,
            "message": self.message,
        }


class StorageError(Exception):
    """Raised when the persistence layer fails for reasons other than a rule violation."""


class DuplicateAttendanceError(StorageError):
    """The (worker, attendance date) uniqueness constraint rejected an insert."""
