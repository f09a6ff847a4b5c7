from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    """Persistence port for worker attendance.

    Implementations must enforce uniqueness of (worker_id, attendance_date)
    and raise ``DuplicateAttendanceError`` when an insert violates it.
    """

    def get_for_worker_and_date(self, worker_id: str, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_workers_and_date(
        self, worker_ids: Sequence[str], attendance_date: date
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: NewAttendance) -> str:
        """Insert one record and return its id."""

        raise NotImplementedError

    def bulk_create(self, records: Sequence[NewAttendance]) -> int:
        """Insert all records in one transaction (all-or-nothing); returns the count."""

        raise NotImplementedError
