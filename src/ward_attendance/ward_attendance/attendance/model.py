from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..core.enums import GeoStatus, RosterStatus


@dataclass(frozen=True)
class NewAttendance:
    """A record the marking service asks the repository to create."""

    worker_id: str
    supervisor_id: int
    ward_id: int
    ulb_id: str
    eo_id: Optional[int]
    attendance_date: date
    checkin_time: datetime
    geo_status: GeoStatus
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one worker marked present on one calendar day."""

    attendance_id: str
    worker_id: str
    supervisor_id: int
    ward_id: int
    ulb_id: str
    eo_id: Optional[int]
    attendance_date: date
    checkin_time: datetime
    geo_status: GeoStatus
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    photo_url: Optional[str] = None

    @classmethod
    def from_new(cls, attendance_id: str, new: NewAttendance) -> "AttendanceRecord":
        return cls(
            attendance_id=attendance_id,
            worker_id=new.worker_id,
            supervisor_id=new.supervisor_id,
            ward_id=new.ward_id,
            ulb_id=new.ulb_id,
            eo_id=new.eo_id,
            attendance_date=new.attendance_date,
            checkin_time=new.checkin_time,
            geo_status=new.geo_status,
            latitude=new.latitude,
            longitude=new.longitude,
            photo_url=new.photo_url,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "worker_id": self.worker_id,
            "supervisor_id": self.supervisor_id,
            "ward_id": self.ward_id,
            "ulb_id": self.ulb_id,
            "eo_id": self.eo_id,
            "attendance_date": self.attendance_date.isoformat(),
            "checkin_time": self.checkin_time.isoformat(timespec="seconds"),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "photo_url": self.photo_url,
            "geo_status": self.geo_status.value,
        }


@dataclass(frozen=True)
class BulkMarkResult:
    newly_marked: int
    already_marked: int
    total_workers: int

    def to_dict(self) -> dict:
        return {
            "newly_marked": self.newly_marked,
            "already_marked": self.already_marked,
            "total_workers": self.total_workers,
        }


@dataclass(frozen=True)
class RosterEntry:
    """Read-model row for the supervisor's daily roster view."""

    worker_id: str
    full_name: str
    worker_type: Optional[str]
    status: RosterStatus
    checkin_time: Optional[datetime] = None
    geo_status: Optional[GeoStatus] = None
    photo_url: Optional[str] = None
    mobile: Optional[str] = None

    @property
    def is_present(self) -> bool:
        return self.status == RosterStatus.PRESENT

    def to_dict(self) -> dict:
        return {
            "worker_id": self.worker_id,
            "full_name": self.full_name,
            "worker_type": self.worker_type,
            "status": self.status.value,
            "is_present": self.is_present,
            "checkin_time": self.checkin_time.isoformat(timespec="seconds") if self.checkin_time else None,
            "geo_status": self.geo_status.value if self.geo_status else None,
            "photo_url": self.photo_url,
            "mobile": self.mobile,
        }


@dataclass(frozen=True)
class RosterSummary:
    attendance_date: date
    ward_id: int
    workers: List[RosterEntry] = field(default_factory=list)

    def _count(self, status: RosterStatus) -> int:
        return sum(1 for w in self.workers if w.status == status)

    @property
    def total_workers(self) -> int:
        return len(self.workers)

    @property
    def present(self) -> int:
        return self._count(RosterStatus.PRESENT)

    @property
    def absent(self) -> int:
        return self._count(RosterStatus.ABSENT)

    @property
    def not_marked(self) -> int:
        return self._count(RosterStatus.NOT_MARKED)

    @property
    def attendance_pct(self) -> int:
        if not self.workers:
            return 0
        return round(self.present * 100 / self.total_workers)

    def to_dict(self) -> dict:
        return {
            "attendance_date": self.attendance_date.isoformat(),
            "ward_id": self.ward_id,
            "total_workers": self.total_workers,
            "present": self.present,
            "absent": self.absent,
            "not_marked": self.not_marked,
            "attendance_pct": self.attendance_pct,
            "workers": [w.to_dict() for w in self.workers],
        }
