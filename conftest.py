from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Optional, Sequence, Tuple

import pytest

from src.ward_attendance.ward_attendance.attendance.model import AttendanceRecord, NewAttendance
from src.ward_attendance.ward_attendance.attendance.service import AttendanceMarkingService
from src.ward_attendance.ward_attendance.attendance.validator import ConsistencyValidator
from src.ward_attendance.ward_attendance.core.enums import Role, WorkerStatus
from src.ward_attendance.ward_attendance.core.exceptions import DuplicateAttendanceError
from src.ward_attendance.ward_attendance.organization.model import CallerIdentity, Supervisor, Ward, Worker

# Square around lat 26.90-26.95, lng 75.75-75.80, stored as [lat, lng] pairs.
WARD_7_BOUNDARY = [[26.90, 75.75], [26.90, 75.80], [26.95, 75.80], [26.95, 75.75]]


class InMemoryWards:
    def __init__(self):
        self.wards: Dict[int, Ward] = {}

    def get_by_id(self, ward_id: int) -> Optional[Ward]:
        return self.wards.get(int(ward_id))


class InMemorySupervisors:
    def __init__(self):
        self.supervisors: Dict[int, Supervisor] = {}

    def get_by_id(self, supervisor_id: int) -> Optional[Supervisor]:
        return self.supervisors.get(int(supervisor_id))


class InMemoryWorkers:
    def __init__(self):
        self.workers: Dict[str, Worker] = {}

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        return self.workers.get(str(worker_id))

    def list_active_roster(self, *, supervisor_id: int, ward_id: int, ulb_id: str) -> Sequence[Worker]:
        return [
            w
            for w in self.workers.values()
            if w.supervisor_id == supervisor_id
            and w.ward_id == ward_id
            and w.ulb_id == ulb_id
            and w.status == WorkerStatus.ACTIVE
        ]


class InMemoryAttendance:
    """Enforces UNIQUE(worker_id, attendance_date) like the real table.

    ``stale_reads`` hides existing rows from lookups to simulate a concurrent
    writer committing between the idempotency check and the insert.
    """

    def __init__(self):
        self.records: Dict[Tuple[str, date], AttendanceRecord] = {}
        self.stale_reads = False
        self.bulk_calls = 0
        self._id = 0

    def get_for_worker_and_date(self, worker_id: str, attendance_date: date) -> Optional[AttendanceRecord]:
        if self.stale_reads:
            return None
        return self.records.get((str(worker_id), attendance_date))

    def list_for_workers_and_date(self, worker_ids: Sequence[str], attendance_date: date):
        if self.stale_reads:
            return []
        return [r for (wid, d), r in self.records.items() if d == attendance_date and wid in set(worker_ids)]

    def _insert(self, record: NewAttendance) -> str:
        self._id += 1
        attendance_id = f"att-{self._id}"
        self.records[(record.worker_id, record.attendance_date)] = AttendanceRecord.from_new(attendance_id, record)
        return attendance_id

    def create(self, record: NewAttendance) -> str:
        if (record.worker_id, record.attendance_date) in self.records:
            raise DuplicateAttendanceError(record.worker_id)
        return self._insert(record)

    def bulk_create(self, records: Sequence[NewAttendance]) -> int:
        self.bulk_calls += 1
        keys = [(r.worker_id, r.attendance_date) for r in records]
        if any(k in self.records for k in keys) or len(set(keys)) != len(keys):
            raise DuplicateAttendanceError("batch")
        for r in records:
            self._insert(r)
        return len(records)

    def count_for(self, worker_id: str, attendance_date: date) -> int:
        return sum(1 for (wid, d) in self.records if wid == worker_id and d == attendance_date)


class World:
    """Supervisor 101 runs ward 7 of ULB "ulb-1"; the fixtures below build on this."""

    def __init__(self):
        self.wards = InMemoryWards()
        self.supervisors = InMemorySupervisors()
        self.workers = InMemoryWorkers()
        self.attendance = InMemoryAttendance()

        self.add_ward(Ward(ward_id=7, ulb_id="ulb-1", ward_number="7", ward_name="Gandhi Nagar", boundary_coordinates=WARD_7_BOUNDARY))
        self.add_ward(Ward(ward_id=8, ulb_id="ulb-1", ward_number="8", ward_name="Shastri Nagar"))
        self.supervisors.supervisors[101] = Supervisor(supervisor_id=101, full_name="S", ward_id=7, ulb_id="ulb-1", eo_id=500)

    def add_ward(self, ward: Ward) -> Ward:
        self.wards.wards[ward.ward_id] = ward
        return ward

    def add_worker(self, worker_id: str, **overrides) -> Worker:
        fields = dict(
            worker_id=worker_id,
            full_name=f"Worker {worker_id}",
            ward_id=7,
            ulb_id="ulb-1",
            supervisor_id=101,
            worker_type="SWEEPER",
        )
        fields.update(overrides)
        worker = Worker(**fields)
        self.workers.workers[worker_id] = worker
        return worker

    def update_ward(self, ward_id: int, **changes) -> None:
        self.wards.wards[ward_id] = replace(self.wards.wards[ward_id], **changes)

    def validator(self) -> ConsistencyValidator:
        return ConsistencyValidator(self.workers, self.supervisors, self.wards)

    def service(self, **kwargs) -> AttendanceMarkingService:
        return AttendanceMarkingService(self.attendance, self.workers, self.validator(), **kwargs)


@pytest.fixture()
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 8, 30, 0)


@pytest.fixture()
def world() -> World:
    w = World()
    w.add_worker("w-1")
    w.add_worker("w-2", eo_id=501)
    return w


@pytest.fixture()
def supervisor() -> CallerIdentity:
    return CallerIdentity(user_id=101, role=Role.SUPERVISOR, ward_ids=(7,), ulb_id="ulb-1")


@pytest.fixture()
def service(world: World) -> AttendanceMarkingService:
    return world.service()
