"""Organizational consistency checks run before any attendance is marked.

Supervisor -> Ward -> ULB and Worker -> Ward -> ULB must agree. Every
failure raises ``AttendanceRejected`` with the first reason found.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import RejectionReason
from ..core.exceptions import AttendanceRejected
from ..organization.model import CallerIdentity, Supervisor, Ward, Worker
from ..organization.repository import SupervisorRepository, WardRepository, WorkerRepository


@dataclass(frozen=True)
class BulkMarkingContext:
    supervisor_id: int
    ward_id: int
    ulb_id: str
    eo_id: Optional[int]
    supervisor: Optional[Supervisor] = None


@dataclass(frozen=True)
class MarkingContext:
    """Everything a single mark needs once the organizational graph checks out."""

    supervisor_id: int
    worker: Worker
    ward: Ward
    ulb_id: str
    eo_id: Optional[int]


class ConsistencyValidator:
    def __init__(self, workers: WorkerRepository, supervisors: SupervisorRepository, wards: WardRepository):
        self._workers = workers
        self._supervisors = supervisors
        self._wards = wards

    def _require_supervisor_ward(self, caller: CallerIdentity) -> int:
        if not caller.is_supervisor:
            raise AttendanceRejected(RejectionReason.FORBIDDEN)
        ward_id = caller.assigned_ward_id
        if ward_id is None:
            raise AttendanceRejected(RejectionReason.NO_WARD_ASSIGNED)
        return ward_id

    def _resolve_supervisor_ulb(self, caller: CallerIdentity) -> tuple[Optional[str], Optional[Supervisor]]:
        supervisor = self._supervisors.get_by_id(caller.user_id)
        ulb_id = caller.ulb_id or (supervisor.ulb_id if supervisor else None)
        return ulb_id, supervisor

    def validate(self, caller: CallerIdentity, *, worker_id: Optional[str], ward_id: Optional[int]) -> MarkingContext:
        assigned_ward_id = self._require_supervisor_ward(caller)

        if not worker_id or ward_id is None:
            raise AttendanceRejected(RejectionReason.MISSING_FIELD)

        if int(ward_id) != assigned_ward_id:
            raise AttendanceRejected(RejectionReason.WARD_MISMATCH)

        worker = self._workers.get_by_id(worker_id)
        if not worker:
            raise AttendanceRejected(RejectionReason.WORKER_NOT_FOUND)
        if worker.ward_id != assigned_ward_id:
            raise AttendanceRejected(RejectionReason.WORKER_WARD_MISMATCH)

        supervisor_ulb_id, supervisor = self._resolve_supervisor_ulb(caller)
        if not supervisor_ulb_id:
            raise AttendanceRejected(RejectionReason.SUPERVISOR_NO_ULB)
        if not worker.ulb_id:
            raise AttendanceRejected(RejectionReason.WORKER_NO_ULB)
        if str(worker.ulb_id) != str(supervisor_ulb_id):
            raise AttendanceRejected(RejectionReason.CROSS_ULB_DENIED)

        ward = self._wards.get_by_id(assigned_ward_id)
        if not ward:
            raise AttendanceRejected(RejectionReason.WARD_NOT_FOUND)
        if ward.ulb_id and str(ward.ulb_id) != str(supervisor_ulb_id):
            raise AttendanceRejected(RejectionReason.WARD_ULB_MISMATCH)

        return MarkingContext(
            supervisor_id=caller.user_id,
            worker=worker,
            ward=ward,
            ulb_id=str(supervisor_ulb_id),
            eo_id=worker.eo_id or (supervisor.eo_id if supervisor else None),
        )

    def validate_bulk_caller(self, caller: CallerIdentity) -> BulkMarkingContext:
        """Request-level checks shared by bulk marking and the roster view."""

        ward_id = self._require_supervisor_ward(caller)
        ulb_id, supervisor = self._resolve_supervisor_ulb(caller)
        if not ulb_id:
            raise AttendanceRejected(RejectionReason.SUPERVISOR_NO_ULB)
        return BulkMarkingContext(
            supervisor_id=caller.user_id,
            ward_id=ward_id,
            ulb_id=str(ulb_id),
            eo_id=supervisor.eo_id if supervisor else None,
            supervisor=supervisor,
        )

    def get_ward(self, ward_id: int) -> Optional[Ward]:
        return self._wards.get_by_id(ward_id)
