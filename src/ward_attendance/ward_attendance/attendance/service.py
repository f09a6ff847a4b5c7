from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Optional, Sequence

from ..common.datetime_utils import now_local, to_local
from ..core.constants import DEFAULT_ABSENT_CUTOFF_HOUR
from ..core.enums import RejectionReason, RosterStatus
from ..core.exceptions import AttendanceRejected, DuplicateAttendanceError
from ..geo.geofence import GeofencePolicy
from ..organization.model import CallerIdentity, Worker
from ..organization.repository import WorkerRepository
from .model import AttendanceRecord, BulkMarkResult, NewAttendance, RosterEntry, RosterSummary
from .repository import AttendanceRepository
from .validator import BulkMarkingContext, ConsistencyValidator
from .window import AttendanceWindowPolicy

logger = logging.getLogger(__name__)


class AttendanceMarkingService:
    """Use cases: mark one worker, mark a supervisor's whole roster, show today's roster.

    Each call is a single attempt. Geofencing only annotates ``geo_status``;
    it never blocks a mark.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        workers: WorkerRepository,
        validator: ConsistencyValidator,
        *,
        window: AttendanceWindowPolicy | None = None,
        geofence: GeofencePolicy | None = None,
        absent_cutoff_hour: int = DEFAULT_ABSENT_CUTOFF_HOUR,
    ):
        self._attendance = attendance
        self._workers = workers
        self._validator = validator
        self._window = window or AttendanceWindowPolicy()
        self._geofence = geofence or GeofencePolicy()
        self._absent_cutoff_hour = int(absent_cutoff_hour)

    def _check_window(self, now: datetime) -> None:
        if not self._window.is_within_window(now):
            raise AttendanceRejected(
                RejectionReason.OUTSIDE_ATTENDANCE_WINDOW,
                f"Attendance can only be marked between {self._window.describe()}.",
            )

    def mark_worker(
        self,
        caller: CallerIdentity,
        *,
        worker_id: Optional[str],
        ward_id: Optional[int],
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        now: Optional[datetime] = None,
        photo_url: Optional[str] = None,
    ) -> AttendanceRecord:
        now = to_local(now or now_local())
        today = now.date()

        try:
            ctx = self._validator.validate(caller, worker_id=worker_id, ward_id=ward_id)
            self._check_window(now)
        except AttendanceRejected as e:
            logger.info("Rejected mark by supervisor %s for worker %s: %s", caller.user_id, worker_id, e.reason.value)
            raise

        geo_status = self._geofence.evaluate(latitude, longitude, ctx.ward.boundary_coordinates)

        if self._attendance.get_for_worker_and_date(ctx.worker.worker_id, today):
            logger.info("Worker %s already marked on %s", ctx.worker.worker_id, today)
            raise AttendanceRejected(RejectionReason.ALREADY_MARKED)

        new = NewAttendance(
            worker_id=ctx.worker.worker_id,
            supervisor_id=ctx.supervisor_id,
            ward_id=ctx.ward.ward_id,
            ulb_id=ctx.ulb_id,
            eo_id=ctx.eo_id,
            attendance_date=today,
            checkin_time=now,
            geo_status=geo_status,
            latitude=latitude,
            longitude=longitude,
            photo_url=photo_url,
        )
        try:
            attendance_id = self._attendance.create(new)
        except DuplicateAttendanceError:
            # Lost the race against a concurrent mark for the same worker/day.
            logger.info("Worker %s marked concurrently on %s", ctx.worker.worker_id, today)
            raise AttendanceRejected(RejectionReason.ALREADY_MARKED)

        logger.info(
            "Marked worker %s present on %s (ward=%s, geo=%s)",
            ctx.worker.worker_id,
            today,
            ctx.ward.ward_id,
            geo_status.value,
        )
        return AttendanceRecord.from_new(attendance_id, new)

    def _load_roster(self, ctx: BulkMarkingContext) -> Sequence[Worker]:
        # Repository already filters; re-check so a loose fake/driver can't widen the batch.
        workers = self._workers.list_active_roster(
            supervisor_id=ctx.supervisor_id, ward_id=ctx.ward_id, ulb_id=ctx.ulb_id
        )
        return [
            w
            for w in workers
            if w.is_active and w.ward_id == ctx.ward_id and str(w.ulb_id) == ctx.ulb_id
        ]

    def mark_all_present(
        self,
        caller: CallerIdentity,
        *,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> BulkMarkResult:
        now = to_local(now or now_local())
        today = now.date()

        try:
            ctx = self._validator.validate_bulk_caller(caller)
            self._check_window(now)
            roster = self._load_roster(ctx)
            if not roster:
                raise AttendanceRejected(RejectionReason.NO_WORKERS_ASSIGNED)
        except AttendanceRejected as e:
            logger.info("Rejected bulk mark by supervisor %s: %s", caller.user_id, e.reason.value)
            raise

        existing = self._attendance.list_for_workers_and_date([w.worker_id for w in roster], today)
        marked_ids = {r.worker_id for r in existing}
        to_mark = [w for w in roster if w.worker_id not in marked_ids]
        already_marked = len(roster) - len(to_mark)

        if not to_mark:
            return BulkMarkResult(newly_marked=0, already_marked=already_marked, total_workers=len(roster))

        # One location for the whole batch: the supervisor is standing in one place.
        ward = self._validator.get_ward(ctx.ward_id)
        geo_status = self._geofence.evaluate(latitude, longitude, ward.boundary_coordinates if ward else None)

        batch = [
            NewAttendance(
                worker_id=w.worker_id,
                supervisor_id=ctx.supervisor_id,
                ward_id=ctx.ward_id,
                ulb_id=ctx.ulb_id,
                eo_id=w.eo_id or ctx.eo_id,
                attendance_date=today,
                checkin_time=now,
                geo_status=geo_status,
                latitude=latitude,
                longitude=longitude,
            )
            for w in to_mark
        ]
        try:
            created = self._attendance.bulk_create(batch)
        except DuplicateAttendanceError:
            logger.warning("Bulk mark by supervisor %s rolled back: concurrent mark on %s", ctx.supervisor_id, today)
            raise AttendanceRejected(RejectionReason.BATCH_CONFLICT)

        logger.info(
            "Bulk mark by supervisor %s: %d new, %d already marked, %d total (geo=%s)",
            ctx.supervisor_id,
            created,
            already_marked,
            len(roster),
            geo_status.value,
        )
        return BulkMarkResult(newly_marked=created, already_marked=already_marked, total_workers=len(roster))

    def get_today_roster(self, caller: CallerIdentity, *, now: Optional[datetime] = None) -> RosterSummary:
        now = to_local(now or now_local())
        today: date = now.date()

        ctx = self._validator.validate_bulk_caller(caller)
        roster = self._load_roster(ctx)

        records: Dict[str, AttendanceRecord] = {}
        if roster:
            for r in self._attendance.list_for_workers_and_date([w.worker_id for w in roster], today):
                records.setdefault(r.worker_id, r)

        past_cutoff = now.hour >= self._absent_cutoff_hour
        entries = []
        for w in roster:
            rec = records.get(w.worker_id)
            if rec:
                status = RosterStatus.PRESENT
            elif past_cutoff:
                status = RosterStatus.ABSENT
            else:
                status = RosterStatus.NOT_MARKED
            entries.append(
                RosterEntry(
                    worker_id=w.worker_id,
                    full_name=w.full_name,
                    worker_type=w.worker_type,
                    status=status,
                    checkin_time=rec.checkin_time if rec else None,
                    geo_status=rec.geo_status if rec else None,
                    photo_url=rec.photo_url if rec else None,
                    mobile=w.mobile,
                )
            )
        return RosterSummary(attendance_date=today, ward_id=ctx.ward_id, workers=entries)
