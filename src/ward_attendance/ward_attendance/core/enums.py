from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Closed set of staff roles known to the attendance subsystem."""

    ADMIN = "ADMIN"
    ASSESSOR = "ASSESSOR"
    EO = "EO"
    SUPERVISOR = "SUPERVISOR"
    COLLECTOR = "COLLECTOR"
    CLERK = "CLERK"
    INSPECTOR = "INSPECTOR"
    FIELD_WORKER = "FIELD_WORKER"

    @classmethod
    def parse(cls, value: object) -> Optional["Role"]:
        """Normalise a raw role string once, at the authentication boundary.

        Accepts any case and hyphen/underscore spelling ("supervisor",
        "Field-Worker"). Unknown or empty values return None.
        """

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().upper().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            return None


class WorkerStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class GeoStatus(str, Enum):
    """Geofence annotation stored on every attendance record."""

    VALID = "VALID"
    OUTSIDE_WARD = "OUTSIDE_WARD"


class GeofenceMode(str, Enum):
    """How the geofence treats a missing boundary or missing coordinates.

    ADVISORY_ONLY fails open (VALID), FAIL_CLOSED flags OUTSIDE_WARD.
    Neither mode ever blocks a mark.
    """

    ADVISORY_ONLY = "ADVISORY_ONLY"
    FAIL_CLOSED = "FAIL_CLOSED"

    @classmethod
    def parse(cls, value: object) -> "GeofenceMode":
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().upper().replace("-", "_")
        if normalized in {"ADVISORY", "ADVISORY_ONLY", ""}:
            return cls.ADVISORY_ONLY
        if normalized in {"STRICT", "FAIL_CLOSED"}:
            return cls.FAIL_CLOSED
        raise ValueError(f"Unknown geofence mode: {value!r}")


class RosterStatus(str, Enum):
    PRESENT = "PRESENT"
    NOT_MARKED = "NOT_MARKED"
    ABSENT = "ABSENT"


class RejectionKind(str, Enum):
    """Error families a marking request can be rejected with."""

    AUTHORIZATION = "AUTHORIZATION"
    REQUEST_SHAPE = "REQUEST_SHAPE"
    CONSISTENCY = "CONSISTENCY"
    POLICY = "POLICY"
    IDEMPOTENCY = "IDEMPOTENCY"


class RejectionReason(str, Enum):
    FORBIDDEN = "FORBIDDEN"
    NO_WARD_ASSIGNED = "NO_WARD_ASSIGNED"
    MISSING_FIELD = "MISSING_FIELD"
    WARD_MISMATCH = "WARD_MISMATCH"
    WORKER_NOT_FOUND = "WORKER_NOT_FOUND"
    WORKER_WARD_MISMATCH = "WORKER_WARD_MISMATCH"
    SUPERVISOR_NO_ULB = "SUPERVISOR_NO_ULB"
    WORKER_NO_ULB = "WORKER_NO_ULB"
    CROSS_ULB_DENIED = "CROSS_ULB_DENIED"
    WARD_NOT_FOUND = "WARD_NOT_FOUND"
    WARD_ULB_MISMATCH = "WARD_ULB_MISMATCH"
    NO_WORKERS_ASSIGNED = "NO_WORKERS_ASSIGNED"
    OUTSIDE_ATTENDANCE_WINDOW = "OUTSIDE_ATTENDANCE_WINDOW"
    ALREADY_MARKED = "ALREADY_MARKED"
    BATCH_CONFLICT = "BATCH_CONFLICT"

    @property
    def kind(self) -> RejectionKind:
        return _REASON_KIND[self]

    @property
    def http_status(self) -> int:
        return _REASON_HTTP_STATUS.get(self, 400)

    @property
    def default_message(self) -> str:
        return _REASON_MESSAGE[self]


_REASON_KIND = {
    RejectionReason.FORBIDDEN: RejectionKind.AUTHORIZATION,
    RejectionReason.NO_WARD_ASSIGNED: RejectionKind.AUTHORIZATION,
    RejectionReason.MISSING_FIELD: RejectionKind.REQUEST_SHAPE,
    RejectionReason.WARD_MISMATCH: RejectionKind.CONSISTENCY,
    RejectionReason.WORKER_NOT_FOUND: RejectionKind.CONSISTENCY,
    RejectionReason.WORKER_WARD_MISMATCH: RejectionKind.CONSISTENCY,
    RejectionReason.SUPERVISOR_NO_ULB: RejectionKind.CONSISTENCY,
    RejectionReason.WORKER_NO_ULB: RejectionKind.CONSISTENCY,
    RejectionReason.CROSS_ULB_DENIED: RejectionKind.CONSISTENCY,
    RejectionReason.WARD_NOT_FOUND: RejectionKind.CONSISTENCY,
    RejectionReason.WARD_ULB_MISMATCH: RejectionKind.CONSISTENCY,
    RejectionReason.NO_WORKERS_ASSIGNED: RejectionKind.CONSISTENCY,
    RejectionReason.OUTSIDE_ATTENDANCE_WINDOW: RejectionKind.POLICY,
    RejectionReason.ALREADY_MARKED: RejectionKind.IDEMPOTENCY,
    RejectionReason.BATCH_CONFLICT: RejectionKind.IDEMPOTENCY,
}

_REASON_HTTP_STATUS = {
    RejectionReason.FORBIDDEN: 403,
    RejectionReason.NO_WARD_ASSIGNED: 403,
    RejectionReason.MISSING_FIELD: 400,
    RejectionReason.WARD_MISMATCH: 403,
    RejectionReason.WORKER_NOT_FOUND: 404,
    RejectionReason.WORKER_WARD_MISMATCH: 403,
    RejectionReason.SUPERVISOR_NO_ULB: 400,
    RejectionReason.WORKER_NO_ULB: 400,
    RejectionReason.CROSS_ULB_DENIED: 403,
    RejectionReason.WARD_NOT_FOUND: 404,
    RejectionReason.WARD_ULB_MISMATCH: 403,
    RejectionReason.NO_WORKERS_ASSIGNED: 404,
    RejectionReason.OUTSIDE_ATTENDANCE_WINDOW: 400,
    RejectionReason.ALREADY_MARKED: 409,
    RejectionReason.BATCH_CONFLICT: 409,
}

_REASON_MESSAGE = {
    RejectionReason.FORBIDDEN: "Access denied. SUPERVISOR role required.",
    RejectionReason.NO_WARD_ASSIGNED: "Supervisor must be assigned to exactly one ward.",
    RejectionReason.MISSING_FIELD: "worker_id and ward_id are required.",
    RejectionReason.WARD_MISMATCH: "You can only mark attendance in your assigned ward.",
    RejectionReason.WORKER_NOT_FOUND: "Worker not found.",
    RejectionReason.WORKER_WARD_MISMATCH: "Worker does not belong to your ward.",
    RejectionReason.SUPERVISOR_NO_ULB: "Supervisor must be assigned to an ULB.",
    RejectionReason.WORKER_NO_ULB: "Worker must be assigned to an ULB.",
    RejectionReason.CROSS_ULB_DENIED: "Cross-ULB attendance marking is not allowed.",
    RejectionReason.WARD_NOT_FOUND: "Ward not found.",
    RejectionReason.WARD_ULB_MISMATCH: "Ward does not belong to your ULB.",
    RejectionReason.NO_WORKERS_ASSIGNED: "No active workers assigned to you in this ward.",
    RejectionReason.OUTSIDE_ATTENDANCE_WINDOW: "Attendance can only be marked between 06:00 and 11:00.",
    RejectionReason.ALREADY_MARKED: "Attendance already marked for this worker today.",
    RejectionReason.BATCH_CONFLICT: "Another marking finished first. Submit again to mark the remaining workers.",
}
