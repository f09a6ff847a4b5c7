from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceMarkingService
from .attendance.validator import ConsistencyValidator
from .attendance.window import AttendanceWindowPolicy
from .common.datetime_utils import parse_hhmm
from .core.constants import DEFAULT_ABSENT_CUTOFF_HOUR, DEFAULT_WINDOW_END, DEFAULT_WINDOW_START
from .core.enums import GeofenceMode
from .database.connection import DatabaseConnection, DBConfig
from .geo.geofence import GeofencePolicy
from .organization.mysql_supervisor_repository import MySQLSupervisorRepository
from .organization.mysql_ward_repository import MySQLWardRepository
from .organization.mysql_worker_repository import MySQLWorkerRepository
from .organization.repository import SupervisorRepository, WardRepository, WorkerRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    workers_repo: WorkerRepository
    supervisors_repo: SupervisorRepository
    wards_repo: WardRepository
    attendance_repo: AttendanceRepository

    validator: ConsistencyValidator
    window_policy: AttendanceWindowPolicy
    geofence_policy: GeofencePolicy
    marking_service: AttendanceMarkingService


def build_policies(settings: Any = None) -> tuple[AttendanceWindowPolicy, GeofencePolicy, int]:
    """Read the attendance policy settings (all optional) from a settings module."""
    window = AttendanceWindowPolicy(
        start=parse_hhmm(getattr(settings, "ATTENDANCE_WINDOW_START", None), DEFAULT_WINDOW_START),
        end=parse_hhmm(getattr(settings, "ATTENDANCE_WINDOW_END", None), DEFAULT_WINDOW_END),
    )
    geofence = GeofencePolicy(mode=GeofenceMode.parse(getattr(settings, "GEOFENCE_MODE", None)))
    absent_cutoff_hour = int(getattr(settings, "ABSENT_CUTOFF_HOUR", DEFAULT_ABSENT_CUTOFF_HOUR))
    return window, geofence, absent_cutoff_hour


def wire_container(
    *,
    workers_repo: WorkerRepository,
    supervisors_repo: SupervisorRepository,
    wards_repo: WardRepository,
    attendance_repo: AttendanceRepository,
    settings: Any = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services on top of any repository implementations (MySQL or in-memory)."""
    window, geofence, absent_cutoff_hour = build_policies(settings)
    validator = ConsistencyValidator(workers_repo, supervisors_repo, wards_repo)
    marking_service = AttendanceMarkingService(
        attendance_repo,
        workers_repo,
        validator,
        window=window,
        geofence=geofence,
        absent_cutoff_hour=absent_cutoff_hour,
    )
    return Container(
        conn=conn,
        workers_repo=workers_repo,
        supervisors_repo=supervisors_repo,
        wards_repo=wards_repo,
        attendance_repo=attendance_repo,
        validator=validator,
        window_policy=window,
        geofence_policy=geofence,
        marking_service=marking_service,
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return wire_container(
        workers_repo=MySQLWorkerRepository(conn),
        supervisors_repo=MySQLSupervisorRepository(conn),
        wards_repo=MySQLWardRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings=settings,
        conn=conn,
    )
