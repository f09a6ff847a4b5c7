from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import GeoStatus
from ..core.exceptions import DuplicateAttendanceError, StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders, is_duplicate_key
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = """
    id, worker_id, supervisor_id, ward_id, ulb_id, eo_id, attendance_date,
    checkin_time, latitude, longitude, photo_url, geo_status
"""

_INSERT_SQL = """
    INSERT INTO worker_attendance(
        id, worker_id, supervisor_id, ward_id, ulb_id, eo_id, attendance_date,
        checkin_time, latitude, longitude, photo_url, geo_status
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=str(r["id"]),
        worker_id=str(r["worker_id"]),
        supervisor_id=r.get("supervisor_id"),
        ward_id=int(r["ward_id"]),
        ulb_id=str(r["ulb_id"]) if r.get("ulb_id") else None,
        eo_id=r.get("eo_id"),
        attendance_date=r["attendance_date"],
        checkin_time=r["checkin_time"],
        latitude=_optional_float(r.get("latitude")),
        longitude=_optional_float(r.get("longitude")),
        photo_url=r.get("photo_url"),
        geo_status=GeoStatus(r.get("geo_status") or GeoStatus.VALID.value),
    )


def _insert_params(attendance_id: str, rec: NewAttendance) -> tuple:
    return (
        attendance_id,
        rec.worker_id,
        rec.supervisor_id,
        rec.ward_id,
        rec.ulb_id,
        rec.eo_id,
        rec.attendance_date,
        rec.checkin_time,
        rec.latitude,
        rec.longitude,
        rec.photo_url,
        rec.geo_status.value,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """``worker_attendance`` table; UNIQUE(worker_id, attendance_date) lives in schema.sql."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_worker_and_date(self, worker_id: str, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM worker_attendance
                WHERE worker_id=%s AND attendance_date=%s
                """,
                (str(worker_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_workers_and_date(
        self, worker_ids: Sequence[str], attendance_date: date
    ) -> Sequence[AttendanceRecord]:
        ids = [str(w) for w in worker_ids]
        if not ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM worker_attendance
                WHERE attendance_date=%s AND worker_id IN ({in_placeholders(ids)})
                ORDER BY checkin_time DESC
                """,
                (attendance_date, *ids),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: NewAttendance) -> str:
        attendance_id = str(uuid.uuid4())
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(_INSERT_SQL, _insert_params(attendance_id, record))
        except mysql.connector.Error as exc:
            if is_duplicate_key(exc):
                raise DuplicateAttendanceError(
                    f"worker {record.worker_id} already has attendance on {record.attendance_date}"
                ) from exc
            logger.exception("Attendance insert failed for worker %s", record.worker_id)
            raise StorageError("Failed to store attendance record") from exc
        return attendance_id

    def bulk_create(self, records: Sequence[NewAttendance]) -> int:
        if not records:
            return 0

        params = [_insert_params(str(uuid.uuid4()), r) for r in records]
        try:
            # One transaction: db_cursor rolls the whole batch back on any error.
            with db_cursor(self._conn_factory) as (_, cur):
                cur.executemany(_INSERT_SQL, params)
        except mysql.connector.Error as exc:
            if is_duplicate_key(exc):
                raise DuplicateAttendanceError("attendance batch hit an existing (worker, date) record") from exc
            logger.exception("Attendance batch insert of %d records failed", len(params))
            raise StorageError("Failed to store attendance batch") from exc
        return len(params)
