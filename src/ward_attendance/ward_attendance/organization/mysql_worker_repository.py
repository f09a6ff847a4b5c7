from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import WorkerStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Worker
from .repository import WorkerRepository

_WORKER_COLUMNS = """
    id, employee_code, full_name, mobile, worker_type,
    ward_id, ulb_id, supervisor_id, eo_id, status
"""


def _to_worker(row: Dict[str, Any]) -> Worker:
    return Worker(
        worker_id=str(row["id"]),
        full_name=row.get("full_name") or "",
        ward_id=int(row["ward_id"]),
        ulb_id=str(row["ulb_id"]) if row.get("ulb_id") else None,
        supervisor_id=row.get("supervisor_id"),
        eo_id=row.get("eo_id"),
        status=WorkerStatus(str(row.get("status") or "ACTIVE").upper()),
        employee_code=row.get("employee_code"),
        mobile=row.get("mobile"),
        worker_type=row.get("worker_type"),
    )


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_WORKER_COLUMNS} FROM workers WHERE id=%s",
                (str(worker_id),),
            )
            row = fetchone(cur)
            return _to_worker(row) if row else None

    def list_active_roster(self, *, supervisor_id: int, ward_id: int, ulb_id: str) -> Sequence[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_WORKER_COLUMNS}
                FROM workers
                WHERE supervisor_id=%s AND ward_id=%s AND ulb_id=%s AND status=%s
                ORDER BY full_name ASC
                """,
                (int(supervisor_id), int(ward_id), str(ulb_id), WorkerStatus.ACTIVE.value),
            )
            return [_to_worker(r) for r in fetchall(cur)]
