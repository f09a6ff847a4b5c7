from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Supervisor
from .repository import SupervisorRepository


class MySQLSupervisorRepository(SupervisorRepository):
    """Supervisors live in the shared staff table (``admin_management``)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, supervisor_id: int) -> Optional[Supervisor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, full_name, ward_id, ulb_id, eo_id
                FROM admin_management
                WHERE id=%s
                """,
                (int(supervisor_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Supervisor(
                supervisor_id=int(row["id"]),
                full_name=row.get("full_name") or "",
                ward_id=int(row["ward_id"]) if row.get("ward_id") is not None else None,
                ulb_id=str(row["ulb_id"]) if row.get("ulb_id") else None,
                eo_id=row.get("eo_id"),
            )
