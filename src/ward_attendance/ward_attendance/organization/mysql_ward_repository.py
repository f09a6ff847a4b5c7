from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Ward
from .repository import WardRepository


class MySQLWardRepository(WardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, ward_id: int) -> Optional[Ward]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, ulb_id, ward_number, ward_name, boundary_coordinates
                FROM wards
                WHERE id=%s
                """,
                (int(ward_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Ward(
                ward_id=int(row["id"]),
                ulb_id=str(row["ulb_id"]) if row.get("ulb_id") else None,
                ward_number=row.get("ward_number"),
                ward_name=row.get("ward_name"),
                boundary_coordinates=row.get("boundary_coordinates"),
            )
