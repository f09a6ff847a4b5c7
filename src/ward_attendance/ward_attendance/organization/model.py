from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from ..core.enums import Role, WorkerStatus


@dataclass(frozen=True)
class Ward:
    """Administrative sub-division. ``boundary_coordinates`` is kept raw (JSON text or list)."""

    ward_id: int
    ulb_id: Optional[str]
    ward_number: Optional[str] = None
    ward_name: Optional[str] = None
    boundary_coordinates: Any = None


@dataclass(frozen=True)
class Supervisor:
    """Staff account allowed to mark field-worker attendance (read-only here)."""

    supervisor_id: int
    full_name: str
    ward_id: Optional[int]
    ulb_id: Optional[str]
    eo_id: Optional[int] = None


@dataclass(frozen=True)
class Worker:
    worker_id: str
    full_name: str
    ward_id: int
    ulb_id: Optional[str]
    supervisor_id: Optional[int] = None
    eo_id: Optional[int] = None
    status: WorkerStatus = WorkerStatus.ACTIVE
    employee_code: Optional[str] = None
    mobile: Optional[str] = None
    worker_type: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == WorkerStatus.ACTIVE


@dataclass(frozen=True)
class CallerIdentity:
    """Who is calling, as resolved by the login flow.

    The role is parsed into ``Role`` once, here; nothing downstream
    re-normalises role strings.
    """

    user_id: int
    role: Optional[Role]
    ward_ids: Tuple[int, ...] = field(default_factory=tuple)
    ulb_id: Optional[str] = None

    @property
    def is_supervisor(self) -> bool:
        return self.role == Role.SUPERVISOR

    @property
    def assigned_ward_id(self) -> Optional[int]:
        if len(self.ward_ids) != 1:
            return None
        return self.ward_ids[0]

    @classmethod
    def from_session(cls, data: Mapping[str, Any]) -> "CallerIdentity":
        raw_wards = data.get("ward_ids")
        if raw_wards is None:
            raw_wards = [data["ward_id"]] if data.get("ward_id") is not None else []
        ward_ids = tuple(int(w) for w in raw_wards if w is not None and str(w).strip() != "")

        ulb_id = data.get("ulb_id")
        return cls(
            user_id=int(data["user_id"]),
            role=Role.parse(data.get("role")),
            ward_ids=ward_ids,
            ulb_id=str(ulb_id) if ulb_id else None,
        )
