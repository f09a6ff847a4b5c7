from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Supervisor, Ward, Worker


class WardRepository(Protocol):
    """Read-only access to wards and their boundaries."""

    def get_by_id(self, ward_id: int) -> Optional[Ward]:
        raise NotImplementedError


class SupervisorRepository(Protocol):
    def get_by_id(self, supervisor_id: int) -> Optional[Supervisor]:
        raise NotImplementedError


class WorkerRepository(Protocol):
    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        raise NotImplementedError

    def list_active_roster(self, *, supervisor_id: int, ward_id: int, ulb_id: str) -> Sequence[Worker]:
        """ACTIVE workers assigned to the supervisor within one ward and ULB."""

        raise NotImplementedError
