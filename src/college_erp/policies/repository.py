from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendancePolicy


class PolicyRepository(Protocol):
    """Storage contract for attendance policies.

    ``list_all`` must keep a stable order (creation order): the evaluator
    breaks ties between equally strict policies by position.
    """

    def list_all(self) -> Sequence[AttendancePolicy]:
        raise NotImplementedError

    def get_by_id(self, policy_id: str) -> Optional[AttendancePolicy]:
        raise NotImplementedError

    def save(self, policy: AttendancePolicy) -> None:
        """Insert or replace by ``policy_id``."""
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
