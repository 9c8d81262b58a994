from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, WorkClassification


class AttendanceRepository(Protocol):
    """Record store contract for attendance documents, scoped per tenant."""

    def get_by_id(self, tenant_id: str, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def query_attendance(self, tenant_id: str, start_date: str, end_date: str) -> Sequence[AttendanceRecord]:
        """Records whose ``date`` lies in [start_date, end_date], ordered by date."""

        raise NotImplementedError

    def find_unfinished_for_site(self, tenant_id: str, user_id: str, site_name: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_last_completed_for_site(
        self, tenant_id: str, user_id: str, site_name: str
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_record(
        self,
        *,
        tenant_id: str,
        user_id: str,
        site_name: str,
        work_date: str,
        start_time: Optional[str],
        status: AttendanceStatus,
        notes: str = "",
        classification: Optional[WorkClassification] = None,
    ) -> int:
        """Insert a record; a given classification is stored in the same write."""

        raise NotImplementedError

    def update_attendance(self, tenant_id: str, record_id: int, patch: dict[str, Any]) -> bool:
        """Apply a partial update; ``edit_history`` in the patch replaces the stored list."""

        raise NotImplementedError
