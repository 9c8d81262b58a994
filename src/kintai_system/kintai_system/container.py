from __future__ import annotations

from dataclasses import dataclass

from .attendance.classification.standard_classifier import StandardWorkTimeClassifier
from .attendance.factory import EntryStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import RECLOCKIN_THRESHOLD_MINUTES, STANDARD_WORK_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .payroll.aggregator import MonthlyAggregator
from .payroll.service import MonthlySummaryService
from .users.mysql_user_repository import MySQLUserRepository


@dataclass(frozen=True)
class Container:
    """Wired application objects; one per Flask app."""

    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    attendance_repo: MySQLAttendanceRepository

    attendance_service: AttendanceService
    monthly_summary_service: MonthlySummaryService


def build_container(
    *,
    db_config: dict,
    standard_work_minutes: int = STANDARD_WORK_MINUTES,
    reclockin_threshold_minutes: int = RECLOCKIN_THRESHOLD_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    users_repo = MySQLUserRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        attendance_service=AttendanceService(
            attendance_repo,
            classifier=StandardWorkTimeClassifier(standard_minutes=standard_work_minutes),
            strategy_factory=EntryStrategyFactory(),
            reclockin_threshold_minutes=reclockin_threshold_minutes,
        ),
        monthly_summary_service=MonthlySummaryService(attendance_repo, users_repo, aggregator=MonthlyAggregator()),
    )
