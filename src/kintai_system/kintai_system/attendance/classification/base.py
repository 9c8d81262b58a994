from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import NightWorkType, SpecialWorkType
from ...core.exceptions import ValidationError
from ..model import WorkClassification


class WorkTimeClassifier(ABC):
    """Classifier interface (Strategy Pattern for time accounting)."""

    @abstractmethod
    def classify(self, *, start_time: str, end_time: str, break_minutes: int, work_date: str) -> WorkClassification:
        raise NotImplementedError


def leave_classification(special_work_type: SpecialWorkType) -> WorkClassification:
    """Manual leave/absence marking: no time, no night or holiday flags."""
    if not special_work_type.is_leave:
        raise ValidationError(f"休暇区分ではありません: {special_work_type.value}")
    return WorkClassification(
        working_minutes=0,
        overtime_minutes=0,
        is_night_work=False,
        night_work_type=NightWorkType.NONE,
        is_holiday_work=False,
        special_work_type=special_work_type,
    )
