from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import EntryMode
from ..core.exceptions import ValidationError
from .strategies.base import EntryStrategy
from .strategies.fixed_strategy import FixedTimeStrategy
from .strategies.live_strategy import LiveClockStrategy
from .strategies.manual_strategy import ManualEntryStrategy


@dataclass
class EntryStrategyFactory:
    """Factory Pattern: choose how clock times are supplied for a request."""

    def for_mode(self, mode: EntryMode | str) -> EntryStrategy:
        try:
            mode = EntryMode(mode)
        except ValueError:
            raise ValidationError(f"入力モードが不正です: {mode}")

        if mode == EntryMode.FIXED:
            return FixedTimeStrategy()
        if mode == EntryMode.MANUAL:
            return ManualEntryStrategy()
        return LiveClockStrategy()
