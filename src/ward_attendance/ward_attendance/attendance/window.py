from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from ..common.datetime_utils import minutes_since_midnight, to_local
from ..core.constants import DEFAULT_WINDOW_END, DEFAULT_WINDOW_START


@dataclass(frozen=True)
class AttendanceWindowPolicy:
    """Daily time-of-day window in which marking is allowed.

    Both bounds are inclusive and compared at minute resolution, so 11:00:45
    still counts as 11:00. Times are server-local wall-clock.
    """

    start: time = DEFAULT_WINDOW_START
    end: time = DEFAULT_WINDOW_END

    def __post_init__(self):
        if minutes_since_midnight(self.start) > minutes_since_midnight(self.end):
            raise ValueError("attendance window start must not be after its end")

    def is_within_window(self, timestamp: datetime) -> bool:
        minutes = minutes_since_midnight(to_local(timestamp))
        return minutes_since_midnight(self.start) <= minutes <= minutes_since_midnight(self.end)

    def describe(self) -> str:
        return f"{self.start.strftime('%H:%M')} and {self.end.strftime('%H:%M')}"
