from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class PauseTime:
    pause_time_id: int
    time_tracking_id: int
    starts_at: datetime
    ends_at: datetime

    @property
    def duration(self) -> timedelta:
        return self.ends_at - self.starts_at


@dataclass(frozen=True)
class TimeTracking:
    """Summary record of one completed working session."""

    time_tracking_id: int
    user_id: int
    location_id: int
    starts_at: datetime
    ends_at: Optional[datetime]
    manual_pause: bool = False
    pause_times: tuple[PauseTime, ...] = ()

    @property
    def pause_duration(self) -> timedelta:
        return sum((p.duration for p in self.pause_times), timedelta())

    @property
    def worked_duration(self) -> timedelta:
        if self.ends_at is None:
            return timedelta()
        return max(self.ends_at - self.starts_at - self.pause_duration, timedelta())

    @property
    def worked_minutes(self) -> int:
        return int(self.worked_duration.total_seconds() // 60)
