"""Clock used for booking-window validation and lifecycle timestamps"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from ..config import APP_TIMEZONE


class Clock:
    """
    Wall clock for the booking rules.

    `today()` is the calendar date in the configured business timezone (what the
    customer sees as "today"); `now()` is naive UTC, matching how timestamps are
    stored on the models.
    """

    def __init__(self, tz_name: str = APP_TIMEZONE):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def today(self) -> date:
        return datetime.now(self.tz).date()


class FixedClock(Clock):
    """Clock frozen at a given instant (tests, backfills)"""

    def __init__(self, instant: datetime, today: date = None):
        super().__init__("UTC")
        self.instant = instant
        self._today = today or instant.date()

    def now(self) -> datetime:
        return self.instant

    def today(self) -> date:
        return self._today


default_clock = Clock()
