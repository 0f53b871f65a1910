"""
Daily State Service
Per-day state (rollover detection, daily inspiration) driven by an injectable clock
"""

import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Optional, Sequence
from sqlalchemy.orm import Session

from config import CareConfig, settings
from database import get_db_context
import models
from tools.clock import Clock, SystemClock


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Inspiration:
    message: str
    author: Optional[str] = None


DEFAULT_INSPIRATION = Inspiration(
    message=CareConfig.DEFAULT_INSPIRATION_MESSAGE,
    author=CareConfig.DEFAULT_INSPIRATION_AUTHOR
)


class DailyStateService:
    """
    Holds state that resets at local midnight.

    The current day is always read from the clock, never cached, so a
    long-running process rolls over correctly.
    """

    def __init__(
        self,
        clock: Clock,
        chooser: Callable[[Sequence[Any]], Any] = random.choice
    ):
        self.clock = clock
        self.chooser = chooser
        self._last_seen_day: date = clock.today()
        self._inspiration: Optional[Inspiration] = None
        self._inspiration_day: Optional[date] = None

    @property
    def current_day(self) -> date:
        return self.clock.today()

    def check_rollover(self) -> bool:
        """True once per day change since the last check"""
        today = self.current_day
        if today == self._last_seen_day:
            return False

        logger.info(f"Day rolled over from {self._last_seen_day} to {today}")
        self._last_seen_day = today
        return True

    def has_inspiration_for_today(self) -> bool:
        return self._inspiration is not None and self._inspiration_day == self.current_day

    def get_daily_inspiration(self, messages: Iterable[Any]) -> Inspiration:
        """
        Today's inspiration, picked once per day

        Args:
            messages: Candidate messages (rows or mappings with message/author/active)

        Returns:
            The cached pick for today, or a fresh pick among active messages,
            or the default quote when there are none
        """
        self.check_rollover()
        if self.has_inspiration_for_today():
            return self._inspiration

        candidates = [m for m in messages if _read(m, "active", True)]
        if candidates:
            picked = self.chooser(candidates)
            inspiration = Inspiration(message=_read(picked, "message"), author=_read(picked, "author"))
        else:
            inspiration = DEFAULT_INSPIRATION

        self._inspiration = inspiration
        self._inspiration_day = self.current_day
        logger.info(f"New daily inspiration selected for {self._inspiration_day}")
        return inspiration

    async def get_inspiration(self, db: Optional[Session] = None) -> Inspiration:
        """Today's inspiration, loading active messages only when a new pick is needed"""
        if self.has_inspiration_for_today():
            return self._inspiration

        def _get(session: Session) -> Inspiration:
            rows = session.query(models.InspirationMessage).filter(
                models.InspirationMessage.active == True
            ).all()
            return self.get_daily_inspiration(rows)

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


def _read(source: Any, name: str, default: Any = None) -> Any:
    if isinstance(source, dict):
        return source.get(name, default)
    return getattr(source, name, default)


# Singleton instance
daily_state_service = DailyStateService(SystemClock(settings.TIMEZONE))
