"""Staleness tracking for the last successfully fetched observation."""

import logging
from datetime import datetime, timezone

from .schemas import Observation

logger = logging.getLogger(__name__)


class StalenessMonitor:
    """Remember the last good observation and report when it gets old.

    Owned by the poll scheduler. Diagnostic only: staleness is logged, it
    never changes what the scheduler does.
    """

    def __init__(self, stale_threshold_minutes: float = 60) -> None:
        """Initialize staleness monitor.

        Args:
            stale_threshold_minutes: Age after which data counts as stale.
        """
        self.stale_threshold_minutes = stale_threshold_minutes
        self.last_observation: Observation | None = None
        self._alerted = False

    def record(self, observation: Observation) -> None:
        """Record a successfully fetched observation.

        Older observations than the one already held are ignored.
        """
        current = self.last_observation
        if current is not None and observation.observed_at < current.observed_at:
            logger.debug(
                "Ignoring out-of-order observation from %s (have %s)",
                observation.observed_at,
                current.observed_at,
            )
            return

        self.last_observation = observation

        if self._alerted and not self.is_stale():
            self._alerted = False
            logger.info("Weather data recovered: observed at %s", observation.observed_at.isoformat())

    def age_minutes(self, now: datetime | None = None) -> float | None:
        """Minutes since the last observation, or None if there is none."""
        if self.last_observation is None:
            return None
        now = now or datetime.now(timezone.utc)
        return (now - self.last_observation.observed_at).total_seconds() / 60

    def is_stale(self, now: datetime | None = None) -> bool:
        age = self.age_minutes(now)
        return age is not None and age > self.stale_threshold_minutes

    def check(self, now: datetime | None = None) -> bool:
        """Log a warning the first time data becomes stale.

        Returns:
            True if the last observation is stale.
        """
        age = self.age_minutes(now)
        if age is None or age <= self.stale_threshold_minutes:
            return False

        if not self._alerted:
            hours = int(age // 60)
            mins = int(age % 60)
            time_str = f"{hours}h {mins}m" if hours > 0 else f"{mins} minutes"
            logger.warning("Weather data is stale: last observation %s old", time_str)
            self._alerted = True
        return True

    def get_status(self, now: datetime | None = None) -> dict[str, str | float | bool | None]:
        """Get current monitoring status."""
        age = self.age_minutes(now)
        last = self.last_observation
        return {
            "last_observation": last.observed_at.isoformat() if last else None,
            "minutes_ago": round(age, 1) if age is not None else None,
            "is_stale": age is not None and age > self.stale_threshold_minutes,
            "alerted": self._alerted,
        }
