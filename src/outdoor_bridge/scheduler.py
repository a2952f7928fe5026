"""Poll scheduler driving the fetch, map, publish cycle."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from .clients import GatewayClient, OpenWeatherMapClient
from .errors import BridgeError
from .location import LocationSpecifier
from .mapper import SensorMapper
from .monitor import StalenessMonitor
from .retry import RetryingExecutor, RetryPolicy, SleepFunc

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    """Where the scheduler is within its cycle."""

    IDLE = "idle"
    FETCHING = "fetching"
    MAPPING = "mapping"
    PUBLISHING = "publishing"
    SLEEPING = "sleeping"
    SHUTTING_DOWN = "shutting_down"


@dataclass(frozen=True)
class Success:
    """Cycle published a full batch."""

    readings_published: int


@dataclass(frozen=True)
class Degraded:
    """Cycle failed after retries; the daemon keeps running."""

    reason: str
    error: BaseException | None = None

    @property
    def kind(self) -> str:
        if isinstance(self.error, BridgeError):
            return self.error.kind
        if self.error is not None:
            return self.error.__class__.__name__
        return "unknown"


PollResult = Success | Degraded


def _log_retry(attempt: int, error: BridgeError, delay: float) -> None:
    logger.debug("Attempt %d failed (%s), retrying in %.1fs", attempt, error, delay)


class PollScheduler:
    """Runs one fetch, map, publish cycle per interval until shutdown.

    Cycles are strictly sequential. The interval is measured from the start
    of each cycle, so a slow cycle shortens the following sleep rather than
    delaying every later cycle; a cycle that overruns the interval is followed
    immediately by the next one.
    """

    def __init__(
        self,
        weather_client: OpenWeatherMapClient,
        gateway_client: GatewayClient,
        mapper: SensorMapper,
        location: LocationSpecifier,
        interval_seconds: float,
        retry_policy: RetryPolicy | None = None,
        monitor: StalenessMonitor | None = None,
        shutdown_event: asyncio.Event | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialize poll scheduler.

        Args:
            weather_client: Source of observations.
            gateway_client: Sink for sensor readings.
            mapper: Observation to reading translation.
            location: Location to poll.
            interval_seconds: Time between cycle starts.
            retry_policy: Retry policy for fetch and publish.
            monitor: Optional staleness monitor for the last observation.
            shutdown_event: Event that stops the loop when set.
            sleep: Optional sleep function for retry backoff (testing).
        """
        self.weather_client = weather_client
        self.gateway_client = gateway_client
        self.mapper = mapper
        self.location = location
        self.interval_seconds = interval_seconds
        self.executor = RetryingExecutor(retry_policy or RetryPolicy(), sleep=sleep, on_retry=_log_retry)
        self.monitor = monitor or StalenessMonitor()
        self.shutdown_event = shutdown_event or asyncio.Event()
        self.state = SchedulerState.IDLE
        self.cycles_completed = 0
        self.last_result: PollResult | None = None

    def request_shutdown(self) -> None:
        """Ask the loop to stop at the next opportunity."""
        self.shutdown_event.set()

    def _set_state(self, state: SchedulerState) -> None:
        if state is not self.state:
            logger.debug("Scheduler state %s -> %s", self.state.value, state.value)
            self.state = state

    async def run_cycle(self) -> PollResult:
        """Fetch, map and publish once.

        Returns:
            Success with the number of readings published, or Degraded with
            the error that ended the cycle.
        """
        self._set_state(SchedulerState.FETCHING)
        try:
            observation = await self.executor.run(
                lambda: self.weather_client.fetch_current(self.location)
            )
        except BridgeError as e:
            return Degraded(f"fetch failed: {e}", e)

        self.monitor.record(observation)

        self._set_state(SchedulerState.MAPPING)
        readings = self.mapper.map(observation)

        self._set_state(SchedulerState.PUBLISHING)
        try:
            await self.executor.run(lambda: self.gateway_client.publish(readings))
        except BridgeError as e:
            return Degraded(f"publish failed: {e}", e)

        return Success(readings_published=len(readings))

    async def _guarded_cycle(self) -> PollResult:
        """Run a cycle, turning unexpected exceptions into Degraded."""
        try:
            return await self.run_cycle()
        except Exception as e:
            logger.error("Unexpected error in poll cycle: %s", e, exc_info=True)
            return Degraded(f"unexpected error: {e}", e)

    async def _cycle_or_shutdown(self) -> PollResult | None:
        """Run one cycle, cancelling it if shutdown is requested meanwhile.

        Returns:
            The cycle result, or None if the cycle was cancelled.
        """
        cycle = asyncio.create_task(self._guarded_cycle(), name="poll-cycle")
        shutdown = asyncio.create_task(self.shutdown_event.wait(), name="poll-shutdown")
        try:
            await asyncio.wait({cycle, shutdown}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            shutdown.cancel()
            if not cycle.done():
                logger.info("Cancelling in-flight cycle")
                cycle.cancel()
                try:
                    await cycle
                except asyncio.CancelledError:
                    pass

        if cycle.cancelled():
            return None
        return cycle.result()

    def _log_result(self, result: PollResult) -> None:
        if isinstance(result, Success):
            logger.info("Cycle complete: published %d readings", result.readings_published)
        else:
            status = self.monitor.get_status()
            if status["minutes_ago"] is None:
                freshness = "no observation yet"
            else:
                freshness = f"last observation {status['minutes_ago']} minutes old"
            logger.warning("Cycle degraded [%s]: %s (%s)", result.kind, result.reason, freshness)
            self.monitor.check()

    async def run(self, once: bool = False) -> None:
        """Run cycles until shutdown is requested.

        Args:
            once: If True, run a single cycle and return.
        """
        loop = asyncio.get_running_loop()
        logger.info("Polling %s every %g seconds", self.location, self.interval_seconds)

        try:
            while not self.shutdown_event.is_set():
                started = loop.time()

                result = await self._cycle_or_shutdown()
                if result is None:
                    break
                self.last_result = result
                self.cycles_completed += 1
                self._log_result(result)

                if once:
                    break

                self._set_state(SchedulerState.SLEEPING)
                if self.shutdown_event.is_set():
                    break

                remaining = started + self.interval_seconds - loop.time()
                if remaining <= 0:
                    logger.warning(
                        "Cycle took %.1fs, longer than the %gs interval; starting next cycle now",
                        loop.time() - started,
                        self.interval_seconds,
                    )
                else:
                    try:
                        await asyncio.wait_for(self.shutdown_event.wait(), timeout=remaining)
                        # If we get here, shutdown was signaled
                        break
                    except asyncio.TimeoutError:
                        pass

                self._set_state(SchedulerState.IDLE)
        finally:
            self._set_state(SchedulerState.SHUTTING_DOWN)
            logger.info("Scheduler stopped after %d cycles", self.cycles_completed)
