"""
kneeklinic/services/step_counter_service.py

Purpose: Walking session tracking

- Start / stop a session and feed it accelerometer samples
- Live step count, distance, calories and duration
- Saves the finished session to the health record, keeping it for a retry on failure
"""

from datetime import datetime
from typing import Callable, Optional

from kneeklinic.core.exceptions import KneeKlinicError, StepSessionError
from kneeklinic.core.logging import get_logger, LogContext
from kneeklinic.flow.pedometer import (
    AccelerometerSample,
    StepDetector,
    estimate_calories,
    estimate_distance_km,
)
from kneeklinic.schemas.activity import StepSession
from kneeklinic.schemas.response import ApiResponse
from kneeklinic.services.health_service import HealthService
from kneeklinic.utils.constants import (
    NO_STEPS_RECORDED,
    STEP_SAVE_NOT_LOGGED_IN,
    STEP_SAVE_OFFLINE,
    STEP_SAVE_SESSION_EXPIRED,
)
from kneeklinic.utils.time_utils import format_duration, utcnow

logger = get_logger(__name__)


def step_save_error_message(error: BaseException) -> str:
    """Alert text for a failed save."""
    status_code = getattr(error, "status_code", None)
    if status_code == 403:
        return STEP_SAVE_SESSION_EXPIRED
    if status_code == 401:
        return STEP_SAVE_NOT_LOGGED_IN
    return STEP_SAVE_OFFLINE


class StepCounterService:
    """
    One walking session at a time.

    `now` supplies wall-clock time and is injectable so tests can drive the
    step interval and duration deterministically.
    """

    def __init__(self, health_service: HealthService, now: Callable[[], datetime] = utcnow):
        self.health_service = health_service
        self._now = now
        self.detector = StepDetector()
        self.is_active = False
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.pending: Optional[StepSession] = None

    @property
    def steps(self) -> int:
        return self.detector.steps

    @property
    def duration(self) -> int:
        """Whole seconds since start (frozen once stopped)."""
        if self.start_time is None:
            return 0
        end = self._now() if self.is_active else (self.end_time or self.start_time)
        return max(0, int((end - self.start_time).total_seconds()))

    @property
    def formatted_duration(self) -> str:
        return format_duration(self.duration)

    @property
    def distance_km(self) -> float:
        return estimate_distance_km(self.steps)

    @property
    def calories(self) -> float:
        return estimate_calories(self.steps)

    def start(self) -> None:
        """
        Raises:
            StepSessionError: If a session is already running
        """
        if self.is_active:
            raise StepSessionError("Step tracking is already running")

        self.reset()
        self.start_time = self._now()
        self.detector.reset(self.start_time.timestamp() * 1000)
        self.is_active = True
        logger.info("Step tracking started")

    def on_sample(self, sample: AccelerometerSample, at: Optional[datetime] = None) -> int:
        """
        Feeds one accelerometer reading.

        Returns:
            Current step count
        """
        if not self.is_active:
            raise StepSessionError("Step tracking is not running")

        at = at or self._now()
        if self.detector.process(sample, at.timestamp() * 1000):
            logger.debug(f"Step detected (acc {sample.acceleration:.3f}g), total {self.steps}")
        return self.steps

    def stop(self) -> Optional[StepSession]:
        """
        Ends sensing.

        Returns:
            The session summary to save, or None when no steps were recorded
            (the session is reset in that case)
        """
        if not self.is_active:
            raise StepSessionError("Step tracking is not running")

        self.is_active = False
        self.end_time = self._now()

        if self.steps == 0:
            logger.info(NO_STEPS_RECORDED)
            self.reset()
            return None

        self.pending = StepSession(
            start_time=self.start_time,
            end_time=self.end_time,
            steps=self.steps,
            distance=self.distance_km,
            calories=self.calories,
            duration=self.duration,
        )
        logger.info(
            f"Step tracking stopped: {self.pending.steps} steps in {self.formatted_duration}"
        )
        return self.pending

    async def save(self, session: Optional[StepSession] = None) -> ApiResponse:
        """
        Saves the stopped session (or an explicitly given one).

        On failure the session stays pending so `save()` can be called again;
        use `step_save_error_message` for the alert text.
        """
        session = session or self.pending
        if session is None:
            raise StepSessionError("No step session to save")

        with LogContext(session="steps"):
            try:
                response = await self.health_service.save_step_session(session)
            except KneeKlinicError as e:
                logger.error(f"Error saving step session: {e.message}")
                self.pending = session
                raise

        self.reset()
        return response

    def discard(self) -> None:
        logger.info("Step session discarded")
        self.reset()

    def reset(self) -> None:
        self.is_active = False
        self.start_time = None
        self.end_time = None
        self.pending = None
        self.detector.reset(0.0)
