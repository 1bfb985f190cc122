"""
kneeklinic/flow/pedometer.py

Purpose: Step detection from accelerometer readings

- Gravity-compensated magnitude of each reading
- Two-phase (up/down) peak detector with a minimum interval between steps
- Distance and calorie estimates from the step count
"""

import math
from dataclasses import dataclass
from enum import Enum

from kneeklinic.utils.constants import (
    CALORIES_PER_STEP,
    GRAVITY_G,
    MIN_STEP_INTERVAL_MS,
    STEP_LENGTH_METERS,
    STEP_THRESHOLD_G,
)


class StepPhase(str, Enum):
    """Where the detector is within one stride."""

    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class AccelerometerSample:
    """One reading in g on each axis."""

    x: float
    y: float
    z: float

    @property
    def acceleration(self) -> float:
        """Magnitude with gravity removed; ~0 when the device is at rest."""
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2) - GRAVITY_G


class StepDetector:
    """
    Counts steps from a stream of accelerometer samples.

    A step is a rise above +threshold followed by a fall below -threshold,
    counted only if more than `min_interval_ms` passed since the previous
    counted step. Timestamps are in milliseconds on any monotonic scale.
    """

    def __init__(
        self,
        threshold: float = STEP_THRESHOLD_G,
        min_interval_ms: float = MIN_STEP_INTERVAL_MS,
    ):
        self.threshold = threshold
        self.min_interval_ms = min_interval_ms
        self.steps = 0
        self.phase = StepPhase.DOWN
        self.last_step_time: float = 0.0

    def reset(self, start_time_ms: float) -> None:
        self.steps = 0
        self.phase = StepPhase.DOWN
        self.last_step_time = start_time_ms

    def process(self, sample: AccelerometerSample, timestamp_ms: float) -> bool:
        """
        Feeds one sample.

        Returns:
            True if this sample completed a counted step
        """
        acceleration = sample.acceleration

        if acceleration > self.threshold and self.phase == StepPhase.DOWN:
            self.phase = StepPhase.UP
        elif acceleration < -self.threshold and self.phase == StepPhase.UP:
            counted = False
            if timestamp_ms - self.last_step_time > self.min_interval_ms:
                self.steps += 1
                self.last_step_time = timestamp_ms
                counted = True
            self.phase = StepPhase.DOWN
            return counted

        return False


def estimate_distance_km(steps: int, step_length_m: float = STEP_LENGTH_METERS) -> float:
    return round(steps * step_length_m / 1000, 2)


def estimate_calories(steps: int, per_step: float = CALORIES_PER_STEP) -> float:
    return round(steps * per_step, 2)


def format_distance_km(steps: int) -> str:
    """Distance for display, e.g. "0.76"."""
    return f"{steps * STEP_LENGTH_METERS / 1000:.2f}"


def format_calories(steps: int) -> str:
    """Calories for display, e.g. "4" (whole kcal)."""
    return f"{steps * CALORIES_PER_STEP:.0f}"
