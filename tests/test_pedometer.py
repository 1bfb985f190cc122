import pytest

from kneeklinic.flow.pedometer import (
    AccelerometerSample,
    StepDetector,
    StepPhase,
    estimate_calories,
    estimate_distance_km,
    format_calories,
    format_distance_km,
)

REST = AccelerometerSample(0.0, 0.0, 1.0)
PEAK = AccelerometerSample(0.0, 0.0, 1.2)
TROUGH = AccelerometerSample(0.0, 0.0, 0.8)


def test_acceleration_removes_gravity():
    assert REST.acceleration == pytest.approx(0.0)
    assert AccelerometerSample(0.6, 0.0, 0.8).acceleration == pytest.approx(0.0)
    assert PEAK.acceleration == pytest.approx(0.2)
    assert TROUGH.acceleration == pytest.approx(-0.2)


def test_rest_never_counts():
    detector = StepDetector()
    detector.reset(0)
    for t in range(0, 5000, 50):
        assert detector.process(REST, t) is False
    assert detector.steps == 0
    assert detector.phase == StepPhase.DOWN


def test_peak_then_trough_counts_one_step():
    detector = StepDetector()
    detector.reset(0)

    assert detector.process(PEAK, 150) is False
    assert detector.phase == StepPhase.UP
    assert detector.process(TROUGH, 300) is True
    assert detector.steps == 1
    assert detector.phase == StepPhase.DOWN
    assert detector.last_step_time == 300


def test_trough_without_peak_is_ignored():
    detector = StepDetector()
    detector.reset(0)
    assert detector.process(TROUGH, 500) is False
    assert detector.steps == 0


def test_small_movements_stay_below_threshold():
    detector = StepDetector()
    detector.reset(0)
    detector.process(AccelerometerSample(0.0, 0.0, 1.05), 300)
    detector.process(AccelerometerSample(0.0, 0.0, 0.95), 600)
    assert detector.steps == 0
    assert detector.phase == StepPhase.DOWN


def test_interval_must_exceed_minimum():
    detector = StepDetector()
    detector.reset(0)

    detector.process(PEAK, 100)
    assert detector.process(TROUGH, 250) is False  # exactly 250 ms is too soon
    assert detector.phase == StepPhase.DOWN

    detector.process(PEAK, 260)
    assert detector.process(TROUGH, 251 + 250) is True
    assert detector.steps == 1

    # Second step too close to the first
    detector.process(PEAK, 600)
    assert detector.process(TROUGH, 700) is False
    assert detector.steps == 1


def test_repeated_peaks_only_count_once():
    detector = StepDetector()
    detector.reset(0)
    for t in (100, 150, 200):
        detector.process(PEAK, t)
    detector.process(TROUGH, 400)
    detector.process(TROUGH, 450)
    assert detector.steps == 1


def test_count_is_monotonic_while_walking():
    detector = StepDetector()
    detector.reset(0)
    previous = 0
    t = 0
    for _ in range(50):
        t += 200
        detector.process(PEAK, t)
        t += 200
        detector.process(TROUGH, t)
        assert detector.steps >= previous
        previous = detector.steps
    assert detector.steps == 50


def test_reset_clears_state():
    detector = StepDetector()
    detector.reset(0)
    detector.process(PEAK, 100)
    detector.process(TROUGH, 400)
    detector.process(PEAK, 500)

    detector.reset(10_000)
    assert detector.steps == 0
    assert detector.phase == StepPhase.DOWN
    assert detector.last_step_time == 10_000


@pytest.mark.parametrize("steps, km, kcal", [
    (0, 0.0, 0.0),
    (7, 0.01, 0.28),
    (1000, 0.76, 40.0),
    (12345, 9.41, 493.8),
])
def test_estimates(steps, km, kcal):
    assert estimate_distance_km(steps) == pytest.approx(km)
    assert estimate_calories(steps) == pytest.approx(kcal)


def test_display_formats():
    assert format_distance_km(1000) == "0.76"
    assert format_calories(100) == "4"
