"""Tests for relaxation phase progression."""

import math

import pytest

from canine_sense.core.contracts import PhaseKind, StressLevel
from canine_sense.phase.controller import (
    CALM_AND_RELAX,
    MENTAL_STIMULATION,
    PhaseController,
    content_category_for,
)
from canine_sense.phase.easing import ease_parameter, smooth_ease


class TestPhaseController:
    """Time-driven phase machine."""

    @pytest.fixture
    def controller(self):
        return PhaseController()

    def test_starts_initial(self, controller):
        assert controller.current.kind == PhaseKind.INITIAL
        assert controller.tick(0).kind == PhaseKind.INITIAL
        assert controller.elapsed_seconds == 0.0

    @pytest.mark.parametrize("elapsed, expected", [
        (0.0, PhaseKind.INITIAL),
        (299.0, PhaseKind.INITIAL),
        (300.0, PhaseKind.DEEPENING),
        (899.0, PhaseKind.DEEPENING),
        (900.0, PhaseKind.MAINTENANCE),
        (1e9, PhaseKind.MAINTENANCE),
    ])
    def test_phase_for_elapsed(self, controller, elapsed, expected):
        assert controller.phase_for_elapsed(elapsed).kind == expected

    def test_phases_never_regress(self, controller):
        order = list(PhaseKind)
        last = 0
        for _ in range(100):
            index = order.index(controller.tick(20.0).kind)
            assert index >= last
            last = index
        assert controller.current.kind == PhaseKind.MAINTENANCE

    def test_maintenance_is_terminal(self, controller):
        controller.tick(5000.0)
        controller.tick(1e6)
        assert controller.current.kind == PhaseKind.MAINTENANCE

    def test_zero_delta_is_idempotent(self, controller):
        controller.tick(120.0, StressLevel.LOW)
        first = controller.tick(0.0, StressLevel.LOW)
        second = controller.tick(0.0, StressLevel.LOW)
        assert first == second
        assert controller.elapsed_seconds == 120.0
        assert not controller.stress_changed

    @pytest.mark.parametrize("delta", [-5.0, float("nan"), None])
    def test_invalid_delta_treated_as_zero(self, controller, delta):
        controller.tick(10.0)
        controller.tick(delta)
        assert controller.elapsed_seconds == 10.0

    def test_infinite_delta_reaches_maintenance(self, controller):
        controller.tick(float("inf"))
        assert controller.current.kind == PhaseKind.MAINTENANCE
        assert math.isfinite(controller.elapsed_seconds)

    def test_stress_changed_flag(self, controller):
        controller.tick(1.0, StressLevel.LOW)
        assert not controller.stress_changed

        controller.tick(1.0, StressLevel.HIGH)
        assert controller.stress_changed

        controller.tick(1.0, StressLevel.HIGH)
        assert not controller.stress_changed

    def test_stress_does_not_change_phase(self, controller):
        controller.tick(10.0, StressLevel.LOW)
        assert controller.tick(0.0, StressLevel.HIGH).kind == PhaseKind.INITIAL

    def test_progress(self, controller):
        controller.tick(150.0)
        assert controller.progress == pytest.approx(0.5)

        controller.tick(450.0)
        assert controller.current.kind == PhaseKind.DEEPENING
        assert controller.progress == pytest.approx(0.5)

        controller.tick(2000.0)
        assert controller.progress == 1.0

    def test_transition_weight(self, controller):
        controller.tick(100.0)
        assert controller.transition_weight == 0.0

        controller.tick(190.0)  # 290s: inside the final 20%
        assert 0.0 < controller.transition_weight <= 1.0

        controller.tick(2000.0)
        assert controller.transition_weight == 0.0

    def test_reset(self, controller):
        controller.tick(1000.0, StressLevel.HIGH)
        controller.reset()

        assert controller.current.kind == PhaseKind.INITIAL
        assert controller.elapsed_seconds == 0.0
        assert controller.last_stress is None

    def test_custom_durations(self):
        controller = PhaseController((10.0, 20.0, 30.0))
        assert controller.tick(10.0).kind == PhaseKind.DEEPENING
        assert controller.phase_start(PhaseKind.MAINTENANCE) == 30.0

    @pytest.mark.parametrize("durations", [(300.0, 600.0), (300.0, 0.0, 3600.0), (-1.0, 600.0, 3600.0)])
    def test_invalid_durations(self, durations):
        with pytest.raises(ValueError):
            PhaseController(durations)


class TestContentCategory:

    def test_initial_is_stimulating(self):
        assert content_category_for(PhaseKind.INITIAL, StressLevel.LOW) == MENTAL_STIMULATION

    def test_later_phases_calm(self):
        assert content_category_for(PhaseKind.DEEPENING, StressLevel.LOW) == CALM_AND_RELAX
        assert content_category_for(PhaseKind.MAINTENANCE, StressLevel.MODERATE) == CALM_AND_RELAX

    def test_high_stress_forces_calm(self):
        assert content_category_for(PhaseKind.INITIAL, StressLevel.HIGH) == CALM_AND_RELAX


class TestEasing:

    def test_smooth_ease_bounds(self):
        assert smooth_ease(-1.0) == 0.0
        assert smooth_ease(0.0) == 0.0
        assert smooth_ease(1.0) == 1.0
        assert smooth_ease(0.5) == pytest.approx(0.875)

    def test_ease_parameter_endpoints(self):
        assert ease_parameter(60.0, 55.0, 0.0) == pytest.approx(60.0)
        assert ease_parameter(60.0, 55.0, 1.0) == pytest.approx(55.0)
        assert ease_parameter(60.0, 55.0, 0.5) == pytest.approx(57.5)

    @pytest.mark.parametrize("weight, expected", [(-0.5, 60.0), (1.5, 55.0)])
    def test_ease_parameter_clamps_weight(self, weight, expected):
        assert ease_parameter(60.0, 55.0, weight) == pytest.approx(expected)
