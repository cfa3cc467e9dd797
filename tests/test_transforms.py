"""Tests for visual parameter shaping and the dichromatic transform."""

import itertools

import numpy as np
import pytest

from canine_sense.core.contracts import (
    AgeProfile,
    ColorPreference,
    EnergyLevel,
    PhaseKind,
    StressLevel,
    StressMetrics,
)
from canine_sense.transforms.color_shaper import ColorTransformShaper
from canine_sense.transforms.dichromatic import (
    DICHROMATIC_WEIGHTS,
    apply_to_frame,
    coefficients_for,
    color_matrix,
    contrast_lut,
    dichromatic_transform,
)


@pytest.fixture
def shaper():
    return ColorTransformShaper()


class TestColorShaper:
    """Visual ranges and stress behavior."""

    @pytest.mark.parametrize("weight", [0.0, 0.5, 1.0])
    def test_all_outputs_in_range(self, shaper, registry, weight):
        for profile, age, stress, phase in itertools.product(
            registry, AgeProfile, StressLevel, PhaseKind
        ):
            params = shaper.shape(phase, profile, age, stress, transition_weight=weight)

            assert 0.0 <= params.color_contrast <= 1.0
            assert 10.0 <= params.frame_rate_cap <= 120.0
            assert 0.1 <= params.motion_damping <= 1.0
            assert 0.0 <= params.visual_speed <= 2.0
            assert params.dichromatic.contrast_exponent > 1.0

    def test_higher_stress_never_raises_visual_speed(self, shaper, registry):
        for profile, age, phase in itertools.product(registry, AgeProfile, PhaseKind):
            speeds = [shaper.shape(phase, profile, age, s).visual_speed for s in StressLevel]
            assert speeds == sorted(speeds, reverse=True)

    def test_phase_reduces_stimulation(self, shaper, registry):
        profile = registry.lookup("labrador")
        by_phase = [shaper.shape(p, profile, AgeProfile.ADULT, StressLevel.LOW) for p in PhaseKind]

        assert [p.visual_speed for p in by_phase] == pytest.approx([0.5, 0.2, 0.1])
        contrasts = [p.color_contrast for p in by_phase]
        assert contrasts == sorted(contrasts, reverse=True)

    def test_bulldog_senior_high_stress(self, shaper, registry):
        bulldog = registry.lookup("bulldog")
        stressed = shaper.shape(PhaseKind.INITIAL, bulldog, AgeProfile.SENIOR, StressLevel.HIGH)
        baseline = shaper.shape(PhaseKind.INITIAL, bulldog, AgeProfile.ADULT, StressLevel.LOW)

        assert stressed.frame_rate_cap == pytest.approx(60.0 * 0.65 * 0.85 * 0.7)
        assert stressed.frame_rate_cap < 30.0
        assert stressed.visual_speed < baseline.visual_speed

    @pytest.mark.parametrize("name, factor", [
        ("border collie", 1.1),
        ("labrador", 1.0),
        ("bulldog", 0.9),
    ])
    def test_energy_level_paces_visual_speed(self, shaper, registry, name, factor):
        params = shaper.shape(PhaseKind.INITIAL, registry.lookup(name), AgeProfile.ADULT, StressLevel.LOW)
        assert params.visual_speed == pytest.approx(0.5 * factor)

    def test_energy_level_changes_only_speed(self, shaper, make_profile):
        calm = shaper.shape(PhaseKind.DEEPENING, make_profile(energy_level=EnergyLevel.LOW), AgeProfile.ADULT, StressLevel.LOW)
        lively = shaper.shape(PhaseKind.DEEPENING, make_profile(energy_level=EnergyLevel.HIGH), AgeProfile.ADULT, StressLevel.LOW)

        assert calm.visual_speed < lively.visual_speed
        assert calm.color_contrast == lively.color_contrast
        assert calm.frame_rate_cap == lively.frame_rate_cap

    def test_high_contrast_bonus(self, shaper, registry):
        collie = registry.lookup("border collie")
        params = shaper.shape(PhaseKind.INITIAL, collie, AgeProfile.ADULT, StressLevel.LOW)
        assert params.color_contrast == pytest.approx(0.7 * 0.95 + 0.1)

    def test_motion_damping(self, shaper, registry):
        bulldog = registry.lookup("bulldog")
        calm = shaper.shape(PhaseKind.INITIAL, bulldog, AgeProfile.ADULT, StressMetrics(StressLevel.LOW, 0.5))
        assert calm.motion_damping == pytest.approx(1.0 - 0.3 * 0.5 * 1.25)

        collie = registry.lookup("border collie")
        agitated = shaper.shape(PhaseKind.INITIAL, collie, AgeProfile.ADULT, StressMetrics(StressLevel.HIGH, 1.0))
        assert agitated.motion_damping == pytest.approx(0.1)

    def test_deterministic(self, shaper, registry):
        profile = registry.lookup("husky")
        first = shaper.shape(PhaseKind.DEEPENING, profile, AgeProfile.PUPPY, StressLevel.MODERATE, 0.4)
        second = shaper.shape(PhaseKind.DEEPENING, profile, AgeProfile.PUPPY, StressLevel.MODERATE, 0.4)
        assert first == second


class TestDichromaticTransform:
    """Pure per-pixel math."""

    @pytest.fixture
    def coeffs(self):
        return coefficients_for(ColorPreference.BALANCED, 0.6)

    def test_weights_in_documented_ranges(self):
        for blue, yellow, red, green in DICHROMATIC_WEIGHTS.values():
            assert 0.7 <= blue <= 0.8
            assert 0.8 <= yellow <= 0.9
            assert red < 0.5 and green < yellow

    def test_exponent_from_contrast(self):
        assert coefficients_for(ColorPreference.BALANCED, 0.0).contrast_exponent == pytest.approx(1.05)
        assert coefficients_for(ColorPreference.BALANCED, 1.0).contrast_exponent == pytest.approx(1.5)
        assert coefficients_for(ColorPreference.BALANCED, 7.0).contrast_exponent == pytest.approx(1.5)

    def test_single_pixel(self, coeffs):
        out = dichromatic_transform([1.0, 0.0, 0.0], coeffs)

        expected_yellow = (coeffs.red_weight * coeffs.yellow_weight) ** coeffs.contrast_exponent
        np.testing.assert_allclose(out, [expected_yellow, expected_yellow, 0.0])

    def test_pure_blue(self, coeffs):
        out = dichromatic_transform([0.0, 0.0, 1.0], coeffs)
        np.testing.assert_allclose(out, [0.0, 0.0, coeffs.blue_weight ** coeffs.contrast_exponent])

    def test_red_and_green_collapse(self, coeffs):
        out = dichromatic_transform(np.random.default_rng(3).random((8, 8, 3)), coeffs)
        assert out.shape == (8, 8, 3)
        np.testing.assert_array_equal(out[..., 0], out[..., 1])
        assert out.min() >= 0.0 and out.max() <= 1.0

    def test_input_clipped(self, coeffs):
        np.testing.assert_allclose(
            dichromatic_transform([2.0, -1.0, 5.0], coeffs),
            dichromatic_transform([1.0, 0.0, 1.0], coeffs),
        )

    def test_bad_shape(self, coeffs):
        with pytest.raises(ValueError):
            dichromatic_transform(np.zeros((4, 2)), coeffs)

    def test_color_matrix(self, coeffs):
        matrix = color_matrix(coeffs)
        assert matrix.shape == (3, 3)
        assert matrix.dtype == np.float32
        np.testing.assert_array_equal(matrix[0], matrix[1])
        assert matrix[2, 2] == pytest.approx(coeffs.blue_weight)

    def test_contrast_lut(self):
        lut = contrast_lut(1.5)
        assert lut.shape == (256,)
        assert lut[0] == 0 and lut[255] == 255
        assert np.all(np.diff(lut.astype(int)) >= 0)


class TestApplyToFrame:
    """OpenCV frame path matches the float transform."""

    def test_matches_float_transform(self):
        coeffs = coefficients_for(ColorPreference.YELLOW_DOMINANT, 0.8)
        frame = np.random.default_rng(7).integers(0, 256, size=(32, 48, 3), dtype=np.uint8)

        out = apply_to_frame(frame, coeffs)
        expected = dichromatic_transform(frame / 255.0, coeffs) * 255.0

        assert out.dtype == np.uint8
        assert out.shape == frame.shape
        np.testing.assert_allclose(out.astype(np.float64), expected, atol=3.0)

    def test_rejects_grayscale(self):
        coeffs = coefficients_for(ColorPreference.BALANCED, 0.5)
        with pytest.raises(ValueError):
            apply_to_frame(np.zeros((4, 4), dtype=np.uint8), coeffs)
