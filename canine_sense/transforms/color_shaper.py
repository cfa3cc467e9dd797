"""
Color Transform Shaper.

Maps relaxation phase + breed profile + age + stress into the visual
subset of AdaptationParameters:
- Dichromatic color coefficients
- Color contrast
- Visual speed (paced by breed energy level)
- Motion damping (fraction of on-screen motion retained)
- Advisory frame-rate cap

Mirrors the audio shaper: moderate stimulation in the initial phase,
reduced while deepening, minimal in maintenance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

from loguru import logger

from canine_sense.core.contracts import (
    AGE_TABLE,
    AgeProfile,
    BreedProfile,
    ColorPreference,
    EnergyLevel,
    PhaseKind,
    RelaxationPhase,
    SafetyConstraints,
    StressLevel,
    StressMetrics,
    VisualParameters,
)
from canine_sense.phase.easing import ease_parameter
from canine_sense.transforms.dichromatic import coefficients_for


@dataclass(frozen=True)
class VisualPhaseSettings:
    """Per-phase visual baseline."""
    base_contrast: float
    base_visual_speed: float
    base_frame_rate: float


VISUAL_PHASE_TABLE: Dict[PhaseKind, VisualPhaseSettings] = {
    PhaseKind.INITIAL: VisualPhaseSettings(base_contrast=0.7, base_visual_speed=0.5, base_frame_rate=60.0),
    PhaseKind.DEEPENING: VisualPhaseSettings(base_contrast=0.5, base_visual_speed=0.2, base_frame_rate=45.0),
    PhaseKind.MAINTENANCE: VisualPhaseSettings(base_contrast=0.3, base_visual_speed=0.1, base_frame_rate=30.0),
}

STRESS_SPEED_FACTOR: Dict[StressLevel, float] = {
    StressLevel.LOW: 1.0,
    StressLevel.MODERATE: 0.8,
    StressLevel.HIGH: 0.6,
}

STRESS_CONTRAST_FACTOR: Dict[StressLevel, float] = {
    StressLevel.LOW: 1.0,
    StressLevel.MODERATE: 0.9,
    StressLevel.HIGH: 0.8,
}

STRESS_FRAME_RATE_FACTOR: Dict[StressLevel, float] = {
    StressLevel.LOW: 1.0,
    StressLevel.MODERATE: 0.85,
    StressLevel.HIGH: 0.7,
}

STRESS_MOTION_FACTOR: Dict[StressLevel, float] = {
    StressLevel.LOW: 0.5,
    StressLevel.MODERATE: 0.75,
    StressLevel.HIGH: 1.0,
}

ENERGY_SPEED_FACTOR: Dict[EnergyLevel, float] = {
    EnergyLevel.LOW: 0.9,
    EnergyLevel.MEDIUM: 1.0,
    EnergyLevel.HIGH: 1.1,
}

HIGH_CONTRAST_BONUS = 0.1
MAX_MOTION_REDUCTION = 0.9


class ColorTransformShaper:
    """
    Visual parameter shaper.

    Guarantees:
    - color_contrast in [0, 1]
    - frame_rate_cap inside the safety frame-rate range
    - Higher stress never raises visual_speed
    """

    def __init__(self, constraints: Optional[SafetyConstraints] = None):
        """
        Initialize color shaper.

        Args:
            constraints: Safety ranges (uses defaults if None)
        """
        self.constraints = constraints or SafetyConstraints()

    def _blended(self, kind: PhaseKind, transition_weight: float) -> VisualPhaseSettings:
        current = VISUAL_PHASE_TABLE[kind]
        nxt = kind.next
        if nxt is None or transition_weight <= 0.0:
            return current

        target = VISUAL_PHASE_TABLE[nxt]
        w = min(transition_weight, 1.0)
        return VisualPhaseSettings(
            base_contrast=ease_parameter(current.base_contrast, target.base_contrast, w),
            base_visual_speed=ease_parameter(current.base_visual_speed, target.base_visual_speed, w),
            base_frame_rate=ease_parameter(current.base_frame_rate, target.base_frame_rate, w),
        )

    def shape_contrast(self, settings: VisualPhaseSettings, profile: BreedProfile, stress: StressLevel) -> float:
        contrast = settings.base_contrast * (0.5 + 0.5 * profile.contrast_preference)
        contrast *= STRESS_CONTRAST_FACTOR[stress]
        if profile.color_preference == ColorPreference.HIGH_CONTRAST:
            contrast += HIGH_CONTRAST_BONUS
        return min(max(contrast, 0.0), 1.0)

    def shape_visual_speed(
        self,
        settings: VisualPhaseSettings,
        profile: BreedProfile,
        age: AgeProfile,
        stress: StressLevel,
    ) -> float:
        """Phase speed paced by breed energy, slowed for age and stress."""
        speed = settings.base_visual_speed
        speed *= ENERGY_SPEED_FACTOR[profile.energy_level]
        speed *= AGE_TABLE[age].visual_speed_multiplier
        speed *= STRESS_SPEED_FACTOR[stress]
        return min(max(speed, 0.0), self.constraints.max_visual_speed)

    def shape_motion_damping(self, profile: BreedProfile, metrics: StressMetrics) -> float:
        """
        Fraction of on-screen motion retained.

        motion_damping = 1 - clamp(motion_sensitivity * stress_factor, 0, 0.9);
        motion-sensitive breeds under stress get stronger damping (lower value).
        """
        stress_factor = STRESS_MOTION_FACTOR[metrics.stress_level]
        stress_factor *= 1.0 + 0.5 * metrics.clamped_movement_rate
        reduction = min(max(profile.motion_sensitivity * stress_factor, 0.0), MAX_MOTION_REDUCTION)
        c = self.constraints
        return min(max(1.0 - reduction, c.min_motion_damping), c.max_motion_damping)

    def shape_frame_rate(
        self,
        settings: VisualPhaseSettings,
        profile: BreedProfile,
        age: AgeProfile,
        stress: StressLevel,
    ) -> float:
        """Advisory frame-rate ceiling; renderers may clamp further."""
        fps = settings.base_frame_rate
        fps *= 0.5 + 0.5 * profile.motion_sensitivity
        fps *= AGE_TABLE[age].frame_rate_bias
        fps *= STRESS_FRAME_RATE_FACTOR[stress]
        return min(max(fps, self.constraints.min_frame_rate), self.constraints.max_frame_rate)

    def shape(
        self,
        phase: Union[RelaxationPhase, PhaseKind],
        profile: BreedProfile,
        age: AgeProfile,
        stress: Union[StressMetrics, StressLevel, None],
        transition_weight: float = 0.0,
    ) -> VisualParameters:
        """
        Shape visual parameters.

        Args:
            phase: Current relaxation phase
            profile: Resolved breed profile
            age: Age profile
            stress: Current stress metrics (or bare stress level)
            transition_weight: Eased blend toward the next phase (0 to 1)

        Returns:
            VisualParameters
        """
        kind = phase.kind if isinstance(phase, RelaxationPhase) else phase
        metrics = StressMetrics.coerce(stress)
        level = metrics.stress_level

        settings = self._blended(kind, transition_weight)
        contrast = self.shape_contrast(settings, profile, level)

        params = VisualParameters(
            visual_speed=self.shape_visual_speed(settings, profile, age, level),
            color_contrast=contrast,
            motion_damping=self.shape_motion_damping(profile, metrics),
            frame_rate_cap=self.shape_frame_rate(settings, profile, age, level),
            dichromatic=coefficients_for(profile.color_preference, contrast),
        )

        logger.debug(
            f"Visual shaped for {profile.name}/{age.value}/{level.value} in {kind.value}: "
            f"speed {params.visual_speed:.2f}, contrast {params.color_contrast:.2f}, "
            f"cap {params.frame_rate_cap:.0f} fps"
        )
        return params
