"""
Audio Parameter Shaper.

Maps relaxation phase + breed profile + age + stress into the audio
subset of AdaptationParameters:
- Tempo (BPM)
- 10-band equalizer across the canine hearing range
- Spatial bias
- Volume ceiling
- Tone generators

All branches are total over their enum domains; no exceptions are raised.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from loguru import logger

from canine_sense.core.contracts import (
    AGE_TABLE,
    CENTER,
    AgeProfile,
    AudioParameters,
    BreedProfile,
    FrequencyBand,
    PhaseKind,
    RelaxationPhase,
    SafetyConstraints,
    SpatialPreference,
    StressLevel,
    StressMetrics,
    ToneGenerator,
    Vector3,
)
from canine_sense.phase.controller import MENTAL_STIMULATION, content_category_for
from canine_sense.phase.easing import ease_parameter


# Band edges spanning the documented canine hearing range (~40 Hz - 65 kHz)
CANINE_BAND_EDGES_HZ: Tuple[Tuple[float, float], ...] = (
    (40.0, 84.0),
    (84.0, 175.0),
    (175.0, 367.0),
    (367.0, 770.0),
    (770.0, 1610.0),
    (1610.0, 3370.0),
    (3370.0, 7060.0),
    (7060.0, 14800.0),
    (14800.0, 31000.0),
    (31000.0, 65000.0),
)


def band_centers_hz() -> Tuple[float, ...]:
    """Geometric center of each band."""
    return tuple(math.sqrt(lo * hi) for lo, hi in CANINE_BAND_EDGES_HZ)


@dataclass(frozen=True)
class AudioPhaseSettings:
    """Per-phase audio baseline."""
    base_bpm: float
    band_intensity: float
    base_volume_db: float
    gain_shape_db: Tuple[float, ...]


# Progressive relaxation: early engagement, deepening calm, sustained minimal stimulation
AUDIO_PHASE_TABLE: Dict[PhaseKind, AudioPhaseSettings] = {
    PhaseKind.INITIAL: AudioPhaseSettings(
        base_bpm=60,
        band_intensity=1.0,
        base_volume_db=60.0,
        gain_shape_db=(0.0, 0.0, 1.0, 2.0, 2.0, 3.0, 3.0, 2.0, 0.0, -3.0),
    ),
    PhaseKind.DEEPENING: AudioPhaseSettings(
        base_bpm=55,
        band_intensity=0.7,
        base_volume_db=55.0,
        gain_shape_db=(1.0, 1.0, 1.0, 1.0, 0.0, 0.0, -1.0, -2.0, -4.0, -6.0),
    ),
    PhaseKind.MAINTENANCE: AudioPhaseSettings(
        base_bpm=50,
        band_intensity=0.4,
        base_volume_db=50.0,
        gain_shape_db=(0.5, 0.5, 0.5, 0.0, 0.0, 0.0, -1.0, -2.0, -4.0, -6.0),
    ),
}

STRESS_BPM_REDUCTION: Dict[StressLevel, int] = {
    StressLevel.LOW: 0,
    StressLevel.MODERATE: 3,
    StressLevel.HIGH: 6,
}

STRESS_VOLUME_FACTOR: Dict[StressLevel, float] = {
    StressLevel.LOW: 1.0,
    StressLevel.MODERATE: 0.92,
    StressLevel.HIGH: 0.85,
}

STRESS_RESPONSE_BOOST_DB: Dict[StressLevel, float] = {
    StressLevel.LOW: 0.0,
    StressLevel.MODERATE: 1.5,
    StressLevel.HIGH: 3.0,
}

PREFERRED_BAND_BOOST_DB = 1.0

# Fraction of the ceiling removed at volume_sensitivity = 1
VOLUME_SENSITIVITY_ATTENUATION = 0.5

SPATIAL_BIAS: Dict[SpatialPreference, Vector3] = {
    SpatialPreference.SURROUND: CENTER,
    SpatialPreference.FRONT_FOCUSED: (0.0, 0.0, 1.0),
    SpatialPreference.SIDE_FOCUSED: (1.0, 0.0, 0.0),
    SpatialPreference.OVERHEAD: (0.0, 1.0, 0.0),
}

AGE_TONE_HZ: Dict[AgeProfile, float] = {
    AgeProfile.PUPPY: 600.0,   # more engaging
    AgeProfile.ADULT: 400.0,
    AgeProfile.SENIOR: 200.0,  # calmer
}

CATEGORY_TONES: Dict[str, ToneGenerator] = {
    MENTAL_STIMULATION: ToneGenerator(frequency_hz=880.0, amplitude=0.3),
}
CALM_TONE = ToneGenerator(frequency_hz=220.0, amplitude=0.5)


def _overlaps(low: float, high: float, frequencies: Tuple[float, ...]) -> bool:
    return any(low <= f < high for f in frequencies)


class AudioParameterShaper:
    """
    Audio parameter shaper.

    Guarantees:
    - volume_ceiling_db never exceeds the safety ceiling
    - Band gains stay inside the safety gain range
    - Higher stress never raises BPM and never lowers stress-response band gain
    """

    def __init__(self, constraints: Optional[SafetyConstraints] = None):
        """
        Initialize audio shaper.

        Args:
            constraints: Safety ranges (uses defaults if None)
        """
        self.constraints = constraints or SafetyConstraints()
        self._centers = band_centers_hz()

    def _blended(self, kind: PhaseKind, transition_weight: float) -> AudioPhaseSettings:
        current = AUDIO_PHASE_TABLE[kind]
        nxt = kind.next
        if nxt is None or transition_weight <= 0.0:
            return current

        target = AUDIO_PHASE_TABLE[nxt]
        w = min(transition_weight, 1.0)
        return AudioPhaseSettings(
            base_bpm=ease_parameter(current.base_bpm, target.base_bpm, w),
            band_intensity=ease_parameter(current.band_intensity, target.band_intensity, w),
            base_volume_db=ease_parameter(current.base_volume_db, target.base_volume_db, w),
            gain_shape_db=tuple(
                ease_parameter(a, b, w)
                for a, b in zip(current.gain_shape_db, target.gain_shape_db)
            ),
        )

    def shape_bpm(self, settings: AudioPhaseSettings, age: AgeProfile, stress: StressLevel) -> int:
        bpm = settings.base_bpm + AGE_TABLE[age].bpm_offset - STRESS_BPM_REDUCTION[stress]
        bpm = int(round(bpm))
        return min(max(bpm, self.constraints.min_bpm), self.constraints.max_bpm)

    def shape_volume(
        self,
        settings: AudioPhaseSettings,
        profile: BreedProfile,
        age: AgeProfile,
        stress: StressLevel,
    ) -> float:
        volume = settings.base_volume_db
        volume *= 1.0 - VOLUME_SENSITIVITY_ATTENUATION * profile.volume_sensitivity
        volume *= AGE_TABLE[age].volume_multiplier
        volume *= STRESS_VOLUME_FACTOR[stress]
        return min(max(volume, self.constraints.min_volume_db), self.constraints.max_volume_db)

    def shape_bands(
        self,
        settings: AudioPhaseSettings,
        profile: BreedProfile,
        age: AgeProfile,
        stress: StressLevel,
    ) -> Tuple[FrequencyBand, ...]:
        """
        Compute the 10-band equalizer.

        Each band's gain = phase shape * phase intensity * age engagement,
        plus a preference boost for bands holding the breed's preferred
        frequencies and a stress boost for its stress-response frequencies.
        """
        engagement = AGE_TABLE[age].audio_engagement
        stress_boost = STRESS_RESPONSE_BOOST_DB[stress]

        bands: List[FrequencyBand] = []
        for (low, high), center, shape in zip(
            CANINE_BAND_EDGES_HZ, self._centers, settings.gain_shape_db
        ):
            gain = shape * settings.band_intensity * engagement

            if _overlaps(low, high, profile.preferred_frequencies):
                gain += PREFERRED_BAND_BOOST_DB * settings.band_intensity

            if _overlaps(low, high, profile.stress_response_frequencies):
                gain += stress_boost

            gain = min(max(gain, self.constraints.min_band_gain_db), self.constraints.max_band_gain_db)
            bands.append(FrequencyBand(center_hz=center, bandwidth_hz=high - low, gain_db=gain))

        return tuple(bands)

    def shape_spatial_bias(
        self,
        profile: BreedProfile,
        subject_location: Optional[Vector3] = None,
    ) -> Vector3:
        """Spatial bias from preference; adaptive follows the subject if known."""
        if profile.spatial_preference != SpatialPreference.ADAPTIVE:
            return SPATIAL_BIAS[profile.spatial_preference]

        if subject_location is None:
            return CENTER

        limit = self.constraints.max_spatial_component
        components = []
        for c in subject_location:
            c = float(c)
            if math.isnan(c):
                c = 0.0
            components.append(min(max(c, -limit), limit))
        return (components[0], components[1], components[2])

    def shape_tones(
        self,
        kind: PhaseKind,
        profile: BreedProfile,
        age: AgeProfile,
        stress: StressLevel,
    ) -> Tuple[ToneGenerator, ...]:
        tones = [ToneGenerator(frequency_hz=AGE_TONE_HZ[age], amplitude=0.5)]

        category = content_category_for(kind, stress)
        tones.append(CATEGORY_TONES.get(category, CALM_TONE))

        if stress != StressLevel.LOW and profile.stress_response_frequencies:
            tones.append(
                ToneGenerator(
                    frequency_hz=profile.stress_response_frequencies[0],
                    amplitude=0.1 * stress.rank,
                )
            )

        return tuple(tones)

    def shape(
        self,
        phase: Union[RelaxationPhase, PhaseKind],
        profile: BreedProfile,
        age: AgeProfile,
        stress: Union[StressMetrics, StressLevel, None],
        transition_weight: float = 0.0,
        subject_location: Optional[Vector3] = None,
    ) -> AudioParameters:
        """
        Shape audio parameters.

        Args:
            phase: Current relaxation phase
            profile: Resolved breed profile
            age: Age profile
            stress: Current stress metrics (or bare stress level)
            transition_weight: Eased blend toward the next phase (0 to 1)
            subject_location: Last known subject location (adaptive spatial)

        Returns:
            AudioParameters
        """
        kind = phase.kind if isinstance(phase, RelaxationPhase) else phase
        metrics = StressMetrics.coerce(stress)
        level = metrics.stress_level

        if subject_location is None:
            subject_location = metrics.subject_location

        settings = self._blended(kind, transition_weight)

        params = AudioParameters(
            audio_bpm=self.shape_bpm(settings, age, level),
            frequency_bands=self.shape_bands(settings, profile, age, level),
            spatial_bias=self.shape_spatial_bias(profile, subject_location),
            volume_ceiling_db=self.shape_volume(settings, profile, age, level),
            tone_generators=self.shape_tones(kind, profile, age, level),
        )

        logger.debug(
            f"Audio shaped for {profile.name}/{age.value}/{level.value} in {kind.value}: "
            f"{params.audio_bpm} BPM, ceiling {params.volume_ceiling_db:.1f} dB"
        )
        return params
