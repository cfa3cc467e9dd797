"""
Core data contracts for the Canine Sensory Adaptation Engine.

All components must adhere to these contracts for:
- Immutability of shared profile data
- Deterministic behavior
- Closed numeric ranges on every output
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, Optional, Tuple


Vector3 = Tuple[float, float, float]

CENTER: Vector3 = (0.0, 0.0, 0.0)


# ============================================================
# ENUMERATIONS
# ============================================================

class StressLevel(Enum):
    """Observed stress level of the subject (ordered)."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _STRESS_RANK[self]

    def __lt__(self, other: StressLevel) -> bool:
        if not isinstance(other, StressLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: StressLevel) -> bool:
        if not isinstance(other, StressLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: StressLevel) -> bool:
        if not isinstance(other, StressLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: StressLevel) -> bool:
        if not isinstance(other, StressLevel):
            return NotImplemented
        return self.rank >= other.rank


_STRESS_RANK = {
    StressLevel.LOW: 0,
    StressLevel.MODERATE: 1,
    StressLevel.HIGH: 2,
}


class AgeProfile(Enum):
    """Developmental stage of the subject."""
    PUPPY = "puppy"
    ADULT = "adult"
    SENIOR = "senior"


class SpatialPreference(Enum):
    """Preferred placement of audio sources around the subject."""
    SURROUND = "surround"
    FRONT_FOCUSED = "front_focused"
    SIDE_FOCUSED = "side_focused"
    OVERHEAD = "overhead"
    ADAPTIVE = "adaptive"


class ColorPreference(Enum):
    """Dichromatic color emphasis preferred by a breed."""
    BLUE_DOMINANT = "blue_dominant"
    YELLOW_DOMINANT = "yellow_dominant"
    BALANCED = "balanced"
    HIGH_CONTRAST = "high_contrast"


class BreedCategory(Enum):
    """Broad breed grouping."""
    WORKING = "working"            # Border Collie, German Shepherd
    COMPANION = "companion"        # Labrador, Golden Retriever
    TERRIER = "terrier"            # Jack Russell, Yorkshire
    BRACHYCEPHALIC = "brachycephalic"  # Bulldog, Pug
    GIANT = "giant"                # Great Dane, Mastiff
    SPORTING = "sporting"          # Pointer, Setter
    HERDING = "herding"            # Australian Shepherd, Collie
    TOY = "toy"                    # Chihuahua, Pomeranian


class EnergyLevel(Enum):
    """Typical activity level; scales visual pacing."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PhaseKind(Enum):
    """Relaxation phases, in session order."""
    INITIAL = "initial"
    DEEPENING = "deepening"
    MAINTENANCE = "maintenance"

    @property
    def next(self) -> Optional[PhaseKind]:
        order = list(PhaseKind)
        index = order.index(self)
        return order[index + 1] if index + 1 < len(order) else None


# ============================================================
# PROFILES
# ============================================================

@dataclass(frozen=True)
class BreedProfile:
    """
    Audio/visual preference coefficients for a named breed.

    Built once when the registry is constructed and shared by
    reference across sessions. Never mutated.
    """
    name: str
    preferred_frequencies: Tuple[float, ...]
    volume_sensitivity: float  # (0, 1]
    spatial_preference: SpatialPreference
    stress_response_frequencies: Tuple[float, ...]
    color_preference: ColorPreference
    motion_sensitivity: float  # [0, 1]
    contrast_preference: float  # [0, 1]

    category: BreedCategory = BreedCategory.COMPANION
    energy_level: EnergyLevel = EnergyLevel.MEDIUM
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AgeCharacteristics:
    """Multipliers applied for a given age profile."""
    visual_speed_multiplier: float
    bpm_offset: int
    audio_engagement: float
    frame_rate_bias: float
    volume_multiplier: float


AGE_TABLE: Dict[AgeProfile, AgeCharacteristics] = {
    AgeProfile.PUPPY: AgeCharacteristics(
        visual_speed_multiplier=1.2,
        bpm_offset=5,
        audio_engagement=1.1,
        frame_rate_bias=1.1,
        volume_multiplier=1.0,
    ),
    AgeProfile.ADULT: AgeCharacteristics(
        visual_speed_multiplier=1.0,
        bpm_offset=0,
        audio_engagement=1.0,
        frame_rate_bias=1.0,
        volume_multiplier=1.0,
    ),
    AgeProfile.SENIOR: AgeCharacteristics(
        visual_speed_multiplier=0.8,
        bpm_offset=-5,
        audio_engagement=0.9,
        frame_rate_bias=0.85,
        volume_multiplier=0.9,
    ),
}


# ============================================================
# INPUTS
# ============================================================

@dataclass(frozen=True)
class StressMetrics:
    """
    Behavior feedback for one sampling interval.

    Produced by an external behavior-sensing collaborator.
    """
    stress_level: StressLevel = StressLevel.MODERATE
    movement_rate: float = 0.5  # [0, 1]
    heart_rate: Optional[float] = None
    subject_location: Optional[Vector3] = None

    @classmethod
    def coerce(cls, value: StressMetrics | StressLevel | None) -> StressMetrics:
        """Accept full metrics, a bare stress level, or None (moderate)."""
        if isinstance(value, StressMetrics):
            return value
        if isinstance(value, StressLevel):
            return cls(stress_level=value)
        return cls()

    @property
    def clamped_movement_rate(self) -> float:
        rate = float(self.movement_rate)
        if rate != rate:  # NaN
            return 0.0
        return min(max(rate, 0.0), 1.0)


@dataclass(frozen=True)
class RelaxationPhase:
    """A relaxation phase with its fixed nominal duration in seconds."""
    kind: PhaseKind
    duration: float

    @classmethod
    def initial(cls, duration: float = 300.0) -> RelaxationPhase:
        return cls(PhaseKind.INITIAL, duration)

    @classmethod
    def deepening(cls, duration: float = 600.0) -> RelaxationPhase:
        return cls(PhaseKind.DEEPENING, duration)

    @classmethod
    def maintenance(cls, duration: float = 3600.0) -> RelaxationPhase:
        return cls(PhaseKind.MAINTENANCE, duration)


# ============================================================
# OUTPUTS
# ============================================================

@dataclass(frozen=True)
class FrequencyBand:
    """One equalizer band handed to the audio renderer."""
    center_hz: float
    bandwidth_hz: float
    gain_db: float

    @property
    def low_hz(self) -> float:
        return self.center_hz - self.bandwidth_hz / 2

    @property
    def high_hz(self) -> float:
        return self.center_hz + self.bandwidth_hz / 2


@dataclass(frozen=True)
class ToneGenerator:
    """A synthesized calming/engagement tone."""
    frequency_hz: float
    amplitude: float  # [0, 1]


@dataclass(frozen=True)
class DichromaticCoefficients:
    """
    Coefficients for the per-pixel dichromatic transform.

    blue'   = (blue * blue_weight) ** contrast_exponent
    yellow' = ((red * red_weight + green * green_weight) * yellow_weight) ** contrast_exponent
    """
    blue_weight: float
    yellow_weight: float
    red_weight: float
    green_weight: float
    contrast_exponent: float  # > 1


@dataclass(frozen=True)
class AudioParameters:
    """Audio subset of AdaptationParameters."""
    audio_bpm: int
    frequency_bands: Tuple[FrequencyBand, ...]
    spatial_bias: Vector3
    volume_ceiling_db: float
    tone_generators: Tuple[ToneGenerator, ...] = ()


@dataclass(frozen=True)
class VisualParameters:
    """Visual subset of AdaptationParameters."""
    visual_speed: float
    color_contrast: float
    motion_damping: float
    frame_rate_cap: float
    dichromatic: DichromaticCoefficients


@dataclass(frozen=True)
class AdaptationParameters:
    """
    Complete parameter snapshot consumed by external renderers.

    A pure value, recomputed on every evaluation.
    """
    visual_speed: float
    color_contrast: float
    audio_bpm: int
    frequency_bands: Tuple[FrequencyBand, ...]
    spatial_bias: Vector3
    volume_ceiling_db: float
    frame_rate_cap: float
    content_category: str

    motion_damping: float = 1.0
    dichromatic: Optional[DichromaticCoefficients] = None
    tone_generators: Tuple[ToneGenerator, ...] = ()
    phase: PhaseKind = PhaseKind.INITIAL
    stress_level: StressLevel = StressLevel.MODERATE


# ============================================================
# SAFETY
# ============================================================

MAX_VOLUME_DB = 65.0


@dataclass(frozen=True)
class SafetyConstraints:
    """
    Global closed ranges for every numeric output.

    These are HARD CONSTRAINTS. MAX_VOLUME_DB is a welfare ceiling
    that no profile, phase or stress input may exceed.
    """
    max_volume_db: float = MAX_VOLUME_DB
    min_volume_db: float = 20.0

    min_band_gain_db: float = -12.0
    max_band_gain_db: float = 6.0

    min_bpm: int = 30
    max_bpm: int = 120

    min_frame_rate: float = 10.0
    max_frame_rate: float = 120.0

    max_visual_speed: float = 2.0

    min_motion_damping: float = 0.1
    max_motion_damping: float = 1.0

    max_spatial_component: float = 1.0


# ============================================================
# SESSION STATE
# ============================================================

@dataclass
class SessionState:
    """
    Mutable state of one adaptation session.

    Owned exclusively by a single orchestrator instance.
    """
    elapsed_seconds: float = 0.0
    current_phase: PhaseKind = PhaseKind.INITIAL
    last_stress_level: Optional[StressLevel] = None
    history: Deque[AdaptationParameters] = field(default_factory=lambda: deque(maxlen=120))

    last_subject_location: Optional[Vector3] = None
    stress_transitions: int = 0
    evaluations: int = 0

    def copy(self) -> SessionState:
        return SessionState(
            elapsed_seconds=self.elapsed_seconds,
            current_phase=self.current_phase,
            last_stress_level=self.last_stress_level,
            history=deque(self.history, maxlen=self.history.maxlen),
            last_subject_location=self.last_subject_location,
            stress_transitions=self.stress_transitions,
            evaluations=self.evaluations,
        )
