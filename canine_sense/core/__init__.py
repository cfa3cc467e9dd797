"""
Core contracts for the Canine Sensory Adaptation Engine.

Evaluation order (NEVER REORDER):
1. Resolve breed profile
2. Advance relaxation phase
3. Shape audio parameters
4. Shape visual parameters
5. Merge and clamp against safety ranges
6. Record history and publish snapshot
"""

from .contracts import (
    AgeProfile,
    StressLevel,
    SpatialPreference,
    ColorPreference,
    BreedCategory,
    EnergyLevel,
    PhaseKind,
    BreedProfile,
    AgeCharacteristics,
    AGE_TABLE,
    StressMetrics,
    RelaxationPhase,
    FrequencyBand,
    ToneGenerator,
    DichromaticCoefficients,
    AudioParameters,
    VisualParameters,
    AdaptationParameters,
    SafetyConstraints,
    SessionState,
    MAX_VOLUME_DB,
)
from .errors import (
    CanineSenseError,
    DuplicateProfileError,
    InvalidProfileError,
    RegistryFrozenError,
    OutOfRangeParameter,
)
