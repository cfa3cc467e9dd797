"""
Canine Sensory Adaptation Engine

Computes audio and video transform parameters adapted to canine
perception: a dichromatic (blue/yellow) color transform for vision and
frequency/spatial shaping across the extended canine hearing range.
Parameters are modulated in real time by breed, age and observed stress.

Top Priorities (strict order):
1. Animal welfare (65 dB ceiling, bounded visual intensity)
2. Deterministic, explainable behavior
3. Smooth phase progression (no abrupt parameter jumps)
4. Pure computation; rendering and sensing stay external
"""

__version__ = "0.1.0"
__author__ = "Canine Sensory Adaptation Engine Team"

from canine_sense.config import EngineConfig, load_config
from canine_sense.core.contracts import (
    AdaptationParameters,
    AgeProfile,
    StressLevel,
    StressMetrics,
)
from canine_sense.logging_setup import setup_logging
from canine_sense.pipeline import AdaptationOrchestrator, AdaptationSession, StressFeed
from canine_sense.profiles import ProfileRegistry, build_default_registry, build_registry
