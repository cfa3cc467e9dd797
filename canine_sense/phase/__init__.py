"""
Phase Module.

Responsibilities:
- Session time tracking
- Relaxation phase derivation (initial -> deepening -> maintenance)
- Eased interpolation between phases
"""

from .controller import (
    PhaseController,
    DEFAULT_PHASE_DURATIONS,
    content_category_for,
    MENTAL_STIMULATION,
    CALM_AND_RELAX,
)
from .easing import smooth_ease, ease_parameter
