"""
Relaxation Phase Controller.

Tracks session elapsed time and derives the current relaxation phase:

    initial (gentle engagement) -> deepening (slower rhythm) -> maintenance (minimal change)

Time alone drives phase advancement. A change in observed stress flags
an out-of-band re-evaluation so parameter intensity is re-derived
immediately rather than on the next natural tick.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from loguru import logger

from canine_sense.core.contracts import PhaseKind, RelaxationPhase, StressLevel
from canine_sense.phase.easing import smooth_ease


DEFAULT_PHASE_DURATIONS: Tuple[float, float, float] = (300.0, 600.0, 3600.0)

# Fraction of a phase over which parameters blend toward the next phase
TRANSITION_WINDOW = 0.2

MENTAL_STIMULATION = "Mental Stimulation"
CALM_AND_RELAX = "Calm & Relax"


def content_category_for(phase: PhaseKind, stress: StressLevel) -> str:
    """Content category for a phase; high stress always gets calming content."""
    if stress == StressLevel.HIGH:
        return CALM_AND_RELAX
    if phase == PhaseKind.INITIAL:
        return MENTAL_STIMULATION
    return CALM_AND_RELAX


class PhaseController:
    """
    Three-state relaxation phase machine.

    Guarantees:
    - Phases are visited in order, never skipped or regressed
    - Maintenance is terminal until reset()
    - tick() is idempotent for the same cumulative time and stress
    """

    def __init__(self, durations: Tuple[float, float, float] = DEFAULT_PHASE_DURATIONS):
        """
        Initialize phase controller.

        Args:
            durations: Seconds for (initial, deepening, maintenance)
        """
        if len(durations) != 3 or any(d <= 0 for d in durations):
            raise ValueError(f"Phase durations must be three positive values, got {durations}")

        self.phases: Tuple[RelaxationPhase, ...] = (
            RelaxationPhase.initial(float(durations[0])),
            RelaxationPhase.deepening(float(durations[1])),
            RelaxationPhase.maintenance(float(durations[2])),
        )

        self._elapsed: float = 0.0
        self._current: RelaxationPhase = self.phases[0]
        self._last_stress: Optional[StressLevel] = None
        self._stress_changed: bool = False

    def phase_for_elapsed(self, elapsed_seconds: float) -> RelaxationPhase:
        """Pure mapping from cumulative session time to phase."""
        cumulative = 0.0
        for phase in self.phases[:-1]:
            cumulative += phase.duration
            if elapsed_seconds < cumulative:
                return phase
        return self.phases[-1]

    def phase_start(self, kind: PhaseKind) -> float:
        """Session time at which a phase begins."""
        start = 0.0
        for phase in self.phases:
            if phase.kind == kind:
                return start
            start += phase.duration
        return start

    def tick(self, delta_seconds: float, stress: Optional[StressLevel] = None) -> RelaxationPhase:
        """
        Advance session time and return the current phase.

        Args:
            delta_seconds: Time since the previous tick (negative/NaN treated as 0)
            stress: Most recent observed stress level

        Returns:
            Current RelaxationPhase
        """
        delta = float(delta_seconds) if delta_seconds is not None else 0.0
        if math.isnan(delta) or delta < 0:
            logger.warning(f"Ignoring invalid phase delta {delta_seconds!r}")
            delta = 0.0
        elif math.isinf(delta):
            delta = sum(p.duration for p in self.phases)

        self._elapsed += delta

        previous = self._current
        self._current = self.phase_for_elapsed(self._elapsed)
        if self._current.kind != previous.kind:
            logger.info(
                f"Relaxation phase {previous.kind.value} -> {self._current.kind.value} "
                f"at {self._elapsed:.1f}s"
            )

        self._stress_changed = (
            stress is not None
            and self._last_stress is not None
            and stress != self._last_stress
        )
        if stress is not None:
            if self._stress_changed:
                logger.debug(
                    f"Stress {self._last_stress.value} -> {stress.value}: "
                    "re-deriving parameter intensity"
                )
            self._last_stress = stress

        return self._current

    @property
    def current(self) -> RelaxationPhase:
        return self._current

    @property
    def elapsed_seconds(self) -> float:
        return self._elapsed

    @property
    def last_stress(self) -> Optional[StressLevel]:
        return self._last_stress

    @property
    def stress_changed(self) -> bool:
        """Whether the last tick observed a different stress level than before."""
        return self._stress_changed

    @property
    def progress(self) -> float:
        """Fraction of the current phase elapsed (0 to 1); 1.0 once in maintenance."""
        if self._current.kind.next is None:
            return 1.0
        start = self.phase_start(self._current.kind)
        return min(max((self._elapsed - start) / self._current.duration, 0.0), 1.0)

    @property
    def transition_weight(self) -> float:
        """
        Eased weight toward the next phase's parameters.

        Zero until the final TRANSITION_WINDOW of a phase, then rises
        smoothly to 1 at the boundary. Always zero in maintenance.
        """
        if self._current.kind.next is None:
            return 0.0
        window_start = 1.0 - TRANSITION_WINDOW
        t = (self.progress - window_start) / TRANSITION_WINDOW
        return smooth_ease(t)

    def reset(self):
        """Reset to the start of a new session."""
        self._elapsed = 0.0
        self._current = self.phases[0]
        self._last_stress = None
        self._stress_changed = False
        logger.debug("Phase controller reset")
