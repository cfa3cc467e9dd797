"""
Adaptation Orchestrator.

Executes one evaluation in strict order:

1. Resolve the breed profile (default on unknown names)
2. Advance the phase controller
3. Shape audio parameters
4. Shape visual parameters
5. Merge into one snapshot and select the content category
6. Enforce safety ranges
7. Append to the bounded session history

The orchestrator does no I/O and spawns nothing; a single caller owns it.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Union

from loguru import logger

from canine_sense.audio.parameter_shaper import AudioParameterShaper
from canine_sense.config import EngineConfig
from canine_sense.core.contracts import (
    AdaptationParameters,
    AgeProfile,
    AudioParameters,
    PhaseKind,
    SessionState,
    StressLevel,
    StressMetrics,
    VisualParameters,
)
from canine_sense.phase.controller import PhaseController, content_category_for
from canine_sense.profiles.registry import ProfileRegistry, build_registry
from canine_sense.safety.safety_layer import SafetyLayer
from canine_sense.transforms.color_shaper import ColorTransformShaper


def coerce_age(age: Union[AgeProfile, str, None]) -> AgeProfile:
    """Accept an AgeProfile or its name; anything else is treated as adult."""
    if isinstance(age, AgeProfile):
        return age
    if isinstance(age, str):
        try:
            return AgeProfile(age.strip().lower())
        except ValueError:
            pass
    logger.debug(f"Unknown age profile {age!r}, using adult")
    return AgeProfile.ADULT


def merge_parameters(
    audio: AudioParameters,
    visual: VisualParameters,
    phase: PhaseKind,
    stress: StressLevel,
) -> AdaptationParameters:
    """Combine both shaper outputs into one snapshot."""
    return AdaptationParameters(
        visual_speed=visual.visual_speed,
        color_contrast=visual.color_contrast,
        audio_bpm=audio.audio_bpm,
        frequency_bands=audio.frequency_bands,
        spatial_bias=audio.spatial_bias,
        volume_ceiling_db=audio.volume_ceiling_db,
        frame_rate_cap=visual.frame_rate_cap,
        content_category=content_category_for(phase, stress),
        motion_damping=visual.motion_damping,
        dichromatic=visual.dichromatic,
        tone_generators=audio.tone_generators,
        phase=phase,
        stress_level=stress,
    )


class AdaptationOrchestrator:
    """
    Per-session adaptation engine.

    Guarantees:
    - Evaluation order is NEVER reordered
    - Identical inputs from a fresh session give identical snapshots
    - Every returned snapshot has passed the safety layer
    - evaluate() never raises for unknown breeds, ages or bad deltas
    """

    def __init__(
        self,
        registry: ProfileRegistry,
        config: Optional[EngineConfig] = None,
        safety: Optional[SafetyLayer] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            registry: Breed profile registry (shared, read-only)
            config: Engine configuration (STANDARD preset if None)
            safety: Safety layer (built from config if None)
        """
        self.registry = registry
        self.config = config or EngineConfig()
        self.safety = safety or SafetyLayer(
            self.config.safety_constraints(),
            strict=self.config.strict_safety,
        )

        constraints = self.safety.constraints
        self._phase_controller = PhaseController(self.config.phase_durations)
        self._audio_shaper = AudioParameterShaper(constraints)
        self._color_shaper = ColorTransformShaper(constraints)

        self._state = self._new_state()

        logger.info(
            f"Adaptation orchestrator initialized ({len(registry)} breeds, "
            f"preset {self.config.preset})"
        )

    @classmethod
    def from_config(cls, config: EngineConfig) -> "AdaptationOrchestrator":
        """Build an orchestrator over the breed table the config names."""
        return cls(build_registry(config), config)

    def _new_state(self) -> SessionState:
        return SessionState(history=deque(maxlen=self.config.history_length))

    def evaluate(
        self,
        profile_name: Optional[str],
        age: Union[AgeProfile, str, None],
        stress: Union[StressMetrics, StressLevel, None],
        delta_seconds: float,
    ) -> AdaptationParameters:
        """
        Produce the parameter snapshot for one tick.

        Args:
            profile_name: Breed name (case-insensitive; unknown -> default)
            age: Age profile or its name
            stress: Current stress metrics or bare level (None -> moderate)
            delta_seconds: Time since the previous evaluation

        Returns:
            Safety-clamped AdaptationParameters
        """
        profile = self.registry.lookup(profile_name)
        age_profile = coerce_age(age)
        metrics = StressMetrics.coerce(stress)
        level = metrics.stress_level

        # Step 2: phase
        phase = self._phase_controller.tick(delta_seconds, level)
        transition_weight = self._phase_controller.transition_weight

        if metrics.subject_location is not None:
            self._state.last_subject_location = metrics.subject_location

        # Steps 3-4: shapers
        audio = self._audio_shaper.shape(
            phase,
            profile,
            age_profile,
            metrics,
            transition_weight=transition_weight,
            subject_location=self._state.last_subject_location,
        )
        visual = self._color_shaper.shape(
            phase,
            profile,
            age_profile,
            metrics,
            transition_weight=transition_weight,
        )

        # Steps 5-6: merge, clamp
        params = self.safety.enforce(merge_parameters(audio, visual, phase.kind, level))

        # Step 7: history holds exactly what is returned
        self._record(params)
        return params

    def _record(self, params: AdaptationParameters):
        state = self._state
        controller = self._phase_controller

        if controller.stress_changed:
            state.stress_transitions += 1
            logger.debug(f"Stress transition #{state.stress_transitions}: {params.stress_level.value}")

        state.elapsed_seconds = controller.elapsed_seconds
        state.current_phase = controller.current.kind
        state.last_stress_level = controller.last_stress
        state.evaluations += 1
        state.history.append(params)

    @property
    def session_state(self) -> SessionState:
        """Snapshot copy of the session state."""
        return self._state.copy()

    @property
    def history(self) -> Deque[AdaptationParameters]:
        """Copy of the bounded snapshot history, oldest first."""
        return deque(self._state.history, maxlen=self._state.history.maxlen)

    @property
    def latest(self) -> Optional[AdaptationParameters]:
        return self._state.history[-1] if self._state.history else None

    @property
    def phase_controller(self) -> PhaseController:
        return self._phase_controller

    def reset(self):
        """Clear the session: elapsed time, phase, stress and history."""
        self._phase_controller.reset()
        self._state = self._new_state()
        logger.info("Adaptation session reset")
