"""
Adaptation Session.

Connects a StressFeed, an AdaptationOrchestrator and renderer sinks.
The embedding application drives step() from its own timer.

To add a renderer:
1. Inherit from AudioSink or VisualSink
2. Implement apply()
3. Pass an instance to AdaptationSession
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import List, Optional, Sequence, Union

from loguru import logger

from canine_sense.core.contracts import AdaptationParameters, AgeProfile, StressMetrics
from canine_sense.pipeline.feedback import StressFeed
from canine_sense.pipeline.orchestrator import AdaptationOrchestrator, coerce_age


class AudioSink(ABC):
    """Abstract base class for audio renderers.

    Receives the full snapshot; reads bands, spatial bias, volume
    ceiling, BPM and tone generators.
    """

    @abstractmethod
    def apply(self, parameters: AdaptationParameters) -> None:
        """Apply a parameter snapshot.

        Args:
            parameters: Safety-clamped snapshot
        """
        pass


class VisualSink(ABC):
    """Abstract base class for video renderers.

    Receives the full snapshot; reads visual speed, contrast,
    frame-rate cap, motion damping and dichromatic coefficients.
    """

    @abstractmethod
    def apply(self, parameters: AdaptationParameters) -> None:
        """Apply a parameter snapshot.

        Args:
            parameters: Safety-clamped snapshot
        """
        pass


class AdaptationSession:
    """
    One subject's adaptation session.

    Guarantees:
    - Every sink receives the same snapshot each step
    - A failing sink never stops the other sinks
    - Without feedback, the last metrics are held (moderate at start)
    """

    def __init__(
        self,
        orchestrator: AdaptationOrchestrator,
        feed: Optional[StressFeed] = None,
        audio_sinks: Sequence[AudioSink] = (),
        visual_sinks: Sequence[VisualSink] = (),
        breed: Optional[str] = None,
        age: Union[AgeProfile, str] = AgeProfile.ADULT,
    ):
        self.orchestrator = orchestrator
        self.feed = feed or StressFeed()
        self.audio_sinks: List[AudioSink] = list(audio_sinks)
        self.visual_sinks: List[VisualSink] = list(visual_sinks)

        self._breed = breed
        self._age = coerce_age(age)
        self._metrics = StressMetrics()
        self._sink_failures: int = 0

    def update_subject(self, breed: Optional[str], age: Union[AgeProfile, str]):
        """Change the subject; takes effect on the next step."""
        self._breed = breed
        self._age = coerce_age(age)
        logger.info(f"Subject updated: {breed or 'default'} ({self._age.value})")

    def _poll_metrics(self) -> StressMetrics:
        """
        Consume everything published since the last step.

        Returns the newest metrics carrying the worst stress level seen in
        the interval. With nothing new, the last metrics are held.
        """
        items = self.feed.drain()
        if not items:
            return self._metrics

        latest = items[-1]
        self._metrics = latest
        worst = max((m.stress_level for m in items), key=lambda level: level.rank)
        if worst.rank > latest.stress_level.rank:
            logger.debug(f"Stress peaked at {worst.value} since last step, now {latest.stress_level.value}")
            return replace(latest, stress_level=worst)
        return latest

    def step(self, delta_seconds: float) -> AdaptationParameters:
        """
        Evaluate once and fan the snapshot out to every sink.

        Args:
            delta_seconds: Time since the previous step

        Returns:
            The snapshot handed to the sinks
        """
        metrics = self._poll_metrics()
        parameters = self.orchestrator.evaluate(self._breed, self._age, metrics, delta_seconds)

        for sink in [*self.audio_sinks, *self.visual_sinks]:
            try:
                sink.apply(parameters)
            except Exception as e:
                self._sink_failures += 1
                logger.error(f"Sink {type(sink).__name__} failed: {e}")

        return parameters

    @property
    def breed(self) -> Optional[str]:
        return self._breed

    @property
    def age(self) -> AgeProfile:
        return self._age

    @property
    def sink_failures(self) -> int:
        return self._sink_failures

    def reset(self):
        """Start the session over with the same subject and sinks."""
        self.orchestrator.reset()
        self.feed.clear()
        self._metrics = StressMetrics()
        self._sink_failures = 0
