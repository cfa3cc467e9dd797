"""
Safety Layer - Output Range Guardrails.

Enforces:
- Volume ceiling never above MAX_VOLUME_DB (65 dB)
- Band gains, BPM, frame-rate cap, visual speed and motion damping
  inside their closed ranges
- Spatial bias components inside [-1, 1]
- Non-finite values replaced with the nearest safe bound

When a value is out of range:
- Clamp it
- Log the violation
- In strict mode, raise OutOfRangeParameter instead
"""

from __future__ import annotations

import dataclasses
import math
import time
from typing import List, Optional, Tuple

from loguru import logger

from canine_sense.core.contracts import (
    AdaptationParameters,
    FrequencyBand,
    SafetyConstraints,
    ToneGenerator,
    Vector3,
)
from canine_sense.core.errors import OutOfRangeParameter


MAX_VIOLATION_LOG = 100


class SafetyLayer:
    """
    Final clamp over every AdaptationParameters snapshot.

    HARD CONSTRAINTS that CANNOT be violated:
    - volume_ceiling_db <= constraints.max_volume_db
    - Every numeric field inside its SafetyConstraints range
    - No NaN or infinity reaches a renderer
    """

    def __init__(
        self,
        constraints: Optional[SafetyConstraints] = None,
        strict: bool = False,
    ):
        """
        Initialize safety layer.

        Args:
            constraints: Safety constraints (uses defaults if None)
            strict: Raise OutOfRangeParameter instead of clamping
        """
        self.constraints = constraints or SafetyConstraints()
        self.strict = strict

        self._violation_count: int = 0
        self._violation_log: List[str] = []

    def _clamp(self, name: str, value: float, low: float, high: float) -> float:
        value = float(value)
        if low <= value <= high:
            return value

        if self.strict:
            raise OutOfRangeParameter(name, value, low, high)

        if math.isnan(value):
            safe = low
        else:
            safe = min(max(value, low), high)

        self._log_violation(f"{name}={value:.3f} clamped to {safe:.3f}")
        return safe

    def clamp_bands(self, bands: Tuple[FrequencyBand, ...]) -> Tuple[FrequencyBand, ...]:
        c = self.constraints
        clamped = []
        for band in bands:
            gain = self._clamp(
                f"band_gain_db@{band.center_hz:.0f}Hz",
                band.gain_db,
                c.min_band_gain_db,
                c.max_band_gain_db,
            )
            if gain != band.gain_db:
                band = dataclasses.replace(band, gain_db=gain)
            clamped.append(band)
        return tuple(clamped)

    def clamp_spatial(self, bias: Vector3) -> Vector3:
        limit = self.constraints.max_spatial_component
        return tuple(
            self._clamp(f"spatial_bias[{axis}]", component, -limit, limit)
            for axis, component in zip("xyz", bias)
        )

    def clamp_tones(self, tones: Tuple[ToneGenerator, ...]) -> Tuple[ToneGenerator, ...]:
        clamped = []
        for tone in tones:
            amplitude = self._clamp("tone_amplitude", tone.amplitude, 0.0, 1.0)
            clamped.append(ToneGenerator(frequency_hz=tone.frequency_hz, amplitude=amplitude))
        return tuple(clamped)

    def enforce(self, params: AdaptationParameters) -> AdaptationParameters:
        """
        Clamp every numeric field of a snapshot.

        Args:
            params: Merged shaper output

        Returns:
            A new snapshot with all fields inside the global ranges
            (the input itself if nothing needed clamping)

        Raises:
            OutOfRangeParameter: Only in strict mode
        """
        c = self.constraints

        safe = dataclasses.replace(
            params,
            visual_speed=self._clamp("visual_speed", params.visual_speed, 0.0, c.max_visual_speed),
            color_contrast=self._clamp("color_contrast", params.color_contrast, 0.0, 1.0),
            audio_bpm=int(round(self._clamp("audio_bpm", params.audio_bpm, c.min_bpm, c.max_bpm))),
            frequency_bands=self.clamp_bands(params.frequency_bands),
            spatial_bias=self.clamp_spatial(params.spatial_bias),
            volume_ceiling_db=self._clamp(
                "volume_ceiling_db", params.volume_ceiling_db, c.min_volume_db, c.max_volume_db
            ),
            frame_rate_cap=self._clamp(
                "frame_rate_cap", params.frame_rate_cap, c.min_frame_rate, c.max_frame_rate
            ),
            motion_damping=self._clamp(
                "motion_damping", params.motion_damping, c.min_motion_damping, c.max_motion_damping
            ),
            tone_generators=self.clamp_tones(params.tone_generators),
        )

        return params if safe == params else safe

    def _log_violation(self, message: str):
        """Log a constraint violation."""
        self._violation_count += 1
        self._violation_log.append(f"[{time.strftime('%H:%M:%S')}] {message}")

        if len(self._violation_log) > MAX_VIOLATION_LOG:
            self._violation_log.pop(0)

        logger.warning(f"Safety violation: {message}")

    @property
    def violation_count(self) -> int:
        return self._violation_count

    def get_violation_log(self) -> List[str]:
        """Get recent violation log."""
        return self._violation_log.copy()

    def reset(self):
        """Reset safety layer state."""
        self._violation_count = 0
        self._violation_log.clear()
        logger.info("Safety layer reset")
