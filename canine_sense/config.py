"""
Configuration module for the adaptation engine.

This module contains engine presets and settings loading.
Settings come from (later wins):
1. The preset named in settings or args
2. Explicit values in the YAML settings file (null = keep preset)
3. Attributes on an args namespace

To add a new preset:
1. Add entry to PRESETS dict with your settings
2. Optionally set as ACTIVE_PRESET default
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from loguru import logger

from canine_sense.core.contracts import MAX_VOLUME_DB, SafetyConstraints


DEFAULT_SETTINGS = Path(__file__).resolve().parent / "data" / "settings.yaml"


# === ENGINE PRESETS ===
# Each preset trades session pacing against output intensity
PRESETS = {
    "STANDARD": {
        "phase_durations": (300.0, 600.0, 3600.0),
        "history_length": 120,
        "max_volume_db": 65.0,      # Welfare ceiling
        "max_bpm": 120,
        "max_frame_rate": 120.0,
        "max_visual_speed": 2.0,
    },
    "SENSITIVE": {
        "phase_durations": (300.0, 600.0, 3600.0),
        "history_length": 120,
        "max_volume_db": 55.0,      # Noise-sensitive subjects
        "max_bpm": 90,
        "max_frame_rate": 60.0,
        "max_visual_speed": 1.0,
    },
    "DEMO": {
        "phase_durations": (30.0, 60.0, 360.0),  # Compressed session
        "history_length": 30,
        "max_volume_db": 65.0,
        "max_bpm": 120,
        "max_frame_rate": 120.0,
        "max_visual_speed": 2.0,
    },
}

# Default preset
ACTIVE_PRESET = "STANDARD"

# settings.yaml section -> {yaml key: EngineConfig attribute}
_SECTION_KEYS = {
    "engine": {
        "strict_safety": "strict_safety",
        "history_length": "history_length",
        "breed_table": "breed_table",
    },
    "safety": {
        "max_volume_db": "max_volume_db",
        "max_bpm": "max_bpm",
        "max_frame_rate": "max_frame_rate",
        "max_visual_speed": "max_visual_speed",
    },
    "logging": {
        "level": "log_level",
        "file": "log_file",
    },
}

_PHASE_KEYS = ("initial_seconds", "deepening_seconds", "maintenance_seconds")


@dataclass
class EngineConfig:
    """Main configuration for the adaptation engine.

    Attributes:
        preset: Engine preset name
        strict_safety: Raise on out-of-range outputs instead of clamping
        log_level: Console log level
        log_file: Optional rotating log file
        breed_table: Breed table YAML path for build_registry (packaged table if None)
    """
    preset: str = ACTIVE_PRESET

    # Behavior
    strict_safety: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Profiles
    breed_table: Optional[str] = None

    # Computed from preset (set in __post_init__)
    phase_durations: Tuple[float, float, float] = field(default=(300.0, 600.0, 3600.0), init=False)
    history_length: int = field(default=120, init=False)
    max_volume_db: float = field(default=65.0, init=False)
    max_bpm: int = field(default=120, init=False)
    max_frame_rate: float = field(default=120.0, init=False)
    max_visual_speed: float = field(default=2.0, init=False)

    def __post_init__(self):
        """Apply preset settings."""
        self.preset = self.preset.upper()
        if self.preset not in PRESETS:
            raise ValueError(f"Unknown preset '{self.preset}' (choose from {', '.join(PRESETS)})")

        preset = PRESETS[self.preset]
        self.phase_durations = tuple(preset["phase_durations"])
        self.history_length = preset["history_length"]
        self.max_volume_db = preset["max_volume_db"]
        self.max_bpm = preset["max_bpm"]
        self.max_frame_rate = preset["max_frame_rate"]
        self.max_visual_speed = preset["max_visual_speed"]

    def safety_constraints(self) -> SafetyConstraints:
        """Build safety constraints; the volume ceiling never exceeds MAX_VOLUME_DB.

        Raises:
            ValueError: If a configured maximum is below its fixed floor
        """
        max_volume = self.max_volume_db
        if max_volume > MAX_VOLUME_DB:
            logger.warning(f"Configured max_volume_db {max_volume} above {MAX_VOLUME_DB} dB, capping")
            max_volume = MAX_VOLUME_DB

        floors = SafetyConstraints()
        for name, value, floor in (
            ("max_volume_db", max_volume, floors.min_volume_db),
            ("max_bpm", self.max_bpm, floors.min_bpm),
            ("max_frame_rate", self.max_frame_rate, floors.min_frame_rate),
            ("max_visual_speed", self.max_visual_speed, 0.0),
        ):
            if value < floor:
                raise ValueError(f"{name}={value} is below the minimum of {floor}")

        return SafetyConstraints(
            max_volume_db=max_volume,
            max_bpm=self.max_bpm,
            max_frame_rate=self.max_frame_rate,
            max_visual_speed=self.max_visual_speed,
        )


def read_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read a YAML settings file (packaged settings if None)."""
    settings_path = Path(path) if path is not None else DEFAULT_SETTINGS
    if not settings_path.exists():
        logger.warning(f"Settings file {settings_path} not found, using defaults")
        return {}

    with open(settings_path) as f:
        document = yaml.safe_load(f)

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(f"Settings file {settings_path} must contain a mapping")
    return document


def _apply_settings(config: EngineConfig, settings: Dict[str, Any]):
    for section, keys in _SECTION_KEYS.items():
        values = settings.get(section) or {}
        for key, attribute in keys.items():
            if values.get(key) is not None:
                setattr(config, attribute, values[key])

    phases = settings.get("phases") or {}
    durations = list(config.phase_durations)
    for index, key in enumerate(_PHASE_KEYS):
        if phases.get(key) is not None:
            durations[index] = float(phases[key])
    config.phase_durations = tuple(durations)


def load_config(args: Optional[Any] = None, path: Optional[Path] = None) -> EngineConfig:
    """Load configuration from a settings file and/or parsed args.

    Args:
        args: Namespace with optional attributes (preset, strict_safety,
            log_level, log_file, breed_table), or None
        path: Settings YAML path (packaged settings if None)

    Returns:
        EngineConfig with all settings
    """
    settings = read_settings(path)

    preset = getattr(args, 'preset', None) or (settings.get("engine") or {}).get("preset") or ACTIVE_PRESET
    config = EngineConfig(preset=preset)
    _apply_settings(config, settings)

    if args is not None:
        for attribute in ("strict_safety", "log_level", "log_file", "breed_table"):
            value = getattr(args, attribute, None)
            if value is not None:
                setattr(config, attribute, value)

    config.safety_constraints()  # Reject inverted ranges at load time
    logger.debug(f"Loaded config: preset {config.preset}, phases {config.phase_durations}")
    return config
