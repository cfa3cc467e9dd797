"""
Breed coefficient table loading and validation.

The numeric table is configuration data (YAML), not code. Every entry
is validated on load so that an out-of-range coefficient fails at
registry build time instead of surfacing during playback.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from loguru import logger

from canine_sense.core.contracts import (
    BreedCategory,
    BreedProfile,
    ColorPreference,
    EnergyLevel,
    SpatialPreference,
)
from canine_sense.core.errors import InvalidProfileError


DEFAULT_BREED_TABLE = Path(__file__).resolve().parent.parent / "data" / "breeds.yaml"

REQUIRED_FIELDS = (
    "name",
    "preferred_frequencies",
    "volume_sensitivity",
    "spatial_preference",
    "stress_response_frequencies",
    "color_preference",
    "motion_sensitivity",
    "contrast_preference",
)


def canonical_name(name: Optional[str]) -> str:
    """Lowercase, trimmed, single-spaced form used for lookup keys."""
    if not name:
        return ""
    return " ".join(str(name).split()).lower()


def _frequencies(name: str, field_name: str, values: Any, allow_empty: bool) -> Tuple[float, ...]:
    if values is None:
        values = []
    try:
        freqs = tuple(float(v) for v in values)
    except (TypeError, ValueError) as e:
        raise InvalidProfileError(f"{name}: {field_name} must be a list of Hz values") from e

    if not freqs and not allow_empty:
        raise InvalidProfileError(f"{name}: {field_name} must not be empty")
    if any(f <= 0 for f in freqs):
        raise InvalidProfileError(f"{name}: {field_name} values must be positive")
    return freqs


def _unit(name: str, field_name: str, value: Any, open_low: bool = False) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidProfileError(f"{name}: {field_name} must be a number") from e

    low_ok = v > 0.0 if open_low else v >= 0.0
    if not (low_ok and v <= 1.0):
        bracket = "(0, 1]" if open_low else "[0, 1]"
        raise InvalidProfileError(f"{name}: {field_name}={v} outside {bracket}")
    return v


def _enum(name: str, enum_cls, value: Any):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidProfileError(
            f"{name}: unknown {enum_cls.__name__} '{value}'. Allowed: {allowed}"
        ) from e


def profile_from_mapping(data: Mapping[str, Any]) -> BreedProfile:
    """
    Build a validated BreedProfile from a mapping.

    Args:
        data: One breed entry (as loaded from YAML)

    Returns:
        Immutable BreedProfile

    Raises:
        InvalidProfileError: If a field is missing or out of range
    """
    missing = [f for f in REQUIRED_FIELDS if f not in data]
    if missing:
        raise InvalidProfileError(
            f"{data.get('name', '<unnamed>')}: missing fields {', '.join(missing)}"
        )

    name = canonical_name(data["name"])
    if not name:
        raise InvalidProfileError("Breed name must not be empty")

    aliases = tuple(
        canonical_name(a) for a in (data.get("aliases") or []) if canonical_name(a)
    )

    return BreedProfile(
        name=name,
        preferred_frequencies=_frequencies(
            name, "preferred_frequencies", data["preferred_frequencies"], allow_empty=False
        ),
        volume_sensitivity=_unit(name, "volume_sensitivity", data["volume_sensitivity"], open_low=True),
        spatial_preference=_enum(name, SpatialPreference, data["spatial_preference"]),
        stress_response_frequencies=_frequencies(
            name, "stress_response_frequencies", data["stress_response_frequencies"], allow_empty=True
        ),
        color_preference=_enum(name, ColorPreference, data["color_preference"]),
        motion_sensitivity=_unit(name, "motion_sensitivity", data["motion_sensitivity"]),
        contrast_preference=_unit(name, "contrast_preference", data["contrast_preference"]),
        category=_enum(name, BreedCategory, data.get("category", "companion")),
        energy_level=_enum(name, EnergyLevel, data.get("energy_level", "medium")),
        aliases=aliases,
    )


def validate_profile(profile: BreedProfile) -> None:
    """Validate a profile constructed directly in code."""
    profile_from_mapping(
        {
            "name": profile.name,
            "aliases": list(profile.aliases),
            "category": profile.category.value,
            "energy_level": profile.energy_level.value,
            "preferred_frequencies": list(profile.preferred_frequencies),
            "volume_sensitivity": profile.volume_sensitivity,
            "spatial_preference": profile.spatial_preference.value,
            "stress_response_frequencies": list(profile.stress_response_frequencies),
            "color_preference": profile.color_preference.value,
            "motion_sensitivity": profile.motion_sensitivity,
            "contrast_preference": profile.contrast_preference,
        }
    )


def parse_breed_table(document: Mapping[str, Any]) -> Tuple[List[BreedProfile], str]:
    """
    Parse a loaded breed table document.

    Returns:
        Tuple of (profiles, default_name)
    """
    if not isinstance(document, Mapping):
        raise InvalidProfileError("Breed table must be a mapping with a 'breeds' list")

    entries = document.get("breeds") or []
    if not isinstance(entries, list) or not entries:
        raise InvalidProfileError("Breed table has no 'breeds' entries")

    profiles = [profile_from_mapping(entry) for entry in entries]

    default_name = canonical_name(document.get("default", "default"))
    if default_name not in {p.name for p in profiles}:
        raise InvalidProfileError(f"Default breed '{default_name}' is not defined in the table")

    return profiles, default_name


def load_breed_table(path: Optional[Path] = None) -> Tuple[List[BreedProfile], str]:
    """
    Load and validate a breed table YAML file.

    Args:
        path: Table location (packaged table if None)

    Returns:
        Tuple of (profiles, default_name)
    """
    table_path = Path(path) if path is not None else DEFAULT_BREED_TABLE
    with open(table_path) as f:
        document: Dict[str, Any] = yaml.safe_load(f)

    profiles, default_name = parse_breed_table(document)
    logger.debug(f"Loaded {len(profiles)} breed profiles from {table_path}")
    return profiles, default_name
