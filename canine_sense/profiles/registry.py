"""
Breed Profile Registry.

Immutable lookup of breed characteristics with a designated default.
Unknown breeds degrade gracefully to the default profile: subject
identification is best-effort and playback must never halt for lack
of personalization data.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional

from loguru import logger

from canine_sense.core.contracts import BreedCategory, BreedProfile
from canine_sense.core.errors import DuplicateProfileError, RegistryFrozenError
from canine_sense.profiles.breed_table import (
    canonical_name,
    load_breed_table,
    validate_profile,
)

if TYPE_CHECKING:
    from canine_sense.config import EngineConfig


class ProfileRegistry:
    """
    Registry of breed profiles.

    Built once, then frozen. After freeze() the registry is read-only
    and may be shared across sessions and threads; lookups take no lock.
    """

    def __init__(self, default: BreedProfile):
        """
        Initialize registry.

        Args:
            default: Profile returned for unknown names (registered too)
        """
        self._profiles: Dict[str, BreedProfile] = {}
        self._index: Dict[str, BreedProfile] = {}
        self._frozen = False

        self.register(default)
        self._default = default

    def register(self, profile: BreedProfile) -> None:
        """
        Register a profile under its canonical name and aliases.

        Raises:
            RegistryFrozenError: If called after freeze()
            DuplicateProfileError: If the name or an alias is taken
            InvalidProfileError: If a coefficient is out of range
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{profile.name}': registry is frozen"
            )

        validate_profile(profile)

        keys = [canonical_name(profile.name)]
        keys.extend(canonical_name(a) for a in profile.aliases)

        if len(set(keys)) != len(keys):
            raise DuplicateProfileError(f"'{profile.name}' repeats a name in its aliases")

        for key in keys:
            if key in self._index:
                raise DuplicateProfileError(
                    f"'{key}' is already registered to '{self._index[key].name}'"
                )

        self._profiles[keys[0]] = profile
        for key in keys:
            self._index[key] = profile

    def freeze(self) -> ProfileRegistry:
        """Make the registry read-only. Returns self for chaining."""
        self._frozen = True
        self._profiles = MappingProxyType(dict(self._profiles))
        self._index = MappingProxyType(dict(self._index))
        logger.info(f"Profile registry frozen with {len(self._profiles)} breeds")
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def default(self) -> BreedProfile:
        return self._default

    def lookup(self, name: Optional[str]) -> BreedProfile:
        """
        Resolve a breed name to a profile.

        Case-insensitive and whitespace-trimmed. Never raises: unknown
        or empty names return the default profile.
        """
        key = canonical_name(name)
        profile = self._index.get(key)
        if profile is None:
            logger.debug(f"Unknown breed '{name}', using default profile")
            return self._default
        return profile

    def names(self) -> List[str]:
        """Canonical names of all registered breeds (sorted)."""
        return sorted(self._profiles.keys())

    def suggest(self, partial: str) -> List[str]:
        """Breed names containing, or contained in, the input."""
        needle = canonical_name(partial)
        if not needle:
            return []
        return sorted(
            name for name in self._profiles
            if needle in name or name in needle
        )

    def by_category(self, category: BreedCategory) -> List[str]:
        return sorted(
            name for name, profile in self._profiles.items()
            if profile.category == category
        )

    @property
    def profiles(self) -> Mapping[str, BreedProfile]:
        return MappingProxyType(dict(self._profiles))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_name(name) in self._index

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[BreedProfile]:
        return iter(self._profiles.values())


def build_default_registry(path: Optional[Path] = None) -> ProfileRegistry:
    """
    Build and freeze a registry from a breed table YAML file.

    Args:
        path: Breed table location (packaged table if None)

    Returns:
        Frozen ProfileRegistry
    """
    profiles, default_name = load_breed_table(path)

    default = next(p for p in profiles if p.name == default_name)
    registry = ProfileRegistry(default)

    for profile in profiles:
        if profile is default:
            continue
        registry.register(profile)

    return registry.freeze()


def build_registry(config: EngineConfig) -> ProfileRegistry:
    """Build the frozen registry named by a config's breed_table (packaged table if unset)."""
    path = Path(config.breed_table).expanduser() if config.breed_table else None
    return build_default_registry(path)
