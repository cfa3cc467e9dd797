"""
Profiles Module.

Responsibilities:
- Breed coefficient table loading and validation
- Immutable, case-insensitive breed lookup with default fallback
"""

from .registry import ProfileRegistry, build_default_registry, build_registry
from .breed_table import load_breed_table, profile_from_mapping, canonical_name
