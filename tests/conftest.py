"""Shared fixtures for the adaptation engine tests."""

from __future__ import annotations

import pytest

from canine_sense.config import EngineConfig
from canine_sense.core.contracts import (
    AdaptationParameters,
    BreedCategory,
    EnergyLevel,
    BreedProfile,
    ColorPreference,
    FrequencyBand,
    PhaseKind,
    SpatialPreference,
    StressLevel,
)
from canine_sense.pipeline.orchestrator import AdaptationOrchestrator
from canine_sense.profiles.registry import build_default_registry


@pytest.fixture(scope="session")
def registry():
    """Frozen registry built from the packaged breed table."""
    return build_default_registry()


@pytest.fixture
def orchestrator(registry):
    return AdaptationOrchestrator(registry)


@pytest.fixture
def make_orchestrator(registry):
    def _make(**config_kwargs):
        return AdaptationOrchestrator(registry, EngineConfig(**config_kwargs))
    return _make


@pytest.fixture
def make_profile():
    def _make(name="test breed", **overrides):
        fields = dict(
            name=name,
            preferred_frequencies=(500.0, 1000.0),
            volume_sensitivity=0.5,
            spatial_preference=SpatialPreference.SURROUND,
            stress_response_frequencies=(220.0,),
            color_preference=ColorPreference.BALANCED,
            motion_sensitivity=0.5,
            contrast_preference=0.5,
            category=BreedCategory.COMPANION,
            energy_level=EnergyLevel.MEDIUM,
            aliases=(),
        )
        fields.update(overrides)
        return BreedProfile(**fields)
    return _make


@pytest.fixture
def make_parameters():
    """In-range snapshot with per-test overrides."""
    def _make(**overrides):
        fields = dict(
            visual_speed=0.5,
            color_contrast=0.6,
            audio_bpm=60,
            frequency_bands=(
                FrequencyBand(center_hz=250.0, bandwidth_hz=200.0, gain_db=1.0),
                FrequencyBand(center_hz=1000.0, bandwidth_hz=800.0, gain_db=-2.0),
            ),
            spatial_bias=(0.0, 0.0, 0.0),
            volume_ceiling_db=50.0,
            frame_rate_cap=60.0,
            content_category="Calm & Relax",
            motion_damping=0.8,
            phase=PhaseKind.INITIAL,
            stress_level=StressLevel.MODERATE,
        )
        fields.update(overrides)
        return AdaptationParameters(**fields)
    return _make
