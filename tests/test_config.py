"""Tests for presets and settings loading."""

from types import SimpleNamespace

import pytest
import yaml

from canine_sense.config import PRESETS, EngineConfig, load_config
from canine_sense.core.contracts import MAX_VOLUME_DB, PhaseKind, StressLevel
from canine_sense.pipeline.orchestrator import AdaptationOrchestrator
from canine_sense.profiles.registry import build_registry


class TestPresets:

    def test_standard_defaults(self):
        config = EngineConfig()
        assert config.preset == "STANDARD"
        assert config.phase_durations == (300.0, 600.0, 3600.0)
        assert config.history_length == 120
        assert config.max_volume_db == MAX_VOLUME_DB

    def test_sensitive(self):
        config = EngineConfig(preset="SENSITIVE")
        constraints = config.safety_constraints()
        assert constraints.max_volume_db == 55.0
        assert constraints.max_bpm == 90

    def test_preset_name_case_insensitive(self):
        assert EngineConfig(preset="demo").phase_durations == PRESETS["DEMO"]["phase_durations"]

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            EngineConfig(preset="TURBO")

    @pytest.mark.parametrize("attribute, value", [
        ("max_volume_db", 15.0),
        ("max_bpm", 20),
        ("max_frame_rate", 5.0),
        ("max_visual_speed", -0.5),
    ])
    def test_maximum_below_floor_rejected(self, attribute, value):
        config = EngineConfig()
        setattr(config, attribute, value)
        with pytest.raises(ValueError, match=attribute):
            config.safety_constraints()

    def test_volume_never_configured_above_ceiling(self):
        config = EngineConfig()
        config.max_volume_db = 90.0
        assert config.safety_constraints().max_volume_db == MAX_VOLUME_DB


class TestLoadConfig:

    def test_packaged_settings(self):
        config = load_config()
        assert config.preset == "STANDARD"
        assert config.log_level == "INFO"
        assert config.log_file is None
        assert config.phase_durations == (300.0, 600.0, 3600.0)

    def test_settings_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.safe_dump({
            "engine": {"preset": "SENSITIVE", "strict_safety": True},
            "phases": {"initial_seconds": 120, "deepening_seconds": None},
            "safety": {"max_bpm": 80},
            "logging": {"level": "DEBUG"},
        }))

        config = load_config(path=path)
        assert config.preset == "SENSITIVE"
        assert config.strict_safety is True
        assert config.phase_durations == (120.0, 600.0, 3600.0)
        assert config.max_bpm == 80
        assert config.max_volume_db == 55.0
        assert config.log_level == "DEBUG"

    def test_args_override_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.safe_dump({"engine": {"preset": "SENSITIVE"}, "logging": {"level": "DEBUG"}}))

        args = SimpleNamespace(preset="DEMO", log_level="WARNING", strict_safety=None)
        config = load_config(args, path=path)
        assert config.preset == "DEMO"
        assert config.log_level == "WARNING"
        assert config.strict_safety is False

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(path=tmp_path / "absent.yaml")
        assert config.preset == "STANDARD"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert load_config(path=path).preset == "STANDARD"

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            load_config(path=path)

    def test_inverted_safety_range_rejected_at_load(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.safe_dump({
            "engine": {"strict_safety": True},
            "safety": {"max_volume_db": 15},
        }))
        with pytest.raises(ValueError, match="max_volume_db"):
            load_config(path=path)


class TestConfiguredOrchestrator:

    def test_demo_phases(self, make_orchestrator):
        orchestrator = make_orchestrator(preset="DEMO")
        assert orchestrator.evaluate("pug", "adult", StressLevel.LOW, 30.0).phase == PhaseKind.DEEPENING

    def test_sensitive_limits(self, make_orchestrator, registry):
        orchestrator = make_orchestrator(preset="SENSITIVE")
        for name in registry.names():
            params = orchestrator.evaluate(name, "puppy", StressLevel.LOW, 1.0)
            assert params.volume_ceiling_db <= 55.0
            assert params.frame_rate_cap <= 60.0
            assert params.audio_bpm <= 90

    def test_breed_table_from_config(self, tmp_path):
        table = tmp_path / "breeds.yaml"
        table.write_text(yaml.safe_dump({
            "default": "mutt",
            "breeds": [{
                "name": "mutt",
                "preferred_frequencies": [400.0],
                "volume_sensitivity": 0.4,
                "spatial_preference": "front_focused",
                "stress_response_frequencies": [],
                "color_preference": "balanced",
                "motion_sensitivity": 0.5,
                "contrast_preference": 0.5,
            }],
        }))

        config = load_config(SimpleNamespace(breed_table=str(table)))
        registry = build_registry(config)
        assert registry.names() == ["mutt"]
        assert registry.lookup("labrador").name == "mutt"

        orchestrator = AdaptationOrchestrator.from_config(config)
        assert len(orchestrator.registry) == 1

    def test_packaged_breed_table_when_unset(self, registry):
        assert build_registry(EngineConfig()).names() == registry.names()
