"""Tests for engine configuration loading and validation."""

import os

import pytest
import yaml

from coinbubbles.config import DEFAULT_CONFIG_PATH, EngineConfig, load_config


class TestDefaults:
    """Tests for the shipped defaults."""

    def test_shipped_yaml_matches_dataclass(self):
        assert DEFAULT_CONFIG_PATH.exists()
        assert load_config() == EngineConfig()

    def test_defaults_are_valid(self):
        assert EngineConfig().validate() == []

    def test_radius_span(self):
        assert EngineConfig().radius_span == 36.0


class TestFromDict:
    """Tests for EngineConfig.from_dict."""

    def test_flat_keys(self):
        config = EngineConfig.from_dict({"collision_gap": 4, "resolve_iterations": 20})

        assert config.collision_gap == 4.0
        assert isinstance(config.collision_gap, float)
        assert config.resolve_iterations == 20

    def test_sectioned_keys(self):
        config = EngineConfig.from_dict({
            "physics": {"bounce_damping": 0.5, "broad_phase": "grid"},
            "radius": {"max_radius": 60},
        })

        assert config.bounce_damping == 0.5
        assert config.broad_phase == "grid"
        assert config.max_radius == 60.0

    def test_empty_gives_defaults(self):
        assert EngineConfig.from_dict(None) == EngineConfig()
        assert EngineConfig.from_dict({}) == EngineConfig()

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown engine config keys"):
            EngineConfig.from_dict({"physics": {"gravity": 9.8}})

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError, match="min_radius"):
            EngineConfig.from_dict({"min_radius": 60, "max_radius": 50})

    def test_bad_broad_phase_rejected(self):
        with pytest.raises(ValueError, match="broad_phase"):
            EngineConfig.from_dict({"broad_phase": "octree"})

    @pytest.mark.parametrize("value", [None, [1, 2], {"px": 18}, "wide"])
    def test_uncoercible_value_rejected(self, value):
        """Test that values of the wrong shape surface as ValueError."""
        with pytest.raises(ValueError, match="Invalid value for min_radius"):
            EngineConfig.from_dict({"radius": {"min_radius": value}})

    def test_uncoercible_int_rejected(self):
        with pytest.raises(ValueError, match="resolve_iterations"):
            EngineConfig.from_dict({"resolver": {"resolve_iterations": float("inf")}})

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError):
            EngineConfig.from_dict(["min_radius", 10])


class TestFromYaml:
    """Tests for loading YAML files."""

    def test_load_custom_file(self, tmp_path):
        path = tmp_path / "tuned.yaml"
        path.write_text("physics:\n  wander_strength: 20\nclock:\n  max_frame_dt: 0.1\n")

        config = load_config(path)

        assert config.wander_strength == 20.0
        assert config.max_frame_dt == 0.1
        assert config.min_radius == 18.0

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert EngineConfig.from_yaml(path) == EngineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            EngineConfig.from_yaml(tmp_path / "missing.yaml")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_rejected(self, tmp_path):
        target = tmp_path / "real.yaml"
        target.write_text("collision_gap: 4\n")
        link = tmp_path / "link.yaml"
        try:
            link.symlink_to(target)
        except OSError:
            pytest.skip("cannot create symlinks here")

        with pytest.raises(ValueError, match="symlink"):
            EngineConfig.from_yaml(link)

    def test_malformed_yaml_rejected(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("physics: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            EngineConfig.from_yaml(path)

    def test_null_value_in_file_rejected(self, tmp_path):
        path = tmp_path / "null.yaml"
        path.write_text("radius:\n  min_radius: null\n")

        with pytest.raises(ValueError, match="min_radius"):
            load_config(path)

    def test_to_yaml_reloads(self):
        config = EngineConfig(collision_gap=5.0, broad_phase="grid")

        assert EngineConfig.from_dict(yaml.safe_load(config.to_yaml())) == config

    def test_missing_defaults_fall_back(self, monkeypatch, tmp_path):
        monkeypatch.setattr("coinbubbles.config.DEFAULT_CONFIG_PATH", tmp_path / "gone.yaml")

        assert load_config() == EngineConfig()
