"""Tests for layout profiles and YAML configuration."""

import math

import pytest

from hublayout.layout.profiles import (
    LayoutConfig,
    PROFILES,
    get_profile,
    list_profiles,
    load_config,
)


class TestProfiles:
    """Tests for the profile registry."""

    def test_list_profiles(self):
        assert list_profiles() == ["compact", "knowledge_graph", "wide"]

    def test_default_profile_values(self):
        config = get_profile("knowledge_graph")

        assert (config.width, config.height, config.padding) == (900.0, 560.0, 60.0)
        assert config.center == (450.0, 280.0)
        assert config.bounds() == (60.0, 60.0, 840.0, 500.0)
        assert config.steps == 120
        assert config.damping == 0.82
        assert config.secondary_phase == pytest.approx(math.pi / 4)
        assert config.convergence_threshold is None

    def test_unknown_profile(self):
        with pytest.raises(ValueError, match="Available"):
            get_profile("nope")

    def test_get_profile_returns_copy(self):
        config = get_profile("compact")
        config.steps = 1
        config.rest_lengths[1] = 1.0

        assert PROFILES["compact"].steps != 1
        assert PROFILES["compact"].rest_lengths[1] != 1.0

    @pytest.mark.parametrize("name", sorted(PROFILES))
    def test_profiles_are_valid(self, name):
        assert get_profile(name).validate() is not None


class TestValidation:
    """Tests for LayoutConfig.validate and with_overrides."""

    @pytest.mark.parametrize("overrides", [
        {"width": 0.0},
        {"padding": 0.0},
        {"padding": 280.0},
        {"damping": 1.0},
        {"damping": -0.1},
        {"repulsion_strength": -1.0},
        {"steps": -1},
        {"distance_epsilon": 0.0},
        {"convergence_threshold": 0.0},
        {"rest_lengths": {1: 0.0}},
        {"default_rest_length": -5.0},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            LayoutConfig(**overrides).validate()

    def test_with_overrides(self, default_config):
        config = default_config.with_overrides(steps=10, rest_lengths={"3": 200})

        assert config.steps == 10
        assert config.rest_length(3) == 200.0
        assert default_config.steps == 120

    def test_with_overrides_unknown_key(self, default_config):
        with pytest.raises(ValueError, match="Unknown layout setting"):
            default_config.with_overrides(gravity=1.0)


class TestLoadConfig:
    """Tests for YAML configuration files."""

    def test_overrides_on_default(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("steps: 50\nrepulsion_strength: 2500\n")

        config = load_config(path)

        assert config.steps == 50
        assert config.repulsion_strength == 2500
        assert config.width == 900.0

    def test_profile_key_selects_base(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("profile: compact\nrest_lengths:\n  1: 60\n  2: 90\n")

        config = load_config(path)

        assert config.width == 600.0
        assert config.rest_length(1) == 60.0
        assert config.rest_length(2) == 90.0

    def test_empty_file_gives_base(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("")

        assert load_config(path, base="wide") == get_profile("wide")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_bad_value(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("padding: 1000\n")

        with pytest.raises(ValueError):
            load_config(path)

    def test_float_steps_rejected(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("steps: 100.0\n")

        with pytest.raises(ValueError, match="steps must be an integer"):
            load_config(path)

    def test_string_width_rejected(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text('width: "900"\n')

        with pytest.raises(ValueError, match="width must be a number"):
            load_config(path)

    def test_bad_rest_lengths_rejected(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("rest_lengths:\n  light: 60\n")

        with pytest.raises(ValueError, match="rest_lengths"):
            load_config(path)


class TestTypeChecks:
    """Tests for value types accepted by LayoutConfig."""

    @pytest.mark.parametrize("overrides", [
        {"steps": 10.0},
        {"steps": True},
        {"width": "900"},
        {"damping": None},
        {"seed": 1.5},
        {"convergence_threshold": "0.5"},
        {"repulsion_strength": float("nan")},
        {"rest_lengths": [80.0, 120.0]},
    ])
    def test_wrong_types(self, default_config, overrides):
        with pytest.raises(ValueError):
            default_config.with_overrides(**overrides)

    def test_int_for_float_field_accepted(self, default_config):
        config = default_config.with_overrides(width=1000, padding=50)

        assert config.width == 1000
        assert config.bounds() == (50, 50, 950, 510)
