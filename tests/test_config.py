"""Tests for settings loading."""

import json
import logging
import math

import pytest

from mindcanvas.config import (
    Settings, LayoutSettings, ViewSettings, NodeSettings, load_settings, get_settings_path,
    get_config_dir,
)
from mindcanvas.engine import MindMapEngine


class TestSettings:
    """Test settings decoding."""

    def test_defaults(self):
        """Test the built-in geometry."""
        settings = Settings()
        assert settings.layout.level_one_radius == 250
        assert settings.layout.branch_radius == 140
        assert settings.layout.max_fan_step == pytest.approx(math.pi / 6)
        assert settings.node.connection_trim == 80

    def test_section_override(self):
        """Test a section value is read into its dataclass."""
        settings = Settings.from_dict({"layout": {"branch_radius": 200}})
        assert settings.layout == LayoutSettings(branch_radius=200)

    def test_partial_override(self):
        """Test unspecified fields keep defaults."""
        settings = Settings.from_json(json.dumps({"view": {"max_scale": 4.0}}))
        assert settings.view.max_scale == 4.0
        assert settings.view.min_scale == 0.2
        assert settings.node == NodeSettings()

    def test_unknown_keys_ignored(self):
        """Test extra keys do not break loading."""
        settings = Settings.from_json(json.dumps({"node": {"width": 120, "shadow": True}}))
        assert settings.node.width == 120

    @pytest.mark.parametrize("text", ["", "{oops", "[1, 2]", '{"layout": 5}'])
    def test_bad_input_gives_defaults(self, text):
        """Test malformed settings fall back to defaults."""
        assert Settings.from_json(text) == Settings()

    def test_bad_input_logged(self, caplog):
        """Test malformed JSON is reported."""
        with caplog.at_level(logging.WARNING, logger="mindcanvas.config"):
            Settings.from_json("{oops")
        assert "not valid JSON" in caplog.text


class TestSettingsValues:
    """Test out of range or mistyped values fall back to defaults."""

    @pytest.mark.parametrize("data", [
        {"view": {"min_scale": "0.5"}},
        {"view": {"initial_scale": 0, "min_scale": 0}},
        {"view": {"min_scale": -1}},
        {"view": {"min_scale": 3.0, "max_scale": 2.0}},
        {"view": {"zoom_step": 0}},
        {"view": {"max_scale": True}},
        {"layout": {"branch_radius": 0}},
        {"layout": {"level_one_radius": None}},
        {"layout": {"max_fan_step": -0.1}},
        {"node": {"width": -150}},
        {"node": {"button_radius": "11"}},
        {"node": {"connection_gap": -1}},
        {"node": {"default_label": 42}},
    ])
    def test_bad_value_gives_defaults(self, data):
        """Test each invalid value is rejected."""
        assert Settings.from_dict(data) == Settings()

    def test_bad_value_logged(self, caplog):
        """Test a rejected value is reported."""
        with caplog.at_level(logging.WARNING, logger="mindcanvas.config"):
            Settings.from_json('{"view": {"min_scale": "0.5"}}')
        assert "min_scale" in caplog.text

    def test_non_finite(self):
        """Test infinities are rejected."""
        assert Settings.from_dict({"layout": {"branch_radius": math.inf}}) == Settings()

    def test_equal_bounds_allowed(self):
        """Test a fixed zoom level is a valid configuration."""
        settings = Settings.from_dict({"view": {"min_scale": 1, "max_scale": 1}})
        assert settings.view.max_scale == 1

    def test_direct_construction_checked(self):
        """Test the dataclasses validate on their own."""
        with pytest.raises(ValueError):
            ViewSettings(min_scale=0)
        with pytest.raises(TypeError):
            NodeSettings(default_label=None)

    def test_engine_survives_bad_view(self):
        """Test rejected settings leave a usable engine."""
        settings = Settings.from_json('{"view": {"initial_scale": 0, "min_scale": 0}}')
        engine = MindMapEngine(settings)
        assert engine.scale == pytest.approx(0.9)
        assert engine.hit_test(10, 10)[1] == "root"


class TestLoadSettings:
    """Test reading the settings file."""

    def test_missing_file(self, tmp_path):
        """Test no file means defaults."""
        assert load_settings(tmp_path / "absent.json") == Settings()

    def test_reads_file(self, tmp_path):
        """Test values come from the file."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"layout": {"level_one_radius": 300}}), encoding="utf-8")
        assert load_settings(path).layout.level_one_radius == 300

    def test_unreadable_path(self, tmp_path, caplog):
        """Test a directory in place of the file is reported."""
        with caplog.at_level(logging.WARNING, logger="mindcanvas.config"):
            assert load_settings(tmp_path) == Settings()
        assert "Could not read" in caplog.text

    def test_env_override(self, tmp_path, monkeypatch):
        """Test the environment picks the file."""
        monkeypatch.setenv("MINDCANVAS_CONFIG", str(tmp_path / "x.json"))
        assert get_settings_path() == tmp_path / "x.json"

    def test_xdg_dir(self, tmp_path, monkeypatch):
        """Test the config directory honours XDG_CONFIG_HOME."""
        monkeypatch.delenv("MINDCANVAS_CONFIG", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "mindcanvas"
        assert get_settings_path() == tmp_path / "mindcanvas" / "settings.json"
