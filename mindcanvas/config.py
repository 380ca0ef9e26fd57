"""Settings for MindCanvas layout, view and node geometry."""

import json
import logging
import math
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Any, Dict

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the application config directory."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "mindcanvas"


def get_settings_path() -> Path:
    """Get the settings file path."""
    override = os.environ.get("MINDCANVAS_CONFIG")
    if override:
        return Path(override)
    return get_config_dir() / "settings.json"


def _known(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    # Filter to only known fields to handle schema evolution
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


def _require_number(obj, name: str, minimum: float = -math.inf, strict: bool = False):
    """Raise unless `obj.name` is a finite real number above `minimum`."""
    value = getattr(obj, name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    if value < minimum or (strict and value == minimum):
        op = ">" if strict else ">="
        raise ValueError(f"{name} must be {op} {minimum}, got {value}")


@dataclass(frozen=True)
class LayoutSettings:
    """Radii and angles used by the radial layout."""
    level_one_radius: float = 250.0
    branch_radius: float = 140.0
    fan_spread: float = math.pi / 2
    max_fan_step: float = math.pi / 6
    insert_fan_step: float = math.pi / 8

    def __post_init__(self):
        _require_number(self, "level_one_radius", 0, strict=True)
        _require_number(self, "branch_radius", 0, strict=True)
        _require_number(self, "fan_spread", 0)
        _require_number(self, "max_fan_step", 0)
        _require_number(self, "insert_fan_step")


@dataclass(frozen=True)
class ViewSettings:
    """Zoom bounds of the canvas."""
    initial_scale: float = 0.9
    min_scale: float = 0.2
    max_scale: float = 2.5
    zoom_step: float = 0.1

    def __post_init__(self):
        _require_number(self, "initial_scale")
        _require_number(self, "min_scale", 0, strict=True)
        _require_number(self, "max_scale", self.min_scale)
        _require_number(self, "zoom_step", 0, strict=True)


@dataclass(frozen=True)
class NodeSettings:
    """Node box geometry in canvas units."""
    width: float = 150.0
    height: float = 60.0
    text_height: float = 22.0
    button_radius: float = 11.0
    connection_gap: float = 5.0
    default_label: str = "New Idea"

    def __post_init__(self):
        for name in ("width", "height", "text_height", "button_radius"):
            _require_number(self, name, 0, strict=True)
        _require_number(self, "connection_gap", 0)
        if not isinstance(self.default_label, str):
            raise TypeError(f"default_label must be a string, got {type(self.default_label).__name__}")

    @property
    def connection_trim(self) -> float:
        """Distance cut from each end of a connection line."""
        return self.width / 2 + self.connection_gap


@dataclass(frozen=True)
class Settings:
    """All engine settings."""
    layout: LayoutSettings = field(default_factory=LayoutSettings)
    view: ViewSettings = field(default_factory=ViewSettings)
    node: NodeSettings = field(default_factory=NodeSettings)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Settings":
        if not data:
            return cls()
        try:
            return cls(
                layout=LayoutSettings(**_known(LayoutSettings, data.get("layout") or {})),
                view=ViewSettings(**_known(ViewSettings, data.get("view") or {})),
                node=NodeSettings(**_known(NodeSettings, data.get("node") or {})),
            )
        except (TypeError, ValueError, AttributeError) as exc:
            logger.warning("Ignoring malformed settings: %s", exc)
            return cls()

    @classmethod
    def from_json(cls, data: Optional[str]) -> "Settings":
        if not data:
            return cls()
        try:
            decoded = json.loads(data)
        except json.JSONDecodeError as exc:
            logger.warning("Settings are not valid JSON: %s", exc)
            return cls()
        if not isinstance(decoded, dict):
            logger.warning("Settings must be a JSON object, got %s", type(decoded).__name__)
            return cls()
        return cls.from_dict(decoded)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or get_settings_path()
    if not path.exists():
        logger.debug("No settings file at %s, using defaults", path)
        return Settings()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not read settings file %s: %s", path, exc)
        return Settings()
    logger.info("Loaded settings from %s", path)
    return Settings.from_json(text)
