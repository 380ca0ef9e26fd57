"""Logging setup, called once early in the program."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Union

_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.environ.get("MINDCANVAS_LOG_LEVEL", "WARNING")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def configure(level: Optional[Union[int, str]] = None, *, fmt: str = _FMT, **kwargs: Any) -> None:
    logging.basicConfig(level=_resolve_level(level), format=fmt, **kwargs)
