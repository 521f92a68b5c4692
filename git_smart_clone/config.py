"""Load runtime settings from environment variables."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping

from .exceptions import ConfigError
from .fs import MARKER_DIRECTORIES, MARKER_FILES
from .git import DEFAULT_GIT
from .watcher import DEFAULT_INTERVAL


ENV_INTERVAL = "GIT_SMART_CLONE_INTERVAL"
ENV_GIT = "GIT_SMART_CLONE_GIT"
ENV_RESERVE = "GIT_SMART_CLONE_RESERVE"
ENV_EXTRA_MARKERS = "GIT_SMART_CLONE_EXTRA_MARKERS"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Application configuration."""

    interval: float = DEFAULT_INTERVAL
    git: str = DEFAULT_GIT
    reserve: bool = False
    marker_files: tuple[str, ...] = MARKER_FILES
    marker_dirs: tuple[str, ...] = MARKER_DIRECTORIES


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    extra_files, extra_dirs = _parse_markers(env.get(ENV_EXTRA_MARKERS, ""))
    return Settings(
        interval=_parse_interval(env.get(ENV_INTERVAL)),
        git=env.get(ENV_GIT, "").strip() or DEFAULT_GIT,
        reserve=_parse_bool(ENV_RESERVE, env.get(ENV_RESERVE, "")),
        marker_files=MARKER_FILES + tuple(name for name in extra_files if name not in MARKER_FILES),
        marker_dirs=MARKER_DIRECTORIES + tuple(name for name in extra_dirs if name not in MARKER_DIRECTORIES),
    )


def _parse_interval(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_INTERVAL
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(ENV_INTERVAL, raw, "a number of seconds") from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(ENV_INTERVAL, raw, "a positive number of seconds")
    return value


def _parse_bool(var: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(var, raw, "one of 1/0, true/false, yes/no, on/off")


def _parse_markers(raw: str) -> tuple[list[str], list[str]]:
    """Split a comma separated list into file markers and `dir/` markers."""

    files: list[str] = []
    dirs: list[str] = []
    for token in raw.split(","):
        name = token.strip()
        if not name:
            continue
        if name.endswith("/"):
            name = name.rstrip("/")
            if name:
                dirs.append(name)
        else:
            files.append(name)
    return files, dirs
