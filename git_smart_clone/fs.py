"""Filesystem helpers for git-smart-clone."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .models import ProjectDetectionResult


logger = logging.getLogger(__name__)

MARKER_FILES: tuple[str, ...] = (
    "package.json",
    "package-lock.json",
    "pnpm-lock.yaml",
    "yarn.lock",
    "composer.json",
    "Gemfile",
    "requirements.txt",
    "Pipfile",
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "Makefile",
    "CMakeLists.txt",
    "tsconfig.json",
    "jsconfig.json",
    ".gitignore",
    "README.md",
    "README.rst",
    "README.txt",
    "LICENSE",
    "LICENSE.txt",
    "LICENSE.md",
    ".env",
    ".env.example",
    "docker-compose.yml",
    "Dockerfile",
    ".git",  # linked worktrees carry a .git file
)

MARKER_DIRECTORIES: tuple[str, ...] = (
    "src",
    "lib",
    "dist",
    "build",
    "out",
    "target",
    "bin",
    "node_modules",
    ".git",
    ".vscode",
    ".idea",
    ".venv",
    "test",
    "tests",
    "spec",
    "docs",
    "public",
    "assets",
    "static",
)


def detect_project(
    path: Path,
    marker_files: Sequence[str] = MARKER_FILES,
    marker_dirs: Sequence[str] = MARKER_DIRECTORIES,
) -> ProjectDetectionResult:
    """Report which project markers sit directly inside ``path``.

    Directory markers are reported with a trailing slash. When ``path`` cannot
    be listed the result claims markers exist so callers pick the placement
    that cannot overwrite anything.
    """

    try:
        entries = {entry.name: entry for entry in Path(path).iterdir()}
    except OSError as exc:
        logger.warning("Unable to inspect %s, assuming it holds a project: %s", path, exc)
        return ProjectDetectionResult(has_markers=True, markers=())

    found: list[str] = []
    for name in marker_files:
        entry = entries.get(name)
        if entry is not None and entry.is_file():
            found.append(name)
    for name in marker_dirs:
        entry = entries.get(name)
        if entry is not None and entry.is_dir():
            found.append(f"{name}/")
    return ProjectDetectionResult(has_markers=bool(found), markers=tuple(found))


def next_free_path(parent: Path, name: str, *, reserve: bool = False) -> Path:
    """Return ``parent/name``, or the first ``parent/name-N`` that does not exist yet.

    With ``reserve`` the winning directory is created with an exclusive mkdir,
    so two callers racing for the same name end up with different folders.
    """

    candidate = parent / name
    counter = 1
    while True:
        if reserve:
            try:
                candidate.mkdir(parents=False, exist_ok=False)
                return candidate
            except FileExistsError:
                pass
            except OSError as exc:
                logger.warning("Could not reserve %s, falling back to an existence check: %s", candidate, exc)
                reserve = False
                continue
        elif not candidate.exists():
            return candidate
        candidate = parent / f"{name}-{counter}"
        counter += 1
