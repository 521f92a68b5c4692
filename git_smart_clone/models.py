"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


DEFAULT_REPOSITORY_NAME = "repository"


@dataclass(frozen=True)
class RepositoryReference:
    """A clipboard string confirmed to look like a git remote."""

    raw_url: str
    normalized_url: str
    name: str


@dataclass(frozen=True)
class ProjectDetectionResult:
    """Project markers found directly inside a directory."""

    has_markers: bool
    markers: tuple[str, ...] = ()


class PlacementMode(str, Enum):
    MERGE_INTO_ROOT = "merge-into-root"
    NEW_SUBFOLDER = "new-subfolder"
    NEW_IN_HOME = "new-in-home"


@dataclass(frozen=True)
class ClonePlacement:
    """Where a clone should land and why."""

    target_path: Path
    mode: PlacementMode
    prompt_message: str

    @property
    def clone_to_root(self) -> bool:
        return self.mode is PlacementMode.MERGE_INTO_ROOT


@dataclass(frozen=True)
class CloneOutcome:
    """Result of a single `git clone` invocation."""

    succeeded: bool
    message: str
    target_path: Path | None = None
    cancelled: bool = False
