"""Decide where a detected repository should be cloned."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .fs import MARKER_DIRECTORIES, MARKER_FILES, detect_project, next_free_path
from .models import ClonePlacement, PlacementMode, RepositoryReference


logger = logging.getLogger(__name__)


def resolve(
    repo: RepositoryReference,
    workspace_root: Path | None = None,
    *,
    home: Path | None = None,
    reserve: bool = False,
    marker_files: Sequence[str] = MARKER_FILES,
    marker_dirs: Sequence[str] = MARKER_DIRECTORIES,
) -> ClonePlacement:
    """Pick a target path and placement mode for ``repo``.

    Without a workspace the clone goes to a new folder in ``home``. A workspace
    that already holds a project gets a new, non-conflicting subfolder; an
    empty-looking workspace receives the repository contents directly.
    """

    if workspace_root is None:
        home_dir = home or Path.home()
        return ClonePlacement(
            target_path=home_dir / repo.name,
            mode=PlacementMode.NEW_IN_HOME,
            prompt_message=f"Clone {repo.name} to new folder in home directory?",
        )

    root = Path(workspace_root)
    detection = detect_project(root, marker_files, marker_dirs)
    if detection.has_markers:
        logger.debug("Workspace %s holds a project (%s)", root, ", ".join(detection.markers) or "unreadable")
        return ClonePlacement(
            target_path=next_free_path(root, repo.name, reserve=reserve),
            mode=PlacementMode.NEW_SUBFOLDER,
            prompt_message=f"Cloning {repo.name} to new folder (avoiding conflicts)",
        )

    logger.debug("Workspace %s has no project markers, cloning into it", root)
    return ClonePlacement(
        target_path=root,
        mode=PlacementMode.MERGE_INTO_ROOT,
        prompt_message=f"Clone {repo.name} contents to current workspace root? (No project files detected)",
    )
