"""Run `git clone` for a resolved placement."""

from __future__ import annotations

import logging
import subprocess
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from .models import ClonePlacement, CloneOutcome, RepositoryReference


logger = logging.getLogger(__name__)

DEFAULT_GIT = "git"
_CANCEL_POLL_SECONDS = 0.2
_TERMINATE_GRACE_SECONDS = 5.0


def build_clone_command(
    repo: RepositoryReference,
    placement: ClonePlacement,
    confirmed_path: Path,
    *,
    git: str = DEFAULT_GIT,
) -> tuple[list[str], Path, bool]:
    """Return the command, its working directory, and whether it clones into that directory.

    Cloning "into the root" uses ``git clone <url> .`` because git only accepts
    an existing directory as target when it is empty. Every other case lets
    git create the folder named after the last path component.
    """

    confirmed = Path(confirmed_path)
    if placement.clone_to_root and confirmed == Path(placement.target_path):
        return [git, "clone", repo.normalized_url, "."], confirmed, True
    return [git, "clone", repo.normalized_url, confirmed.name], confirmed.parent, False


def clone(
    repo: RepositoryReference,
    placement: ClonePlacement,
    confirmed_path: Path,
    *,
    git: str = DEFAULT_GIT,
    cancel: threading.Event | None = None,
) -> CloneOutcome:
    """Clone ``repo`` to ``confirmed_path`` and describe what happened.

    Failures are reported through the returned outcome, never raised.
    """

    confirmed = Path(confirmed_path)
    cmd, cwd, into_root = build_clone_command(repo, placement, confirmed, git=git)
    if cancel is not None and cancel.is_set():
        return _cancelled(repo)

    logger.debug("Running %s in %s", " ".join(cmd), cwd)
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
        )
    except (OSError, ValueError) as exc:
        logger.error("Could not start %s: %s", cmd[0], exc)
        return CloneOutcome(succeeded=False, message=f"Failed to start git process: {exc}")

    stderr, was_cancelled = _drain(proc, cancel)
    if was_cancelled:
        logger.info("Clone of %s cancelled", repo.normalized_url)
        return _cancelled(repo)
    if proc.returncode != 0:
        logger.error("git clone exited with %s: %s", proc.returncode, stderr.strip())
        return CloneOutcome(
            succeeded=False,
            message=f"Failed to clone repository: {stderr.strip() or 'Unknown error'}",
        )

    if into_root:
        message = f"Successfully cloned {repo.name} to workspace root (no conflicts detected)"
    else:
        message = f"Successfully cloned {repo.name} to new folder"
    return CloneOutcome(succeeded=True, message=message, target_path=confirmed)


class CloneExecutor:
    """Runs clones on a worker thread so callers can keep polling the clipboard."""

    def __init__(self, git: str = DEFAULT_GIT, max_workers: int = 1) -> None:
        self.git = git
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="git-clone")

    def submit(
        self,
        repo: RepositoryReference,
        placement: ClonePlacement,
        confirmed_path: Path,
        cancel: threading.Event | None = None,
    ) -> Future[CloneOutcome]:
        return self._pool.submit(clone, repo, placement, confirmed_path, git=self.git, cancel=cancel)

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> CloneExecutor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def _drain(proc: subprocess.Popen[str], cancel: threading.Event | None) -> tuple[str, bool]:
    """Read both pipes until exit; stdout is dropped, stderr is returned."""

    if cancel is None:
        _, stderr = proc.communicate()
        return stderr or "", False
    while True:
        try:
            _, stderr = proc.communicate(timeout=_CANCEL_POLL_SECONDS)
            return stderr or "", False
        except subprocess.TimeoutExpired:
            if not cancel.is_set():
                continue
        proc.terminate()
        try:
            _, stderr = proc.communicate(timeout=_TERMINATE_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            proc.kill()
            _, stderr = proc.communicate()
        return stderr or "", True


def _cancelled(repo: RepositoryReference) -> CloneOutcome:
    return CloneOutcome(succeeded=False, message=f"Clone of {repo.name} was cancelled", cancelled=True)
