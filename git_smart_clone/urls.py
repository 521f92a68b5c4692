"""Recognize, normalize, and name git repository URLs.

Classification is purely syntactic: a string is a repository reference when it
fully matches one of ``RECOGNIZED_PATTERNS``. Nothing here touches the network
and nothing here raises for text that merely fails to look like a URL.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from .models import DEFAULT_REPOSITORY_NAME, RepositoryReference


_SEGMENT = r"[\w.-]+"
_PATH = r"[\w./-]+"
_HOST = r"[\w.-]+(?::\d+)?"
_PROVIDERS = r"(?:github\.com|gitlab\.com|bitbucket\.org)"

RECOGNIZED_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.ASCII)
    for pattern in (
        # hosted providers
        rf"https?://{_PROVIDERS}/{_SEGMENT}/{_SEGMENT}(?:\.git)?/?",
        # self-hosted instances announced by their host name
        rf"https?://(?:git|gitlab|gitea|gitiles|cgit)\.{_HOST}/{_PATH}(?:\.git)?/?",
        # generic self-hosted path shapes
        rf"https?://{_HOST}/{_PATH}\.git/?",
        rf"https?://{_HOST}/(?:git|repos?|scm|projects)/{_PATH}(?:\.git)?/?",
        # scp-like ssh shorthand
        rf"git@{_SEGMENT}:{_PATH}\.git",
        rf"{_SEGMENT}@{_SEGMENT}:{_PATH}\.git",
        # explicit protocols
        rf"ssh://{_SEGMENT}@{_HOST}/{_PATH}(?:\.git)?/?",
        rf"git://{_HOST}/{_PATH}(?:\.git)?/?",
    )
)

_KNOWN_PROVIDER = re.compile(rf"https?://{_PROVIDERS}/{_SEGMENT}/{_SEGMENT}", re.ASCII)
_REPOSITORY_PATH = re.compile(rf"https?://{_HOST}(?:/{_SEGMENT}){{2,}}", re.ASCII)


def is_recognized(text: str | None) -> bool:
    """Return True when ``text`` looks like something `git clone` accepts."""

    if not text or not text.strip():
        return False
    candidate = text.strip()
    return any(pattern.fullmatch(candidate) for pattern in RECOGNIZED_PATTERNS)


def normalize(text: str) -> str:
    """Return the form of ``text`` that should be handed to `git clone`.

    Only HTTP(S) URLs are rewritten: one trailing slash is dropped and a
    ``.git`` suffix is added when the path is shaped like ``/{owner}/{repo}``
    (or deeper). Anything else comes back trimmed but otherwise untouched.
    """

    candidate = text.strip()
    if not candidate.startswith(("http://", "https://")):
        return candidate
    if candidate.endswith("/"):
        candidate = candidate[:-1]
    if candidate.endswith(".git"):
        return candidate
    if _KNOWN_PROVIDER.fullmatch(candidate) or _REPOSITORY_PATH.fullmatch(candidate):
        return candidate + ".git"
    return candidate


def extract_name(text: str) -> str:
    """Derive a folder name for the repository ``text`` points at."""

    candidate = text.strip()
    if _is_scp_like(candidate):
        path = candidate.rsplit(":", 1)[1]
    else:
        path = urlsplit(candidate).path
    parts = [part for part in path.split("/") if part]
    if not parts:
        return DEFAULT_REPOSITORY_NAME
    name = parts[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if name in ("", ".", ".."):
        return DEFAULT_REPOSITORY_NAME
    return name


def parse_repository(text: str | None) -> RepositoryReference | None:
    """Build a reference from ``text``, or return None if it is not a repository URL."""

    if not is_recognized(text):
        return None
    raw = text.strip()
    return RepositoryReference(raw_url=raw, normalized_url=normalize(raw), name=extract_name(raw))


def _is_scp_like(value: str) -> bool:
    return "@" in value and ":" in value and "://" not in value
