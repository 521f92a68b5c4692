"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from pathlib import Path

from InquirerPy import inquirer

from .exceptions import UserAbort, ValidationError
from .models import ClonePlacement


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise ValidationError(
            "Interactive mode requires a TTY. Pass --yes to accept the suggested location."
        )


def path_input(message: str, default: Path) -> Path:
    _ensure_tty()
    try:
        raw = inquirer.filepath(message=message, default=str(default)).execute()
    except KeyboardInterrupt as exc:
        raise UserAbort("Clone cancelled.") from exc
    value = (raw or "").strip()
    if not value:
        raise UserAbort("No target path given, clone cancelled.")
    return Path(value).expanduser()


def confirm_target(placement: ClonePlacement) -> Path:
    """Let the user accept or edit the suggested clone target."""

    return path_input(placement.prompt_message, placement.target_path)
