from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Mapping, Optional

from ..errors import InstallError
from .command import CmdResult, CommandError, run_cmd

logger = logging.getLogger(__name__)


def flutter_bin(flutter_home: Path) -> Path:
    return flutter_home / "bin" / "flutter"


def ensure_flutter(flutter_home: Path, *, repo: str, channel: str = "stable", dry_run: bool = False) -> bool:
    """Clone the Flutter SDK unless flutter_home already has one."""

    if flutter_bin(flutter_home).exists():
        logger.info("Flutter SDK already present at %s; skipping", flutter_home)
        return False

    if flutter_home.exists() and any(flutter_home.iterdir()):
        raise InstallError(f"{flutter_home} exists and is not a Flutter SDK; move it away first")

    if not dry_run:
        flutter_home.parent.mkdir(parents=True, exist_ok=True)
    try:
        run_cmd(
            ["git", "clone", "--depth", "1", "--branch", channel, repo, str(flutter_home)],
            dry_run=dry_run,
        )
    except CommandError as e:
        raise InstallError(f"Could not clone Flutter SDK: {e}") from e
    return True


def flutter_doctor(
    flutter_home: Path,
    *,
    env: Optional[Mapping[str, str]] = None,
    dry_run: bool = False,
) -> CmdResult:
    tool = flutter_bin(flutter_home)
    exe = str(tool) if tool.exists() else (shutil.which("flutter") or str(tool))
    return run_cmd([exe, "doctor"], check=False, env=env, dry_run=dry_run)
