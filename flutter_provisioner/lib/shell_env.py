from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..config import DEFAULT_JAVA_CANDIDATES
from ..errors import JavaNotFound, ProfileIOError

logger = logging.getLogger(__name__)

BLOCK_BEGIN = "# >>> flutter-provisioner >>>"
BLOCK_END = "# <<< flutter-provisioner <<<"


@dataclass(frozen=True)
class ToolPaths:
    flutter_home: Path
    android_home: Path
    java_home: Path


def detect_profile_file(environ: Optional[Mapping[str, str]] = None, home: Optional[Path] = None) -> Path:
    """Pick the profile of the user's login shell ($SHELL); bash is the default."""

    env = os.environ if environ is None else environ
    home = home or Path(env.get("HOME") or Path.home())
    shell = os.path.basename(env.get("SHELL", "") or "")
    if shell == "zsh":
        return home / ".zshrc"
    return home / ".bashrc"


def find_java_home(candidates: Sequence[str] = DEFAULT_JAVA_CANDIDATES, *, configured: Optional[str] = None) -> Path:
    """Return the first existing JDK directory, trying `configured` first."""

    ordered = ([configured] if configured else []) + list(candidates)
    for c in ordered:
        p = Path(c)
        if p.is_dir():
            logger.info("JAVA_HOME resolved to %s", p)
            return p
    raise JavaNotFound(f"No JDK found; looked in: {', '.join(ordered)}")


def render_block(paths: ToolPaths) -> str:
    lines = [
        BLOCK_BEGIN,
        f'export FLUTTER_HOME="{paths.flutter_home}"',
        f'export ANDROID_HOME="{paths.android_home}"',
        'export ANDROID_SDK_ROOT="$ANDROID_HOME"',
        f'export JAVA_HOME="{paths.java_home}"',
        'export PATH="$PATH:$FLUTTER_HOME/bin:$JAVA_HOME/bin"',
        'export PATH="$PATH:$ANDROID_HOME/cmdline-tools/latest/bin:$ANDROID_HOME/platform-tools:$ANDROID_HOME/emulator"',
        BLOCK_END,
    ]
    return "\n".join(lines) + "\n"


def _replace_block(text: str, block: str) -> Optional[str]:
    """Swap an existing managed block for `block`; None if there is none."""

    start = text.find(BLOCK_BEGIN)
    if start < 0:
        return None
    end = text.find(BLOCK_END, start)
    if end < 0:
        # Unterminated block: treat the rest of the file as managed.
        return text[:start] + block
    end += len(BLOCK_END)
    if text[end:end + 1] == "\n":
        end += 1
    return text[:start] + block + text[end:]


def write_env(paths: ToolPaths, profile_file: Path, *, dry_run: bool = False) -> bool:
    """Write the export block into the profile, at most once.

    A second run replaces the managed block in place instead of appending a
    duplicate. Returns True if the file changed.
    """

    profile_file = Path(profile_file)
    block = render_block(paths)

    try:
        current = profile_file.read_text(encoding="utf-8") if profile_file.exists() else ""
    except OSError as e:
        raise ProfileIOError(f"Could not read {profile_file}: {e}") from e

    updated = _replace_block(current, block)
    if updated is None:
        sep = "" if not current or current.endswith("\n") else "\n"
        updated = current + sep + ("\n" if current else "") + block

    if updated == current:
        logger.info("Environment block in %s already up to date", profile_file)
        return False

    if dry_run:
        logger.info("Would write environment block to %s", profile_file)
        return True

    try:
        profile_file.parent.mkdir(parents=True, exist_ok=True)
        profile_file.write_text(updated, encoding="utf-8")
    except OSError as e:
        raise ProfileIOError(f"Could not write {profile_file}: {e}") from e

    logger.info("Environment block written to %s", profile_file)
    return True
