from __future__ import annotations

import logging
import shutil
from typing import Optional

import requests

from ..config import HTTP_TIMEOUT
from ..errors import FetchError, InstallError, UnsupportedPlatform
from .command import CommandError, as_root, run_cmd
from .distro import DistributionInfo

logger = logging.getLogger(__name__)

WAYDROID_REPO_SCRIPT = "https://repo.waydro.id"


def waydroid_present() -> bool:
    return shutil.which("waydroid") is not None


def _add_debian_repo(*, dry_run: bool) -> None:
    """Run the upstream apt repository setup script (normally `curl ... | sudo bash`)."""

    if dry_run:
        logger.info("Would add the Waydroid apt repository from %s", WAYDROID_REPO_SCRIPT)
        return
    try:
        r = requests.get(WAYDROID_REPO_SCRIPT, timeout=HTTP_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Could not fetch Waydroid repo script: {e}") from e
    run_cmd(as_root(["bash"]), input_text=r.text)


def install_waydroid(
    distro: DistributionInfo,
    *,
    aur_helper: Optional[str] = None,
    dry_run: bool = False,
) -> bool:
    """Install Waydroid unless it is already on PATH. Returns True if installed."""

    if waydroid_present():
        logger.info("Waydroid already installed; skipping")
        return False

    family = distro.family
    try:
        if family == "arch":
            if aur_helper:
                # AUR helpers refuse to run as root and call sudo themselves.
                if shutil.which(aur_helper) is None:
                    raise InstallError(f"AUR helper {aur_helper!r} not found on PATH")
                run_cmd([aur_helper, "-S", "--noconfirm", "waydroid"], dry_run=dry_run)
            else:
                run_cmd(as_root(["pacman", "-S", "--noconfirm", "waydroid"]), dry_run=dry_run)
        elif family == "debian":
            _add_debian_repo(dry_run=dry_run)
            run_cmd(as_root(["apt-get", "install", "-y", "waydroid"]), dry_run=dry_run)
        elif family == "fedora":
            run_cmd(as_root(["dnf", "install", "-y", "waydroid"]), dry_run=dry_run)
        else:
            raise UnsupportedPlatform(f"Waydroid install is not supported on {distro.name}")
    except CommandError as e:
        raise InstallError(f"Waydroid install failed: {e}") from e

    logger.info("Waydroid installed")
    return True
