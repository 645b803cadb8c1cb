from __future__ import annotations

import getpass
import logging
import os
from typing import Dict, Optional

from ..errors import InstallError
from .command import CommandError, as_root, run_cmd
from .distro import DistributionInfo

logger = logging.getLogger(__name__)

# Group that owns adb device nodes through the distribution's udev rules.
ADB_GROUPS: Dict[str, Optional[str]] = {
    "arch": "adbusers",
    "debian": "plugdev",
    "fedora": None,
    "suse": None,
}


def current_user() -> str:
    return os.environ.get("SUDO_USER") or os.environ.get("USER") or getpass.getuser()


def grant_adb_access(distro: DistributionInfo, *, user: Optional[str] = None, dry_run: bool = False) -> Optional[str]:
    """Add the user to the adb group and reload udev rules.

    Returns the group used, or None where the rules grant access without one.
    """

    group = ADB_GROUPS.get(distro.family or "")
    user = user or current_user()
    try:
        if group:
            run_cmd(as_root(["usermod", "-aG", group, user]), dry_run=dry_run)
        else:
            logger.info("No adb group on %s; relying on udev uaccess rules", distro.name)
        run_cmd(as_root(["udevadm", "control", "--reload-rules"]), dry_run=dry_run)
        run_cmd(as_root(["systemctl", "restart", "systemd-udevd"]), dry_run=dry_run)
    except CommandError as e:
        raise InstallError(f"Could not configure adb device permissions: {e}") from e
    return group
