from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

from ..errors import InstallError, UnsupportedPlatform
from .command import CommandError, as_root, run_cmd
from .distro import DistributionInfo
from .manifests import PackageSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManager:
    """argv templates for one package family. Package names are appended."""

    family: str
    query: Tuple[str, ...]
    install: Tuple[str, ...]
    refresh: Tuple[str, ...]


MANAGERS: Dict[str, PackageManager] = {
    "arch": PackageManager(
        family="arch",
        query=("pacman", "-Q"),
        install=("pacman", "-S", "--noconfirm", "--needed"),
        refresh=("pacman", "-Syu", "--noconfirm"),
    ),
    "debian": PackageManager(
        family="debian",
        query=("dpkg", "-s"),
        install=("apt-get", "install", "-y"),
        refresh=("apt-get", "update"),
    ),
    "fedora": PackageManager(
        family="fedora",
        query=("rpm", "-q"),
        install=("dnf", "install", "-y"),
        refresh=("dnf", "makecache"),
    ),
    "suse": PackageManager(
        family="suse",
        query=("rpm", "-q"),
        install=("zypper", "--non-interactive", "install"),
        refresh=("zypper", "--non-interactive", "refresh"),
    ),
}


def manager_for(distro: DistributionInfo) -> PackageManager:
    family = distro.family
    if family is None or family not in MANAGERS:
        raise UnsupportedPlatform(f"No package manager strategy for {distro.name!r}")
    return MANAGERS[family]


def is_installed(manager: PackageManager, package: str) -> bool:
    # Read-only query: runs even in dry-run.
    r = run_cmd([*manager.query, package], check=False)
    return r.returncode == 0


def refresh_system(distro: DistributionInfo, *, dry_run: bool = False) -> None:
    manager = manager_for(distro)
    try:
        run_cmd(as_root(manager.refresh), dry_run=dry_run)
    except CommandError as e:
        raise InstallError(f"System update failed on {distro.name}: {e}") from e


def install_packages(
    distro: DistributionInfo,
    packages: Sequence[Union[PackageSpec, str]],
    *,
    dry_run: bool = False,
) -> List[str]:
    """Install every package not already present, one at a time.

    Fail-fast: the first failed install raises InstallError. Returns the
    distribution-specific names that were installed.
    """

    manager = manager_for(distro)

    installed: List[str] = []
    for item in packages:
        spec = PackageSpec(name=item) if isinstance(item, str) else item
        name = spec.resolve(manager.family)
        if not name:
            logger.info("Package %s not needed on %s; skipping", spec.name, distro.name)
            continue

        if is_installed(manager, name):
            logger.info("Package %s already installed; skipping", name)
            continue

        try:
            run_cmd(as_root([*manager.install, name]), dry_run=dry_run)
        except CommandError as e:
            raise InstallError(f"Failed to install {name} on {distro.name}: {e}") from e
        installed.append(name)

    logger.info("Packages installed: %s", ",".join(installed) or "(none)")
    return installed
