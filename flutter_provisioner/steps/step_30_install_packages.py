from __future__ import annotations

import logging
from typing import Any, Dict, List, Union

from ..lib.manifests import PackageSpec, load_package_specs
from ..lib.pkg import install_packages

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "30_install_packages"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state["config"]
        distro = state["distro"]

        packages: List[Union[PackageSpec, str]] = [*load_package_specs(), *cfg.extra_packages]
        installed = install_packages(distro, packages, dry_run=cfg.dry_run)

        state.setdefault("execution", {}).setdefault("decisions", {})["installed_packages"] = installed
        return state
