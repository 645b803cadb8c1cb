from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.udev import grant_adb_access

logger = logging.getLogger(__name__)


class DevicePermissionsStep:
    step_id = "80_device_permissions"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state["config"]
        if not cfg.device_permissions:
            logger.info("Device permission setup disabled by config")
            return state

        group = grant_adb_access(state["distro"], dry_run=cfg.dry_run)
        state.setdefault("execution", {}).setdefault("decisions", {})["adb_group"] = group
        return state
