from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.pkg import refresh_system

logger = logging.getLogger(__name__)


class UpdateSystemStep:
    step_id = "20_update_system"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state["config"]
        if not cfg.update_system:
            logger.info("System update disabled by config")
            return state

        refresh_system(state["distro"], dry_run=cfg.dry_run)
        return state
