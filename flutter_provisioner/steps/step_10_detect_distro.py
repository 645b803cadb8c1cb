from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.distro import detect_distribution, resolve_forced

logger = logging.getLogger(__name__)


class DetectDistroStep:
    step_id = "10_detect_distro"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state["config"]

        if cfg.distro:
            distro = resolve_forced(cfg.distro)
            logger.info("Distribution forced by config: %s (family=%s)", distro.name, distro.family)
        else:
            distro = detect_distribution()

        state["distro"] = distro
        state.setdefault("execution", {}).setdefault("decisions", {})["distro"] = {
            "name": distro.name,
            "version": distro.version,
            "family": distro.family,
            "source": distro.source,
        }
        return state
