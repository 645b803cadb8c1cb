from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.shell_env import ToolPaths, detect_profile_file, find_java_home, write_env

logger = logging.getLogger(__name__)


class WriteEnvStep:
    step_id = "70_write_env"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state["config"]

        paths = ToolPaths(
            flutter_home=cfg.flutter_home,
            android_home=cfg.android_home,
            java_home=find_java_home(cfg.java_candidates, configured=cfg.java_home),
        )
        profile_file = cfg.profile_file or detect_profile_file()

        changed = write_env(paths, profile_file, dry_run=cfg.dry_run)

        state["tool_paths"] = paths
        state["profile_file"] = profile_file
        state.setdefault("execution", {}).setdefault("decisions", {})["profile"] = {
            "path": str(profile_file),
            "changed": changed,
        }
        return state
