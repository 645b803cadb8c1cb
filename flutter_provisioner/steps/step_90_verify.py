from __future__ import annotations

import logging
import os
from typing import Any, Dict

from ..lib.flutter import flutter_doctor

logger = logging.getLogger(__name__)


class VerifyStep:
    step_id = "90_verify"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state["config"]
        paths = state.get("tool_paths")

        if cfg.verify:
            env: Dict[str, str] = {}
            if paths is not None:
                # The profile is not loaded in this process yet.
                env = {
                    "FLUTTER_HOME": str(paths.flutter_home),
                    "ANDROID_HOME": str(paths.android_home),
                    "ANDROID_SDK_ROOT": str(paths.android_home),
                    "JAVA_HOME": str(paths.java_home),
                    "PATH": os.pathsep.join(
                        [
                            os.environ.get("PATH", ""),
                            str(paths.flutter_home / "bin"),
                            str(paths.java_home / "bin"),
                            str(paths.android_home / "platform-tools"),
                        ]
                    ),
                }
            r = flutter_doctor(cfg.flutter_home, env=env, dry_run=cfg.dry_run)
            if r.returncode != 0:
                logger.warning("flutter doctor exited %s; see the log for details", r.returncode)
            else:
                logger.info("flutter doctor completed")

        profile = state.get("profile_file")
        if profile:
            logger.info("Done. Run 'source %s' or restart your terminal to apply the environment.", profile)
        else:
            logger.info("Done. Restart your terminal to apply the environment.")
        return state
