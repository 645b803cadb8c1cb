from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import JavaNotFound
from ..lib.sdk import fetch_sdk
from ..lib.shell_env import find_java_home

logger = logging.getLogger(__name__)


class FetchSdkStep:
    step_id = "60_fetch_sdk"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state["config"]

        # sdkmanager needs a JDK; a missing one is reported by the env step.
        try:
            java_home = str(find_java_home(cfg.java_candidates, configured=cfg.java_home))
        except JavaNotFound:
            logger.warning("No JDK found yet; sdkmanager will rely on java from PATH")
            java_home = None

        fetched = fetch_sdk(
            cfg.android_home,
            packages=cfg.sdk_packages,
            url=cfg.cmdline_tools_url,
            version=cfg.cmdline_tools_version,
            page_url=cfg.studio_page_url,
            java_home=java_home,
            dry_run=cfg.dry_run,
            cleanup=state.get("cleanup"),
        )
        state.setdefault("execution", {}).setdefault("decisions", {})["sdk_fetched"] = fetched
        return state
