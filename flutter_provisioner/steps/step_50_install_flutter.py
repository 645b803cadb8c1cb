from __future__ import annotations

from typing import Any, Dict

from ..lib.flutter import ensure_flutter


class InstallFlutterStep:
    step_id = "50_install_flutter"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state["config"]
        ensure_flutter(
            cfg.flutter_home,
            repo=cfg.flutter_repo,
            channel=cfg.flutter_channel,
            dry_run=cfg.dry_run,
        )
        return state
