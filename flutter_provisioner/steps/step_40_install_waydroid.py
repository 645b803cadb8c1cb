from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Dict

from ..lib.waydroid import install_waydroid

logger = logging.getLogger(__name__)

PROMPT = "Install Waydroid (Android emulator)? [y/N]: "


def ask_yes_no(prompt: str) -> bool:
    """Ask on an interactive terminal; anything but y/yes (or no terminal) is "no"."""

    if not sys.stdin.isatty():
        logger.info("No interactive terminal; assuming 'no' for: %s", prompt.strip())
        return False
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


class InstallWaydroidStep:
    step_id = "40_install_waydroid"

    def __init__(self, ask: Callable[[str], bool] = ask_yes_no):
        self._ask = ask

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state["config"]

        choice = cfg.waydroid
        wanted = choice == "yes" or (choice == "ask" and self._ask(PROMPT))
        state.setdefault("execution", {}).setdefault("decisions", {})["waydroid"] = wanted
        if not wanted:
            logger.info("Waydroid not requested; skipping")
            return state

        install_waydroid(state["distro"], aur_helper=cfg.waydroid_aur_helper, dry_run=cfg.dry_run)
        return state
