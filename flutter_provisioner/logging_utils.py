from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Tuple

DEFAULT_LOG_PATH = "~/.local/state/flutter-provisioner/provision.log"
FALLBACK_LOG_NAME = "flutter-provisioner.log"

FILE_HANDLER = "flutter-provisioner-file"
CONSOLE_HANDLER = "flutter-provisioner-console"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def _open_log_file(log_path: str) -> Tuple[logging.FileHandler, str]:
    requested = os.path.expanduser(log_path)
    try:
        Path(requested).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(requested, encoding="utf-8"), requested
    except OSError:
        fallback = str(Path.cwd() / FALLBACK_LOG_NAME)
        return logging.FileHandler(fallback, encoding="utf-8"), fallback


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Send everything to the provisioning log and `level` and up to the console.

    The file always records DEBUG, which is where run_cmd puts the captured
    stdout/stderr of package managers, git and sdkmanager. If the log
    directory cannot be created, a file in the current directory is used.
    Calling this again replaces the handlers it installed before.

    Returns the path of the log file actually in use.
    """

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        if h.get_name() in (FILE_HANDLER, CONSOLE_HANDLER):
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler, chosen_path = _open_log_file(log_path)
    file_handler.set_name(FILE_HANDLER)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.set_name(CONSOLE_HANDLER)
        console.setLevel(level)
        console.setFormatter(fmt)
        root.addHandler(console)

    logging.getLogger(__name__).info("Logging to %s", chosen_path)
    return chosen_path
