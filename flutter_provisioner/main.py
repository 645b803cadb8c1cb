from __future__ import annotations

import argparse
import contextlib
import logging
from typing import Any, Dict, Optional

from .config import ProvisionConfig, load_config
from .errors import ConfigError
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, run_pipeline
from .steps import (
    DetectDistroStep,
    DevicePermissionsStep,
    FetchSdkStep,
    InstallFlutterStep,
    InstallPackagesStep,
    InstallWaydroidStep,
    UpdateSystemStep,
    VerifyStep,
    WriteEnvStep,
)

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


def build_steps():
    return [
        DetectDistroStep(),
        UpdateSystemStep(),
        InstallPackagesStep(),
        InstallWaydroidStep(),
        InstallFlutterStep(),
        FetchSdkStep(),
        WriteEnvStep(),
        DevicePermissionsStep(),
        VerifyStep(),
    ]


def run(config: ProvisionConfig, *, stop_after: Optional[str] = None) -> PipelineResult:
    """Run the provisioning pipeline once.

    The cleanup stack is closed on success, on failure and on interrupt.
    """

    with contextlib.ExitStack() as cleanup:
        state: Dict[str, Any] = {
            "config": config,
            "cleanup": cleanup,
            "execution": {"current_step": None, "decisions": {}},
        }
        result = run_pipeline(state=state, steps=build_steps(), stop_after=stop_after)

    decisions = (result.state.get("execution") or {}).get("decisions") or {}
    logger.info("Summary: ran=%s decisions=%s", ",".join(result.ran_steps), decisions)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="flutter-provisioner")
    p.add_argument("--config", default=None, help="Path to a YAML config file")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the provisioning log")
    p.add_argument("--profile-file", default=None, help="Shell profile to write exports to")
    p.add_argument("--sdk-url", default=None, help="Pinned Android cmdline-tools archive URL")
    p.add_argument("--sdk-version", default=None, help="Pinned Android cmdline-tools build number")
    p.add_argument("--distro", default=None, help="Skip detection and use this distribution name")
    p.add_argument("--stop-after", default=None, help="Stop after step_id (e.g. 30_install_packages)")
    p.add_argument("--dry-run", action="store_true", help="Log mutating commands without running them")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    waydroid = p.add_mutually_exclusive_group()
    waydroid.add_argument("--waydroid", dest="waydroid", action="store_const", const="yes", default=None)
    waydroid.add_argument("--no-waydroid", dest="waydroid", action="store_const", const="no")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = load_config(
            args.config,
            overrides={
                "profile_file": args.profile_file,
                "android.cmdline_tools_url": args.sdk_url,
                "android.cmdline_tools_version": args.sdk_version,
                "distro": args.distro,
                "waydroid": args.waydroid,
                "dry_run": True if args.dry_run else None,
            },
        )
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return e.exit_code

    try:
        result = run(config, stop_after=args.stop_after)
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return EXIT_INTERRUPTED

    if result.error is not None:
        logger.error("Provisioning failed at %s: %s", result.failed_step, result.error)
        return result.error.exit_code
    return 0
