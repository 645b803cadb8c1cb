from __future__ import annotations

import contextlib
import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Iterator, Optional, Sequence

import requests
from tqdm import tqdm

from ..config import DEFAULT_SDK_PACKAGES, DEFAULT_STUDIO_PAGE, HTTP_TIMEOUT
from ..errors import FetchError, InstallError, ResolutionError
from .command import CommandError, run_cmd

logger = logging.getLogger(__name__)

DOWNLOAD_BASE = "https://dl.google.com/android/repository/"
CMDLINE_TOOLS_RE = re.compile(r"commandlinetools-linux-(\d+)_latest\.zip")

# Enough affirmative answers for every license prompt sdkmanager shows.
LICENSE_ANSWERS = "y\n" * 64


def marker_dir(install_dir: Path) -> Path:
    """The cmdline-tools location sdkmanager expects; its presence means "installed"."""

    return install_dir / "cmdline-tools" / "latest"


def staging_dir(install_dir: Path) -> Path:
    """Sibling of the marker on the same filesystem, renamed into place when complete."""

    return install_dir / "cmdline-tools" / ".latest.partial"


def sdkmanager_path(install_dir: Path) -> Path:
    return marker_dir(install_dir) / "bin" / "sdkmanager"


def cmdline_tools_url(version: str) -> str:
    return f"{DOWNLOAD_BASE}commandlinetools-linux-{version}_latest.zip"


@contextlib.contextmanager
def _session_scope(session: Optional[requests.Session]) -> Iterator[requests.Session]:
    if session is not None:
        yield session
        return
    with requests.Session() as s:
        yield s


def scrape_cmdline_tools_url(page_url: str = DEFAULT_STUDIO_PAGE, *, session: Optional[requests.Session] = None) -> str:
    """Find the current Linux cmdline-tools archive on the Android Studio page.

    This depends on the page markup; pin a URL or version to avoid it.
    """

    logger.info("Resolving cmdline-tools URL from %s", page_url)
    try:
        with _session_scope(session) as s:
            r = s.get(page_url, timeout=HTTP_TIMEOUT)
            r.raise_for_status()
            html = r.text
    except requests.RequestException as e:
        raise FetchError(f"Could not fetch {page_url}: {e}") from e

    m = CMDLINE_TOOLS_RE.search(html)
    if not m:
        raise ResolutionError(f"No commandlinetools-linux-*_latest.zip link found on {page_url}")
    return cmdline_tools_url(m.group(1))


def resolve_cmdline_tools_url(
    *,
    url: Optional[str] = None,
    version: Optional[str] = None,
    page_url: str = DEFAULT_STUDIO_PAGE,
    session: Optional[requests.Session] = None,
) -> str:
    """Pinned URL, then pinned version, then page scraping."""

    if url:
        logger.info("Using pinned cmdline-tools URL %s", url)
        return url
    if version:
        resolved = cmdline_tools_url(version)
        logger.info("Using pinned cmdline-tools version %s (%s)", version, resolved)
        return resolved
    return scrape_cmdline_tools_url(page_url, session=session)


def download(url: str, dest: Path, *, session: Optional[requests.Session] = None) -> Path:
    logger.info("Downloading %s -> %s", url, dest)
    try:
        with _session_scope(session) as s:
            with s.get(url, stream=True, allow_redirects=True, timeout=HTTP_TIMEOUT) as r:
                r.raise_for_status()
                total = int(r.headers.get("content-length") or 0) or None
                with open(dest, "wb") as f, tqdm(
                    total=total,
                    unit="B",
                    unit_scale=True,
                    unit_divisor=1024,
                    desc=dest.name,
                    disable=None,
                ) as progress_bar:
                    for chunk in r.iter_content(chunk_size=64 * 1024):
                        f.write(chunk)
                        progress_bar.update(len(chunk))
    except (requests.RequestException, OSError) as e:
        raise FetchError(f"Download failed for {url}: {e}") from e
    return dest


def extract_cmdline_tools(archive: Path, install_dir: Path, *, work_dir: Path) -> Path:
    """Unpack the archive and move its cmdline-tools/ into the staging directory.

    unzip keeps the executable bits that zipfile would drop. The move may fall
    back to a copy when the temp dir is on another filesystem, which is why
    the target is the staging directory and not the marker.
    """

    extracted = work_dir / "extracted"
    try:
        run_cmd(["unzip", "-q", "-o", str(archive), "-d", str(extracted)])
    except CommandError as e:
        raise FetchError(f"Could not extract {archive}: {e}") from e

    src = extracted / "cmdline-tools"
    if not src.is_dir():
        raise FetchError(f"{archive.name} has no cmdline-tools/ directory")

    target = staging_dir(install_dir)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(src), str(target))
    except OSError as e:
        raise FetchError(f"Could not unpack cmdline-tools into {target}: {e}") from e
    return target


def run_sdkmanager(
    install_dir: Path,
    packages: Sequence[str],
    *,
    tools_dir: Optional[Path] = None,
    java_home: Optional[str] = None,
    dry_run: bool = False,
) -> None:
    """Accept licenses, then install packages, using the sdkmanager under tools_dir."""

    tools_dir = tools_dir or marker_dir(install_dir)
    tool = str(tools_dir / "bin" / "sdkmanager")
    sdk_root = f"--sdk_root={install_dir}"
    env = {"ANDROID_HOME": str(install_dir), "ANDROID_SDK_ROOT": str(install_dir)}
    if java_home:
        env["JAVA_HOME"] = java_home

    try:
        run_cmd([tool, sdk_root, "--licenses"], input_text=LICENSE_ANSWERS, env=env, dry_run=dry_run)
        if packages:
            run_cmd([tool, sdk_root, *packages], input_text=LICENSE_ANSWERS, env=env, dry_run=dry_run)
    except CommandError as e:
        raise InstallError(f"sdkmanager failed: {e}") from e


def fetch_sdk(
    install_dir: Path,
    *,
    packages: Sequence[str] = tuple(DEFAULT_SDK_PACKAGES),
    url: Optional[str] = None,
    version: Optional[str] = None,
    page_url: str = DEFAULT_STUDIO_PAGE,
    java_home: Optional[str] = None,
    dry_run: bool = False,
    cleanup: Optional[contextlib.ExitStack] = None,
    session: Optional[requests.Session] = None,
) -> bool:
    """Install the Android cmdline-tools and the requested SDK packages.

    Skipped entirely (no network access) when the cmdline-tools directory
    already exists; completeness of an existing SDK is not checked. The marker
    only appears once sdkmanager has accepted the licenses and installed the
    packages: everything before that happens in a staging directory that is
    renamed into place at the end and removed on any failure, so a failed run
    is retried from scratch next time. The temporary download directory is
    registered on `cleanup` when given, so it is removed when the run ends.

    Returns True if anything was installed.
    """

    install_dir = Path(install_dir)
    marker = marker_dir(install_dir)
    if marker.is_dir():
        logger.info("Android cmdline-tools already present at %s; skipping SDK fetch", marker)
        return False

    resolved = resolve_cmdline_tools_url(url=url, version=version, page_url=page_url, session=session)

    if dry_run:
        logger.info("Would download %s and unpack into %s", resolved, marker)
        run_sdkmanager(install_dir, packages, java_home=java_home, dry_run=True)
        return True

    staging = staging_dir(install_dir)
    owned = cleanup is None
    stack = contextlib.ExitStack() if owned else cleanup
    try:
        if staging.exists():
            logger.warning("Removing leftover %s from an interrupted run", staging)
            shutil.rmtree(staging)
        work_dir = Path(stack.enter_context(tempfile.TemporaryDirectory(prefix="flutter-provisioner-")))
        archive = download(resolved, work_dir / resolved.rsplit("/", 1)[-1], session=session)
        extract_cmdline_tools(archive, install_dir, work_dir=work_dir)
        run_sdkmanager(install_dir, packages, tools_dir=staging, java_home=java_home)
        os.replace(staging, marker)
    except OSError as e:
        shutil.rmtree(staging, ignore_errors=True)
        raise FetchError(f"Could not install cmdline-tools into {marker}: {e}") from e
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise
    finally:
        if owned:
            stack.close()

    logger.info("cmdline-tools installed at %s", marker)
    return True
