from __future__ import annotations

import logging
import shlex
import shutil
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..errors import UnsupportedPlatform
from .command import run_cmd

logger = logging.getLogger(__name__)


# Dispatch table: canonical distribution name -> package family.
DISPATCH: Dict[str, str] = {
    "Arch Linux": "arch",
    "Manjaro Linux": "arch",
    "EndeavourOS": "arch",
    "Ubuntu": "debian",
    "Debian GNU/Linux": "debian",
    "Linux Mint": "debian",
    "Pop!_OS": "debian",
    "Fedora Linux": "fedora",
    "openSUSE Tumbleweed": "suse",
    "openSUSE Leap": "suse",
}

# Lower-cased aliases seen in lsb_release output, os-release IDs and release files.
_ALIASES: Dict[str, str] = {
    "arch": "Arch Linux",
    "archlinux": "Arch Linux",
    "manjaro": "Manjaro Linux",
    "manjarolinux": "Manjaro Linux",
    "manjaro-arm": "Manjaro Linux",
    "endeavouros": "EndeavourOS",
    "ubuntu": "Ubuntu",
    "debian": "Debian GNU/Linux",
    "linuxmint": "Linux Mint",
    "pop": "Pop!_OS",
    "fedora": "Fedora Linux",
    "opensuse-tumbleweed": "openSUSE Tumbleweed",
    "opensuse-leap": "openSUSE Leap",
}
_ALIASES.update({name.lower(): name for name in DISPATCH})


@dataclass(frozen=True)
class DistributionInfo:
    name: str
    version: str = ""
    id: str = ""
    id_like: Tuple[str, ...] = field(default_factory=tuple)
    source: str = ""

    @property
    def family(self) -> Optional[str]:
        return DISPATCH.get(self.name)


Probe = Callable[[], Optional[DistributionInfo]]


def canonical_name(info: DistributionInfo) -> Optional[str]:
    """Map a probe result onto a dispatch key, or None."""

    candidates = [info.name, info.id, *info.id_like]
    for c in candidates:
        if not c:
            continue
        if c in DISPATCH:
            return c
        alias = _ALIASES.get(c.strip().lower())
        if alias:
            return alias
    return None


def parse_os_release(text: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        try:
            parts = shlex.split(raw)
        except ValueError:
            parts = [raw.strip("\"'")]
        values[key.strip()] = parts[0] if parts else ""
    return values


def _read_text(path: Path) -> Optional[str]:
    try:
        txt = path.read_text(encoding="utf-8", errors="ignore").strip()
        return txt or None
    except OSError:
        return None


def probe_os_release(paths: Sequence[str] = ("/etc/os-release", "/usr/lib/os-release")) -> Optional[DistributionInfo]:
    for p in paths:
        txt = _read_text(Path(p))
        if not txt:
            continue
        data = parse_os_release(txt)
        name = data.get("NAME") or data.get("PRETTY_NAME") or ""
        if not name and not data.get("ID"):
            continue
        return DistributionInfo(
            name=name,
            version=data.get("VERSION_ID", ""),
            id=data.get("ID", ""),
            id_like=tuple(data.get("ID_LIKE", "").split()),
            source=p,
        )
    return None


def probe_lsb_release() -> Optional[DistributionInfo]:
    if shutil.which("lsb_release") is None:
        return None
    r = run_cmd(["lsb_release", "-si"], check=False)
    name = r.stdout.strip()
    if r.returncode != 0 or not name:
        return None
    v = run_cmd(["lsb_release", "-sr"], check=False)
    version = v.stdout.strip() if v.returncode == 0 else ""
    return DistributionInfo(name=name, version=version, source="lsb_release")


def _first_number(text: str) -> str:
    for token in text.split():
        if token[:1].isdigit():
            return token
    return ""


def probe_release_files(root: str = "/") -> Optional[DistributionInfo]:
    base = Path(root)

    lsb = _read_text(base / "etc/lsb-release")
    if lsb:
        data = parse_os_release(lsb)
        if data.get("DISTRIB_ID"):
            return DistributionInfo(
                name=data["DISTRIB_ID"],
                version=data.get("DISTRIB_RELEASE", ""),
                source="/etc/lsb-release",
            )

    if (base / "etc/arch-release").exists():
        return DistributionInfo(name="Arch Linux", source="/etc/arch-release")

    fedora = _read_text(base / "etc/fedora-release")
    if fedora:
        return DistributionInfo(name="Fedora Linux", version=_first_number(fedora), source="/etc/fedora-release")

    suse = _read_text(base / "etc/SuSE-release")
    if suse:
        first = suse.splitlines()[0]
        name = "openSUSE Tumbleweed" if "tumbleweed" in first.lower() else "openSUSE Leap"
        return DistributionInfo(name=name, version=_first_number(first), source="/etc/SuSE-release")

    debian = _read_text(base / "etc/debian_version")
    if debian:
        return DistributionInfo(name="Debian GNU/Linux", version=debian, source="/etc/debian_version")

    return None


def probe_uname() -> Optional[DistributionInfo]:
    r = run_cmd(["uname", "-s"], check=False)
    name = r.stdout.strip()
    if r.returncode != 0 or not name:
        return None
    v = run_cmd(["uname", "-r"], check=False)
    return DistributionInfo(name=name, version=v.stdout.strip(), source="uname")


DEFAULT_PROBES: List[Probe] = [
    probe_os_release,
    probe_lsb_release,
    probe_release_files,
    probe_uname,
]


def resolve_forced(name: str) -> DistributionInfo:
    info = DistributionInfo(name=name, id=name, source="config")
    canonical = canonical_name(info)
    if canonical is None:
        raise UnsupportedPlatform(
            f"Unsupported distribution {name!r} (supported: {', '.join(sorted(DISPATCH))})"
        )
    return replace(info, name=canonical)


def detect_distribution(probes: Optional[Sequence[Probe]] = None) -> DistributionInfo:
    """Return the first probe result that maps onto a dispatch key.

    Probes run in priority order and are read-only. A probe that yields a
    name we do not support does not stop the search; it is reported if
    nothing later matches either.
    """

    seen: List[str] = []
    for probe in (DEFAULT_PROBES if probes is None else probes):
        info = probe()
        if info is None or not (info.name or info.id):
            continue
        canonical = canonical_name(info)
        if canonical is None:
            logger.debug("Probe %s reported unsupported distribution %r", info.source, info.name)
            seen.append(info.name or info.id)
            continue
        result = replace(info, name=canonical)
        logger.info(
            "Distribution: %s %s (family=%s, source=%s)",
            result.name,
            result.version or "?",
            result.family,
            result.source,
        )
        return result

    raise UnsupportedPlatform(
        "Could not detect a supported distribution"
        + (f" (found: {', '.join(seen)})" if seen else "")
        + f"; supported: {', '.join(sorted(DISPATCH))}"
    )
