from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

DEFAULT_ANDROID_HOME = "~/Android/Sdk"
DEFAULT_FLUTTER_HOME = "~/development/flutter"
DEFAULT_FLUTTER_REPO = "https://github.com/flutter/flutter.git"
DEFAULT_STUDIO_PAGE = "https://developer.android.com/studio"
DEFAULT_SDK_PACKAGES = ["platform-tools", "platforms;android-34", "build-tools;34.0.0"]
DEFAULT_JAVA_CANDIDATES = [
    "/usr/lib/jvm/java-17-openjdk",
    "/usr/lib/jvm/java-17-openjdk-amd64",
    "/usr/lib/jvm/java-17-openjdk-arm64",
    "/usr/lib/jvm/java-17",
    "/usr/lib/jvm/jre-17-openjdk",
    "/usr/lib/jvm/default",
]

WAYDROID_CHOICES = {"ask", "yes", "no"}

HTTP_TIMEOUT = 60


def _expand(p: str) -> str:
    return os.path.expandvars(os.path.expanduser(p))


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"config.{key} must be a mapping")
    return value


def _string_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"config.{key} must be a list")
    return [str(v).strip() for v in value if str(v).strip()]


@dataclass(frozen=True)
class ProvisionConfig:
    raw: Dict[str, Any]

    @property
    def distro(self) -> Optional[str]:
        value = self.raw.get("distro")
        return str(value) if value else None

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def update_system(self) -> bool:
        return bool(self.raw.get("update_system", True))

    @property
    def extra_packages(self) -> List[str]:
        return _string_list(self.raw.get("packages"), "packages")

    @property
    def android_home(self) -> Path:
        return Path(_expand(str(_section(self.raw, "android").get("home") or DEFAULT_ANDROID_HOME)))

    @property
    def cmdline_tools_url(self) -> Optional[str]:
        value = _section(self.raw, "android").get("cmdline_tools_url")
        return str(value) if value else None

    @property
    def cmdline_tools_version(self) -> Optional[str]:
        value = _section(self.raw, "android").get("cmdline_tools_version")
        return str(value) if value else None

    @property
    def studio_page_url(self) -> str:
        return str(_section(self.raw, "android").get("page_url") or DEFAULT_STUDIO_PAGE)

    @property
    def sdk_packages(self) -> List[str]:
        return _string_list(_section(self.raw, "android").get("packages"), "android.packages") or list(
            DEFAULT_SDK_PACKAGES
        )

    @property
    def flutter_home(self) -> Path:
        return Path(_expand(str(_section(self.raw, "flutter").get("home") or DEFAULT_FLUTTER_HOME)))

    @property
    def flutter_repo(self) -> str:
        return str(_section(self.raw, "flutter").get("repo") or DEFAULT_FLUTTER_REPO)

    @property
    def flutter_channel(self) -> str:
        return str(_section(self.raw, "flutter").get("channel") or "stable")

    @property
    def java_home(self) -> Optional[str]:
        value = _section(self.raw, "java").get("home")
        return _expand(str(value)) if value else None

    @property
    def java_candidates(self) -> List[str]:
        candidates = _string_list(_section(self.raw, "java").get("candidates"), "java.candidates")
        return [_expand(c) for c in candidates or DEFAULT_JAVA_CANDIDATES]

    @property
    def profile_file(self) -> Optional[Path]:
        value = self.raw.get("profile_file")
        return Path(_expand(str(value))) if value else None

    @property
    def waydroid(self) -> str:
        # YAML turns bare yes/no/true/false into booleans.
        value = self.raw.get("waydroid", "ask")
        if value is True:
            return "yes"
        if value is False or value is None:
            return "no"
        value = str(value).strip().lower()
        if value not in WAYDROID_CHOICES:
            raise ConfigError(f"config.waydroid must be one of {sorted(WAYDROID_CHOICES)}, got {value!r}")
        return value

    @property
    def waydroid_aur_helper(self) -> Optional[str]:
        value = self.raw.get("waydroid_aur_helper")
        return str(value) if value else None

    @property
    def device_permissions(self) -> bool:
        return bool(self.raw.get("device_permissions", True))

    @property
    def verify(self) -> bool:
        return bool(self.raw.get("verify", True))

    def validate(self) -> "ProvisionConfig":
        """Read every property once so bad values fail before any step runs."""

        for name, attr in vars(type(self)).items():
            if isinstance(attr, property):
                getattr(self, name)
        return self


def load_config(path: Optional[str], overrides: Optional[Dict[str, Any]] = None) -> ProvisionConfig:
    """Load an optional YAML config file, apply overrides on top and validate.

    Override keys may be dotted ("android.cmdline_tools_url"); None values are
    ignored so unset CLI flags never clobber the file. Every problem is
    reported as ConfigError.
    """

    raw: Dict[str, Any] = {}
    if path:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"Config file not found: {path}")
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ConfigError(f"{path}: config must be YAML")
        try:
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{path} must contain a mapping/object")

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        target = raw
        *parents, leaf = key.split(".")
        for part in parents:
            target = target.setdefault(part, {})
            if not isinstance(target, dict):
                raise ConfigError(f"config.{part} must be a mapping")
        target[leaf] = value

    return ProvisionConfig(raw=raw).validate()
