from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


def _manifests_dir() -> Path:
    # flutter_provisioner/lib/manifests.py -> flutter_provisioner/manifests
    return Path(__file__).resolve().parents[1] / "manifests"


@dataclass(frozen=True)
class PackageSpec:
    """A logical package and its per-family names.

    A family mapped to None does not need the package at all.
    """

    name: str
    names: Dict[str, Optional[str]] = field(default_factory=dict)

    def resolve(self, family: str) -> Optional[str]:
        if family in self.names:
            return self.names[family]
        return self.name


def load_yaml_rel(rel_path: str) -> Dict[str, Any]:
    """Load a YAML file bundled under flutter_provisioner/manifests."""

    p = _manifests_dir() / rel_path.lstrip("/")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    return data


def load_package_specs(rel_path: str = "packages.yaml") -> List[PackageSpec]:
    data = load_yaml_rel(rel_path)
    entries = data.get("packages") or []
    if not isinstance(entries, list):
        raise ValueError(f"manifests/{rel_path}: packages must be a list")

    specs: List[PackageSpec] = []
    for entry in entries:
        if isinstance(entry, str):
            specs.append(PackageSpec(name=entry))
            continue
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ValueError(f"manifests/{rel_path}: bad package entry {entry!r}")
        names = entry.get("names") or {}
        if not isinstance(names, dict):
            raise ValueError(f"manifests/{rel_path}: names of {entry['name']} must be a mapping")
        specs.append(
            PackageSpec(
                name=str(entry["name"]),
                names={str(k): (str(v) if v is not None else None) for k, v in names.items()},
            )
        )
    return specs
