from __future__ import annotations

from pathlib import Path

import pytest

from flutter_provisioner.config import DEFAULT_SDK_PACKAGES, ProvisionConfig, load_config
from flutter_provisioner.errors import ConfigError


def test_defaults_without_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    cfg = load_config(None)

    assert cfg.android_home == tmp_path / "Android/Sdk"
    assert cfg.flutter_home == tmp_path / "development/flutter"
    assert cfg.sdk_packages == DEFAULT_SDK_PACKAGES
    assert cfg.cmdline_tools_url is None
    assert cfg.waydroid == "ask"
    assert cfg.update_system is True
    assert cfg.dry_run is False


def test_yaml_file_and_dotted_overrides(tmp_path: Path) -> None:
    path = tmp_path / "provision.yaml"
    path.write_text(
        "\n".join(
            [
                "distro: Ubuntu",
                "packages: [htop]",
                "android:",
                "  home: /opt/android",
                "  cmdline_tools_version: '11076708'",
                "waydroid: no",
            ]
        ),
        encoding="utf-8",
    )

    cfg = load_config(
        str(path),
        overrides={"android.cmdline_tools_url": "https://mirror/x.zip", "distro": None, "flutter.channel": "beta"},
    )

    assert cfg.distro == "Ubuntu"
    assert cfg.extra_packages == ["htop"]
    assert cfg.android_home == Path("/opt/android")
    assert cfg.cmdline_tools_version == "11076708"
    assert cfg.cmdline_tools_url == "https://mirror/x.zip"
    assert cfg.flutter_channel == "beta"
    assert cfg.waydroid == "no"


@pytest.mark.parametrize("value, expected", [(True, "yes"), (False, "no"), ("ASK", "ask"), (None, "no")])
def test_waydroid_choice(value, expected) -> None:
    assert ProvisionConfig(raw={"waydroid": value}).waydroid == expected


def test_waydroid_choice_rejects_garbage() -> None:
    with pytest.raises(ConfigError):
        ProvisionConfig(raw={"waydroid": "sometimes"}).waydroid


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "absent.yaml"))


def test_config_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(path))


@pytest.mark.parametrize(
    "raw, key",
    [
        ({"packages": "htop"}, "config.packages"),
        ({"android": {"packages": "platform-tools"}}, "config.android.packages"),
        ({"java": {"candidates": "/usr/lib/jvm/default"}}, "config.java.candidates"),
    ],
)
def test_scalar_where_list_expected_is_rejected(raw, key) -> None:
    with pytest.raises(ConfigError, match=key):
        ProvisionConfig(raw=raw).validate()


def test_bad_value_fails_at_load_time(tmp_path: Path) -> None:
    path = tmp_path / "provision.yaml"
    path.write_text("packages: [htop]\nwaydroid: sometimes\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="waydroid"):
        load_config(str(path))


def test_bad_override_fails_at_load_time() -> None:
    with pytest.raises(ConfigError, match="waydroid"):
        load_config(None, overrides={"waydroid": "maybe"})


def test_malformed_yaml(tmp_path: Path) -> None:
    path = tmp_path / "provision.yaml"
    path.write_text("android: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Could not read"):
        load_config(str(path))
