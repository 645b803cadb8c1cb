from __future__ import annotations

import pytest

from flutter_provisioner.config import HTTP_TIMEOUT
from flutter_provisioner.errors import InstallError, UnsupportedPlatform
from flutter_provisioner.lib import waydroid as waydroid_mod
from flutter_provisioner.lib.distro import DistributionInfo
from flutter_provisioner.lib.waydroid import install_waydroid

WAYDROID = "flutter_provisioner.lib.waydroid"


class _Script:
    text = "echo adding repo\n"

    def raise_for_status(self) -> None:
        return None


def _which(available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


def test_already_present_is_skipped(monkeypatch: pytest.MonkeyPatch, fake_runner) -> None:
    monkeypatch.setattr(waydroid_mod.shutil, "which", _which({"waydroid"}))
    runner = fake_runner(WAYDROID)

    assert install_waydroid(DistributionInfo(name="Arch Linux")) is False
    assert runner.calls == []


def test_arch_uses_pacman(monkeypatch: pytest.MonkeyPatch, fake_runner) -> None:
    monkeypatch.setattr(waydroid_mod.shutil, "which", _which(set()))
    runner = fake_runner(WAYDROID)

    assert install_waydroid(DistributionInfo(name="EndeavourOS")) is True
    assert runner.commands() == [["pacman", "-S", "--noconfirm", "waydroid"]]


def test_arch_with_aur_helper(monkeypatch: pytest.MonkeyPatch, fake_runner) -> None:
    monkeypatch.setattr(waydroid_mod.shutil, "which", _which({"yay"}))
    runner = fake_runner(WAYDROID)

    install_waydroid(DistributionInfo(name="Arch Linux"), aur_helper="yay")

    assert runner.calls == [["yay", "-S", "--noconfirm", "waydroid"]]


def test_missing_aur_helper(monkeypatch: pytest.MonkeyPatch, fake_runner) -> None:
    monkeypatch.setattr(waydroid_mod.shutil, "which", _which(set()))
    runner = fake_runner(WAYDROID)

    with pytest.raises(InstallError, match="paru"):
        install_waydroid(DistributionInfo(name="Manjaro Linux"), aur_helper="paru")
    assert runner.calls == []


def test_debian_adds_repo_then_installs(monkeypatch: pytest.MonkeyPatch, fake_runner) -> None:
    monkeypatch.setattr(waydroid_mod.shutil, "which", _which(set()))
    timeouts = []

    def _get(url, timeout):
        timeouts.append(timeout)
        return _Script()

    monkeypatch.setattr(waydroid_mod.requests, "get", _get)
    runner = fake_runner(WAYDROID)

    install_waydroid(DistributionInfo(name="Ubuntu"))

    assert runner.commands() == [["bash"], ["apt-get", "install", "-y", "waydroid"]]
    assert runner.inputs[0] == _Script.text
    assert timeouts == [HTTP_TIMEOUT]


def test_suse_is_unsupported(monkeypatch: pytest.MonkeyPatch, fake_runner) -> None:
    monkeypatch.setattr(waydroid_mod.shutil, "which", _which(set()))
    runner = fake_runner(WAYDROID)

    with pytest.raises(UnsupportedPlatform):
        install_waydroid(DistributionInfo(name="openSUSE Leap"))
    assert runner.calls == []


def test_install_failure(monkeypatch: pytest.MonkeyPatch, fake_runner) -> None:
    monkeypatch.setattr(waydroid_mod.shutil, "which", _which(set()))
    fake_runner(WAYDROID, returncodes={("dnf", "install", "-y", "waydroid"): 1})

    with pytest.raises(InstallError):
        install_waydroid(DistributionInfo(name="Fedora Linux"))
