"""Shared pytest fixtures: a recording stand-in for run_cmd."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from flutter_provisioner.lib.command import CmdResult, CommandError


class FakeRunner:
    """Records every argv; return codes are looked up without the sudo prefix."""

    def __init__(self, returncodes: Optional[Dict[Tuple[str, ...], int]] = None):
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[str]] = []
        self.envs: List[Optional[Dict[str, str]]] = []
        self.returncodes = dict(returncodes or {})
        self.on_call: Optional[Callable[[List[str]], None]] = None

    @staticmethod
    def strip_sudo(argv: Sequence[str]) -> List[str]:
        argv = list(argv)
        return argv[1:] if argv and argv[0] == "sudo" else argv

    def __call__(self, argv, *, check=True, env=None, cwd=None, input_text=None, dry_run=False):
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(input_text)
        self.envs.append(dict(env) if env is not None else None)
        if self.on_call is not None and not dry_run:
            self.on_call(argv)
        rc = 0 if dry_run else self.returncodes.get(tuple(self.strip_sudo(argv)), 0)
        result = CmdResult(argv=argv, returncode=rc, stdout="", stderr="")
        if check and rc != 0:
            raise CommandError(f"Command failed ({rc})", result)
        return result

    def commands(self) -> List[List[str]]:
        return [self.strip_sudo(c) for c in self.calls]


@pytest.fixture
def fake_runner(monkeypatch: pytest.MonkeyPatch) -> Callable[..., FakeRunner]:
    """Install one FakeRunner as run_cmd in the given modules."""

    def _install(*modules: str, returncodes: Optional[Dict[Tuple[str, ...], int]] = None) -> FakeRunner:
        runner = FakeRunner(returncodes)
        for module in modules:
            monkeypatch.setattr(f"{module}.run_cmd", runner)
        return runner

    return _install
