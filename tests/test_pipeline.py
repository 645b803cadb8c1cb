from __future__ import annotations

from typing import Any, Dict, List

import pytest

from flutter_provisioner.errors import FetchError, JavaNotFound
from flutter_provisioner.pipeline import run_pipeline


class RecordingStep:
    def __init__(self, step_id: str, log: List[str], error: Exception | None = None):
        self.step_id = step_id
        self._log = log
        self._error = error

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        self._log.append(self.step_id)
        if self._error is not None:
            raise self._error
        state.setdefault("seen", []).append(self.step_id)
        return state


def test_runs_all_steps_in_order() -> None:
    log: List[str] = []
    steps = [RecordingStep(s, log) for s in ("10_a", "20_b", "30_c")]

    result = run_pipeline(state={}, steps=steps)

    assert result.ok
    assert result.ran_steps == ["10_a", "20_b", "30_c"]
    assert result.state["seen"] == ["10_a", "20_b", "30_c"]
    assert result.state["execution"]["current_step"] is None


def test_first_failure_short_circuits() -> None:
    log: List[str] = []
    boom = FetchError("network down")
    steps = [
        RecordingStep("10_a", log),
        RecordingStep("20_b", log, error=boom),
        RecordingStep("30_c", log),
    ]

    result = run_pipeline(state={}, steps=steps)

    assert not result.ok
    assert result.error is boom
    assert result.failed_step == "20_b"
    assert result.ran_steps == ["10_a"]
    assert log == ["10_a", "20_b"]


def test_unexpected_errors_propagate() -> None:
    steps = [RecordingStep("10_a", [], error=KeyError("bug"))]

    with pytest.raises(KeyError):
        run_pipeline(state={}, steps=steps)


def test_stop_after() -> None:
    log: List[str] = []
    steps = [RecordingStep(s, log) for s in ("10_a", "20_b", "30_c")]

    result = run_pipeline(state={}, steps=steps, stop_after="20_b")

    assert result.ran_steps == ["10_a", "20_b"]
    assert log == ["10_a", "20_b"]


def test_exit_codes_are_distinct() -> None:
    from flutter_provisioner import errors

    codes = {
        cls.exit_code
        for cls in (
            errors.UnsupportedPlatform,
            errors.InstallError,
            errors.ResolutionError,
            errors.FetchError,
            errors.JavaNotFound,
            errors.ProfileIOError,
            errors.ConfigError,
        )
    }
    assert len(codes) == 7
    assert 0 not in codes
    assert JavaNotFound.exit_code == 6
