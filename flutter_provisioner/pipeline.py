from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .errors import ProvisionError

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[ProvisionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_pipeline(
    *,
    state: Dict[str, Any],
    steps: Sequence[Step],
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order, stopping at the first ProvisionError.

    The failure is returned on the result rather than raised; anything that is
    not a ProvisionError is a bug and propagates.
    """

    result = PipelineResult(state=state)

    for step in steps:
        state.setdefault("execution", {})["current_step"] = step.step_id
        logger.info("Running step %s", step.step_id)
        try:
            state = step.run(state)
        except ProvisionError as e:
            logger.error("Step %s failed: %s", step.step_id, e)
            result.failed_step = step.step_id
            result.error = e
            break
        result.ran_steps.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    state.setdefault("execution", {})["current_step"] = None
    result.state = state
    return result
