from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence

from .options import Option

if TYPE_CHECKING:
    from .context import InstallCtx

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step.

    run() checks for its own artifacts before acting and returns whether it
    changed anything. Steps never modify ctx.options.
    """

    step_id: str

    def enabled(self, ctx: "InstallCtx") -> bool:
        ...

    def run(self, ctx: "InstallCtx") -> bool:
        ...


class OptionGate:
    """enabled() driven by one InstallOptions entry; no option means always on."""

    option: Optional[Option] = None

    def enabled(self, ctx: "InstallCtx") -> bool:
        return self.option is None or ctx.options[self.option]


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    skipped_steps: List[str]
    unchanged_steps: List[str]


def run_pipeline(*, ctx: "InstallCtx", steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order. The first failure aborts the run."""

    ran: List[str] = []
    skipped: List[str] = []
    unchanged: List[str] = []

    for step in steps:
        if not step.enabled(ctx):
            logger.info("Skipping step %s (not selected)", step.step_id)
            skipped.append(step.step_id)
            continue

        logger.info("Running step %s", step.step_id)
        try:
            changed = step.run(ctx)
        except Exception:
            logger.error("Step %s failed, aborting", step.step_id)
            raise
        ran.append(step.step_id)
        if not changed:
            logger.info("Step %s: nothing to do", step.step_id)
            unchanged.append(step.step_id)

    return PipelineResult(ran_steps=ran, skipped_steps=skipped, unchanged_steps=unchanged)
