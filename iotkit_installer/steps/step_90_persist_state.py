from __future__ import annotations

from ..context import InstallCtx
from ..pipeline import OptionGate
from ..state_store import save_options


class PersistStateStep(OptionGate):
    step_id = "90_persist_state"

    def run(self, ctx: InstallCtx) -> bool:
        save_options(ctx.env.state_path, ctx.options, dry_run=ctx.dry_run)
        return True
