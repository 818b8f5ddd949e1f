from __future__ import annotations

from ..context import InstallCtx
from ..lib.configpatch import apply_component_patch
from ..options import Option
from ..pipeline import OptionGate


class MosquittoStep(OptionGate):
    step_id = "43_mosquitto"
    option = Option.MOSQUITTO

    def run(self, ctx: InstallCtx) -> bool:
        changed = ctx.ensure_bundle("mosquitto")
        changed = apply_component_patch(ctx.env.local, ctx.component("mosquitto"), dry_run=ctx.dry_run) or changed
        return changed
