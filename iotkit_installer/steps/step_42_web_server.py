from __future__ import annotations

from ..context import InstallCtx
from ..lib.configpatch import apply_component_patch
from ..options import Option
from ..pipeline import OptionGate


class WebServerStep(OptionGate):
    step_id = "42_web_server"
    option = Option.WEB_SERVER

    def run(self, ctx: InstallCtx) -> bool:
        changed = ctx.ensure_bundle("web_server")
        changed = apply_component_patch(ctx.env.local, ctx.component("web_server"), dry_run=ctx.dry_run) or changed
        return changed
