from __future__ import annotations

from ..context import InstallCtx
from ..lib.toolchain import ensure_node_workspace, ensure_npm_package
from ..options import Option
from ..pipeline import OptionGate


class CloudcmdStep(OptionGate):
    step_id = "40_cloudcmd"
    option = Option.CLOUDCMD

    def run(self, ctx: InstallCtx) -> bool:
        cfg = ctx.component("cloudcmd")
        changed = ensure_node_workspace(ctx)
        changed = ensure_npm_package(ctx, str(cfg["npm_package"])) or changed
        return changed
