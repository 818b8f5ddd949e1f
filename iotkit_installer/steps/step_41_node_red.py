from __future__ import annotations

from ..context import InstallCtx
from ..lib.configpatch import apply_component_patch
from ..lib.toolchain import ensure_node_workspace, ensure_npm_package
from ..options import Option
from ..pipeline import OptionGate


class NodeRedStep(OptionGate):
    step_id = "41_node_red"
    option = Option.NODE_RED

    def run(self, ctx: InstallCtx) -> bool:
        cfg = ctx.component("node_red")
        changed = ensure_node_workspace(ctx)
        changed = ensure_npm_package(ctx, str(cfg["npm_package"])) or changed
        changed = apply_component_patch(ctx.env.local, cfg, dry_run=ctx.dry_run) or changed
        return changed
