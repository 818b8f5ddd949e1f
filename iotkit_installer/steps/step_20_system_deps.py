from __future__ import annotations

from ..context import InstallCtx
from ..lib.toolchain import ensure_runtime, ensure_version_manager
from ..options import Option
from ..pipeline import OptionGate


class SystemDepsStep(OptionGate):
    """System libraries first, then the node toolchain built on top of them."""

    step_id = "20_system_deps"
    option = Option.SYSTEM_DEPS

    def run(self, ctx: InstallCtx) -> bool:
        changed = ctx.ensure_bundle("system_deps")
        changed = ensure_version_manager(ctx) or changed
        changed = ensure_runtime(ctx) or changed
        return changed
