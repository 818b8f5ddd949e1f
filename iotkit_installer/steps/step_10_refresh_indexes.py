from __future__ import annotations

from ..context import InstallCtx
from ..options import Option


class RefreshIndexesStep:
    step_id = "10_refresh_indexes"

    # Components installed from the system package manager.
    needs_fresh_index = (Option.WEB_SERVER, Option.MOSQUITTO, Option.CONVENIENCE)

    def enabled(self, ctx: InstallCtx) -> bool:
        return any(ctx.options[o] for o in self.needs_fresh_index)

    def run(self, ctx: InstallCtx) -> bool:
        ctx.platform.refresh_indexes()
        return True
