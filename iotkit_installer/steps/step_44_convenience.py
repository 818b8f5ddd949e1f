from __future__ import annotations

from ..context import InstallCtx
from ..options import Option
from ..pipeline import OptionGate


class ConvenienceToolsStep(OptionGate):
    step_id = "44_convenience"
    option = Option.CONVENIENCE

    def run(self, ctx: InstallCtx) -> bool:
        return ctx.ensure_bundle("convenience")
