from __future__ import annotations

import logging

from ..context import InstallCtx
from ..options import Option
from ..pipeline import OptionGate

logger = logging.getLogger(__name__)


class PredownloadPlatformsStep(OptionGate):
    step_id = "70_predownload_platforms"
    option = Option.PRE_DOWNLOAD

    def run(self, ctx: InstallCtx) -> bool:
        pio_home = ctx.env.pio_home
        changed = False
        for name in ctx.core.get("build_platforms") or []:
            if (pio_home / "platforms" / str(name)).exists():
                logger.info("Build platform %s already downloaded", name)
                continue
            ctx.run(
                [ctx.venv_tool("pio"), "pkg", "install", "--global", "--platform", str(name)],
                env={"PLATFORMIO_CORE_DIR": str(pio_home)},
            )
            changed = True
        return changed
