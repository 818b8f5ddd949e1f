from __future__ import annotations

import logging

from ..context import InstallCtx
from ..options import Option
from ..pipeline import OptionGate

logger = logging.getLogger(__name__)


class UpgradeSystemStep(OptionGate):
    step_id = "15_upgrade_system"
    option = Option.UPGRADE

    def run(self, ctx: InstallCtx) -> bool:
        logger.info("Upgrading all %s packages", ctx.platform.profile_id)
        ctx.platform.upgrade_all()
        return True
