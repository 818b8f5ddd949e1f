from __future__ import annotations

import logging

from ..context import InstallCtx
from ..errors import UnknownUser
from ..options import Option
from ..pipeline import OptionGate

logger = logging.getLogger(__name__)


class SerialPermissionsStep(OptionGate):
    step_id = "85_serial_permissions"
    option = Option.FIX_SERIAL

    def run(self, ctx: InstallCtx) -> bool:
        group = ctx.platform.serial_group
        if not group:
            logger.info("No serial group on %s, skipping", ctx.platform.profile_id)
            return False

        user = ctx.env.user
        if not user:
            raise UnknownUser(f"Cannot add an unknown user to {group}; set USER and re-run")

        r = ctx.run(["id", "-nG", user], check=False)
        if group in r.stdout.split():
            logger.info("%s already in group %s", user, group)
            return False

        ctx.platform.add_user_to_group(user, group)
        logger.warning("Added %s to %s; log out and back in for it to take effect", user, group)
        return True
