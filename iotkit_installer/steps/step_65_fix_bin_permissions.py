from __future__ import annotations

import logging
import stat

from ..context import InstallCtx
from ..errors import RequiredDirectoryMissing
from ..pipeline import OptionGate

logger = logging.getLogger(__name__)

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class FixBinPermissionsStep(OptionGate):
    step_id = "65_fix_bin_permissions"

    def run(self, ctx: InstallCtx) -> bool:
        bin_dir = ctx.env.bin_dir
        if not bin_dir.is_dir():
            raise RequiredDirectoryMissing(f"Binary directory missing or unreadable: {bin_dir}")

        fixed = []
        for p in sorted(bin_dir.iterdir()):
            if not p.is_file():
                continue
            mode = p.stat().st_mode
            if mode & _EXEC_BITS == _EXEC_BITS:
                continue
            if not ctx.dry_run:
                p.chmod(mode | _EXEC_BITS)
            fixed.append(p.name)

        if fixed:
            logger.info("Made executable: %s", ", ".join(fixed))
        return bool(fixed)
