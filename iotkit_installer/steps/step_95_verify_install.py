from __future__ import annotations

import logging

from ..context import InstallCtx
from ..errors import RequiredDirectoryMissing, VerificationFailed
from ..pipeline import OptionGate

logger = logging.getLogger(__name__)


class VerifyInstallStep(OptionGate):
    step_id = "95_verify_install"

    def run(self, ctx: InstallCtx) -> bool:
        tests_dir = ctx.env.root / "tests" / "installation"
        if not tests_dir.is_dir():
            raise RequiredDirectoryMissing(f"Verification suite missing: {tests_dir}")

        python = ctx.venv_tool("python", fallback=ctx.platform.python)
        r = ctx.run(
            [python, "-m", "pytest", "-q", str(tests_dir)],
            check=False,
            env={"IOTKIT_INSTALL_STATE": str(ctx.env.state_path)},
        )
        if r.returncode != 0:
            raise VerificationFailed(f"Verification suite failed (exit {r.returncode})")
        logger.info("Verification suite passed")
        return True
