from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..context import InstallCtx
from ..lib.toolchain import ensure_node_workspace
from ..options import Option
from ..pipeline import OptionGate

logger = logging.getLogger(__name__)


class CoreEnvStep(OptionGate):
    """Isolated runtime, core libraries, helper projects and the node workspace."""

    step_id = "30_core_env"
    option = Option.CORE

    def _create_runtime(self, ctx: InstallCtx) -> bool:
        if ctx.env.runtime_present:
            logger.info("Runtime %s already exists", ctx.env.venv)
            return False
        ctx.run([ctx.platform.python, "-m", "venv", str(ctx.env.venv)])
        return True

    def _pip(self, ctx: InstallCtx, *args: str) -> None:
        python = str(ctx.env.venv_bin / "python")
        ctx.run([python, "-m", "pip", "install", *args])

    def _helpers(self, ctx: InstallCtx) -> List[Dict[str, Any]]:
        helpers = ctx.core.get("helper_projects") or []
        if not isinstance(helpers, list):
            raise ValueError("manifests/core.yaml: helper_projects must be a list")
        return helpers

    def run(self, ctx: InstallCtx) -> bool:
        created = self._create_runtime(ctx)
        changed = created

        if created or ctx.options[Option.UPGRADE]:
            packages = [str(p) for p in ctx.core.get("python_packages") or []]
            self._pip(ctx, "--upgrade", *packages)
            changed = True

        for helper in self._helpers(ctx):
            dest = ctx.env.external_dir / str(helper["name"])
            if dest.exists():
                logger.info("Helper %s already cloned, skipping", helper["name"])
                continue
            argv = ["git", "clone", "--depth", "1"]
            if helper.get("ref"):
                argv += ["--branch", str(helper["ref"])]
            ctx.run([*argv, str(helper["url"]), str(dest)])
            self._pip(ctx, str(dest))
            changed = True

        changed = ensure_node_workspace(ctx) or changed
        return changed
