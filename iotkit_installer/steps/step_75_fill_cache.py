from __future__ import annotations

import logging

from ..context import InstallCtx
from ..errors import RequiredDirectoryMissing
from ..options import Option
from ..pipeline import OptionGate

logger = logging.getLogger(__name__)

CACHE_MARKER = ".filled"


class FillCacheStep(OptionGate):
    step_id = "75_fill_cache"
    option = Option.FILL_CACHE

    def run(self, ctx: InstallCtx) -> bool:
        cache_dir = ctx.env.cache_dir
        marker = cache_dir / CACHE_MARKER
        if marker.exists():
            logger.info("Build cache already filled (%s)", cache_dir)
            return False

        project = ctx.env.template_src
        if not project.is_dir():
            raise RequiredDirectoryMissing(f"Template directory missing or unreadable: {project}")

        logger.warning("Filling the build cache, this can take a long time")
        ctx.run(
            [ctx.venv_tool("pio"), "run", "-d", str(project)],
            env={
                "PLATFORMIO_CORE_DIR": str(ctx.env.pio_home),
                "PLATFORMIO_BUILD_CACHE_DIR": str(cache_dir),
                "PLATFORMIO_BUILD_DIR": str(cache_dir / "build"),
            },
        )
        if not ctx.dry_run:
            cache_dir.mkdir(parents=True, exist_ok=True)
            marker.write_text("1\n", encoding="utf-8")
        return True
