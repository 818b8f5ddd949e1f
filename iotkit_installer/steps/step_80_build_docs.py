from __future__ import annotations

from ..context import InstallCtx
from ..errors import RequiredDirectoryMissing
from ..pipeline import OptionGate


class BuildDocsStep(OptionGate):
    step_id = "80_build_docs"

    def run(self, ctx: InstallCtx) -> bool:
        config = ctx.env.root / "doc" / "mkdocs.yml"
        if not config.is_file():
            raise RequiredDirectoryMissing(f"Documentation sources missing: {config}")
        ctx.run(
            [ctx.venv_tool("mkdocs"), "build", "--quiet", "-f", str(config), "-d", str(ctx.env.local / "doc")]
        )
        return True
