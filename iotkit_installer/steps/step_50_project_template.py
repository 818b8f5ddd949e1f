from __future__ import annotations

from ..context import InstallCtx
from ..lib.assets import copy_tree
from ..options import Option
from ..pipeline import OptionGate


class ProjectTemplateStep(OptionGate):
    step_id = "50_project_template"
    option = Option.TEMPLATE

    def run(self, ctx: InstallCtx) -> bool:
        # An existing destination is kept as is (user data).
        return copy_tree(ctx.env.template_src, ctx.env.project_dir, dry_run=ctx.dry_run)
