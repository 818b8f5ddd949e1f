from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

from .lib.command import CmdResult
from .lib.env import Environment
from .lib.manifests import load_components_manifest, load_core_manifest
from .lib.platforms import Platform
from .options import InstallOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallCtx:
    env: Environment
    platform: Platform
    options: InstallOptions
    core: Dict[str, Any] = field(default_factory=load_core_manifest)
    components: Dict[str, Any] = field(default_factory=load_components_manifest)

    @property
    def dry_run(self) -> bool:
        return self.platform.dry_run

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ) -> CmdResult:
        return self.platform.run(argv, check=check, env=env, cwd=cwd)

    def venv_tool(self, name: str, fallback: Optional[str] = None) -> str:
        """Prefer the runtime's copy of a tool, fall back to PATH."""
        p = self.env.venv_bin / name
        return str(p) if p.exists() else (fallback or name)

    def component(self, name: str) -> Dict[str, Any]:
        cfg = self.components.get(name) or {}
        if not isinstance(cfg, dict):
            raise ValueError(f"manifests/components.yaml: {name} must be a mapping")
        return cfg

    def commands_present(self, names: Sequence[str]) -> bool:
        return bool(names) and all(self.platform.has_command(n) for n in names)

    def checks_pass(self, checks: Sequence[Sequence[str]]) -> bool:
        """Run each check_argv entry; "{python}" is the profile's interpreter."""

        for entry in checks:
            argv = [str(a).format(python=self.platform.python) for a in entry]
            if self.run(argv, check=False).returncode != 0:
                logger.info("Check failed: %s", " ".join(argv))
                return False
        return True

    def ensure_bundle(self, name: str) -> bool:
        """Install a component's system bundle unless its commands and checks pass.

        check_commands must all be on PATH and every check_argv must exit 0.
        """

        cfg = self.component(name)
        check_commands = [str(c) for c in cfg.get("check_commands") or []]
        if self.commands_present(check_commands) and self.checks_pass(cfg.get("check_argv") or []):
            logger.info("%s already installed (%s), skipping", name, ", ".join(check_commands))
            return False
        self.platform.install_bundle(str(cfg.get("bundle") or name))
        return True
