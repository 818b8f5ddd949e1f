"""Package-manager profiles.

One Platform subclass per supported profile. Detection walks PLATFORM_PRIORITY
and returns the first profile whose markers are present; Termux is checked
before Debian because it also ships apt.
"""

from __future__ import annotations

import logging
import shutil
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Type

from ..errors import UnsupportedPlatform
from .command import CmdResult, run_cmd
from .env import Environment
from .hwdetect import RASPBERRY_PI, detect_board
from .manifests import load_profile

logger = logging.getLogger(__name__)

Which = Callable[[str], Optional[str]]


class Platform:
    profile_id = ""
    package_manager = ""
    use_sudo = True
    supports_serial = True
    python = "python3"

    def __init__(
        self,
        env: Environment,
        *,
        manifest: Optional[Dict[str, Any]] = None,
        which: Which = shutil.which,
        board: Optional[str] = None,
        dry_run: bool = False,
    ) -> None:
        self.env = env
        self.manifest = manifest if manifest is not None else load_profile(self.profile_id)
        self.which = which
        self.board = board
        self.dry_run = dry_run

    def __repr__(self) -> str:
        return f"<{type(self).__name__} profile={self.profile_id} board={self.board}>"

    @classmethod
    def is_available(cls, env: Environment, which: Which) -> bool:
        return bool(cls.package_manager) and which(cls.package_manager) is not None

    @property
    def is_pi(self) -> bool:
        return self.board == RASPBERRY_PI

    @property
    def serial_group(self) -> Optional[str]:
        return self.manifest.get("serial_group")

    def bundle(self, name: str) -> List[str]:
        bundles = self.manifest.get("bundles") or {}
        pkgs = bundles.get(name) or []
        if not isinstance(pkgs, list):
            raise ValueError(f"profiles/{self.profile_id}.yaml: bundle {name} must be a list")
        return [str(p) for p in pkgs]

    # Wrapper around every external invocation.

    def command_env(self) -> Dict[str, str]:
        return {}

    def unset_env(self) -> Sequence[str]:
        return ()

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ) -> CmdResult:
        return run_cmd(
            argv,
            check=check,
            base_env=self.env.variables,
            env=dict(self.command_env(), **(env or {})),
            unset_env=self.unset_env(),
            cwd=cwd,
            dry_run=self.dry_run,
        )

    def privileged(self, argv: Sequence[str]) -> List[str]:
        if self.use_sudo and not self.env.is_root_user:
            return ["sudo", *argv]
        return list(argv)

    def has_command(self, name: str) -> bool:
        return self.which(name) is not None

    # Package-manager verbs.

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        raise NotImplementedError

    def refresh_argv(self) -> List[str]:
        raise NotImplementedError

    def upgrade_argv(self) -> List[str]:
        raise NotImplementedError

    def install_packages(self, packages: Iterable[str]) -> None:
        pkgs = [p for p in packages if p]
        if not pkgs:
            return
        self.run(self.privileged(self.install_argv(pkgs)))

    def refresh_indexes(self) -> None:
        self.run(self.privileged(self.refresh_argv()))

    def upgrade_all(self) -> None:
        self.run(self.privileged(self.upgrade_argv()))

    def install_bundle(self, name: str) -> None:
        pkgs = self.bundle(name)
        logger.info("Installing bundle %s on %s: %s", name, self.profile_id, " ".join(pkgs) or "(empty)")
        self.install_packages(pkgs)

    def add_user_to_group(self, user: str, group: str) -> None:
        self.run(self.privileged(["usermod", "-a", "-G", group, user]))


class TermuxPlatform(Platform):
    profile_id = "termux"
    package_manager = "pkg"
    use_sudo = False
    supports_serial = False
    python = "python"

    @classmethod
    def is_available(cls, env: Environment, which: Which) -> bool:
        return env.termux_prefix is not None and which("pkg") is not None

    def command_env(self) -> Dict[str, str]:
        # Compiled extensions must link against Termux's own libraries.
        return {"LD_LIBRARY_PATH": f"{self.env.termux_prefix}/lib"}

    def unset_env(self) -> Sequence[str]:
        # termux-exec's preload breaks native builds.
        return ("LD_PRELOAD",)

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["pkg", "install", "-y", *packages]

    def refresh_argv(self) -> List[str]:
        return ["pkg", "update", "-y"]

    def upgrade_argv(self) -> List[str]:
        return ["pkg", "upgrade", "-y"]


class DebianPlatform(Platform):
    profile_id = "debian"
    package_manager = "apt-get"

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["apt-get", "install", "-y", "--no-install-recommends", *packages]

    def refresh_argv(self) -> List[str]:
        return ["apt-get", "update"]

    def upgrade_argv(self) -> List[str]:
        return ["apt-get", "upgrade", "-y"]


class ArchPlatform(Platform):
    profile_id = "arch"
    package_manager = "pacman"

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["pacman", "-S", "--needed", "--noconfirm", *packages]

    def refresh_argv(self) -> List[str]:
        return ["pacman", "-Sy"]

    def upgrade_argv(self) -> List[str]:
        return ["pacman", "-Syu", "--noconfirm"]


class FedoraPlatform(Platform):
    profile_id = "fedora"
    package_manager = "dnf"

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["dnf", "install", "-y", *packages]

    def refresh_argv(self) -> List[str]:
        return ["dnf", "makecache"]

    def upgrade_argv(self) -> List[str]:
        return ["dnf", "upgrade", "-y"]


class MacPlatform(Platform):
    profile_id = "macos"
    package_manager = "brew"
    use_sudo = False

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["brew", "install", *packages]

    def refresh_argv(self) -> List[str]:
        return ["brew", "update"]

    def upgrade_argv(self) -> List[str]:
        return ["brew", "upgrade"]


PLATFORM_PRIORITY: List[Type[Platform]] = [
    TermuxPlatform,
    DebianPlatform,
    ArchPlatform,
    FedoraPlatform,
    MacPlatform,
]


def detect_platform(
    env: Environment,
    *,
    which: Which = shutil.which,
    board: Optional[str] = None,
    dry_run: bool = False,
    candidates: Sequence[Type[Platform]] = PLATFORM_PRIORITY,
) -> Platform:
    """Return the first available profile in priority order."""

    for cls in candidates:
        if cls.is_available(env, which):
            if board is None and cls is not MacPlatform:
                board = detect_board()
            platform = cls(env, which=which, board=board, dry_run=dry_run)
            logger.info("Platform: profile=%s board=%s", platform.profile_id, platform.board or "-")
            return platform

    names = ", ".join(c.profile_id for c in candidates)
    raise UnsupportedPlatform(f"No supported package manager found (checked: {names})")
