from __future__ import annotations

import os
import pwd
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..errors import EnvironmentNotActive

ACTIVE_MARKER = "IOTKIT_ACTIVE"
ACTIVE_SENTINEL = "yes"

STATE_FILENAME = "installation_options.json"
LOG_FILENAME = "iotkit-install.log"


def _account_name(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except (KeyError, OverflowError):
        return ""


@dataclass(frozen=True)
class Environment:
    """Everything the installer needs from the process environment.

    Built once by from_environ(); components never read os.environ themselves.
    """

    active: bool
    root: Path
    local: Path
    home: Path
    user: str
    is_root_user: bool = False
    termux_prefix: Optional[str] = None
    variables: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        uid: Optional[int] = None,
    ) -> "Environment":
        src = dict(os.environ if environ is None else environ)
        home = Path(src.get("HOME") or Path.home())
        root = Path(src.get("IOTKIT_ROOT") or Path.cwd())
        local = Path(src.get("IOTKIT_LOCAL") or home / ".local" / "share" / "iotkit")

        prefix = src.get("PREFIX") or ""
        termux_prefix = prefix if "com.termux" in prefix else None

        if uid is None:
            uid = os.getuid() if hasattr(os, "getuid") else -1

        return cls(
            active=src.get(ACTIVE_MARKER) == ACTIVE_SENTINEL,
            root=root,
            local=local,
            home=home,
            user=src.get("USER") or src.get("LOGNAME") or _account_name(uid),
            is_root_user=uid == 0,
            termux_prefix=termux_prefix,
            variables=src,
        )

    def require_active(self) -> None:
        if not self.active:
            raise EnvironmentNotActive(
                f"{ACTIVE_MARKER} is not '{ACTIVE_SENTINEL}'. Activate the iotkit environment first."
            )

    @property
    def venv(self) -> Path:
        return self.local / "venv"

    @property
    def venv_bin(self) -> Path:
        return self.venv / "bin"

    @property
    def external_dir(self) -> Path:
        # Cloned helper projects and other cached downloads.
        return self.local / "external"

    @property
    def node_dir(self) -> Path:
        return self.local / "nodejs"

    @property
    def nvm_dir(self) -> Path:
        return self.local / "nvm"

    @property
    def pio_home(self) -> Path:
        return self.local / "platformio"

    @property
    def cache_dir(self) -> Path:
        return self.local / "build_cache"

    @property
    def bin_dir(self) -> Path:
        return self.root / "bin"

    @property
    def template_src(self) -> Path:
        return self.root / "templates" / "project"

    @property
    def project_dir(self) -> Path:
        return self.home / "iot-systems" / "demo01"

    @property
    def state_path(self) -> Path:
        return self.local / STATE_FILENAME

    @property
    def log_path(self) -> Path:
        return self.local / "logs" / LOG_FILENAME

    @property
    def runtime_present(self) -> bool:
        return self.venv.is_dir()
