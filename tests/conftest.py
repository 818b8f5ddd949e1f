from __future__ import annotations

import shutil
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from iotkit_installer.context import InstallCtx
from iotkit_installer.lib.command import CmdResult
from iotkit_installer.lib.env import Environment
from iotkit_installer.lib.hwdetect import RASPBERRY_PI
from iotkit_installer.lib.platforms import DebianPlatform
from iotkit_installer.options import InstallOptions, Option

# Commands a bundle puts on PATH once installed.
PROVIDES = {
    "system_deps": ["git", "curl", "gcc", "make"],
    "web_server": ["nginx"],
    "mqtt_broker": ["mosquitto"],
    "convenience": ["tmux", "mc", "htop", "jq"],
}


class RecordingPlatform(DebianPlatform):
    """Debian profile that records every command and fakes its effect on disk."""

    def __init__(self, env: Environment, *, commands: Sequence[str] = (), board: Optional[str] = None) -> None:
        self.commands = set(commands)
        super().__init__(env, which=self._which, board=board)
        self.calls: List[List[str]] = []
        self.bundles: List[str] = []
        self.groups = {"tester"}
        self.nvm_version = ""
        self.node_version = ""
        self.system_node = ""
        self.python_dev = False
        self.alias = ""
        self.remediation_works = True
        self.verify_rc = 0

    def _which(self, name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if name in self.commands else None

    def preinstall_toolchain(self, node: str = "v20.11.1") -> None:
        nvm_sh = self.env.nvm_dir / "nvm.sh"
        nvm_sh.parent.mkdir(parents=True, exist_ok=True)
        nvm_sh.write_text("# nvm\n", encoding="utf-8")
        self.nvm_version = "0.40.1"
        self.node_version = node
        self.alias = node

    def install_bundle(self, name: str) -> None:
        super().install_bundle(name)
        self.bundles.append(name)
        self.commands.update(PROVIDES.get(name, ()))
        if name == "system_deps":
            self.python_dev = True

    def run(self, argv, *, check=True, env=None, cwd=None) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        if self.dry_run:
            return CmdResult(argv=argv, returncode=0, stdout="", stderr="")
        stdout, rc = self._simulate(argv, env or {})
        return CmdResult(argv=argv, returncode=rc, stdout=stdout, stderr="")

    def _simulate(self, argv: List[str], env: Dict[str, str]):
        if argv[:2] == ["bash", "-c"]:
            return self._simulate_shell(argv[2])
        if argv[1:2] == ["-c"]:
            return "", 0 if self.python_dev else 1
        if argv[1:3] == ["-m", "venv"]:
            Path(argv[3], "bin").mkdir(parents=True)
        elif argv[:2] == ["rm", "-rf"]:
            shutil.rmtree(argv[2], ignore_errors=True)
        elif argv[:2] == ["git", "clone"]:
            Path(argv[-1]).mkdir(parents=True)
        elif "pkg" in argv and "--platform" in argv:
            Path(env["PLATFORMIO_CORE_DIR"], "platforms", argv[-1]).mkdir(parents=True)
        elif argv[:2] == ["id", "-nG"]:
            return " ".join(sorted(self.groups)), 0
        elif "usermod" in argv:
            self.groups.add(argv[-2])
        elif "pytest" in argv:
            return "", self.verify_rc
        return "", 0

    def _simulate_shell(self, script: str):
        env = self.env
        if "curl -fsSL" in script:
            (env.nvm_dir / "nvm.sh").write_text("# nvm\n", encoding="utf-8")
            self.nvm_version = "0.40.1"
        elif script.endswith("nvm --version"):
            return self.nvm_version, 0
        elif script.endswith("node --version"):
            return self.system_node, 0 if self.system_node else 127
        elif script.endswith("nvm version default"):
            return (self.node_version, 0) if self.node_version else ("N/A", 3)
        elif "nvm install " in script:
            if self.remediation_works:
                self.node_version = "v" + script.split("nvm install ")[1].split()[0]
        elif "&& nvm version " in script:
            return (self.alias, 0) if self.alias else ("N/A", 3)
        elif "&& nvm alias " in script:
            self.alias = "v" + script.split()[-1]
        elif script.endswith("npm init -y"):
            (env.node_dir / "package.json").write_text("{}\n", encoding="utf-8")
        elif "npm install --save " in script:
            spec = script.split("npm install --save ")[1].strip()
            name = spec.partition("@")[0]
            (env.node_dir / "node_modules" / name).mkdir(parents=True)
        return "", 0


def is_read_only(argv: List[str]) -> bool:
    """Version and group checks, the index refresh and the always-run docs/verification calls."""

    if argv[:2] == ["bash", "-c"]:
        script = argv[2]
        return script.endswith(("nvm --version", "node --version")) or "&& nvm version " in script
    if argv[1:2] == ["-c"] or argv[:2] == ["id", "-nG"]:
        return True
    if "mkdocs" in argv[0] or "pytest" in argv:
        return True
    return argv[-2:] == ["apt-get", "update"]


def make_options(**selected: bool) -> InstallOptions:
    opts = InstallOptions(**{o.value: False for o in Option})
    for name, value in selected.items():
        opts = opts.with_value(Option(name), value)
    return opts


@pytest.fixture
def env(tmp_path: Path) -> Environment:
    root = tmp_path / "src"
    (root / "bin").mkdir(parents=True)
    tool = root / "bin" / "iot"
    tool.write_text("#!/bin/sh\necho iot\n", encoding="utf-8")
    tool.chmod(0o644)

    (root / "doc").mkdir()
    (root / "doc" / "mkdocs.yml").write_text("site_name: iotkit\n", encoding="utf-8")

    template = root / "templates" / "project"
    (template / "src").mkdir(parents=True)
    (template / "platformio.ini").write_text("[env:node]\nplatform = espressif8266\n", encoding="utf-8")
    (template / "src" / "main.cpp").write_text("// demo\n", encoding="utf-8")

    (root / "tests" / "installation").mkdir(parents=True)

    home = tmp_path / "home"
    home.mkdir()
    return Environment(
        active=True,
        root=root,
        local=tmp_path / "local",
        home=home,
        user="tester",
        variables={"PATH": "/usr/bin:/bin", "HOME": str(home)},
    )


@pytest.fixture
def platform(env: Environment) -> RecordingPlatform:
    return RecordingPlatform(env)


@pytest.fixture
def pi_platform(env: Environment) -> RecordingPlatform:
    return RecordingPlatform(env, board=RASPBERRY_PI)


@pytest.fixture
def make_ctx(env: Environment, platform: RecordingPlatform):
    def _make(plat: Optional[RecordingPlatform] = None, **selected: bool) -> InstallCtx:
        return InstallCtx(env=env, platform=plat or platform, options=make_options(**selected))

    return _make
