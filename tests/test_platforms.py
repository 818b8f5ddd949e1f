from __future__ import annotations

import subprocess
from dataclasses import replace

import pytest

from iotkit_installer.errors import CommandFailed, UnsupportedPlatform
from iotkit_installer.lib import command
from iotkit_installer.lib.hwdetect import RASPBERRY_PI, detect_board
from iotkit_installer.lib.manifests import load_core_manifest
from iotkit_installer.lib.platforms import (
    ArchPlatform,
    DebianPlatform,
    MacPlatform,
    TermuxPlatform,
    detect_platform,
)


def _which(*present):
    return lambda name: f"/usr/bin/{name}" if name in present else None


@pytest.fixture
def termux_env(env):
    return replace(env, termux_prefix="/data/data/com.termux/files/usr")


def test_termux_wins_over_debian(termux_env):
    plat = detect_platform(termux_env, which=_which("pkg", "apt-get"), board="none")
    assert isinstance(plat, TermuxPlatform)


def test_pkg_without_termux_prefix_is_not_termux(env):
    plat = detect_platform(env, which=_which("pkg", "apt-get"), board="none")
    assert isinstance(plat, DebianPlatform)


def test_arch_detected_by_pacman(env):
    plat = detect_platform(env, which=_which("pacman", "brew"), board="none")
    assert isinstance(plat, ArchPlatform)


def test_mac_skips_board_detection(env, monkeypatch):
    def _boom(*a, **kw):
        raise AssertionError("board detected on macos")

    monkeypatch.setattr("iotkit_installer.lib.platforms.detect_board", _boom)
    plat = detect_platform(env, which=_which("brew"))
    assert isinstance(plat, MacPlatform)
    assert plat.board is None


def test_no_package_manager_is_unsupported(env):
    with pytest.raises(UnsupportedPlatform):
        detect_platform(env, which=_which())


def test_detection_passes_dry_run(env):
    plat = detect_platform(env, which=_which("apt-get"), board="none", dry_run=True)
    assert plat.dry_run is True


def test_sudo_prefix_unless_root(env):
    plat = DebianPlatform(env, which=_which())
    assert plat.privileged(["apt-get", "update"]) == ["sudo", "apt-get", "update"]

    root_plat = DebianPlatform(replace(env, is_root_user=True), which=_which())
    assert root_plat.privileged(["apt-get", "update"]) == ["apt-get", "update"]


def test_termux_and_mac_never_use_sudo(termux_env):
    assert TermuxPlatform(termux_env, which=_which()).privileged(["pkg", "update", "-y"])[0] == "pkg"
    assert MacPlatform(termux_env, which=_which()).privileged(["brew", "update"])[0] == "brew"


def test_bundles_come_from_profiles(env):
    debian = DebianPlatform(env, which=_which())
    assert "nginx" in debian.bundle("web_server")
    assert debian.serial_group == "dialout"
    assert ArchPlatform(env, which=_which()).serial_group == "uucp"
    assert MacPlatform(env, which=_which()).serial_group is None


def test_termux_wraps_every_command(termux_env, monkeypatch):
    seen = {}

    def fake_run(argv, **kwargs):
        seen.update(kwargs)
        return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")

    monkeypatch.setattr(command.subprocess, "run", fake_run)
    env = replace(termux_env, variables={"PATH": "/bin", "LD_PRELOAD": "libtermux-exec.so"})
    plat = TermuxPlatform(env, which=_which("pkg"))

    plat.run(["pkg", "install", "-y", "git"], env={"EXTRA": "1"})

    assert seen["env"]["LD_LIBRARY_PATH"] == "/data/data/com.termux/files/usr/lib"
    assert "LD_PRELOAD" not in seen["env"]
    assert seen["env"]["EXTRA"] == "1"
    assert seen["env"]["PATH"] == "/bin"


def test_failed_command_raises(env, monkeypatch):
    monkeypatch.setattr(
        command.subprocess,
        "run",
        lambda argv, **kw: subprocess.CompletedProcess(argv, 2, stdout="", stderr="boom"),
    )
    plat = DebianPlatform(env, which=_which())

    with pytest.raises(CommandFailed) as exc:
        plat.refresh_indexes()
    assert exc.value.returncode == 2

    assert plat.run(["false"], check=False).returncode == 2


def test_dry_run_executes_nothing(env, monkeypatch):
    def _boom(*a, **kw):
        raise AssertionError("executed in dry-run")

    monkeypatch.setattr(command.subprocess, "run", _boom)
    plat = DebianPlatform(env, which=_which(), dry_run=True)
    plat.install_bundle("web_server")
    assert plat.run(["id", "-nG", "tester"]).returncode == 0


@pytest.mark.parametrize(
    "model,expected",
    [
        ("Raspberry Pi 4 Model B Rev 1.4\x00", RASPBERRY_PI),
        ("Raspberry Pi Zero 2 W Rev 1.0", RASPBERRY_PI),
        ("Radxa ROCK 5B", None),
    ],
)
def test_detect_board_from_device_tree(tmp_path, model, expected):
    path = tmp_path / "model"
    path.write_text(model, encoding="utf-8")
    assert detect_board([tmp_path / "missing", path]) == expected


def test_detect_board_without_device_tree(tmp_path):
    assert detect_board([tmp_path / "missing"]) is None


def test_manifests_are_private_copies(env):
    core = load_core_manifest()
    core["build_platforms"].clear()
    core["toolchain"]["runtime"]["maximum"] = "0.0.1"

    fresh = load_core_manifest()
    assert fresh["build_platforms"]
    assert fresh["toolchain"]["runtime"]["maximum"] != "0.0.1"

    first = DebianPlatform(env, which=_which(), board="none")
    second = DebianPlatform(env, which=_which(), board="none")
    first.manifest["bundles"]["system_deps"] = []
    assert second.manifest["bundles"]["system_deps"]


def test_commands_take_no_stdin_text(env, monkeypatch):
    seen = {}

    def _run(argv, **kw):
        seen.update(kw)
        return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")

    monkeypatch.setattr(command.subprocess, "run", _run)
    plat = DebianPlatform(env, which=_which())

    plat.run(["true"])
    assert "input" not in seen
    with pytest.raises(TypeError):
        plat.run(["true"], input_text="y\n")
