"""Node.js toolchain provisioning through nvm.

Two version gates live here:
- the version manager (nvm) only has a floor; missing counts as 0.0.0 and
  triggers an install of the pinned minimum.
- the runtime (node) must sit inside [minimum, maximum]; one remediation
  (install the pinned maximum) and one re-check are allowed before giving up.
"""

from __future__ import annotations

import logging
import shlex
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..errors import VersionCheckFailed
from .command import CmdResult
from .versions import NOT_INSTALLED, VersionSpec, VersionStatus, check, compare_versions

if TYPE_CHECKING:
    from ..context import InstallCtx

logger = logging.getLogger(__name__)


def _toolchain_cfg(ctx: "InstallCtx", key: str) -> Dict[str, Any]:
    cfg = (ctx.core.get("toolchain") or {}).get(key) or {}
    if not cfg.get("minimum"):
        raise ValueError(f"manifests/core.yaml: toolchain.{key}.minimum missing")
    return cfg


def nvm_shell(ctx: "InstallCtx", script: str, *, check: bool = True, cwd: Optional[str] = None) -> CmdResult:
    nvm_sh = ctx.env.nvm_dir / "nvm.sh"
    return ctx.run(
        ["bash", "-c", f". {shlex.quote(str(nvm_sh))} && {script}"],
        check=check,
        env={"NVM_DIR": str(ctx.env.nvm_dir)},
        cwd=cwd,
    )


def probe_version_manager(ctx: "InstallCtx") -> str:
    if not (ctx.env.nvm_dir / "nvm.sh").exists():
        return ""
    r = nvm_shell(ctx, "nvm --version", check=False)
    return r.stdout.strip() if r.returncode == 0 else ""


def probe_runtime(ctx: "InstallCtx") -> str:
    """Version of the nvm-managed default node, "" when nvm has none.

    A node found on PATH outside nvm does not count: `nvm exec` cannot use it.
    """

    r = nvm_shell(ctx, "nvm version default", check=False)
    version = r.stdout.strip()
    if r.returncode != 0 or version in ("", "N/A", "system"):
        return ""
    return version


def install_version_manager(ctx: "InstallCtx", version: str) -> None:
    cfg = _toolchain_cfg(ctx, "version_manager")
    url = str(cfg["install_url"]).format(version=version)
    if not ctx.dry_run:
        ctx.env.nvm_dir.mkdir(parents=True, exist_ok=True)
    ctx.run(
        ["bash", "-c", f"curl -fsSL {shlex.quote(url)} | bash"],
        env={"NVM_DIR": str(ctx.env.nvm_dir), "PROFILE": "/dev/null"},
    )


def ensure_version_manager(ctx: "InstallCtx") -> bool:
    """Returns True when nvm had to be installed."""

    cfg = _toolchain_cfg(ctx, "version_manager")
    spec = VersionSpec(minimum=str(cfg["minimum"]), probe=lambda: probe_version_manager(ctx))

    installed = spec.probe() or NOT_INSTALLED
    if check(installed, spec) is VersionStatus.OK:
        logger.info("nvm %s satisfies >= %s", installed, spec.minimum)
        return False

    logger.info("nvm %s below %s, installing pinned version", installed, spec.minimum)
    install_version_manager(ctx, spec.minimum)
    if ctx.dry_run:
        return True

    installed = spec.probe() or NOT_INSTALLED
    if check(installed, spec) is not VersionStatus.OK:
        raise VersionCheckFailed(f"nvm {installed} still below required {spec.minimum} after install")
    return True


def ensure_runtime(ctx: "InstallCtx") -> bool:
    """Returns True when node was installed or the alias moved."""

    cfg = _toolchain_cfg(ctx, "runtime")
    spec = VersionSpec(
        minimum=str(cfg["minimum"]),
        maximum=str(cfg["maximum"]),
        probe=lambda: probe_runtime(ctx),
    )

    installed = spec.probe() or NOT_INSTALLED
    status = check(installed, spec)
    remediated = False
    if status is not VersionStatus.OK:
        logger.warning(
            "node %s is %s (allowed %s..%s), installing %s",
            installed,
            status.value,
            spec.minimum,
            spec.maximum,
            spec.maximum,
        )
        nvm_shell(ctx, f"nvm install {spec.maximum} && nvm alias default {spec.maximum}")
        remediated = True
        if ctx.dry_run:
            installed = str(spec.maximum)
        else:
            installed = spec.probe() or NOT_INSTALLED
            status = check(installed, spec)
            if status is not VersionStatus.OK:
                raise VersionCheckFailed(
                    f"node {installed} is {status.value} (allowed {spec.minimum}..{spec.maximum}) after remediation"
                )

    rebound = bind_alias(ctx, runtime_alias(ctx), installed)
    return remediated or rebound


def bind_alias(ctx: "InstallCtx", alias: str, version: str) -> bool:
    current = nvm_shell(ctx, f"nvm version {shlex.quote(alias)}", check=False)
    if current.returncode == 0 and compare_versions(current.stdout.strip(), version) == 0:
        return False
    nvm_shell(ctx, f"nvm alias {shlex.quote(alias)} {shlex.quote(version.lstrip('vV'))}")
    logger.info("Bound node %s to alias %s", version, alias)
    return True


def runtime_alias(ctx: "InstallCtx") -> str:
    return str(_toolchain_cfg(ctx, "runtime").get("alias") or "iotkit")


def npm(ctx: "InstallCtx", *args: str) -> CmdResult:
    quoted = " ".join(shlex.quote(a) for a in args)
    return nvm_shell(
        ctx,
        f"nvm exec --silent {shlex.quote(runtime_alias(ctx))} npm {quoted}",
        cwd=str(ctx.env.node_dir),
    )


def npm_package_name(spec: str) -> str:
    """'node-red@4.0.8' -> 'node-red', '@scope/pkg@1' -> '@scope/pkg'."""
    if spec.startswith("@"):
        return "@" + spec[1:].partition("@")[0]
    return spec.partition("@")[0]


def ensure_node_workspace(ctx: "InstallCtx") -> bool:
    """Toolchain checks plus the npm project that holds the web components."""

    changed = ensure_version_manager(ctx)
    changed = ensure_runtime(ctx) or changed

    if (ctx.env.node_dir / "package.json").exists():
        return changed
    if not ctx.dry_run:
        ctx.env.node_dir.mkdir(parents=True, exist_ok=True)
    npm(ctx, "init", "-y")
    logger.info("Created node workspace %s", ctx.env.node_dir)
    return True


def ensure_npm_package(ctx: "InstallCtx", spec: str) -> bool:
    name = npm_package_name(spec)
    if (ctx.env.node_dir / "node_modules" / name).exists():
        logger.info("npm package %s already installed, skipping", name)
        return False
    npm(ctx, "install", "--save", spec)
    return True
