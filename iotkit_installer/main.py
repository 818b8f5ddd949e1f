from __future__ import annotations

import argparse
import logging
import shutil
import sys
from typing import Any, Dict, Mapping, Optional

from .context import InstallCtx
from .errors import EnvironmentNotActive, InstallerError
from .lib.env import Environment
from .lib.platforms import Platform, Which, detect_platform
from .logging_utils import configure_logging
from .options import Option, clean_runtime, resolve
from .pipeline import PipelineResult, run_pipeline
from .prompt import Ask, ask
from .steps import (
    BuildDocsStep,
    CloudcmdStep,
    ConvenienceToolsStep,
    CoreEnvStep,
    FillCacheStep,
    FixBinPermissionsStep,
    MosquittoStep,
    NodeRedStep,
    PersistStateStep,
    PiWifiFirmwareStep,
    PredownloadPlatformsStep,
    ProjectTemplateStep,
    RefreshIndexesStep,
    SerialPermissionsStep,
    SystemDepsStep,
    UpgradeSystemStep,
    VerifyInstallStep,
    WebServerStep,
)

logger = logging.getLogger(__name__)


FLAG_HELP: Dict[Option, str] = {
    Option.SYSTEM_DEPS: "install system packages and the node toolchain",
    Option.CORE: "create/update the core environment",
    Option.CLOUDCMD: "install the cloudcmd web file manager",
    Option.NODE_RED: "install Node-RED",
    Option.WEB_SERVER: "install and configure nginx",
    Option.MOSQUITTO: "install and configure the mosquitto MQTT broker",
    Option.CONVENIENCE: "install convenience tools",
    Option.TEMPLATE: "copy the example project template",
    Option.PRE_DOWNLOAD: "pre-download the esp8266/esp32 build platforms",
    Option.FILL_CACHE: "pre-fill the build cache (slow)",
    Option.FIX_SERIAL: "grant serial port access to the current user",
    Option.FIX_PI_WIFI: "apply the Raspberry Pi wifi access-point firmware fix",
    Option.UPGRADE: "upgrade system packages first",
    Option.CLEAN: "remove the runtime and cached downloads first (asks for confirmation)",
}


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(
        prog="iotkit-install",
        add_help=False,
        description="Install the IoT development environment. Without flags, asks about every component.",
    )
    for opt in Option:
        p.add_argument(opt.flag, dest=opt.value, action="store_true", help=FLAG_HELP[opt])
    p.add_argument("--default", action="store_true", help="install the default bundle without asking")
    p.add_argument("--dry-run", action="store_true", help="log commands without running them")
    return p


def build_steps():
    return [
        RefreshIndexesStep(),
        UpgradeSystemStep(),
        SystemDepsStep(),
        CoreEnvStep(),
        CloudcmdStep(),
        NodeRedStep(),
        WebServerStep(),
        MosquittoStep(),
        ConvenienceToolsStep(),
        ProjectTemplateStep(),
        PiWifiFirmwareStep(),
        FixBinPermissionsStep(),
        PredownloadPlatformsStep(),
        FillCacheStep(),
        BuildDocsStep(),
        SerialPermissionsStep(),
        PersistStateStep(),
        VerifyInstallStep(),
    ]


def run(
    args: Any,
    *,
    env: Environment,
    ask_fn: Optional[Ask] = None,
    which: Optional[Which] = None,
    platform: Optional[Platform] = None,
) -> PipelineResult:
    """Detect, resolve, then run every step in order."""

    dry_run = bool(getattr(args, "dry_run", False))
    configure_logging(log_path=str(env.log_path), to_file=not dry_run)

    try:
        target = platform or detect_platform(env, which=which or shutil.which, dry_run=dry_run)

        options = resolve(
            args,
            runtime_present=env.runtime_present,
            platform=target,
            ask=ask_fn or ask,
            clean=lambda: clean_runtime(env, target),
        )
        ctx = InstallCtx(env=env, platform=target, options=options)
        result = run_pipeline(ctx=ctx, steps=build_steps())
    except InstallerError:
        raise
    except Exception:
        logger.exception("Installer failed")
        raise

    logger.info(
        "Installation finished (ran=%d, unchanged=%d, skipped=%d)",
        len(result.ran_steps),
        len(result.unchanged_steps),
        len(result.skipped_steps),
    )
    return result


def main(argv: Optional[list[str]] = None, *, environ: Optional[Mapping[str, str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    env = Environment.from_environ(environ)
    try:
        env.require_active()
    except EnvironmentNotActive as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser = build_parser()
    if any("help" in a for a in argv):
        parser.print_help()
        return 0

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    try:
        run(args, env=env)
    except InstallerError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
