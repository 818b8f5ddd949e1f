"""Turn CLI flags, wizard answers or the default bundle into InstallOptions."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from .errors import CleanDeclined
from .prompt import Ask

if TYPE_CHECKING:
    from .lib.env import Environment
    from .lib.platforms import Platform

logger = logging.getLogger(__name__)


class Option(str, Enum):
    SYSTEM_DEPS = "system_deps"
    CORE = "core"
    CLOUDCMD = "cloudcmd"
    NODE_RED = "node_red"
    WEB_SERVER = "web_server"
    MOSQUITTO = "mosquitto"
    CONVENIENCE = "convenience"
    TEMPLATE = "template"
    PRE_DOWNLOAD = "pre_download"
    FILL_CACHE = "fill_cache"
    FIX_SERIAL = "fix_serial"
    FIX_PI_WIFI = "fix_pi_wifi"
    UPGRADE = "upgrade"
    CLEAN = "clean"

    @property
    def flag(self) -> str:
        return "--" + self.value.replace("_", "-")


@dataclass(frozen=True)
class InstallOptions:
    """One field per Option. None means "not decided yet"."""

    system_deps: Optional[bool] = None
    core: Optional[bool] = None
    cloudcmd: Optional[bool] = None
    node_red: Optional[bool] = None
    web_server: Optional[bool] = None
    mosquitto: Optional[bool] = None
    convenience: Optional[bool] = None
    template: Optional[bool] = None
    pre_download: Optional[bool] = None
    fill_cache: Optional[bool] = None
    fix_serial: Optional[bool] = None
    fix_pi_wifi: Optional[bool] = None
    upgrade: Optional[bool] = None
    clean: Optional[bool] = None

    def get(self, opt: Option) -> Optional[bool]:
        return getattr(self, opt.value)

    def __getitem__(self, opt: Option) -> bool:
        return bool(self.get(opt))

    def with_value(self, opt: Option, value: Optional[bool]) -> "InstallOptions":
        return replace(self, **{opt.value: value})

    def unset(self) -> List[Option]:
        return [o for o in Option if self.get(o) is None]

    def is_resolved(self) -> bool:
        return not self.unset()

    def as_dict(self) -> Dict[str, Optional[bool]]:
        return asdict(self)


# (option, question, default) in the order the wizard asks them.
QUESTIONS: Tuple[Tuple[Option, str, bool], ...] = (
    (Option.SYSTEM_DEPS, "Install system dependencies and the node toolchain?", True),
    (Option.CORE, "Create or update the core environment?", True),
    (Option.CLOUDCMD, "Install the cloudcmd web file manager?", True),
    (Option.NODE_RED, "Install Node-RED?", True),
    (Option.WEB_SERVER, "Install and configure the nginx web server?", True),
    (Option.MOSQUITTO, "Install and configure the mosquitto MQTT broker?", True),
    (Option.CONVENIENCE, "Install convenience tools (tmux, mc, htop, jq)?", True),
    (Option.TEMPLATE, "Copy the example project template?", True),
    (Option.PRE_DOWNLOAD, "Pre-download the esp8266 and esp32 build platforms?", True),
    (Option.FILL_CACHE, "Pre-fill the build cache (this can take a long time)?", False),
    (Option.FIX_SERIAL, "Grant this user access to serial ports?", True),
    (Option.FIX_PI_WIFI, "Apply the Raspberry Pi wifi access-point firmware fix?", True),
    (Option.UPGRADE, "Upgrade all system packages first?", True),
)

CLEAN_QUESTION = "Remove the local runtime and all cached downloads?"


def supplied_flags(args: Any) -> List[Option]:
    """Options switched on explicitly, from an argparse namespace."""
    return [o for o in Option if getattr(args, o.value, False)]


def default_bundle(platform: "Platform") -> Dict[Option, bool]:
    bundle = {o: True for o in Option if o is not Option.CLEAN}
    bundle[Option.FILL_CACHE] = False
    bundle[Option.FIX_PI_WIFI] = platform.is_pi
    bundle[Option.UPGRADE] = True
    return bundle


def _wizard(opts: InstallOptions, platform: "Platform", ask: Ask) -> InstallOptions:
    for opt, question, default in QUESTIONS:
        if opts.get(opt) is not None:
            continue
        if opt is Option.FIX_PI_WIFI and not platform.is_pi:
            opts = opts.with_value(opt, False)
            continue
        if opt is Option.FIX_SERIAL and not platform.supports_serial:
            opts = opts.with_value(opt, False)
            continue
        opts = opts.with_value(opt, ask(question, default))
    return opts


def resolve(
    args: Any,
    *,
    runtime_present: bool,
    platform: "Platform",
    ask: Ask,
    clean: Callable[[], None],
) -> InstallOptions:
    """Resolve every option to True/False.

    Precedence:
    - no runtime yet: core is forced on before anything else.
    - --clean asks for confirmation (default no) and cleans; with no other
      flag it then behaves like a bare invocation.
    - --default selects the default bundle.
    - zero flags: the wizard asks about every undecided option.
    - any flag: only the supplied flags are on, nothing is asked.
    """

    opts = InstallOptions()
    if not runtime_present:
        opts = opts.with_value(Option.CORE, True)

    flags = supplied_flags(args)

    if Option.CLEAN in flags:
        if not ask(CLEAN_QUESTION, False):
            raise CleanDeclined("Clean not confirmed, nothing was removed")
        clean()
        opts = opts.with_value(Option.CLEAN, True)
        flags = [o for o in flags if o is not Option.CLEAN]
    else:
        opts = opts.with_value(Option.CLEAN, False)

    if getattr(args, "default", False):
        logger.info("Using the default bundle")
        for opt, value in default_bundle(platform).items():
            opts = opts.with_value(opt, value)
        for opt in flags:
            opts = opts.with_value(opt, True)
    elif not flags:
        opts = _wizard(opts, platform, ask)
    else:
        for opt in flags:
            opts = opts.with_value(opt, True)

    for opt in opts.unset():
        opts = opts.with_value(opt, False)

    logger.info(
        "Resolved options: %s",
        ", ".join(f"{k}={'yes' if v else 'no'}" for k, v in opts.as_dict().items()),
    )
    return opts


def clean_runtime(env: "Environment", platform: "Platform") -> None:
    """Remove the runtime and cached external downloads."""

    for p in (env.venv, env.external_dir):
        if p.exists():
            logger.info("Removing %s", p)
            platform.run(["rm", "-rf", str(p)])
        else:
            logger.info("Nothing to remove at %s", p)
