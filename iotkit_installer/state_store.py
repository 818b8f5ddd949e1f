from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from .options import InstallOptions, Option

logger = logging.getLogger(__name__)

# Keys of the persisted record, in file order.
PERSISTED_OPTIONS: Tuple[Option, ...] = (
    Option.CORE,
    Option.CLOUDCMD,
    Option.NODE_RED,
    Option.WEB_SERVER,
    Option.MOSQUITTO,
    Option.FIX_SERIAL,
    Option.FIX_PI_WIFI,
    Option.CONVENIENCE,
    Option.TEMPLATE,
    Option.FILL_CACHE,
)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def options_record(options: InstallOptions) -> Dict[str, bool]:
    if not options.is_resolved():
        unset = ", ".join(o.value for o in options.unset())
        raise ValueError(f"Refusing to persist unresolved options: {unset}")
    return {opt.value: bool(options.get(opt)) for opt in PERSISTED_OPTIONS}


def save_options(path: str | Path, options: InstallOptions, *, dry_run: bool = False) -> Dict[str, bool]:
    """Write the resolved options, replacing any earlier record."""

    p = Path(path)
    record = options_record(options)
    if dry_run:
        logger.info("Would write installation options to %s", p)
        return record

    p.parent.mkdir(parents=True, exist_ok=True)
    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(record, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(record, indent=2) + "\n", encoding="utf-8")
    logger.info("Installation options written to %s", p)
    return record


def load_state(path: str | Path) -> Dict[str, Any]:
    """Read a record written by save_options (used by the verification suite)."""

    p = Path(path)
    if not p.exists():
        return {}

    text = p.read_text(encoding="utf-8")
    if _detect_format(p) in {"yaml", "yml"}:
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data)}")
    return data
