from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import ConfigPatchError

logger = logging.getLogger(__name__)


def has_sentinel(path: Path, sentinel: str) -> bool:
    if not path.exists():
        return False
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise ConfigPatchError(f"Cannot read {path}: {e}") from e
    return any(ln.strip() == sentinel.strip() for ln in lines)


def append_block(path: Path, sentinel: str, block: str, *, dry_run: bool = False) -> bool:
    """Append sentinel + block to path unless the sentinel line is already there.

    Returns True when the file was changed.
    """

    if not sentinel.strip():
        raise ConfigPatchError(f"Empty sentinel for {path}")

    if has_sentinel(path, sentinel):
        logger.info("%s already patched (%s), skipping", path, sentinel)
        return False

    if dry_run:
        logger.info("Would append block %s to %s", sentinel, path)
        return True

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        existing = path.read_text(encoding="utf-8") if path.exists() else ""
        prefix = "" if not existing or existing.endswith("\n") else "\n"
        body = block if block.endswith("\n") else block + "\n"
        with path.open("a", encoding="utf-8") as fh:
            fh.write(f"{prefix}{sentinel}\n{body}")
    except OSError as e:
        raise ConfigPatchError(f"Cannot patch {path}: {e}") from e

    logger.info("Patched %s (%s)", path, sentinel)
    return True


def apply_component_patch(local: Path, cfg: Dict[str, Any], *, dry_run: bool = False) -> bool:
    """Guarded append driven by a components.yaml entry (config_file, sentinel, block)."""

    try:
        rel, sentinel, block = cfg["config_file"], cfg["sentinel"], cfg["block"]
    except KeyError as e:
        raise ConfigPatchError(f"components.yaml entry lacks {e.args[0]}") from e
    return append_block(local / str(rel), str(sentinel), str(block), dry_run=dry_run)
