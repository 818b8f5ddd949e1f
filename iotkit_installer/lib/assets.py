from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..errors import RequiredDirectoryMissing

logger = logging.getLogger(__name__)


def copy_tree(src: Path, dst: Path, *, dry_run: bool = False) -> bool:
    """Copy src into a new directory dst. An existing dst is left alone.

    Returns True when something was copied.
    """

    if not src.is_dir():
        raise RequiredDirectoryMissing(f"Template directory missing or unreadable: {src}")

    if dst.exists():
        logger.info("%s already exists, skipping", dst)
        return False

    if dry_run:
        logger.info("Would copy tree %s -> %s", src, dst)
        return True

    dst.mkdir(parents=True)
    for item in sorted(src.rglob("*")):
        rel = item.relative_to(src)
        out = dst / rel
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)
    logger.info("Copied %s -> %s", src, dst)
    return True
