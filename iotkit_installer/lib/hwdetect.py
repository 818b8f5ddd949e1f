from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

RASPBERRY_PI = "raspberry-pi"

_DT_MODEL_PATHS = (
    Path("/sys/firmware/devicetree/base/model"),
    Path("/proc/device-tree/model"),
)


def _read_text(path: Path) -> Optional[str]:
    try:
        txt = path.read_text(encoding="utf-8", errors="ignore").strip("\x00\n ")
        return txt or None
    except OSError:
        return None


def read_device_tree_model(paths=_DT_MODEL_PATHS) -> Optional[str]:
    for p in paths:
        model = _read_text(p)
        if model:
            return model
    return None


def detect_board(paths=_DT_MODEL_PATHS) -> Optional[str]:
    """Identify single-board computers from the device-tree model string."""

    model = read_device_tree_model(paths)
    if model and "raspberry pi" in model.lower():
        logger.info("Board: %s (%s)", RASPBERRY_PI, model)
        return RASPBERRY_PI
    return None
