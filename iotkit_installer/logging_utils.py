from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .lib.env import LOG_FILENAME

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

_GUARD = "_iotkit_log_path"


def _open_log(log_path: Path) -> tuple[logging.FileHandler, Path]:
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path, encoding="utf-8"), log_path
    except OSError:
        fallback = Path.cwd() / LOG_FILENAME
        return logging.FileHandler(fallback, encoding="utf-8"), fallback


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
    to_file: bool = True,
) -> Optional[str]:
    """Send every record to the install log and INFO+ to the console.

    The file handler runs at DEBUG so captured command output ends up in the
    log without cluttering the terminal. An unwritable local data directory
    falls back to ./iotkit-install.log.

    With to_file=False (dry-run) nothing is created on disk and None is
    returned.

    Only the first call configures anything; it returns the file in use.
    """

    root = logging.getLogger()
    if hasattr(root, _GUARD):
        return getattr(root, _GUARD)

    root.setLevel(logging.DEBUG)

    if also_console:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root.addHandler(console)

    if not to_file:
        setattr(root, _GUARD, None)
        return None

    file_handler, chosen = _open_log(Path(log_path))
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root.addHandler(file_handler)

    setattr(root, _GUARD, str(chosen))
    if chosen != Path(log_path):
        logging.getLogger(__name__).warning("Cannot write %s, logging to %s", log_path, chosen)
    logging.getLogger(__name__).debug("Install log: %s", chosen)
    return str(chosen)
