from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from ..errors import CommandFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def build_env(
    base: Mapping[str, str],
    *,
    env: Mapping[str, str] | None = None,
    unset_env: Iterable[str] = (),
) -> dict[str, str]:
    merged = dict(base, **(env or {}))
    for name in unset_env:
        merged.pop(name, None)
    return merged


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    base_env: Mapping[str, str] | None = None,
    env: Mapping[str, str] | None = None,
    unset_env: Iterable[str] = (),
    cwd: str | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Output is captured; failures raise CommandFailed when check is set.
    - base_env replaces os.environ as the starting environment.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s", fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            env=build_env(os.environ if base_env is None else base_env, env=env, unset_env=unset_env),
        )
    except FileNotFoundError as e:
        if check:
            raise CommandFailed(f"Command not found: {argv_list[0]}", 127) from e
        return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandFailed(
            f"Command failed ({p.returncode}): {fmt_argv(argv_list)}\n{p.stderr}",
            p.returncode,
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)
