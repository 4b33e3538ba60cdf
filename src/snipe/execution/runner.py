"""Running rendered commands.

Each command is split with ``shlex``, prefixed with the configured wrapper
(``teetty`` by default, which keeps the child on a pty so it still emits
colors), and run in sequence with the configured environment overlaid on
the current one. Output is streamed as it arrives.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from collections.abc import Mapping, Sequence
from typing import IO

import questionary

from snipe.core.errors import ExecutionError
from snipe.core.logging import get_logger

log = get_logger("execution.runner")

EDIT_PROMPT = "Edit command >>"


def edit_commands(commands: Sequence[str]) -> list[str] | None:
    """Let the user edit each command; None if a prompt is cancelled."""
    edited: list[str] = []
    for command in commands:
        answer = questionary.text(EDIT_PROMPT, default=command).ask()
        if answer is None:
            return None
        edited.append(answer)
    return edited


def build_argv(command: str, wrapper: str = "") -> list[str]:
    """Split ``command`` and prefix it with ``wrapper``.

    Raises:
        ExecutionError: If either string has unbalanced quoting or is empty.
    """
    try:
        argv = shlex.split(wrapper) + shlex.split(command)
    except ValueError as e:
        raise ExecutionError.invalid_command(command, str(e)) from e
    if not shlex.split(command):
        raise ExecutionError.invalid_command(command, "empty command")
    return argv


def run_command(
    command: str,
    *,
    envs: Mapping[str, str],
    wrapper: str = "",
    out: IO[str] | None = None,
) -> None:
    """Run one command, streaming stdout line by line.

    Raises:
        ExecutionError: If the command cannot start or exits non-zero.
    """
    argv = build_argv(command, wrapper)
    stream = out or sys.stdout
    env = {**os.environ, **envs}
    log.info("execution.start", command=command, argv=argv)

    try:
        proc = subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            env=env,
            text=True,
            bufsize=1,
        )
    except OSError as e:
        raise ExecutionError.invalid_command(command, str(e)) from e

    assert proc.stdout is not None
    with proc.stdout:
        for line in proc.stdout:
            stream.write(line)
            stream.flush()
    returncode = proc.wait()

    log.info("execution.done", command=command, returncode=returncode)
    if returncode != 0:
        raise ExecutionError.command_failed(command, returncode)


def run_commands(
    commands: Sequence[str],
    *,
    envs: Mapping[str, str],
    wrapper: str = "",
    out: IO[str] | None = None,
) -> None:
    """Run ``commands`` in order, stopping at the first failure."""
    for command in commands:
        run_command(command, envs=envs, wrapper=wrapper, out=out)
