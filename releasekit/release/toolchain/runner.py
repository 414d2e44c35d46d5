# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
External tool invocation.

Every step of a release is some other program: the compiler, strip, lipo,
tar, inkscape, the packager, the signer. They all go through ToolRunner.run,
which blocks until the tool exits and raises ExternalToolError on the first
non-zero exit. There is no retry and no timeout; CI owns cancellation.

Output is not captured. Whatever the tool prints goes straight to the
console, which is the diagnostic the user needs when it fails.

No shell=True anywhere: commands are argv lists, so the packager's JSON
config can be passed as a single argument without quoting games.
"""

import os
import subprocess
import time
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Optional

from releasekit.logging.logger import get_logger
from releasekit.release.exceptions import ExternalToolError

_logger = get_logger(__name__)

# Shell conventions for "found but not executable" and "command not found".
COMMAND_NOT_EXECUTABLE = 126
COMMAND_NOT_FOUND = 127


def tool_environment(
    base: Optional[Mapping[str, str]] = None,
    set_vars: Optional[Mapping[str, str]] = None,
    unset: Iterable[str] = (),
) -> dict[str, str]:
    """
    Build the environment for one tool invocation.

    Args:
        base: Starting environment. Defaults to os.environ.
        set_vars: Variables to add or override.
        unset: Variables to remove after overrides are applied.

    Returns:
        A fresh dict; `base` is never mutated.
    """
    env = dict(os.environ if base is None else base)
    if set_vars:
        env.update(set_vars)
    for name in unset:
        env.pop(name, None)
    return env


class ToolRunner:
    """Runs external tools one at a time, raising on the first failure."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        description: str = "",
    ) -> None:
        """
        Run `command` to completion.

        Raises:
            ExternalToolError: If the tool exits non-zero or cannot be started.
        """
        argv = [str(part) for part in command]
        if not argv:
            raise ExternalToolError(argv, COMMAND_NOT_FOUND, "Empty command")

        # The environment is never logged; it may hold the signing key.
        _logger.info(
            "Running external tool",
            extra={
                "tool": argv[0],
                "description": description,
                "argv": argv,
                "cwd": str(cwd) if cwd is not None else None,
            },
        )

        start = time.monotonic()
        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env) if env is not None else None,
                check=False,
            )
        except FileNotFoundError as err:
            _logger.error("External tool not found", extra={"tool": argv[0]})
            raise ExternalToolError(
                argv, COMMAND_NOT_FOUND, f"Executable not found: {argv[0]}"
            ) from err
        except PermissionError as err:
            _logger.error("External tool not executable", extra={"tool": argv[0]})
            raise ExternalToolError(
                argv, COMMAND_NOT_EXECUTABLE, f"Executable not runnable: {argv[0]}"
            ) from err

        elapsed = time.monotonic() - start

        if completed.returncode != 0:
            _logger.error(
                "External tool failed",
                extra={
                    "tool": argv[0],
                    "description": description,
                    "exit_code": completed.returncode,
                    "elapsed_seconds": round(elapsed, 3),
                },
            )
            raise ExternalToolError(argv, completed.returncode)

        _logger.debug(
            "External tool finished",
            extra={"tool": argv[0], "elapsed_seconds": round(elapsed, 3)},
        )
