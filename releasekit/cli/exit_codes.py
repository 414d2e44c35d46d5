# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI exit codes.

A failing external tool is the exception: the CLI exits with that tool's
own code (see `tool_exit_code`), so CI shows the real failure.
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3
VALIDATION_ERROR: int = 4

_MAX_EXIT_CODE: int = 255


def tool_exit_code(returncode: int) -> int:
    """
    Exit code to propagate for a failed tool.

    Signal deaths (negative codes) and out-of-range values collapse to
    RUNTIME_ERROR.
    """
    if 0 < returncode <= _MAX_EXIT_CODE:
        return returncode
    return RUNTIME_ERROR
