# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions raised by the release pipeline.

Every failure in a release run is fatal. These types exist so the CLI can
pick the right exit code, not so callers can recover.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Optional


class ReleaseError(Exception):
    """Base for all release pipeline errors."""


class MissingVersionError(ReleaseError):
    """Raised when the version argument is absent or empty."""

    def __init__(self, message: str = "Missing version argument") -> None:
        super().__init__(message)


class ExternalToolError(ReleaseError):
    """
    Raised when an external tool exits non-zero or cannot be started.

    `returncode` is the tool's own exit code; the CLI exits with it.
    """

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        message: Optional[str] = None,
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        tool = self.command[0] if self.command else "<empty>"
        super().__init__(message or f"{tool} exited with code {returncode}")


class ArtifactNotFoundError(ReleaseError):
    """Raised when an expected artifact or tool output is not on disk."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        super().__init__(message)


class AmbiguousArtifactError(ReleaseError):
    """Raised when several packager outputs match and none can be preferred."""

    def __init__(self, pattern: str, candidates: Sequence[Path]) -> None:
        self.pattern = pattern
        self.candidates = list(candidates)
        names = ", ".join(c.name for c in self.candidates)
        super().__init__(f"Several files match {pattern!r}: {names}")
