# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Records describing what a release run produces.

A ReleaseArtifact starts life with only identity fields filled in, right
after the packager output is renamed. Size, checksum, and signature are
attached later, when (and only when) the run is in signed mode.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class Platform(str, Enum):
    """Release targets. Values double as manifest and CLI names."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


class ArtifactKind(str, Enum):
    PORTABLE_EXECUTABLE = "portable-executable"
    INSTALLER_PACKAGE = "installer-package"
    DISK_IMAGE = "disk-image"
    ARCHIVE = "archive"


@dataclass(frozen=True)
class ReleaseArtifact:
    """One canonical, renamed file in the output directory."""

    platform: Platform
    architecture: str
    kind: ArtifactKind
    key: str
    path: Path
    version: str
    size_bytes: Optional[int] = None
    checksum: Optional[str] = None
    signature: Optional[str] = None

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def is_signed(self) -> bool:
        return self.signature is not None

    def with_digest(self, size_bytes: int, checksum: str) -> "ReleaseArtifact":
        return dataclasses.replace(self, size_bytes=size_bytes, checksum=checksum)

    def with_signature(self, signature: str) -> "ReleaseArtifact":
        return dataclasses.replace(self, signature=signature)
