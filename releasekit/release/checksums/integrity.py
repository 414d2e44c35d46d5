# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Size and checksum of a release artifact, read from disk.

These are computed at manifest time, after every rename, so the numbers in
the manifest describe exactly the bytes that get uploaded.
"""

from dataclasses import dataclass
from pathlib import Path

from releasekit.logging.logger import get_logger
from releasekit.release.artifacts import ReleaseArtifact
from releasekit.release.exceptions import ArtifactNotFoundError
from releasekit.utils.hashing import compute_sha1

_logger = get_logger(__name__)


@dataclass(frozen=True)
class FileDigest:
    size_bytes: int
    sha1: str


def compute_file_digest(path: Path) -> FileDigest:
    """
    Read size and SHA-1 of a file.

    Raises:
        ArtifactNotFoundError: If `path` is not an existing regular file.
    """
    if not path.is_file():
        raise ArtifactNotFoundError(f"Artifact not found: {path}", path=path)

    digest = FileDigest(size_bytes=path.stat().st_size, sha1=compute_sha1(path))
    _logger.debug(
        "Computed digest",
        extra={"file": path.name, "size": digest.size_bytes, "sha1": digest.sha1},
    )
    return digest


def attach_digest(artifact: ReleaseArtifact) -> ReleaseArtifact:
    """Return a copy of `artifact` with size and checksum filled from disk."""
    digest = compute_file_digest(artifact.path)
    return artifact.with_digest(digest.size_bytes, digest.sha1)
