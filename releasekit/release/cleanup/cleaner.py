# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Removal of transient signature sidecars.

Once the signatures are inlined into the update manifest, the `.sig` files
have no further use and must not be uploaded. This is the only deletion a
release run performs; artifacts themselves are never removed, not even when
the run fails.
"""

from dataclasses import dataclass, field
from pathlib import Path

from releasekit.logging.logger import get_logger
from releasekit.utils.filesystem import safe_delete

_logger = get_logger(__name__)


@dataclass(frozen=True)
class CleanResult:
    """Outcome of a sidecar sweep."""

    removed_files: int
    freed_bytes: int
    removed: list[str] = field(default_factory=list)


def sweep_signature_sidecars(out_dir: Path, suffix: str = ".sig") -> CleanResult:
    """
    Delete every `*<suffix>` file directly inside `out_dir`.

    Subdirectories (such as a .app bundle) are left alone.
    """
    if not out_dir.is_dir():
        return CleanResult(removed_files=0, freed_bytes=0)

    removed: list[str] = []
    freed_bytes = 0
    for sidecar in sorted(out_dir.glob(f"*{suffix}")):
        if not sidecar.is_file():
            continue
        size = sidecar.stat().st_size
        if safe_delete(sidecar):
            removed.append(sidecar.name)
            freed_bytes += size

    _logger.info(
        "Signature sidecars removed",
        extra={"out_dir": str(out_dir), "removed_files": len(removed)},
    )
    return CleanResult(removed_files=len(removed), freed_bytes=freed_bytes, removed=removed)
