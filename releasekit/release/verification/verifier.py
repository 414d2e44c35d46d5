# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Manifest verification: does the manifest still describe the files on disk?

Run it right before upload. Each entry's download URL ends in the canonical
filename, and that file is expected in the output directory with exactly
the recorded size and SHA-1. Everything is checked; all problems are
reported, not just the first.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from releasekit.logging.logger import get_logger
from releasekit.release.checksums.integrity import compute_file_digest
from releasekit.release.manifests.manifest import load_manifest

_logger = get_logger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a manifest verification run."""

    is_valid: bool
    checked_count: int
    mismatches: list[str] = field(default_factory=list)
    missing_files: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def local_filename(download: str) -> str:
    """Last path segment of a download URL, percent-decoded."""
    return unquote(urlparse(download).path.rsplit("/", 1)[-1])


def verify_manifest(manifest_file: Path, out_dir: Optional[Path] = None) -> VerificationResult:
    """
    Check every manifest entry against its local file.

    Args:
        manifest_file: Path to update_manifest_<platform>.json.
        out_dir: Where the artifacts live. Defaults to the manifest's directory.
    """
    base_dir = out_dir if out_dir is not None else manifest_file.parent

    try:
        manifest = load_manifest(manifest_file)
    except (FileNotFoundError, ValueError) as err:
        _logger.error("Cannot load manifest", extra={"path": str(manifest_file), "error": str(err)})
        return VerificationResult(is_valid=False, checked_count=0, errors=[str(err)])

    mismatches: list[str] = []
    missing_files: list[str] = []
    checked = 0

    for arch, key, entry in manifest.entries():
        filename = local_filename(entry.download)
        path = base_dir / filename
        if not path.is_file():
            missing_files.append(filename)
            _logger.error("Artifact missing", extra={"entry": f"{arch}/{key}", "file": filename})
            continue

        digest = compute_file_digest(path)
        checked += 1
        if digest.size_bytes != entry.size or digest.sha1 != entry.sha1.lower():
            mismatches.append(filename)
            _logger.error(
                "Artifact does not match manifest",
                extra={
                    "entry": f"{arch}/{key}",
                    "file": filename,
                    "expected_size": entry.size,
                    "actual_size": digest.size_bytes,
                    "expected_sha1": entry.sha1,
                    "actual_sha1": digest.sha1,
                },
            )

    is_valid = not mismatches and not missing_files
    log_fn = _logger.info if is_valid else _logger.error
    log_fn(
        "Manifest verification finished",
        extra={
            "manifest": str(manifest_file),
            "checked_count": checked,
            "mismatches": len(mismatches),
            "missing": len(missing_files),
        },
    )
    return VerificationResult(
        is_valid=is_valid,
        checked_count=checked,
        mismatches=mismatches,
        missing_files=missing_files,
    )
