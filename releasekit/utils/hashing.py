# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Hashing utilities for releasekit.

The launcher's updater verifies downloads with SHA-1, so that is what the
update manifest carries. Files are read in chunks because installers and
disk images can run to hundreds of megabytes.
"""

import hashlib
from pathlib import Path

MANIFEST_HASH_ALGORITHM = "sha1"
HASH_BUFFER_SIZE = 65536  # 64 KiB


def compute_file_hash(file_path: Path, algorithm: str = MANIFEST_HASH_ALGORITHM) -> str:
    """
    Compute the hex digest of a file with the given hashlib algorithm.

    Args:
        file_path: Path to the file to hash.
        algorithm: Any name accepted by hashlib.new.

    Returns:
        Lowercase hex digest.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the algorithm is unknown to hashlib.
    """
    hasher = hashlib.new(algorithm)
    with open(file_path, "rb") as f:
        while True:
            chunk = f.read(HASH_BUFFER_SIZE)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()


def compute_sha1(file_path: Path) -> str:
    """SHA-1 hex digest of a file, as written into update manifests."""
    return compute_file_hash(file_path, "sha1")
