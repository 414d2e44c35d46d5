# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for hashing utilities, checked against the standard SHA-1 vectors.
"""

import hashlib
from pathlib import Path

from releasekit.utils.hashing import compute_file_hash, compute_sha1

EMPTY_SHA1 = "da39a3ee5e6b4b0d3255bfef95601890afd80709"
ABC_SHA1 = "a9993e364706816aba3e25717850c26c9cd0d89d"


def test_known_vectors(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.write_bytes(b"")
    abc = tmp_path / "abc"
    abc.write_bytes(b"abc")

    assert compute_sha1(empty) == EMPTY_SHA1
    assert compute_sha1(abc) == ABC_SHA1


def test_large_file_spans_chunks(tmp_path: Path) -> None:
    data = b"x" * (200 * 1024 + 7)
    path = tmp_path / "big"
    path.write_bytes(data)
    assert compute_sha1(path) == hashlib.sha1(data).hexdigest()


def test_other_algorithm(tmp_path: Path) -> None:
    path = tmp_path / "abc"
    path.write_bytes(b"abc")
    assert compute_file_hash(path, "sha256") == (
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )
