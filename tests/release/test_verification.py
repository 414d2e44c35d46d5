# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for manifest verification against disk.
"""

from pathlib import Path

from releasekit.release.artifacts import Platform
from releasekit.release.pipeline import ReleasePipeline
from releasekit.release.verification.verifier import local_filename, verify_manifest


def _signed_linux_release(tmp_path, release_config, fake_runner, signing_env) -> Path:  # type: ignore[no-untyped-def]
    result = ReleasePipeline(release_config, fake_runner, signing_env).run(Platform.LINUX, "2.5.0")
    assert result.manifest_path is not None
    return result.manifest_path


def test_local_filename_decodes_url() -> None:
    assert local_filename("https://x/releases/download/v1/My%20App.dmg") == "My App.dmg"


def test_fresh_release_verifies(tmp_path, release_config, fake_runner, signing_env) -> None:  # type: ignore[no-untyped-def]
    manifest_file = _signed_linux_release(tmp_path, release_config, fake_runner, signing_env)

    result = verify_manifest(manifest_file)

    assert result.is_valid
    assert result.checked_count == 3


def test_tampered_artifact_is_reported(tmp_path, release_config, fake_runner, signing_env) -> None:  # type: ignore[no-untyped-def]
    manifest_file = _signed_linux_release(tmp_path, release_config, fake_runner, signing_env)
    appimage = manifest_file.parent / "Product-Linux-2.5.0-x86_64.AppImage"
    appimage.write_bytes(appimage.read_bytes() + b"!")

    result = verify_manifest(manifest_file)

    assert not result.is_valid
    assert result.mismatches == ["Product-Linux-2.5.0-x86_64.AppImage"]


def test_missing_artifact_is_reported(tmp_path, release_config, fake_runner, signing_env) -> None:  # type: ignore[no-untyped-def]
    manifest_file = _signed_linux_release(tmp_path, release_config, fake_runner, signing_env)
    (manifest_file.parent / "Product-Linux-2.5.0-x86_64.deb").unlink()

    result = verify_manifest(manifest_file)

    assert not result.is_valid
    assert result.missing_files == ["Product-Linux-2.5.0-x86_64.deb"]
    assert result.checked_count == 2


def test_unreadable_manifest(tmp_path: Path) -> None:
    result = verify_manifest(tmp_path / "update_manifest_linux.json")
    assert not result.is_valid
    assert result.errors
