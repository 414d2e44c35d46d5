# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the packager config record and output renaming.
"""

import json
from pathlib import Path

import pytest

from releasekit.release.exceptions import AmbiguousArtifactError, ArtifactNotFoundError
from releasekit.release.packaging.packager import (
    build_packager_config,
    collect_artifacts,
    find_packager_output,
    run_packager,
)
from releasekit.release.platforms import LINUX_PROFILE, MACOS_PROFILE, WINDOWS_PROFILE


class TestPackagerConfig:
    def test_linux_config_fields(self, tmp_path: Path, release_config) -> None:
        packager_config = build_packager_config(
            LINUX_PROFILE, release_config, "2.5.0", tmp_path / "dist"
        )

        assert packager_config.to_dict() == {
            "name": "product-launcher",
            "outDir": str(tmp_path / "dist"),
            "formats": ["deb", "appimage"],
            "productName": "Product Launcher",
            "version": "2.5.0",
            "identifier": "com.example.productlauncher",
            "resources": [],
            "binaries": [{"path": "Product-Linux", "main": True}],
            "icons": ["package/icon_512x512.png"],
        }

    def test_icons_follow_platform(self, tmp_path: Path, release_config) -> None:
        mac = build_packager_config(MACOS_PROFILE, release_config, "1.0.0", tmp_path)
        win = build_packager_config(WINDOWS_PROFILE, release_config, "1.0.0", tmp_path)

        assert mac.icons == ("package/mac.icns",)
        assert win.icons == ("package/windows.ico",)
        assert win.binaries[0].path == "Product-Windows.exe"

    def test_json_is_passed_as_one_argument(self, tmp_path: Path, release_config, fake_runner) -> None:
        (tmp_path / "dist").mkdir()
        (tmp_path / "dist" / "Product-Windows.exe").write_bytes(b"exe")
        packager_config = build_packager_config(
            WINDOWS_PROFILE, release_config, "1.0.0", tmp_path / "dist"
        )

        run_packager(fake_runner, packager_config, release_config, tmp_path, {})

        (call,) = fake_runner.calls
        assert call.argv[:2] == ["fake-packager", "--config"]
        assert json.loads(call.argv[2])["formats"] == ["nsis"]


class TestFindPackagerOutput:
    def test_single_match(self, tmp_path: Path) -> None:
        (tmp_path / "launcher_1.0.0_amd64.deb").write_bytes(b"deb")
        found = find_packager_output(tmp_path, "launcher_*_amd64.deb", "1.0.0")
        assert found.name == "launcher_1.0.0_amd64.deb"

    def test_no_match(self, tmp_path: Path) -> None:
        with pytest.raises(ArtifactNotFoundError, match="No packager output"):
            find_packager_output(tmp_path, "launcher_*_amd64.deb", "1.0.0")

    def test_version_breaks_ties(self, tmp_path: Path) -> None:
        (tmp_path / "launcher_0.9.0_amd64.deb").write_bytes(b"old")
        (tmp_path / "launcher_1.0.0_amd64.deb").write_bytes(b"new")
        found = find_packager_output(tmp_path, "launcher_*_amd64.deb", "1.0.0")
        assert found.name == "launcher_1.0.0_amd64.deb"

    def test_version_must_match_whole_segment(self, tmp_path: Path) -> None:
        (tmp_path / "launcher_1.0_amd64.deb").write_bytes(b"new")
        (tmp_path / "launcher_1.0.1_amd64.deb").write_bytes(b"old")
        (tmp_path / "launcher_11.0_amd64.deb").write_bytes(b"old")
        found = find_packager_output(tmp_path, "launcher_*_amd64.deb", "1.0")
        assert found.name == "launcher_1.0_amd64.deb"

    def test_unresolvable_tie(self, tmp_path: Path) -> None:
        (tmp_path / "launcher_0.8.0_amd64.deb").write_bytes(b"a")
        (tmp_path / "launcher_0.9.0_amd64.deb").write_bytes(b"b")
        with pytest.raises(AmbiguousArtifactError):
            find_packager_output(tmp_path, "launcher_*_amd64.deb", "1.0.0")


class TestCollectArtifacts:
    def test_missing_packager_output_aborts(self, tmp_path: Path, release_config, fake_runner) -> None:
        dist = tmp_path / "dist"
        dist.mkdir()
        staged = dist / "Product-Linux"
        staged.write_bytes(b"bin")
        (dist / "product-launcher_2.5.0_amd64.deb").write_bytes(b"deb")

        with pytest.raises(ArtifactNotFoundError, match="AppImage"):
            collect_artifacts(
                fake_runner, LINUX_PROFILE, release_config, "2.5.0", dist, staged, tmp_path, {}
            )

        # Renames already done stay done.
        assert (dist / "Product-Linux-2.5.0-x86_64.deb").is_file()

    def test_renames_without_touching_content(self, tmp_path: Path, release_config, fake_runner) -> None:
        dist = tmp_path / "dist"
        dist.mkdir()
        staged = dist / "Product-Windows.exe"
        staged.write_bytes(b"portable bytes")
        (dist / "product-launcher_3.0.0_x64-setup.exe").write_bytes(b"setup bytes")

        artifacts = collect_artifacts(
            fake_runner, WINDOWS_PROFILE, release_config, "3.0.0", dist, staged, tmp_path, {}
        )

        assert [a.path.read_bytes() for a in artifacts] == [b"portable bytes", b"setup bytes"]
        assert not staged.exists()
        assert fake_runner.calls == []
