# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Per-platform build and packaging profiles.

Each supported platform is one frozen PlatformProfile. The pipeline never
branches on the platform itself; it asks the profile which compiler targets
to build, whether to fuse them, which packager formats to request, where
those formats land, and what they are renamed to.

Canonical filenames follow one pattern:

    <Prefix>-<Platform>-<version>-<arch>[-<variant>].<ext>

    PandoraLauncher-Linux-2.5.0-x86_64-Portable
    PandoraLauncher-Linux-2.5.0-x86_64.AppImage
    PandoraLauncher-macOS-2.5.0-Universal.dmg
    PandoraLauncher-Windows-2.5.0-x86_64-Setup.exe

Packager output globs follow the packager's own naming
(`<slug>_<version>_<arch>.<ext>`). The exact name depends on the packager
version, so outputs are located by glob and treated as candidates.
"""

import glob
from dataclasses import dataclass
from typing import Union

from releasekit.release.artifacts import ArtifactKind, Platform

PORTABLE_KEY = "portable"


@dataclass(frozen=True)
class FormatSpec:
    """
    One packager output format.

    `output_glob` may reference {slug} and {product_name}; both are
    glob-escaped before substitution. `suffix` is appended to the canonical
    stem. When `archive` is set the packager output is a directory that
    gets tarred into the canonical name instead of renamed.
    """

    format: str
    kind: ArtifactKind
    key: str
    output_glob: str
    suffix: str
    archive: bool = False

    def glob_for(self, slug: str, product_name: str) -> str:
        return self.output_glob.format(
            slug=glob.escape(slug),
            product_name=glob.escape(product_name),
        )


@dataclass(frozen=True)
class PlatformProfile:
    platform: Platform
    display_name: str
    architecture: str
    arch_label: str
    targets: tuple[str, ...]
    executable_suffix: str
    formats: tuple[FormatSpec, ...]

    @property
    def fuses_binaries(self) -> bool:
        """More than one target means the binaries are fused into one."""
        return len(self.targets) > 1

    @property
    def package_formats(self) -> list[str]:
        return [spec.format for spec in self.formats]

    def staged_binary_name(self, prefix: str) -> str:
        """Name the binary has in the output directory while the packager runs."""
        return f"{prefix}-{self.display_name}{self.executable_suffix}"

    def canonical_stem(self, prefix: str, version: str) -> str:
        return f"{prefix}-{self.display_name}-{version}-{self.arch_label}"

    def portable_name(self, prefix: str, version: str) -> str:
        return f"{self.canonical_stem(prefix, version)}-Portable{self.executable_suffix}"

    def canonical_name(self, spec: FormatSpec, prefix: str, version: str) -> str:
        return f"{self.canonical_stem(prefix, version)}{spec.suffix}"


LINUX_PROFILE = PlatformProfile(
    platform=Platform.LINUX,
    display_name="Linux",
    architecture="x86_64",
    arch_label="x86_64",
    targets=("x86_64-unknown-linux-gnu",),
    executable_suffix="",
    formats=(
        FormatSpec(
            format="deb",
            kind=ArtifactKind.INSTALLER_PACKAGE,
            key="deb",
            output_glob="{slug}_*_amd64.deb",
            suffix=".deb",
        ),
        FormatSpec(
            format="appimage",
            kind=ArtifactKind.PORTABLE_EXECUTABLE,
            key="appimage",
            output_glob="{slug}_*_x86_64.AppImage",
            suffix=".AppImage",
        ),
    ),
)

MACOS_PROFILE = PlatformProfile(
    platform=Platform.MACOS,
    display_name="macOS",
    architecture="universal",
    arch_label="Universal",
    targets=("x86_64-apple-darwin", "aarch64-apple-darwin"),
    executable_suffix="",
    formats=(
        FormatSpec(
            format="dmg",
            kind=ArtifactKind.DISK_IMAGE,
            key="dmg",
            output_glob="{slug}_*_universal.dmg",
            suffix=".dmg",
        ),
        FormatSpec(
            format="app",
            kind=ArtifactKind.ARCHIVE,
            key="app",
            output_glob="{product_name}.app",
            suffix=".app.tar.gz",
            archive=True,
        ),
    ),
)

WINDOWS_PROFILE = PlatformProfile(
    platform=Platform.WINDOWS,
    display_name="Windows",
    architecture="x86_64",
    arch_label="x86_64",
    targets=("x86_64-pc-windows-msvc",),
    executable_suffix=".exe",
    formats=(
        FormatSpec(
            format="nsis",
            kind=ArtifactKind.INSTALLER_PACKAGE,
            key="nsis",
            output_glob="{slug}_*_x64-setup.exe",
            suffix="-Setup.exe",
        ),
    ),
)

PROFILES: dict[Platform, PlatformProfile] = {
    Platform.LINUX: LINUX_PROFILE,
    Platform.MACOS: MACOS_PROFILE,
    Platform.WINDOWS: WINDOWS_PROFILE,
}


def get_profile(platform: Union[Platform, str]) -> PlatformProfile:
    """
    Look up the profile for a platform, by enum or by name.

    Raises:
        ValueError: If the name is not a supported platform.
    """
    try:
        key = Platform(platform)
    except ValueError:
        supported = ", ".join(p.value for p in Platform)
        raise ValueError(f"Unknown platform {platform!r}. Supported: {supported}") from None
    return PROFILES[key]
