# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Compile, strip, fuse, and stage the launcher binary.

The order matters and mirrors what the data allows: every target is
compiled, then each binary is stripped, then the stripped binaries are
either fused (macOS: one universal binary via lipo) or moved, as-is, into
the output directory under the name the packager is told to expect.
"""

import shutil
from collections.abc import Mapping
from pathlib import Path

from releasekit.config.schema import BuildConfig
from releasekit.logging.logger import get_logger
from releasekit.release.exceptions import ArtifactNotFoundError
from releasekit.release.platforms import PlatformProfile
from releasekit.release.toolchain.runner import ToolRunner
from releasekit.utils.paths import resolve_under

_logger = get_logger(__name__)


def binary_path(
    project_root: Path,
    build: BuildConfig,
    target: str,
    executable_suffix: str = "",
) -> Path:
    """Where the compiler leaves the release binary for one target triple."""
    return (
        resolve_under(project_root, build.target_dir)
        / target
        / "release"
        / f"{build.binary_name}{executable_suffix}"
    )


def compile_targets(
    runner: ToolRunner,
    profile: PlatformProfile,
    build: BuildConfig,
    project_root: Path,
    env: Mapping[str, str],
) -> list[Path]:
    """
    Compile the launcher once per target triple of the profile.

    Returns:
        Paths of the produced binaries, in target order.

    Raises:
        ExternalToolError: If the compiler fails.
        ArtifactNotFoundError: If the compiler succeeded but left no binary.
    """
    binaries: list[Path] = []
    for target in profile.targets:
        runner.run(
            [*build.compiler_command, "build", "--release", "--target", target],
            cwd=project_root,
            env=env,
            description=f"compile {target}",
        )
        produced = binary_path(project_root, build, target, profile.executable_suffix)
        if not produced.is_file():
            raise ArtifactNotFoundError(
                f"Compiler reported success but produced no binary at {produced}",
                path=produced,
            )
        binaries.append(produced)

    _logger.info(
        "Compiled targets",
        extra={"platform": profile.platform.value, "targets": list(profile.targets)},
    )
    return binaries


def strip_binaries(
    runner: ToolRunner,
    binaries: list[Path],
    build: BuildConfig,
    project_root: Path,
    env: Mapping[str, str],
) -> None:
    """Remove debug symbols from every binary, in place."""
    for binary in binaries:
        runner.run(
            [*build.strip_command, str(binary)],
            cwd=project_root,
            env=env,
            description=f"strip {binary.name}",
        )


def stage_binary(
    runner: ToolRunner,
    binaries: list[Path],
    profile: PlatformProfile,
    build: BuildConfig,
    staged_path: Path,
    project_root: Path,
    env: Mapping[str, str],
) -> Path:
    """
    Put the final binary into the output directory under its staging name.

    Multiple binaries are fused with lipo; a single binary is moved.
    """
    staged_path.parent.mkdir(parents=True, exist_ok=True)

    if profile.fuses_binaries:
        runner.run(
            [*build.lipo_command, "-create", "-output", str(staged_path), *map(str, binaries)],
            cwd=project_root,
            env=env,
            description="fuse universal binary",
        )
        if not staged_path.is_file():
            raise ArtifactNotFoundError(
                f"Fusion tool produced no binary at {staged_path}", path=staged_path
            )
    else:
        shutil.move(str(binaries[0]), str(staged_path))

    _logger.info(
        "Staged binary",
        extra={"path": str(staged_path), "fused": profile.fuses_binaries},
    )
    return staged_path


def rasterize_icon(
    runner: ToolRunner,
    build: BuildConfig,
    project_root: Path,
    env: Mapping[str, str],
) -> Path:
    """
    Export the vector icon to the first configured Linux PNG.

    Raises:
        ValueError: If no SVG source or no Linux icon is configured.
    """
    icons = build.icons
    if icons.linux_source_svg is None or not icons.linux:
        raise ValueError("Icon rasterisation needs linux_source_svg and at least one Linux icon")

    output = resolve_under(project_root, icons.linux[0])
    output.parent.mkdir(parents=True, exist_ok=True)
    runner.run(
        [
            *build.inkscape_command,
            f"--export-filename={output}",
            f"--export-width={icons.raster_width}",
            str(resolve_under(project_root, icons.linux_source_svg)),
        ],
        cwd=project_root,
        env=env,
        description="rasterise icon",
    )
    return output
