# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Installer packaging and canonical renaming.

The packager takes a declarative JSON config on the command line and drops
its outputs (deb, AppImage, dmg, .app bundle, NSIS setup) into the output
directory under names of its own choosing. This module:

  1. builds that config as a structured record, not an interpolated string;
  2. runs the packager;
  3. finds each output by glob and renames it to its canonical name, or
     tars it when the output is a bundle directory.

The staged binary is renamed to its portable name last, after the packager
has read it.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from releasekit.config.schema import ReleaseKitConfig
from releasekit.logging.logger import get_logger
from releasekit.release.artifacts import ArtifactKind, ReleaseArtifact
from releasekit.release.exceptions import AmbiguousArtifactError, ArtifactNotFoundError
from releasekit.release.platforms import PORTABLE_KEY, FormatSpec, PlatformProfile
from releasekit.release.toolchain.runner import ToolRunner

_logger = get_logger(__name__)


@dataclass(frozen=True)
class PackagerBinary:
    path: str
    main: bool = True


@dataclass(frozen=True)
class PackagerConfig:
    """The configuration handed to the packager, field for field."""

    name: str
    product_name: str
    identifier: str
    version: str
    out_dir: str
    formats: tuple[str, ...]
    binaries: tuple[PackagerBinary, ...]
    icons: tuple[str, ...]
    resources: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        """Packager-facing form, with the packager's camelCase keys."""
        return {
            "name": self.name,
            "outDir": self.out_dir,
            "formats": list(self.formats),
            "productName": self.product_name,
            "version": self.version,
            "identifier": self.identifier,
            "resources": list(self.resources),
            "binaries": [{"path": b.path, "main": b.main} for b in self.binaries],
            "icons": list(self.icons),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def build_packager_config(
    profile: PlatformProfile,
    config: ReleaseKitConfig,
    version: str,
    out_dir: Path,
) -> PackagerConfig:
    """
    Assemble the packager config for one platform.

    Binary paths are relative to `out_dir`, which is where the packager
    looks for them. Icon paths are passed through as configured, relative
    to the project directory the packager runs in.
    """
    product = config.product
    return PackagerConfig(
        name=product.slug,
        product_name=product.product_name,
        identifier=product.identifier,
        version=version,
        out_dir=str(out_dir),
        formats=tuple(profile.package_formats),
        binaries=(PackagerBinary(path=profile.staged_binary_name(product.artifact_prefix)),),
        icons=tuple(config.build.icons.for_platform(profile.platform)),
    )


def run_packager(
    runner: ToolRunner,
    packager_config: PackagerConfig,
    config: ReleaseKitConfig,
    project_root: Path,
    env: Mapping[str, str],
) -> None:
    """
    Optionally install the packager, then run it.

    `env` must already have the signing key removed, otherwise the packager
    signs on its own and the explicit signing step would double up.
    """
    settings = config.packager
    if settings.install_command:
        runner.run(
            settings.install_command,
            cwd=project_root,
            env=env,
            description="install packager",
        )

    _logger.info(
        "Invoking packager",
        extra={"formats": list(packager_config.formats), "version": packager_config.version},
    )
    runner.run(
        [*settings.command, "--config", packager_config.to_json()],
        cwd=project_root,
        env=env,
        description="package installers",
    )


def find_packager_output(out_dir: Path, pattern: str, version: str) -> Path:
    """
    Pick the one packager output matching `pattern`.

    A single match wins outright. With several matches (leftovers from an
    earlier version, say) the only one carrying `_<version>_` in its name wins.

    Raises:
        ArtifactNotFoundError: If nothing matches.
        AmbiguousArtifactError: If several match and the version doesn't settle it.
    """
    candidates = sorted(out_dir.glob(pattern))
    if not candidates:
        raise ArtifactNotFoundError(
            f"No packager output matching {pattern!r} in {out_dir}",
            path=out_dir / pattern,
        )
    if len(candidates) == 1:
        return candidates[0]

    segment = f"_{version}_"
    versioned = [c for c in candidates if segment in c.name]
    if len(versioned) == 1:
        return versioned[0]
    raise AmbiguousArtifactError(pattern, candidates)


def _archive_bundle(
    runner: ToolRunner,
    config: ReleaseKitConfig,
    bundle: Path,
    target: Path,
    project_root: Path,
    env: Mapping[str, str],
) -> None:
    runner.run(
        [*config.build.tar_command, "-czf", str(target), "-C", str(bundle.parent), bundle.name],
        cwd=project_root,
        env=env,
        description=f"archive {bundle.name}",
    )
    if not target.is_file():
        raise ArtifactNotFoundError(f"Archiver produced no file at {target}", path=target)


def _collect_format(
    runner: ToolRunner,
    spec: FormatSpec,
    profile: PlatformProfile,
    config: ReleaseKitConfig,
    version: str,
    out_dir: Path,
    project_root: Path,
    env: Mapping[str, str],
) -> ReleaseArtifact:
    product = config.product
    source = find_packager_output(
        out_dir, spec.glob_for(product.slug, product.product_name), version
    )
    target = out_dir / profile.canonical_name(spec, product.artifact_prefix, version)

    if spec.archive:
        _archive_bundle(runner, config, source, target, project_root, env)
    else:
        source.replace(target)

    _logger.info(
        "Canonical artifact ready",
        extra={"format": spec.format, "source": source.name, "artifact": target.name},
    )
    return ReleaseArtifact(
        platform=profile.platform,
        architecture=profile.architecture,
        kind=spec.kind,
        key=spec.key,
        path=target,
        version=version,
    )


def collect_artifacts(
    runner: ToolRunner,
    profile: PlatformProfile,
    config: ReleaseKitConfig,
    version: str,
    out_dir: Path,
    staged_binary: Path,
    project_root: Path,
    env: Mapping[str, str],
) -> list[ReleaseArtifact]:
    """
    Rename everything the run produced to canonical names.

    Returns:
        The portable binary first, then one artifact per packager format
        in profile order.
    """
    packaged = [
        _collect_format(runner, spec, profile, config, version, out_dir, project_root, env)
        for spec in profile.formats
    ]

    portable_path = out_dir / profile.portable_name(config.product.artifact_prefix, version)
    if not staged_binary.is_file():
        raise ArtifactNotFoundError(
            f"Staged binary disappeared before renaming: {staged_binary}", path=staged_binary
        )
    staged_binary.replace(portable_path)

    portable = ReleaseArtifact(
        platform=profile.platform,
        architecture=profile.architecture,
        kind=ArtifactKind.PORTABLE_EXECUTABLE,
        key=PORTABLE_KEY,
        path=portable_path,
        version=version,
    )
    return [portable, *packaged]
