# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The release pipeline: one platform, one version, strictly in order.

    normalise version
      -> compile every target (version exported to the compiler)
      -> strip
      -> fuse or stage into the output directory
      -> rasterise icon (Linux, optional)
      -> packager (signing key removed from its environment)
      -> rename outputs to canonical names
      -> [signed mode] sign -> digest -> manifest -> delete .sig sidecars

Unsigned mode (no key in the environment) stops after renaming: no
signatures, no manifest. That is a developer build, not a failure. Any
manifest left for the platform by an earlier run is removed up front, since
the artifacts it describes are about to be overwritten.

Any tool failure propagates immediately as ExternalToolError. Nothing is
rolled back; artifacts produced so far stay on disk.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from releasekit.config.schema import ReleaseKitConfig
from releasekit.logging.logger import get_logger
from releasekit.release.artifacts import Platform, ReleaseArtifact
from releasekit.release.build.compiler import (
    compile_targets,
    rasterize_icon,
    stage_binary,
    strip_binaries,
)
from releasekit.release.checksums.integrity import attach_digest
from releasekit.release.cleanup.cleaner import sweep_signature_sidecars
from releasekit.release.manifests.manifest import (
    UpdateManifest,
    create_manifest,
    manifest_path,
    write_manifest,
)
from releasekit.release.packaging.packager import (
    PackagerConfig,
    build_packager_config,
    collect_artifacts,
    run_packager,
)
from releasekit.release.platforms import PlatformProfile, get_profile
from releasekit.release.signing.signer import (
    read_signature,
    sign_artifact,
    signing_enabled,
)
from releasekit.release.toolchain.runner import ToolRunner, tool_environment
from releasekit.release.version import normalize_version
from releasekit.utils.filesystem import safe_delete
from releasekit.utils.paths import ensure_directory, resolve_under

_logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of a completed release run."""

    platform: Platform
    version: str
    signed: bool
    artifacts: list[ReleaseArtifact] = field(default_factory=list)
    manifest: Optional[UpdateManifest] = None
    manifest_path: Optional[Path] = None


@dataclass(frozen=True)
class ReleasePlan:
    """What a run would do, without doing it. Used by --dry-run."""

    platform: Platform
    version: str
    signed: bool
    targets: list[str]
    packager_config: PackagerConfig
    artifact_names: list[str]


class ReleasePipeline:
    """
    Orchestrates a release for one platform.

    The runner and the environment are injectable so the pipeline can be
    driven without real toolchains.
    """

    def __init__(
        self,
        config: ReleaseKitConfig,
        runner: Optional[ToolRunner] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.config = config
        self.runner = runner if runner is not None else ToolRunner()
        self.environ: dict[str, str] = dict(os.environ if environ is None else environ)
        self.project_root = Path(config.build.project_dir).resolve()
        self.out_dir = resolve_under(self.project_root, config.packager.output_dir)

    @property
    def signed(self) -> bool:
        return signing_enabled(self.environ, self.config.signing)

    def _environments(self, version: str) -> tuple[dict[str, str], dict[str, str]]:
        """
        (tool_env, signer_env).

        Both export the version. Only the signer's keeps the signing key.
        """
        version_vars = {self.config.version_env_var: version}
        signer_env = tool_environment(self.environ, set_vars=version_vars)
        tool_env = tool_environment(
            self.environ,
            set_vars=version_vars,
            unset=[self.config.signing.key_env_var],
        )
        return tool_env, signer_env

    def plan(self, platform: Union[Platform, str], raw_version: Optional[str]) -> ReleasePlan:
        """Resolve everything a run would use, invoking nothing."""
        version = normalize_version(raw_version)
        profile = get_profile(platform)
        prefix = self.config.product.artifact_prefix

        names = [profile.portable_name(prefix, version)]
        names.extend(profile.canonical_name(spec, prefix, version) for spec in profile.formats)

        return ReleasePlan(
            platform=profile.platform,
            version=version,
            signed=self.signed,
            targets=list(profile.targets),
            packager_config=build_packager_config(profile, self.config, version, self.out_dir),
            artifact_names=names,
        )

    def run(self, platform: Union[Platform, str], raw_version: Optional[str]) -> PipelineResult:
        """
        Build, package, rename, and (in signed mode) sign and describe.

        Raises:
            MissingVersionError: Before anything runs, if the version is empty.
            ExternalToolError: On the first failing tool, with its exit code.
            ArtifactNotFoundError: If an expected output never appeared.
            AmbiguousArtifactError: If a packager output cannot be told apart.
        """
        version = normalize_version(raw_version)
        profile = get_profile(platform)
        signed = self.signed
        tool_env, signer_env = self._environments(version)

        _logger.info(
            "Release started",
            extra={"platform": profile.platform.value, "version": version, "signed": signed},
        )

        ensure_directory(self.out_dir)
        # A manifest from an earlier run no longer describes what is about to be built.
        if safe_delete(manifest_path(self.out_dir, profile.platform)):
            _logger.info(
                "Removed stale update manifest", extra={"platform": profile.platform.value}
            )
        staged = self._build(profile, tool_env)

        packager_config = build_packager_config(profile, self.config, version, self.out_dir)
        run_packager(self.runner, packager_config, self.config, self.project_root, tool_env)

        artifacts = collect_artifacts(
            self.runner,
            profile,
            self.config,
            version,
            self.out_dir,
            staged,
            self.project_root,
            tool_env,
        )

        if not signed:
            _logger.info(
                "Signing key not set, skipping signatures and manifest",
                extra={
                    "key_env_var": self.config.signing.key_env_var,
                    "artifacts": [a.filename for a in artifacts],
                },
            )
            return PipelineResult(
                platform=profile.platform,
                version=version,
                signed=False,
                artifacts=artifacts,
            )

        described = self._sign_and_describe(artifacts, signer_env)
        manifest = create_manifest(version, described, self.config.publish)
        written = write_manifest(manifest, manifest_path(self.out_dir, profile.platform))
        sweep_signature_sidecars(self.out_dir, self.config.signing.signature_suffix)

        _logger.info(
            "Release finished",
            extra={
                "platform": profile.platform.value,
                "version": version,
                "manifest": str(written),
                "artifacts": [a.filename for a in described],
            },
        )
        return PipelineResult(
            platform=profile.platform,
            version=version,
            signed=True,
            artifacts=described,
            manifest=manifest,
            manifest_path=written,
        )

    def _build(self, profile: PlatformProfile, env: Mapping[str, str]) -> Path:
        """Compile, strip, stage; returns the staged binary path."""
        build = self.config.build
        binaries = compile_targets(self.runner, profile, build, self.project_root, env)
        strip_binaries(self.runner, binaries, build, self.project_root, env)

        staged_path = self.out_dir / profile.staged_binary_name(
            self.config.product.artifact_prefix
        )
        staged = stage_binary(
            self.runner, binaries, profile, build, staged_path, self.project_root, env
        )

        if profile.platform is Platform.LINUX and build.icons.linux_source_svg is not None:
            rasterize_icon(self.runner, build, self.project_root, env)
        return staged

    def _sign_and_describe(
        self,
        artifacts: list[ReleaseArtifact],
        env: Mapping[str, str],
    ) -> list[ReleaseArtifact]:
        """Sign every artifact, then attach size, SHA-1, and signature text."""
        settings = self.config.signing
        sidecars = [
            sign_artifact(self.runner, artifact, settings, self.project_root, env)
            for artifact in artifacts
        ]
        return [
            attach_digest(artifact).with_signature(read_signature(sidecar))
            for artifact, sidecar in zip(artifacts, sidecars)
        ]
