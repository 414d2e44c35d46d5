# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Detached signing of release artifacts.

Signing is gated on one environment variable holding the private key. The
signer writes `<artifact>.sig` next to the artifact and never touches the
artifact's own bytes. Those sidecars are transient: their text is inlined
into the update manifest and then they are deleted (see release.cleanup).
"""

from collections.abc import Mapping
from pathlib import Path

from releasekit.config.schema import SigningSettings
from releasekit.logging.logger import get_logger
from releasekit.release.artifacts import ReleaseArtifact
from releasekit.release.exceptions import ArtifactNotFoundError
from releasekit.release.toolchain.runner import ToolRunner

_logger = get_logger(__name__)


def signing_enabled(env: Mapping[str, str], settings: SigningSettings) -> bool:
    """Signed mode is on when the key variable is present and non-empty."""
    return bool(env.get(settings.key_env_var))


def signature_path(artifact_path: Path, suffix: str = ".sig") -> Path:
    """The sidecar path for an artifact: the full filename plus the suffix."""
    return artifact_path.with_name(artifact_path.name + suffix)


def sign_artifact(
    runner: ToolRunner,
    artifact: ReleaseArtifact,
    settings: SigningSettings,
    project_root: Path,
    env: Mapping[str, str],
) -> Path:
    """
    Produce the detached signature sidecar for one artifact.

    `env` must carry the signing key; it is the only tool env that does.

    Raises:
        ExternalToolError: If the signer fails.
        ArtifactNotFoundError: If the signer succeeded but wrote no sidecar.
    """
    runner.run(
        [*settings.signer_command, str(artifact.path)],
        cwd=project_root,
        env=env,
        description=f"sign {artifact.filename}",
    )
    sidecar = signature_path(artifact.path, settings.signature_suffix)
    if not sidecar.is_file():
        raise ArtifactNotFoundError(
            f"Signer reported success but wrote no signature at {sidecar}", path=sidecar
        )
    _logger.info("Signed artifact", extra={"artifact": artifact.filename})
    return sidecar


def read_signature(sidecar: Path) -> str:
    """Signature text as it goes into the manifest, trailing newlines dropped."""
    return sidecar.read_text(encoding="utf-8").rstrip("\r\n")
