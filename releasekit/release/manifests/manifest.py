# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Update manifest generation and loading.

The launcher's auto-updater polls `update_manifest_<platform>.json` from
the latest release. It looks up its own architecture, picks the artifact
kind it knows how to install, downloads it, and checks size, SHA-1, and
signature before swapping itself out:

    {
      "version": "2.5.0",
      "downloads": {
        "x86_64": {
          "portable": {"download": "<url>", "size": 123, "sha1": "<hex>", "sig": "<text>"},
          "appimage": {...}
        }
      }
    }

A manifest is only ever written in signed mode, and only for artifacts
that exist on disk at the moment it is built.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote

from releasekit.config.schema import PublishSettings
from releasekit.logging.logger import get_logger
from releasekit.release.artifacts import Platform, ReleaseArtifact
from releasekit.release.exceptions import ArtifactNotFoundError
from releasekit.utils.filesystem import atomic_write

_logger = get_logger(__name__)

MANIFEST_FILENAME_TEMPLATE = "update_manifest_{platform}.json"

_REQUIRED_ENTRY_FIELDS: frozenset[str] = frozenset({"download", "size", "sha1", "sig"})


@dataclass(frozen=True)
class ManifestEntry:
    download: str
    size: int
    sha1: str
    sig: str

    def to_dict(self) -> dict[str, object]:
        return {"download": self.download, "size": self.size, "sha1": self.sha1, "sig": self.sig}


@dataclass(frozen=True)
class UpdateManifest:
    """Everything an updater needs for one platform's release."""

    version: str
    downloads: dict[str, dict[str, ManifestEntry]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "downloads": {
                arch: {key: entry.to_dict() for key, entry in entries.items()}
                for arch, entries in self.downloads.items()
            },
        }

    def entries(self) -> list[tuple[str, str, ManifestEntry]]:
        """Flat (architecture, key, entry) view, in insertion order."""
        return [
            (arch, key, entry)
            for arch, entries in self.downloads.items()
            for key, entry in entries.items()
        ]


def manifest_path(out_dir: Path, platform: Platform) -> Path:
    return out_dir / MANIFEST_FILENAME_TEMPLATE.format(platform=platform.value)


def download_url(publish: PublishSettings, version: str, filename: str) -> str:
    """
    Public URL of an artifact once uploaded to the version's release.

    <repository_url>/releases/download/<tag_prefix><version>/<filename>
    """
    base = publish.repository_url.rstrip("/")
    tag = f"{publish.tag_prefix}{version}"
    return f"{base}/releases/download/{quote(tag)}/{quote(filename)}"


def create_manifest(
    version: str,
    artifacts: Iterable[ReleaseArtifact],
    publish: PublishSettings,
) -> UpdateManifest:
    """
    Build the manifest from fully described artifacts.

    Every artifact must already carry size, checksum, and signature.

    Raises:
        ArtifactNotFoundError: If an artifact's file is not on disk.
        ValueError: If an artifact is missing its digest or signature, or
            two artifacts claim the same (architecture, key) slot.
    """
    downloads: dict[str, dict[str, ManifestEntry]] = {}
    for artifact in artifacts:
        if not artifact.path.is_file():
            raise ArtifactNotFoundError(
                f"Refusing to list missing artifact in manifest: {artifact.path}",
                path=artifact.path,
            )
        if artifact.size_bytes is None or artifact.checksum is None:
            raise ValueError(f"Artifact {artifact.filename} has no size/checksum")
        if not artifact.is_signed:
            raise ValueError(f"Artifact {artifact.filename} is not signed")

        slot = downloads.setdefault(artifact.architecture, {})
        if artifact.key in slot:
            raise ValueError(
                f"Duplicate manifest entry {artifact.architecture}/{artifact.key}"
            )
        slot[artifact.key] = ManifestEntry(
            download=download_url(publish, version, artifact.filename),
            size=artifact.size_bytes,
            sha1=artifact.checksum,
            sig=artifact.signature,
        )

    manifest = UpdateManifest(version=version, downloads=downloads)
    _logger.info(
        "Manifest created",
        extra={"version": version, "entries": len(manifest.entries())},
    )
    return manifest


def write_manifest(manifest: UpdateManifest, path: Path) -> Path:
    """Serialize a manifest to JSON and write it atomically."""
    content = json.dumps(manifest.to_dict(), indent=2) + "\n"
    atomic_write(path, content)

    _logger.info(
        "Manifest written",
        extra={"path": str(path), "version": manifest.version},
    )
    return path


def load_manifest(path: Path) -> UpdateManifest:
    """
    Load a manifest from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the structure or any entry is malformed.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Manifest file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as err:
        raise ValueError(f"Manifest is not valid JSON: {err}") from err

    if not isinstance(data, dict) or "version" not in data or "downloads" not in data:
        raise ValueError("Manifest is missing required fields: version, downloads")
    if not isinstance(data["downloads"], dict):
        raise ValueError("Manifest 'downloads' must be an object")

    downloads: dict[str, dict[str, ManifestEntry]] = {}
    for arch, entries in data["downloads"].items():
        if not isinstance(entries, dict):
            raise ValueError(f"Manifest downloads.{arch} must be an object")
        for key, raw in entries.items():
            if not isinstance(raw, dict):
                raise ValueError(f"Manifest entry {arch}/{key} must be an object")
            missing = _REQUIRED_ENTRY_FIELDS - set(raw.keys())
            if missing:
                raise ValueError(
                    f"Manifest entry {arch}/{key} is missing required fields: "
                    f"{', '.join(sorted(missing))}"
                )
            downloads.setdefault(arch, {})[key] = ManifestEntry(
                download=str(raw["download"]),
                size=int(raw["size"]),
                sha1=str(raw["sha1"]),
                sig=str(raw["sig"]),
            )

    return UpdateManifest(version=str(data["version"]), downloads=downloads)
