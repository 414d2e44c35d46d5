# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for releasekit.

Each concern of a release run gets its own frozen pydantic model: what the
product is called, how to build it, how to package it, how to sign it, and
where the artifacts get published. All of them are frozen, forbid unknown
keys, and validate their defaults.

Every field has a default, so the CLI works without a config file. The
defaults follow cargo conventions (cargo build, cargo packager, strip, lipo)
because the launcher is a cargo workspace. Commands are lists, never shell
strings: they are passed straight to subprocess without a shell.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from releasekit.release.artifacts import Platform


class ProductConfig(BaseModel):
    """Names the product goes by, internally and on the download page."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    artifact_prefix: str = Field(
        default="Launcher",
        min_length=1,
        description="Prefix of every canonical artifact filename, e.g. 'PandoraLauncher'",
    )
    product_name: str = Field(
        default="Launcher",
        min_length=1,
        description="Human-readable product name; also the name of the macOS .app bundle",
    )
    slug: str = Field(
        default="launcher",
        min_length=1,
        description="Packager-internal name embedded in its output filenames",
    )
    identifier: str = Field(
        default="com.example.launcher",
        min_length=1,
        description="Reverse-domain bundle identifier",
    )


class IconConfig(BaseModel):
    """Icon inputs handed to the packager, per platform, relative to the project dir."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    linux: list[str] = Field(default_factory=lambda: ["package/icon_512x512.png"])
    macos: list[str] = Field(default_factory=lambda: ["package/mac.icns"])
    windows: list[str] = Field(default_factory=lambda: ["package/windows.ico"])
    linux_source_svg: Optional[str] = Field(
        default=None,
        description="If set, rasterised into the first Linux icon before packaging",
    )
    raster_width: int = Field(default=512, ge=16)

    def for_platform(self, platform: Platform) -> list[str]:
        """Icon list for one platform."""
        return list(getattr(self, platform.value))


class BuildConfig(BaseModel):
    """How the launcher binary gets compiled, stripped, and fused."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    project_dir: str = Field(default=".", description="Directory every tool runs in")
    binary_name: str = Field(default="launcher", min_length=1)
    target_dir: str = Field(default="target", description="Compiler output root")
    compiler_command: list[str] = Field(default_factory=lambda: ["cargo"], min_length=1)
    strip_command: list[str] = Field(default_factory=lambda: ["strip"], min_length=1)
    lipo_command: list[str] = Field(default_factory=lambda: ["lipo"], min_length=1)
    tar_command: list[str] = Field(default_factory=lambda: ["tar"], min_length=1)
    inkscape_command: list[str] = Field(default_factory=lambda: ["inkscape"], min_length=1)
    icons: IconConfig = Field(default_factory=IconConfig)


class PackagerSettings(BaseModel):
    """The external installer generator."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    command: list[str] = Field(default_factory=lambda: ["cargo", "packager"], min_length=1)
    install_command: Optional[list[str]] = Field(
        default=None,
        description="Optional command run before packaging, e.g. ['cargo', 'install', 'cargo-packager']",
    )
    output_dir: str = Field(default="dist", description="Staging and output directory")


class SigningSettings(BaseModel):
    """Detached signing of the canonical artifacts."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    key_env_var: str = Field(
        default="CARGO_PACKAGER_SIGN_PRIVATE_KEY",
        min_length=1,
        description="Environment variable holding the private key; its presence enables signing",
    )
    signer_command: list[str] = Field(
        default_factory=lambda: ["cargo", "packager", "signer", "sign"],
        min_length=1,
    )
    signature_suffix: str = Field(default=".sig")

    @field_validator("signature_suffix")
    @classmethod
    def _suffix_starts_with_dot(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:
            raise ValueError(f"signature_suffix must look like '.sig', got {value!r}")
        return value


class PublishSettings(BaseModel):
    """Where the update manifest tells clients to download from."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    repository_url: str = Field(
        default="https://github.com/example/launcher",
        description="Repository base URL; releases live under /releases/download/<tag>/",
    )
    tag_prefix: str = Field(default="v", description="Prepended to the version to form the tag")


class ReleaseKitConfig(BaseModel):
    """
    Top-level config container.

    A YAML file only needs the sections it wants to change; everything else
    falls back to the defaults above.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(default="1.0.0")
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    version_env_var: str = Field(
        default="RELEASE_VERSION",
        min_length=1,
        description="Exported to the compiler so the launcher embeds its own version",
    )
    product: ProductConfig = Field(default_factory=ProductConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    packager: PackagerSettings = Field(default_factory=PackagerSettings)
    signing: SigningSettings = Field(default_factory=SigningSettings)
    publish: PublishSettings = Field(default_factory=PublishSettings)
