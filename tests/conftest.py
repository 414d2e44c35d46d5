# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for releasekit tests.

The pipeline only ever talks to the outside world through ToolRunner, so
tests swap in FakeToolRunner: it records every invocation and fabricates
the files each real tool would have left behind (binaries, packages,
archives, signatures). No compiler, packager, or signer is needed.
"""

import json
import textwrap
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import pytest

from releasekit.config.schema import ReleaseKitConfig
from releasekit.release.exceptions import ExternalToolError
from releasekit.release.toolchain.runner import ToolRunner

SIGNING_KEY_VAR = "CARGO_PACKAGER_SIGN_PRIVATE_KEY"

_PACKAGER_OUTPUTS = {
    "deb": "{name}_{version}_amd64.deb",
    "appimage": "{name}_{version}_x86_64.AppImage",
    "dmg": "{name}_{version}_universal.dmg",
    "nsis": "{name}_{version}_x64-setup.exe",
}


@dataclass(frozen=True)
class ToolCall:
    argv: list[str]
    env: Optional[dict[str, str]]
    cwd: Optional[Path]

    @property
    def tool(self) -> str:
        return self.argv[0]


class FakeToolRunner(ToolRunner):
    """
    Records invocations and simulates the fake-* tools used by `release_config`.

    `fail_on` names a tool (argv[0]) that exits with `fail_code` instead.
    """

    def __init__(
        self,
        config: ReleaseKitConfig,
        fail_on: Optional[str] = None,
        fail_code: int = 1,
    ) -> None:
        self.config = config
        self.fail_on = fail_on
        self.fail_code = fail_code
        self.calls: list[ToolCall] = []
        self._handlers: dict[str, Callable[[list[str], Path], None]] = {
            "fake-cargo": self._compile,
            "fake-strip": self._strip,
            "fake-lipo": self._lipo,
            "fake-packager": self._package,
            "fake-tar": self._archive,
            "fake-signer": self._sign,
            "fake-inkscape": self._rasterize,
        }

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        description: str = "",
    ) -> None:
        argv = [str(part) for part in command]
        self.calls.append(ToolCall(argv, dict(env) if env is not None else None, cwd))
        if argv[0] == self.fail_on:
            raise ExternalToolError(argv, self.fail_code)
        handler = self._handlers.get(argv[0])
        if handler is not None:
            handler(argv, cwd or Path.cwd())

    def tools(self) -> list[str]:
        return [call.tool for call in self.calls]

    def calls_to(self, tool: str) -> list[ToolCall]:
        return [call for call in self.calls if call.tool == tool]

    def _compile(self, argv: list[str], cwd: Path) -> None:
        target = argv[argv.index("--target") + 1]
        suffix = ".exe" if "windows" in target else ""
        binary = (
            cwd / self.config.build.target_dir / target / "release"
            / f"{self.config.build.binary_name}{suffix}"
        )
        binary.parent.mkdir(parents=True, exist_ok=True)
        binary.write_bytes(f"binary for {target}".encode())

    def _strip(self, argv: list[str], cwd: Path) -> None:
        path = Path(argv[1])
        path.write_bytes(b"stripped " + path.read_bytes())

    def _lipo(self, argv: list[str], cwd: Path) -> None:
        output = Path(argv[argv.index("-output") + 1])
        inputs = argv[argv.index("-output") + 2:]
        output.write_bytes(b"|".join(Path(p).read_bytes() for p in inputs))

    def _package(self, argv: list[str], cwd: Path) -> None:
        packager_config = json.loads(argv[argv.index("--config") + 1])
        out_dir = Path(packager_config["outDir"])
        staged = out_dir / packager_config["binaries"][0]["path"]
        assert staged.is_file(), f"packager expected staged binary at {staged}"

        for fmt in packager_config["formats"]:
            if fmt == "app":
                bundle = out_dir / f"{packager_config['productName']}.app" / "Contents" / "MacOS"
                bundle.mkdir(parents=True, exist_ok=True)
                (bundle / "launcher").write_bytes(staged.read_bytes())
                continue
            name = _PACKAGER_OUTPUTS[fmt].format(
                name=packager_config["name"], version=packager_config["version"]
            )
            (out_dir / name).write_bytes(f"{fmt} package of {staged.name}".encode())

    def _archive(self, argv: list[str], cwd: Path) -> None:
        target = Path(argv[argv.index("-czf") + 1])
        target.write_bytes(f"archive of {argv[-1]}".encode())

    def _sign(self, argv: list[str], cwd: Path) -> None:
        artifact = Path(argv[-1])
        sidecar = artifact.with_name(artifact.name + ".sig")
        sidecar.write_text(f"sig-of-{artifact.name}\n", encoding="utf-8")

    def _rasterize(self, argv: list[str], cwd: Path) -> None:
        output = next(a.split("=", 1)[1] for a in argv if a.startswith("--export-filename="))
        Path(output).write_bytes(b"png")


def make_release_config(project_dir: Path, **overrides: object) -> ReleaseKitConfig:
    """A config pointing every tool at the fake-* names FakeToolRunner understands."""
    data: dict[str, object] = {
        "product": {
            "artifact_prefix": "Product",
            "product_name": "Product Launcher",
            "slug": "product-launcher",
            "identifier": "com.example.productlauncher",
        },
        "build": {
            "project_dir": str(project_dir),
            "binary_name": "product_launcher",
            "compiler_command": ["fake-cargo"],
            "strip_command": ["fake-strip"],
            "lipo_command": ["fake-lipo"],
            "tar_command": ["fake-tar"],
            "inkscape_command": ["fake-inkscape"],
        },
        "packager": {"command": ["fake-packager"]},
        "signing": {"signer_command": ["fake-signer"]},
        "publish": {"repository_url": "https://github.com/example/product"},
    }
    data.update(overrides)
    return ReleaseKitConfig.model_validate(data)


@pytest.fixture()
def release_config(tmp_path: Path) -> ReleaseKitConfig:
    return make_release_config(tmp_path)


@pytest.fixture()
def fake_runner(release_config: ReleaseKitConfig) -> FakeToolRunner:
    return FakeToolRunner(release_config)


@pytest.fixture()
def make_config() -> Callable[..., ReleaseKitConfig]:
    """Factory for configs with overridden top-level sections."""
    return make_release_config


@pytest.fixture()
def make_runner() -> Callable[..., FakeToolRunner]:
    """Factory for runners that fail on a chosen tool."""
    return FakeToolRunner


@pytest.fixture()
def signing_env() -> dict[str, str]:
    return {SIGNING_KEY_VAR: "secret-key", "PATH": "/usr/bin"}


@pytest.fixture()
def unsigned_env() -> dict[str, str]:
    return {"PATH": "/usr/bin"}


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """A small valid YAML config overriding a few product fields."""
    config_content = textwrap.dedent("""\
        log_level: "DEBUG"
        product:
          artifact_prefix: "Product"
          slug: "product-launcher"
        publish:
          repository_url: "https://github.com/example/product"
    """)
    config_file = tmp_path / "release.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML, but with a key the schema doesn't know."""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text("product:\n  nickname: launchy\n", encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
