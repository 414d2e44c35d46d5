# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Pre-flight environment validation.

A release run that dies on a missing `lipo` after ten minutes of compiling
is a waste of a CI slot. These checks look up every executable the chosen
platform profile will invoke, before anything runs. They only report; the
`info` command logs them and the pipeline itself never consults them.
"""

import platform as host_platform
import shutil
import sys
from dataclasses import dataclass
from typing import NamedTuple

from releasekit.config.schema import ReleaseKitConfig
from releasekit.logging.logger import get_logger
from releasekit.release.artifacts import Platform
from releasekit.release.platforms import PlatformProfile

_logger = get_logger(__name__)

MIN_PYTHON_MAJOR: int = 3
MIN_PYTHON_MINOR: int = 10


class SystemInfo(NamedTuple):
    """Snapshot of the host running the release."""

    python_version: str
    platform: str
    architecture: str
    hostname: str


@dataclass(frozen=True)
class EnvironmentCheck:
    """Result of a single environment check."""

    name: str
    passed: bool
    message: str
    value: str


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=host_platform.python_version(),
        platform=host_platform.system(),
        architecture=host_platform.machine(),
        hostname=host_platform.node(),
    )


def check_python_version() -> EnvironmentCheck:
    major, minor, micro = sys.version_info[:3]
    version_str = f"{major}.{minor}.{micro}"
    passed = (major, minor) >= (MIN_PYTHON_MAJOR, MIN_PYTHON_MINOR)
    if passed:
        msg = f"Python {version_str} meets minimum {MIN_PYTHON_MAJOR}.{MIN_PYTHON_MINOR}"
    else:
        msg = f"Python {version_str} does NOT meet minimum {MIN_PYTHON_MAJOR}.{MIN_PYTHON_MINOR}"
    return EnvironmentCheck(name="python_version", passed=passed, message=msg, value=version_str)


def check_tool(role: str, executable: str) -> EnvironmentCheck:
    """Look an executable up on PATH."""
    resolved = shutil.which(executable)
    if resolved is None:
        return EnvironmentCheck(
            name=role,
            passed=False,
            message=f"{executable} not found on PATH",
            value="not_found",
        )
    return EnvironmentCheck(name=role, passed=True, message=f"{executable} found", value=resolved)


def required_tools(profile: PlatformProfile, config: ReleaseKitConfig) -> dict[str, str]:
    """
    Map tool role to executable for everything a run on `profile` invokes.

    Only the first argv element of each command is an executable.
    """
    build = config.build
    tools: dict[str, str] = {
        "compiler": build.compiler_command[0],
        "strip": build.strip_command[0],
        "packager": config.packager.command[0],
        "signer": config.signing.signer_command[0],
    }
    if profile.fuses_binaries:
        tools["lipo"] = build.lipo_command[0]
    if any(spec.archive for spec in profile.formats):
        tools["archiver"] = build.tar_command[0]
    if profile.platform is Platform.LINUX and build.icons.linux_source_svg is not None:
        tools["icon_rasterizer"] = build.inkscape_command[0]
    if config.packager.install_command:
        tools["packager_installer"] = config.packager.install_command[0]
    return tools


def validate_environment(
    profile: PlatformProfile,
    config: ReleaseKitConfig,
) -> list[EnvironmentCheck]:
    """
    Run all pre-flight checks for one platform.

    Returns:
        One EnvironmentCheck per check; callers inspect `passed`.
    """
    checks = [check_python_version()]
    checks.extend(
        check_tool(role, executable)
        for role, executable in required_tools(profile, config).items()
    )

    for check in checks:
        log_fn = _logger.info if check.passed else _logger.error
        log_fn(
            "Environment check",
            extra={"check": check.name, "passed": check.passed, "check_message": check.message},
        )

    passed_count = sum(1 for c in checks if c.passed)
    _logger.info(
        "Environment validation complete",
        extra={
            "platform": profile.platform.value,
            "passed": passed_count,
            "failed": len(checks) - passed_count,
        },
    )
    return checks
