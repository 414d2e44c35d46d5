# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release version handling.

Versions arrive from CI as git tags ("v1.2.3") or bare strings ("1.2.3").
Everything downstream (filenames, packager config, manifest) wants the bare
form, so the single optional leading "v" is stripped here and nowhere else.
"""

import re
from typing import Optional

from releasekit.logging.logger import get_logger
from releasekit.release.exceptions import MissingVersionError

_logger = get_logger(__name__)

_SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


def is_semver(version: str) -> bool:
    """True if `version` is a semantic version without a tag prefix."""
    return _SEMVER_PATTERN.match(version) is not None


def normalize_version(raw_version: Optional[str]) -> str:
    """
    Strip one optional leading "v" from a raw version argument.

    Only the first character is ever removed, so "vv1.0.0" becomes "v1.0.0".
    Non-semver strings are accepted (the packager has the final say) but
    logged as a warning.

    Raises:
        MissingVersionError: If the argument is None, empty, whitespace, or just "v".
    """
    if raw_version is None or not raw_version.strip():
        raise MissingVersionError()

    version = raw_version[1:] if raw_version.startswith("v") else raw_version
    if not version.strip():
        raise MissingVersionError()

    if not is_semver(version):
        _logger.warning(
            "Version is not a semantic version",
            extra={"raw_version": raw_version, "version": version},
        )
    return version
