# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the releasekit CLI.

Each function takes the parsed argparse namespace and returns an exit
code. Library code raises; this is the one layer that catches, logs, and
turns exceptions into exit codes.

No print() calls. Everything goes through the structured logger.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional

from releasekit.cli.exit_codes import (
    CONFIG_ERROR,
    RUNTIME_ERROR,
    SUCCESS,
    USER_ERROR,
    VALIDATION_ERROR,
    tool_exit_code,
)
from releasekit.config.exceptions import ConfigError
from releasekit.config.loader import load_config
from releasekit.config.schema import ReleaseKitConfig
from releasekit.logging.logger import configure_logging, get_logger
from releasekit.release.exceptions import ExternalToolError, MissingVersionError, ReleaseError
from releasekit.release.pipeline import ReleasePipeline
from releasekit.utils.paths import resolve_under


def _load_and_configure(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Optional[ReleaseKitConfig], logging.Logger]:
    """
    Shared setup: load config, then configure logging from it and the CLI.

    --log-level wins over the config's log_level. Returns
    (exit_code, config, logger); a non-SUCCESS code means stop.
    """
    logger = get_logger(f"releasekit.cli.{command_name}")

    try:
        config = load_config(Path(args.config) if args.config is not None else None)
    except ConfigError as err:
        configure_logging(args.log_level or "INFO")
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return CONFIG_ERROR, None, logger

    log_file = Path(config.log_file) if config.log_file is not None else None
    try:
        configure_logging(args.log_level or config.log_level, log_file)
    except ValueError as err:
        configure_logging("INFO")
        logger.error("Configuration error", extra={"command": command_name, "error": str(err)})
        return CONFIG_ERROR, None, logger

    if args.config is None:
        logger.debug("No config provided, running with defaults", extra={"command": command_name})

    return SUCCESS, config, logger


def handle_release(args: argparse.Namespace) -> int:
    """Run the release pipeline for the platform named by the subcommand."""
    platform = args.command
    exit_code, config, logger = _load_and_configure(args, platform)
    if exit_code != SUCCESS or config is None:
        return exit_code

    pipeline = ReleasePipeline(config)

    try:
        if args.dry_run:
            plan = pipeline.plan(platform, args.version)
            logger.info(
                "Dry run, nothing will be invoked",
                extra={
                    "platform": plan.platform.value,
                    "version": plan.version,
                    "signed": plan.signed,
                    "targets": plan.targets,
                    "packager_config": plan.packager_config.to_dict(),
                    "artifacts": plan.artifact_names,
                },
            )
            return SUCCESS

        result = pipeline.run(platform, args.version)

    except MissingVersionError as err:
        logger.error(str(err), extra={"command": platform})
        return USER_ERROR
    except ExternalToolError as err:
        logger.error(
            "Release aborted by failing tool",
            extra={"command": platform, "tool": err.command[:1], "exit_code": err.returncode},
        )
        return tool_exit_code(err.returncode)
    except ReleaseError as err:
        logger.error("Release failed", extra={"command": platform, "error": str(err)})
        return RUNTIME_ERROR
    except Exception as err:
        logger.error("Release failed", extra={"command": platform, "error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    logger.info(
        "Release complete",
        extra={
            "platform": result.platform.value,
            "version": result.version,
            "signed": result.signed,
            "artifacts": [a.filename for a in result.artifacts],
            "manifest": str(result.manifest_path) if result.manifest_path else None,
        },
    )
    return SUCCESS


def handle_verify(args: argparse.Namespace) -> int:
    """Check update manifests against the artifacts on disk."""
    exit_code, config, logger = _load_and_configure(args, "verify")
    if exit_code != SUCCESS or config is None:
        return exit_code

    from releasekit.release.verification.verifier import verify_manifest

    project_root = Path(config.build.project_dir).resolve()
    out_dir = (
        Path(args.dist_dir)
        if args.dist_dir is not None
        else resolve_under(project_root, config.packager.output_dir)
    )

    if args.manifest is not None:
        manifests = [Path(args.manifest)]
    else:
        manifests = sorted(out_dir.glob("update_manifest_*.json"))
        if not manifests:
            logger.error("No update manifests found", extra={"dist_dir": str(out_dir)})
            return VALIDATION_ERROR

    try:
        results = [
            verify_manifest(path, Path(args.dist_dir) if args.dist_dir is not None else None)
            for path in manifests
        ]
    except Exception as err:
        logger.error("Verification failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    if all(r.is_valid for r in results):
        logger.info(
            "All manifests verified",
            extra={"manifests": len(results), "checked": sum(r.checked_count for r in results)},
        )
        return SUCCESS
    return VALIDATION_ERROR


def handle_info(args: argparse.Namespace) -> int:
    """Log host information and, for a platform, the pre-flight tool checks."""
    exit_code, config, logger = _load_and_configure(args, "info")
    if exit_code != SUCCESS or config is None:
        return exit_code

    from releasekit import __version__
    from releasekit.release.environment.validator import get_system_info, validate_environment
    from releasekit.release.platforms import get_profile

    system_info = get_system_info()
    logger.info(
        "System information",
        extra={
            "releasekit_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "config": args.config,
        },
    )

    if args.platform is None:
        return SUCCESS

    checks = validate_environment(get_profile(args.platform), config)
    return SUCCESS if all(c.passed for c in checks) else VALIDATION_ERROR
