# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for releasekit.

One root command; each platform is a subcommand taking the version as its
only positional argument, so CI can call it exactly like the old per-platform
scripts:

    releasekit linux v2.5.0
    releasekit macos 2.5.0 --config release.yaml
    releasekit windows v2.5.0 --dry-run
    releasekit verify --dist-dir dist
    releasekit info macos

The version is optional at the argparse level on purpose: a missing version
is reported by the pipeline as "Missing version argument" with exit code 1,
rather than as an argparse usage error.

Global options (--config, --log-level, --dry-run) are inherited by every
subcommand through a parent parser and may go before or after it.
"""

import argparse
import sys

from releasekit.cli.commands import handle_info, handle_release, handle_verify
from releasekit.cli.exit_codes import USER_ERROR
from releasekit.release.artifacts import Platform


def _build_global_parser(suppress_defaults: bool = False) -> argparse.ArgumentParser:
    """
    Parent parser with the options every subcommand accepts.

    The root parser gets the real defaults. Subcommand copies are built with
    `suppress_defaults` so an option given before the subcommand is not
    overwritten by the subparser's default.
    """
    parent = argparse.ArgumentParser(add_help=False)
    argument_default = argparse.SUPPRESS if suppress_defaults else None
    parent.add_argument(
        "--config",
        type=str,
        default=argument_default,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=argument_default,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (overrides the config file).",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=argparse.SUPPRESS if suppress_defaults else False,
        dest="dry_run",
        help="Resolve and log the release plan without invoking any tool.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    for platform in Platform:
        parser = subparsers.add_parser(
            platform.value,
            parents=[parent],
            help=f"Build, package, and optionally sign the {platform.value} release.",
        )
        parser.add_argument(
            "version",
            nargs="?",
            default=None,
            help="Release version, with or without a leading 'v' (e.g. v2.5.0).",
        )
        parser.set_defaults(func=handle_release)

    verify_parser = subparsers.add_parser(
        "verify",
        parents=[parent],
        help="Check update manifests against the artifacts on disk.",
    )
    verify_parser.add_argument(
        "--manifest",
        type=str,
        default=None,
        help="Manifest to verify. Defaults to every update_manifest_*.json in the output dir.",
    )
    verify_parser.add_argument(
        "--dist-dir",
        type=str,
        default=None,
        dest="dist_dir",
        help="Directory holding the artifacts. Defaults to the configured output dir.",
    )
    verify_parser.set_defaults(func=handle_verify)

    info_parser = subparsers.add_parser(
        "info",
        parents=[parent],
        help="Show host information and pre-flight tool checks.",
    )
    info_parser.add_argument(
        "platform",
        nargs="?",
        default=None,
        choices=[p.value for p in Platform],
        help="Run the tool checks for this platform.",
    )
    info_parser.set_defaults(func=handle_info)


def main() -> None:
    """Entry point for [project.scripts]."""
    root_parser = argparse.ArgumentParser(
        prog="releasekit",
        description="releasekit: build, package, sign, and describe launcher releases.",
        parents=[_build_global_parser()],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, _build_global_parser(suppress_defaults=True))

    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
