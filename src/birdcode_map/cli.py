"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import sys
from datetime import UTC, datetime
from pathlib import Path

from birdcode_map import __version__
from birdcode_map.analysis.diagnostics import diagnose_sources
from birdcode_map.config import get_settings
from birdcode_map.errors import BirdcodeMapError
from birdcode_map.flows.build import build_mapping
from birdcode_map.schemas import CommonNameSource, Result
from birdcode_map.services.logging import configure_logging
from birdcode_map.store import MapStore


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="birdcode-map",
        description="Reconcile banding alpha codes with checklist species codes",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'build' command - produce map-<version>.json
    build_parser = subparsers.add_parser("build", help="Build a versioned mapping artifact")
    build_parser.add_argument("--checklist", type=Path, default=None, help="Checklist CSV path")
    build_parser.add_argument("--banding", type=Path, default=None, help="Banding list CSV path")
    build_parser.add_argument("--output-dir", type=Path, default=None, help="Artifact directory")
    build_parser.add_argument(
        "--map-version",
        type=str,
        default=None,
        help="CalVer version YYYY.MM[.DD][-hotfix.N] (default: settings or current month)",
    )
    build_parser.add_argument(
        "--updated-at",
        type=str,
        default=None,
        help="ISO-8601 timestamp stamped on every record (default: now)",
    )
    build_parser.add_argument(
        "--prefer",
        choices=[s.value for s in CommonNameSource],
        default=None,
        help="Common-name source that wins on disagreement (default: checklist)",
    )

    # 'diagnose' command - parse errors and join coverage
    diagnose_parser = subparsers.add_parser("diagnose", help="Report parse errors and join coverage")
    diagnose_parser.add_argument("--checklist", type=Path, default=None, help="Checklist CSV path")
    diagnose_parser.add_argument("--banding", type=Path, default=None, help="Banding list CSV path")
    diagnose_parser.add_argument(
        "--samples", type=int, default=3, help="Sample errors to show per type (default: 3)"
    )

    # 'versions' command - list artifacts
    versions_parser = subparsers.add_parser("versions", help="List built map versions")
    versions_parser.add_argument("--output-dir", type=Path, default=None, help="Artifact directory")

    # 'info' command
    subparsers.add_parser("info", help="Show application info")

    return parser


def run_build(args: argparse.Namespace) -> Result:
    """Run the build flow from CLI arguments, falling back to settings."""
    settings = get_settings()
    now = datetime.now(UTC)
    try:
        build = build_mapping(
            checklist_path=args.checklist or settings.resolved_checklist_path,
            banding_path=args.banding or settings.resolved_banding_path,
            output_dir=args.output_dir or settings.resolved_output_dir,
            map_version=args.map_version or settings.map_version or now.strftime("%Y.%m"),
            updated_at=args.updated_at or now.isoformat(),
            preferred_common_name_source=args.prefer or settings.preferred_common_name_source,
        )
    except BirdcodeMapError as exc:
        return Result(success=False, message="Build failed", error=str(exc))
    return Result(
        success=True,
        message=f"Generated {build.output_path} ({build.record_count} records)",
        data=build.model_dump(),
    )


def cmd_build(args: argparse.Namespace) -> int:
    """Handle the 'build' command."""
    result = run_build(args)
    if result.success:
        print(f"Success: {result.message}")
        return 0
    print(f"Error: {result.error}", file=sys.stderr)
    return 1


def cmd_diagnose(args: argparse.Namespace) -> int:
    """Handle the 'diagnose' command."""
    settings = get_settings()
    checklist_path = args.checklist or settings.resolved_checklist_path
    banding_path = args.banding or settings.resolved_banding_path
    for path in (checklist_path, banding_path):
        if not path.exists():
            print(f"Error: source not found: {path}", file=sys.stderr)
            return 1

    report = diagnose_sources(
        checklist_path.read_text(encoding="utf-8"),
        banding_path.read_text(encoding="utf-8"),
        sample_size=args.samples,
    )

    for source in (report.checklist, report.banding):
        stats = source.stats
        print(f"== {source.label} parse")
        print(
            f"Valid={stats.valid_records} Skipped={stats.skipped_records} "
            f"Errors={stats.error_records} Total={stats.total_rows}"
        )
        for group in source.error_groups:
            print(f"  {group.type}: {group.count}")
            for sample in group.samples:
                print(f"    row={sample.row} value={sample.value!r} msg={sample.message!r}")

    exact, variant = report.exact_join, report.variant_join
    print("== join")
    print(
        f"Exact:   matched={exact.successful_matches} "
        f"unmatched checklist={exact.unmatched_checklist_records} "
        f"banding={exact.unmatched_banding_records}"
    )
    print(
        f"Variant: matched={variant.successful_matches} "
        f"(exact={variant.exact_matches}, binomial={variant.binomial_matches}) "
        f"unmatched checklist={variant.unmatched_checklist_records} "
        f"banding={variant.unmatched_banding_records}"
    )
    if report.variant_gain > 0:
        print(f"Variant-aware join adds +{report.variant_gain} matches over exact")
    return 0


def cmd_versions(args: argparse.Namespace) -> int:
    """Handle the 'versions' command."""
    settings = get_settings()
    store = MapStore(args.output_dir or settings.resolved_output_dir)
    versions = store.list_versions()
    if not versions:
        print(f"No map artifacts in {store.base}")
        return 0
    latest = versions[-1]
    for version in versions:
        marker = " (latest)" if version == latest else ""
        print(f"{version}{marker}")
    return 0


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Checklist: {settings.resolved_checklist_path}")
    print(f"Banding: {settings.resolved_banding_path}")
    print(f"Output: {settings.resolved_output_dir}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(debug=args.debug, force=args.debug)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "build": cmd_build,
        "diagnose": cmd_diagnose,
        "versions": cmd_versions,
        "info": cmd_info,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
