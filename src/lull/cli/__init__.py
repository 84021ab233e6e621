"""Lull CLI — build the asset manifest and inspect it.

Entry point registered as ``lull`` in ``pyproject.toml``::

    [project.scripts]
    lull = "lull.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``lull`` command."""
    parser = argparse.ArgumentParser(
        prog="lull",
        description="Lull — phase-gated lazy units and their asset manifest.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- lull manifest ----------------------------------------------------
    manifest_parser = subparsers.add_parser(
        "manifest", help="Build the asset manifest from a compilation snapshot"
    )
    manifest_parser.add_argument("graph", help="Compilation graph snapshot (JSON)")
    manifest_parser.add_argument(
        "--registry",
        required=True,
        help="Lazy import registry (JSON object of resource -> requests)",
    )
    manifest_parser.add_argument(
        "--public-path",
        default=None,
        help="Override the compilation's public path",
    )
    manifest_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file (default: lull-manifest.json)",
    )

    # -- lull assets ------------------------------------------------------
    assets_parser = subparsers.add_parser("assets", help="Print asset URLs for a module id")
    assets_parser.add_argument("manifest", help="Manifest file")
    assets_parser.add_argument("module_id", help="Import identifier (e.g. ./src/chart.py)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "manifest":
        from lull.cli._manifest import run_manifest

        run_manifest(args)
    elif args.command == "assets":
        from lull.cli._assets import run_assets

        run_assets(args)
