"""``lull assets`` — print the asset URLs a module id resolves to."""

import argparse
import sys

from lull.cli._load import load_json
from lull.errors import ManifestError
from lull.manifest.model import Manifest


def run_assets(args: argparse.Namespace) -> None:
    """Print one URL per line; exit 1 if the id has no entry."""
    try:
        manifest = Manifest.from_dict(load_json(args.manifest))
    except ManifestError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.module_id not in manifest:
        print(f"Error: no manifest entry for {args.module_id!r}", file=sys.stderr)
        raise SystemExit(1)

    for url in manifest.asset_urls(args.module_id):
        print(url)
