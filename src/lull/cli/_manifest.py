"""``lull manifest`` — build the asset manifest for one compilation.

Reads a compilation graph snapshot and a lazy import registry, runs the
builder and writes the manifest. Exits with code 1 on malformed input.
"""

import argparse
import sys

from lull.cli._load import load_json
from lull.config import ManifestConfig
from lull.errors import ManifestError
from lull.manifest.builder import build_manifest
from lull.manifest.graph import graph_from_dict
from lull.manifest.registry import ImportRegistry


def run_manifest(args: argparse.Namespace) -> None:
    defaults = ManifestConfig()
    config = ManifestConfig(
        filename=args.output or defaults.filename,
        public_path=args.public_path,
    )

    try:
        graph = graph_from_dict(load_json(args.graph))
        registry = ImportRegistry.from_dict(load_json(args.registry))
    except ManifestError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    manifest = build_manifest(graph, registry, public_path=config.public_path)
    target = manifest.write(config.filename)
    print(f"Wrote {len(manifest.assets)} entries to {target}")
