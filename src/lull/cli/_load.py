"""Shared JSON loading for CLI commands."""

import json
import sys
from pathlib import Path
from typing import Any


def load_json(path: str) -> Any:
    """Read a JSON file, exiting with code 1 on any read or parse error."""
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error: cannot read {path}: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
