"""The asset manifest: import identifier -> output files.

Built once per compilation, serialized, and installed at boot. Read-only
at runtime.

Persisted form::

    {"publicPath": "/assets/", "assets": {"./src/chart.py": ["chart.1a2b.js"]}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from lull.errors import ManifestError


@dataclass(slots=True)
class Manifest:
    """Lookup from import identifier to the files a client must fetch.

    Attributes:
        public_path: Base URL prefixed to every file, or ``None``.
        assets: Ordered file lists keyed by identifier.
    """

    public_path: str | None = None
    assets: dict[str, list[str]] = field(default_factory=dict)

    def files_for(self, module_id: str) -> list[str]:
        return list(self.assets.get(module_id, ()))

    def asset_urls(self, module_id: str) -> list[str]:
        """Return the public URL of every file for *module_id*."""
        base = self.public_path or ""
        return [f"{base}{name}" for name in self.assets.get(module_id, ())]

    def __contains__(self, module_id: object) -> bool:
        return module_id in self.assets

    def to_dict(self) -> dict[str, Any]:
        return {"publicPath": self.public_path, "assets": {k: list(v) for k, v in self.assets.items()}}

    def to_json(self) -> str:
        """Serialize deterministically; identical manifests give identical text."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def from_dict(cls, data: Any) -> Manifest:
        if not isinstance(data, dict):
            msg = "manifest must be a JSON object"
            raise ManifestError(msg)
        public_path = data.get("publicPath")
        if public_path is not None and not isinstance(public_path, str):
            msg = "manifest 'publicPath' must be a string or null"
            raise ManifestError(msg)
        assets = data.get("assets", {})
        if not isinstance(assets, dict) or not all(
            isinstance(files, list) and all(isinstance(f, str) for f in files)
            for files in assets.values()
        ):
            msg = "manifest 'assets' must map identifiers to lists of file names"
            raise ManifestError(msg)
        return cls(public_path=public_path, assets={k: list(v) for k, v in assets.items()})

    @classmethod
    def from_json(cls, text: str) -> Manifest:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"manifest is not valid JSON: {exc}"
            raise ManifestError(msg) from exc
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: str | Path) -> Manifest:
        return cls.from_json(Path(path).read_text(encoding="utf-8"))

    def write(self, path: str | Path) -> Path:
        target = Path(path)
        target.write_text(self.to_json(), encoding="utf-8")
        return target
