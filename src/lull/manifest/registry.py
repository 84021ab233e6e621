"""Registry of lazy import requests, keyed by importing module.

Collected while sources are scanned: every time a module declares a lazy
unit whose import function requests ``"./chart"``, that raw request is
recorded under the module's resource path. The manifest builder uses it to
tell chunk groups created by lazy imports apart from ordinary ones.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from lull.errors import ManifestError


class ImportRegistry:
    """Maps a module resource path to the raw requests it imports lazily."""

    __slots__ = ("_requests",)

    def __init__(self, entries: Mapping[str, Iterable[str]] | None = None) -> None:
        self._requests: dict[str, set[str]] = {}
        if entries:
            for resource, requests in entries.items():
                for request in requests:
                    self.record(resource, request)

    def record(self, resource: str, request: str) -> None:
        self._requests.setdefault(resource, set()).add(request)

    def requests_for(self, resource: str) -> frozenset[str]:
        return frozenset(self._requests.get(resource, ()))

    def has(self, resource: str, request: str) -> bool:
        return request in self._requests.get(resource, ())

    def __len__(self) -> int:
        return len(self._requests)

    def __contains__(self, resource: object) -> bool:
        return resource in self._requests

    def to_dict(self) -> dict[str, list[str]]:
        return {resource: sorted(requests) for resource, requests in self._requests.items()}

    @classmethod
    def from_dict(cls, data: Any) -> ImportRegistry:
        """Build a registry from ``{resource: [request, ...]}``.

        Raises:
            ManifestError: *data* is not a mapping of string lists.
        """
        if not isinstance(data, Mapping):
            msg = "import registry must be an object of {resource: [requests]}"
            raise ManifestError(msg)
        registry = cls()
        for resource, requests in data.items():
            if isinstance(requests, str) or not isinstance(requests, Iterable):
                msg = f"import registry: requests for {resource!r} must be a list"
                raise ManifestError(msg)
            for request in requests:
                registry.record(resource, str(request))
        return registry

    def __repr__(self) -> str:
        return f"<ImportRegistry {len(self)} modules>"
