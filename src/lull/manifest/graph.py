"""Narrow view of a compiler's module/chunk graph.

The builder only needs a handful of fields from the compiler's loosely
typed objects. These classes hold exactly those fields so the traversal
can be exercised with synthetic fixtures, and ``graph_from_dict`` adapts a
JSON snapshot of a real compilation at the integration boundary.

Nodes compare by identity: two modules with the same resource are still
different graph nodes.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from lull.errors import ManifestError

type IdentFunction = Callable[[str], str]


@dataclass(eq=False, slots=True)
class ModuleNode:
    """A source module.

    Attributes:
        resource: Absolute file path of the module's source.
        ident: Returns a build-stable identifier given the build context,
            or ``None`` when the module has no stable identity.
        blocks: Async dependency blocks, one per dynamic-import call site.
    """

    resource: str
    ident: IdentFunction | None = None
    blocks: list[DependencyBlock] = field(default_factory=list)


@dataclass(eq=False, slots=True)
class Dependency:
    """An edge from ``origin_module`` to the resolved target ``module``."""

    request: str
    origin_module: ModuleNode | None
    module: ModuleNode | None


@dataclass(eq=False, slots=True)
class DependencyBlock:
    """Dependencies grouped under one async-import call site."""

    request: str
    module: ModuleNode | None
    dependencies: list[Dependency] = field(default_factory=list)


@dataclass(eq=False, slots=True)
class Chunk:
    files: list[str]
    initial_only: bool = False


@dataclass(frozen=True, slots=True)
class Origin:
    """Which module and request caused a chunk group to exist."""

    module: ModuleNode | None
    request: str


@dataclass(eq=False, slots=True)
class ChunkGroup:
    chunks: list[Chunk]
    origins: list[Origin]


@dataclass(eq=False, slots=True)
class CompilationGraph:
    """Point-in-time snapshot of one finished compilation.

    Attributes:
        context: Build root; identifiers are computed relative to it.
        chunk_groups: All chunk groups, in compiler order.
        public_path: The compiler's configured output public path.
    """

    context: str
    chunk_groups: list[ChunkGroup]
    public_path: str | None = None


def relative_ident(resource: str) -> IdentFunction:
    """Identifier function yielding ``./path`` relative to the build context."""

    def ident(context: str) -> str:
        rel = posixpath.relpath(resource, context)
        return rel if rel.startswith("../") else f"./{rel}"

    return ident


# ---------------------------------------------------------------------------
# JSON snapshot adapter
# ---------------------------------------------------------------------------

def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError):
        msg = f"{where}: missing {key!r}"
        raise ManifestError(msg) from None


def _string(data: Mapping[str, Any], key: str, where: str) -> str:
    value = _require(data, key, where)
    if not isinstance(value, str):
        msg = f"{where}: {key!r} must be a string, got {type(value).__name__}"
        raise ManifestError(msg)
    return value


def _string_list(data: Mapping[str, Any], key: str, where: str) -> list[str]:
    value = _require(data, key, where)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        msg = f"{where}: {key!r} must be a list of strings"
        raise ManifestError(msg)
    return list(value)


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        msg = f"{where}: expected an object, got {type(value).__name__}"
        raise ManifestError(msg)
    return value


def graph_from_dict(data: Mapping[str, Any]) -> CompilationGraph:
    """Build a ``CompilationGraph`` from a JSON-compatible snapshot.

    Expected shape::

        {
          "context": "/app",
          "publicPath": "/assets/",
          "modules": {
            "m1": {"resource": "/app/src/page.py", "ident": "./src/page.py",
                   "blocks": [{"request": "./chart",
                               "dependencies": [{"request": "./chart", "module": "m2"}]}]}
          },
          "chunkGroups": [
            {"chunks": [{"files": ["chart.js"], "initial": false}],
             "origins": [{"module": "m1", "request": "./chart"}]}
          ]
        }

    ``ident`` may be a string (used verbatim), ``true`` (derive from the
    resource relative to ``context``) or absent/``null`` (no stable
    identity). Unknown module references become ``None`` rather than
    errors, matching how a compiler reports detached nodes.

    Raises:
        ManifestError: A required field is missing or has the wrong type.
    """
    data = _mapping(data, "graph")
    context = _string(data, "context", "graph")
    raw_modules = _mapping(data.get("modules", {}), "graph modules")

    modules: dict[str, ModuleNode] = {}
    for key, raw in raw_modules.items():
        raw = _mapping(raw, f"module {key!r}")
        resource = _string(raw, "resource", f"module {key!r}")
        ident_value = raw.get("ident")
        ident: IdentFunction | None
        if isinstance(ident_value, str):
            ident = lambda _context, value=ident_value: value  # noqa: E731
        elif ident_value is True:
            ident = relative_ident(resource)
        else:
            ident = None
        modules[key] = ModuleNode(resource=resource, ident=ident)

    for key, raw in raw_modules.items():
        owner = modules[key]
        for raw_block in raw.get("blocks", ()):
            raw_block = _mapping(raw_block, f"block in module {key!r}")
            block = DependencyBlock(
                request=_string(raw_block, "request", f"block in module {key!r}"),
                module=owner,
            )
            for raw_dep in raw_block.get("dependencies", ()):
                raw_dep = _mapping(raw_dep, f"dependency in module {key!r}")
                block.dependencies.append(
                    Dependency(
                        request=_string(raw_dep, "request", f"dependency in module {key!r}"),
                        origin_module=modules.get(raw_dep.get("originModule", key)),
                        module=modules.get(raw_dep.get("module")),
                    )
                )
            owner.blocks.append(block)

    groups: list[ChunkGroup] = []
    raw_groups: Sequence[Any] = data.get("chunkGroups", ())
    for index, raw_group in enumerate(raw_groups):
        where = f"chunk group {index}"
        raw_group = _mapping(raw_group, where)
        chunks = [
            Chunk(
                files=_string_list(_mapping(c, where), "files", where),
                initial_only=bool(c.get("initial", False)),
            )
            for c in raw_group.get("chunks", ())
        ]
        origins = [
            Origin(
                module=modules.get(_mapping(o, where).get("module")),
                request=_string(o, "request", where),
            )
            for o in raw_group.get("origins", ())
        ]
        groups.append(ChunkGroup(chunks=chunks, origins=origins))

    return CompilationGraph(context=context, chunk_groups=groups, public_path=data.get("publicPath"))
