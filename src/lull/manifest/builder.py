"""Build-time manifest construction.

Walks every chunk group of a finished compilation and maps each lazy
import to the output files that realize it.

One dynamic-import call site leaves three parallel artifacts in the
graph: an origin record on the chunk group, a dependency block on the
importing module, and a dependency edge inside that block. Only the
combination that agrees on module and request identifies that exact
import statement, so two call sites importing the same target never
contaminate each other's entries.

Any broken link in the chain is skipped. A module without an entry only
loses preload hints; its own fetch path still works.
"""

from __future__ import annotations

import logging

from lull.manifest.graph import ChunkGroup, CompilationGraph, Dependency, ModuleNode, Origin
from lull.manifest.model import Manifest
from lull.manifest.registry import ImportRegistry

logger = logging.getLogger("lull.manifest")

SOURCE_MAP_SUFFIX = ".map"


def _find_dependency(origin_module: ModuleNode, request: str) -> Dependency | None:
    block = next(
        (b for b in origin_module.blocks if b.request == request and b.module is origin_module),
        None,
    )
    if block is None:
        return None
    return next(
        (
            d
            for d in block.dependencies
            if d.request == request and d.origin_module is origin_module
        ),
        None,
    )


def _identify(graph: CompilationGraph, registry: ImportRegistry, origin: Origin) -> str | None:
    """Resolve one origin record to its manifest key, or ``None`` on a miss."""
    module = origin.module
    if module is None:
        return None
    if not registry.has(module.resource, origin.request):
        # An ordinary import produced this group.
        return None

    dependency = _find_dependency(module, origin.request)
    if dependency is None:
        logger.debug("No dependency for %r in %s", origin.request, module.resource)
        return None

    target = dependency.module
    if target is None or target.ident is None:
        logger.debug("Target of %r in %s has no stable identifier", origin.request, module.resource)
        return None

    return target.ident(graph.context) or None


def _collect_files(group: ChunkGroup) -> list[str]:
    return [
        name
        for chunk in group.chunks
        if not chunk.initial_only
        for name in chunk.files
        if not name.endswith(SOURCE_MAP_SUFFIX)
    ]


def build_manifest(
    graph: CompilationGraph,
    registry: ImportRegistry,
    public_path: str | None = None,
) -> Manifest:
    """Build the manifest for one finished compilation.

    Args:
        graph: The compilation snapshot.
        registry: Lazy import requests per module resource.
        public_path: Override for the graph's output public path.

    The first chunk group to claim an identifier wins; later groups
    resolving to the same key are ignored.
    """
    manifest = Manifest(public_path=public_path if public_path is not None else graph.public_path)

    for group in graph.chunk_groups:
        for origin in group.origins:
            name = _identify(graph, registry, origin)
            if name is None:
                continue
            if name in manifest.assets:
                logger.debug("Keeping first entry for %s", name)
                continue
            files = _collect_files(group)
            if files:
                manifest.assets[name] = files

    logger.debug("Manifest built with %d entries", len(manifest.assets))
    return manifest
