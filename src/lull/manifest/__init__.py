"""Build-time asset manifest: graph abstraction, registry and builder."""

from lull.manifest.builder import build_manifest
from lull.manifest.graph import (
    Chunk,
    ChunkGroup,
    CompilationGraph,
    Dependency,
    DependencyBlock,
    ModuleNode,
    Origin,
    graph_from_dict,
    relative_ident,
)
from lull.manifest.model import Manifest
from lull.manifest.registry import ImportRegistry

__all__ = [
    "Chunk",
    "ChunkGroup",
    "CompilationGraph",
    "Dependency",
    "DependencyBlock",
    "ImportRegistry",
    "Manifest",
    "ModuleNode",
    "Origin",
    "build_manifest",
    "graph_from_dict",
    "relative_ident",
]
