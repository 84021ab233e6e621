"""Server and client rendering of lazy suspense boundaries."""

from lull.rendering.boundary import (
    ClientBoundary,
    LazySuspense,
    render_content,
    render_server,
    render_server_pass,
)
from lull.rendering.markers import extract_persisted, preload_links, wrap_ssr

__all__ = [
    "ClientBoundary",
    "LazySuspense",
    "extract_persisted",
    "preload_links",
    "render_content",
    "render_server",
    "render_server_pass",
    "wrap_ssr",
]
