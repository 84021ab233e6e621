"""Server-pass markup: content markers and preload hints.

Server-rendered lazy content is bracketed by hidden ``<input>`` markers so
the client pass can find and reuse the exact bytes the server produced::

    <input type="hidden" data-lazy-begin="./widgets/chart">
    ...content...
    <input type="hidden" data-lazy-end="./widgets/chart">

The client strips the markers; they never appear in client output.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Sequence

from kida import DictLoader, Environment
from kida.utils.html import Markup

_TEMPLATES = {
    "lull/ssr.html": (
        '<input type="hidden" data-lazy-begin="{{ module_id }}">'
        "{{ content }}"
        '<input type="hidden" data-lazy-end="{{ module_id }}">'
    ),
    "lull/preload.html": (
        '{% for url in urls %}<link rel="preload" href="{{ url }}" as="script">{% end %}'
    ),
}


@functools.cache
def _env() -> Environment:
    return Environment(loader=DictLoader(_TEMPLATES), autoescape=True)


def wrap_ssr(module_id: str, content: str) -> str:
    """Bracket server-rendered *content* with begin/end markers."""
    template = _env().get_template("lull/ssr.html")
    return template.render({"module_id": module_id, "content": Markup(content)})


def preload_links(urls: Sequence[str]) -> str:
    """Render one ``<link rel="preload">`` per asset URL."""
    if not urls:
        return ""
    return _env().get_template("lull/preload.html").render({"urls": list(urls)})


def extract_persisted(document: str, module_id: str) -> str | None:
    """Return the server markup between *module_id*'s markers, or ``None``."""
    if not document:
        return None
    # Same escaper the templates use, so ids match byte for byte.
    ident = re.escape(str(Markup.escape(module_id)))
    pattern = (
        rf'<input type="hidden" data-lazy-begin="{ident}"\s*/?>'
        rf"(?P<content>.*?)"
        rf'<input type="hidden" data-lazy-end="{ident}"\s*/?>'
    )
    match = re.search(pattern, document, re.DOTALL)
    return match.group("content") if match else None
