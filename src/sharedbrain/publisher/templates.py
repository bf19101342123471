"""Markdown rendering of the backlinks section."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from ..config import BACKLINKS_HEADING, CONTEXT_INDENT
from ..parser.identity import create_link
from ..parser.links import convert_links_on_line

if TYPE_CHECKING:
    from ..models import Backlink, Document
    from ..registry import DocumentRegistry


def order_backlinks(backlinks: list[Backlink], registry: DocumentRegistry) -> list[Backlink]:
    """Order backlinks most recent source first.

    Backlinks whose source has no date follow all dated ones. Equal dates
    and undated backlinks keep their discovery order.
    """
    dated: list[tuple[dt.datetime, Backlink]] = []
    undated: list[Backlink] = []
    for backlink in backlinks:
        source = registry.get(backlink.source)
        source_date = source.date if source is not None else None
        if source_date is None:
            undated.append(backlink)
        else:
            dated.append((source_date, backlink))

    # list.sort is stable with reverse=True; ties keep discovery order
    dated.sort(key=lambda item: item[0], reverse=True)
    return [backlink for _, backlink in dated] + undated


def render_backlink_entry(source: Document, context: str, registry: DocumentRegistry) -> str:
    """Render one bulleted backlink with its quoted context line."""
    link = create_link(source.original_name)
    quoted = convert_links_on_line(context, registry)
    return f"* [{source.title}]({link})\n{CONTEXT_INDENT}* {quoted}\n"


def render_backlinks(document: Document, registry: DocumentRegistry) -> str:
    """Render the backlinks section of a document.

    Returns an empty string when nothing links to the document.
    """
    if not document.inbound_links:
        return ""

    parts = [f"\n## {BACKLINKS_HEADING}\n\n"]
    for backlink in order_backlinks(document.inbound_links, registry):
        parts.append(render_backlink_entry(registry[backlink.source], backlink.context, registry))
    return "".join(parts)
