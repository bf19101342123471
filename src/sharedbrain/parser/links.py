"""Wiki-link discovery and rewriting.

Discovery runs the markdown through markdown-it with a [[wikilink]] inline
rule, so links inside code spans and code blocks are ignored. Every link
found is reported to a LinkObserver together with the full source line it
sits on.

Rewriting is a plain per-line substitution of [[Target]] with a markdown
link to the target's output path.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, NamedTuple, Protocol

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline

from .identity import DefaultNormalizer, IdentityNormalizer, create_link

if TYPE_CHECKING:
    from ..models import Document

# [[link]] - no brackets or newlines inside, so "[[a [[b]]" only links "b"
WIKILINK_PATTERN = re.compile(r"\[\[([^\[\]\n]+)\]\]")

WIKILINK_TOKEN = "wikilink"


class LinkObserver(Protocol):
    """Receives each wiki-link found while parsing a document."""

    def link_with_context(self, display_text: str, target: str, context: str) -> None: ...


class StubResolver(Protocol):
    def resolve_or_create_stub(self, reference: str) -> Document: ...


class LinkOccurrence(NamedTuple):
    """A wiki-link found in a document."""

    display_text: str
    target: str  # Identity key of the linked document
    context: str  # Full source line containing the link


def _wikilink_rule(state: StateInline, silent: bool) -> bool:
    if not state.src.startswith("[[", state.pos):
        return False

    match = WIKILINK_PATTERN.match(state.src, state.pos)
    if match is None or match.end() > state.posMax:
        return False

    if not silent:
        token = state.push(WIKILINK_TOKEN, "", 0)
        token.content = match.group(1)
        # Inline content keeps one line per source line, so counting
        # newlines gives the offset from the block's first line.
        token.meta = {"line_offset": state.src.count("\n", 0, state.pos)}

    state.pos = match.end()
    return True


def _observer_rule(normalizer: IdentityNormalizer, observer: LinkObserver | None):
    def _track_wikilinks(state: StateCore) -> None:
        lines = state.src.split("\n")
        for token in state.tokens:
            if token.type != "inline" or not token.children:
                continue
            for child in token.children:
                if child.type != WIKILINK_TOKEN:
                    continue
                target = normalizer.normalize(child.content)
                child.meta["target"] = target
                if observer is None:
                    continue
                context = token.content
                if token.map is not None:
                    line_no = token.map[0] + child.meta.get("line_offset", 0)
                    if line_no < len(lines):
                        context = lines[line_no]
                observer.link_with_context(child.content, target, context)

    return _track_wikilinks


def wikilinks_plugin(
    md: MarkdownIt,
    normalizer: IdentityNormalizer | None = None,
    observer: LinkObserver | None = None,
) -> None:
    """markdown-it plugin adding [[wikilink]] tokens.

    Args:
        md: Parser to extend.
        normalizer: Maps link text to an identity key. Defaults to
            sharedbrain.parser.identity.normalize.
        observer: Called once per link, in source order, after parsing.
    """
    md.inline.ruler.before("link", WIKILINK_TOKEN, _wikilink_rule)
    md.core.ruler.push(
        "wikilink_observer",
        _observer_rule(normalizer or DefaultNormalizer(), observer),
    )


def create_parser(
    normalizer: IdentityNormalizer | None = None,
    observer: LinkObserver | None = None,
) -> MarkdownIt:
    """Create a markdown parser that reports wiki-links to the observer."""
    md = MarkdownIt()
    md.enable("table")
    md.use(wikilinks_plugin, normalizer=normalizer, observer=observer)
    return md


class _CollectingObserver:
    def __init__(self) -> None:
        self.occurrences: list[LinkOccurrence] = []

    def link_with_context(self, display_text: str, target: str, context: str) -> None:
        self.occurrences.append(LinkOccurrence(display_text, target, context))


class ExtractedLinks:
    """Wiki-links of a document, in source order.

    Parsing is deferred until iteration, and each iteration parses afresh,
    so the sequence can be walked more than once.
    """

    def __init__(self, content: str, normalizer: IdentityNormalizer | None = None) -> None:
        self._content = content
        self._normalizer = normalizer

    def __iter__(self) -> Iterator[LinkOccurrence]:
        observer = _CollectingObserver()
        create_parser(normalizer=self._normalizer, observer=observer).parse(self._content)
        yield from observer.occurrences


def extract_links(
    content: str, normalizer: IdentityNormalizer | None = None
) -> ExtractedLinks:
    """Extract wiki-links from markdown content.

    Args:
        content: Markdown body (without the metadata block).
        normalizer: Maps link text to an identity key.

    Returns:
        Iterable of LinkOccurrence(display_text, target, context).
    """
    return ExtractedLinks(content, normalizer)


def convert_links_on_line(line: str, registry: StubResolver) -> str:
    """Replace every [[Target]] on a line with a markdown link.

    Unknown targets are created as stubs in the registry. Lines without
    wiki-links are returned unchanged.
    """

    def _replace(match: re.Match[str]) -> str:
        link_text = match.group(1)
        document = registry.resolve_or_create_stub(link_text)
        return f"[{link_text}]({create_link(document.original_name)})"

    return WIKILINK_PATTERN.sub(_replace, line)


def convert_links(lines: Iterable[str], registry: StubResolver) -> Iterator[str]:
    """Rewrite wiki-links on each line."""
    for line in lines:
        yield convert_links_on_line(line, registry)
