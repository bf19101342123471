"""Backlink generator for a directory of markdown notes.

Main orchestrator that reads every note, resolves [[wikilinks]] to
markdown links, appends a backlinks section to each note and writes the
result, including stub notes for link targets that have no file.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ..config import DEFAULT_STUB_DATE_POLICY, MARKDOWN_EXTENSION, StubDatePolicy
from ..errors import UnsafeOutputPathError
from ..frontmatter import build_frontmatter, merge_metadata, split_metadata
from ..models import Backlink, Document
from ..parser.links import convert_links, extract_links
from ..registry import DocumentRegistry
from .templates import render_backlinks

log = logging.getLogger(__name__)


@dataclass
class GeneratorConfig:
    """Configuration for backlink generation."""

    source_dir: Path
    dest_dir: Path
    stub_date_policy: StubDatePolicy = DEFAULT_STUB_DATE_POLICY


@dataclass
class GenerateResult:
    """Result of a generation run."""

    documents_written: int
    stubs_created: int
    backlinks_collected: int
    output_dir: str
    stubs: list[str] = field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# Enumeration and writing
# ─────────────────────────────────────────────────────────────────────────────


def get_file_list(source_dir: Path) -> list[str]:
    """List the markdown filenames in the source directory (not recursive).

    Names are sorted so runs over the same directory are reproducible.
    """
    return sorted(
        entry.name
        for entry in source_dir.iterdir()
        if entry.is_file() and entry.suffix == MARKDOWN_EXTENSION
    )


def _output_path(dest_dir: Path, document: Document) -> Path:
    target = dest_dir / document.original_name
    if not target.resolve().is_relative_to(dest_dir.resolve()):
        raise UnsafeOutputPathError(
            document.identity, f"output path {target} is outside {dest_dir}"
        )
    return target


def write_documents(registry: DocumentRegistry, dest_dir: Path) -> int:
    """Write each document's rendered output to dest_dir.

    Returns:
        Number of files written.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)

    # Check every path before writing anything
    targets = [(_output_path(dest_dir, document), document) for document in registry]

    for target, document in targets:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(document.rendered_output.getvalue(), encoding="utf-8")
    return len(targets)


# ─────────────────────────────────────────────────────────────────────────────
# Pass 1: backlink collection
# ─────────────────────────────────────────────────────────────────────────────


def collect_backlinks_for_document(
    registry: DocumentRegistry, document: Document, content: str
) -> int:
    """Record a backlink on every document this one links to.

    Targets that are not in the registry are created as stubs.

    Returns:
        Number of links found.
    """
    _, body = split_metadata(content, document.identity)
    count = 0
    for occurrence in extract_links(body, normalizer=registry):
        target = registry.resolve_or_create_stub(occurrence.display_text)
        target.inbound_links.append(Backlink(source=document.identity, context=occurrence.context))
        count += 1
    return count


def collect_backlinks(
    registry: DocumentRegistry, read_document: Callable[[Document], str]
) -> int:
    """Scan every document from the source directory for wiki-links.

    Stubs are skipped; they have no content. Each document is read once
    and scanned once, so link cycles are harmless.

    Returns:
        Total number of backlinks recorded.
    """
    total = 0
    for document in registry.known():
        log.debug("Collecting backlinks from %s", document.original_name)
        total += collect_backlinks_for_document(registry, document, read_document(document))
    return total


# ─────────────────────────────────────────────────────────────────────────────
# Pass 2: metadata, link conversion, backlinks
# ─────────────────────────────────────────────────────────────────────────────


def merge_all_metadata(
    registry: DocumentRegistry,
    sources: dict[str, str],
    stub_date_policy: StubDatePolicy = DEFAULT_STUB_DATE_POLICY,
) -> dict[str, str]:
    """Merge metadata for every document and emit its metadata block.

    Documents from disk are merged first so that stubs can borrow dates
    from the documents linking to them.

    Args:
        registry: All documents, with backlinks collected.
        sources: Identity -> full source text, for non-stub documents.
        stub_date_policy: How stubs pick a date from their linking documents.

    Returns:
        Identity -> body text (metadata block removed) for non-stub documents.
    """
    bodies: dict[str, str] = {}
    for document in registry.known():
        block, bodies[document.identity] = split_metadata(
            sources[document.identity], document.identity
        )
        merge_metadata(document, block, registry, stub_date_policy)

    for document in registry.stubs():
        log.debug("%s is a new file", document.original_name)
        merge_metadata(document, None, registry, stub_date_policy)

    for document in registry:
        assert document.metadata is not None
        document.rendered_output.write(build_frontmatter(document.metadata))
    return bodies


def _split_lines(body: str) -> list[str]:
    # Only "\n" (and "\r\n") end a line; form feeds and Unicode separators stay put
    lines = [line.removesuffix("\r") for line in body.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def convert_all_links(registry: DocumentRegistry, bodies: dict[str, str]) -> None:
    """Append each document's body with wiki-links converted.

    Stubs have no body. Link targets first seen here become stubs too.
    """
    for document in registry.known():
        for line in convert_links(_split_lines(bodies[document.identity]), registry):
            document.rendered_output.write(line + "\n")


def add_all_backlinks(registry: DocumentRegistry) -> None:
    """Append the backlinks section to every document that has backlinks."""
    for document in registry:
        if document.metadata is None:
            continue
        document.rendered_output.write(render_backlinks(document, registry))


def finalize_late_stubs(registry: DocumentRegistry) -> list[Document]:
    """Give stubs created after the metadata pass their metadata block.

    These stubs were only seen while converting links, so nothing links
    to them in the graph and their title stays the link text.
    """
    late = [document for document in registry if document.metadata is None]
    for document in late:
        log.debug("%s is a new file (found while converting links)", document.original_name)
        metadata = merge_metadata(document, None)
        document.rendered_output.write(build_frontmatter(metadata))
    return late


# ─────────────────────────────────────────────────────────────────────────────
# Orchestration
# ─────────────────────────────────────────────────────────────────────────────


class BacklinkGenerator:
    """Generates cross-referenced markdown from a directory of notes.

    Orchestrates the full pipeline:
    1. Collect filenames so link case can be normalized
    2. Parse every note to collect backlinks and their context
    3. Merge metadata (notes first, then stubs)
    4. Convert wiki-links in note bodies
    5. Append backlinks sections
    6. Write all notes, stubs included

    Nothing is written unless every document renders successfully.
    """

    def __init__(self, config: GeneratorConfig):
        """Initialize generator.

        Args:
            config: Generation configuration
        """
        self.config = config
        self.registry = DocumentRegistry()
        self.sources: dict[str, str] = {}

    def _read_document(self, document: Document) -> str:
        path = self.config.source_dir / document.original_name
        log.debug("Reading %s", path)
        text = path.read_text(encoding="utf-8")
        self.sources[document.identity] = text
        return text

    def generate(self) -> GenerateResult:
        """Run the whole pipeline.

        Returns:
            GenerateResult with statistics and the output directory

        Raises:
            SharedBrainError: If a document cannot be processed.
            OSError: If the source cannot be read or the output written.
        """
        # Phase 1: Build the registry
        self.registry = DocumentRegistry.from_names(get_file_list(self.config.source_dir))
        log.debug("Found %d documents in %s", len(self.registry), self.config.source_dir)

        # Phase 2: Collect backlinks
        backlinks = collect_backlinks(self.registry, self._read_document)

        # Phase 3: Metadata
        bodies = merge_all_metadata(self.registry, self.sources, self.config.stub_date_policy)

        # Phase 4: Convert links
        convert_all_links(self.registry, bodies)

        # Phase 5: Backlinks need merged titles and dates of the linking documents
        add_all_backlinks(self.registry)
        finalize_late_stubs(self.registry)

        # Phase 6: Write
        written = write_documents(self.registry, self.config.dest_dir)

        stubs = [document.original_name for document in self.registry.stubs()]
        return GenerateResult(
            documents_written=written,
            stubs_created=len(stubs),
            backlinks_collected=backlinks,
            output_dir=str(self.config.dest_dir),
            stubs=stubs,
        )


def generate(
    source_dir: Path,
    dest_dir: Path,
    stub_date_policy: StubDatePolicy = DEFAULT_STUB_DATE_POLICY,
) -> GenerateResult:
    """Convenience wrapper around BacklinkGenerator."""
    config = GeneratorConfig(
        source_dir=source_dir, dest_dir=dest_dir, stub_date_policy=stub_date_policy
    )
    return BacklinkGenerator(config).generate()
