"""Metadata block handling for documents.

Documents may start with a TOML block between two `+++` lines. This module
splits that block from the body, merges it with the defaults derived from
the link graph (title, date) and serializes it back out.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING

import toml
from frontmatter.default_handlers import TOMLHandler
from pydantic import ValidationError

from .config import (
    DEFAULT_STUB_DATE_POLICY,
    DEFAULT_TIME_OF_DAY,
    METADATA_DELIMITER,
    StubDatePolicy,
)
from .errors import DateParseError, MalformedMetadataError
from .models import Document, DocumentMetadata
from .parser.identity import remove_extension

if TYPE_CHECKING:
    from .registry import DocumentRegistry

log = logging.getLogger(__name__)

_handler = TOMLHandler()


def split_metadata(text: str, identity: str) -> tuple[str | None, str]:
    """Split the leading metadata block from the body.

    Args:
        text: Full document text.
        identity: Document identity, for error messages.

    Returns:
        Tuple of (block, body). block is None when the document has no
        metadata block.

    Raises:
        MalformedMetadataError: If the block is opened but never closed.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != METADATA_DELIMITER:
        return None, text

    for index in range(1, len(lines)):
        if lines[index].rstrip("\r\n") == METADATA_DELIMITER:
            return "".join(lines[1:index]), "".join(lines[index + 1 :])

    raise MalformedMetadataError(identity, "no end tag found in metadata block")


def parse_metadata(block: str, identity: str) -> DocumentMetadata:
    """Parse a TOML metadata block.

    Raises:
        MalformedMetadataError: If the block is not valid TOML, or title/date
            have the wrong type.
    """
    try:
        data = _handler.load(block)
    except (toml.TomlDecodeError, ValueError, IndexError, TypeError) as e:
        # The toml decoder raises bare IndexError/ValueError on some broken input
        raise MalformedMetadataError(identity, f"invalid TOML: {e}") from e

    try:
        metadata = DocumentMetadata.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        raise MalformedMetadataError(identity, "invalid metadata:\n" + "\n".join(errors)) from e

    metadata._key_order = list(data)
    return metadata


def parse_date_name(name: str, identity: str) -> dt.datetime:
    """Turn a date-shaped name (2020-04-19) into a datetime at the default time of day.

    Raises:
        DateParseError: If the name is not a valid calendar date.
    """
    try:
        day = dt.date.fromisoformat(name)
    except ValueError as e:
        raise DateParseError(identity, name) from e
    return dt.datetime.combine(day, DEFAULT_TIME_OF_DAY)


def infer_stub_date(
    document: Document,
    registry: DocumentRegistry,
    policy: StubDatePolicy = DEFAULT_STUB_DATE_POLICY,
) -> dt.datetime | dt.date | str | None:
    """Pick a date for a stub from the documents that link to it.

    Only sources whose metadata is already merged and carries a date are
    considered. With the "first" policy the earliest-discovered inbound edge
    wins; "earliest" and "latest" compare the dates themselves, ties going
    to the earlier-discovered edge.

    Returns:
        The source's date value, unchanged, or None if no source is dated.
    """
    dated: list[tuple[dt.datetime, Document]] = []
    for backlink in document.inbound_links:
        source = registry.get(backlink.source)
        if source is None or source.date is None:
            continue
        dated.append((source.date, source))

    if not dated:
        return None

    if policy == "earliest":
        _, chosen = min(dated, key=lambda item: item[0])
    elif policy == "latest":
        _, chosen = max(dated, key=lambda item: item[0])
    else:
        _, chosen = dated[0]

    assert chosen.metadata is not None
    return chosen.metadata.date


def merge_metadata(
    document: Document,
    block: str | None,
    registry: DocumentRegistry | None = None,
    stub_date_policy: StubDatePolicy = DEFAULT_STUB_DATE_POLICY,
) -> DocumentMetadata:
    """Merge a document's metadata block with graph-derived defaults.

    - Date-named documents get their name as title and the named day as
      date, unless the block sets them
    - An explicit title overrides document.title; otherwise the block gets
      the document's current title
    - Stubs without a date borrow one from a linking document (needs registry)

    The merged metadata is stored on document.metadata and returned.

    Raises:
        MalformedMetadataError: If the block cannot be parsed.
        DateParseError: If a date-named document's name is not a real date.
    """
    metadata = (
        parse_metadata(block, document.identity) if block is not None else DocumentMetadata()
    )

    if document.is_date_file:
        plain_name = remove_extension(document.original_name)
        if metadata.title is None:
            metadata.title = plain_name
        if metadata.date is None:
            metadata.date = parse_date_name(plain_name, document.identity)

    if metadata.title is not None:
        document.title = metadata.title
    else:
        metadata.title = document.title

    if document.is_stub and metadata.date is None and registry is not None:
        inferred = infer_stub_date(document, registry, stub_date_policy)
        if inferred is not None:
            log.debug("Inferred date %s for stub %s", inferred, document.original_name)
            metadata.date = inferred

    document.metadata = metadata
    return metadata


def build_frontmatter(metadata: DocumentMetadata) -> str:
    """Serialize metadata as a TOML block including `+++` delimiters.

    Keys keep the order they had in the source block; title and date are
    appended when they were filled in rather than read. Unset fields are
    omitted.
    """
    dumped = metadata.model_dump(exclude_none=True)
    ordered = {key: dumped[key] for key in metadata._key_order if key in dumped}
    ordered.update((key, value) for key, value in dumped.items() if key not in ordered)

    body = _handler.export(ordered).rstrip("\n")
    return f"{_handler.START_DELIMITER}\n{body}\n{_handler.END_DELIMITER}\n"
