"""Data models for documents, backlinks and document metadata."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from io import StringIO

from pydantic import BaseModel, ConfigDict, PrivateAttr

from .config import DEFAULT_TIME_OF_DAY


class DocumentMetadata(BaseModel):
    """Metadata block of a document.

    Only title and date are interpreted; any other key is kept as-is and
    written back out unchanged.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    date: dt.datetime | dt.date | str | None = None

    # Key order of the source block, used when writing it back out
    _key_order: list[str] = PrivateAttr(default_factory=list)

    def resolved_date(self) -> dt.datetime | None:
        """Return the date as a timezone-aware datetime, if there is one.

        Local dates (including date-only strings) get the default time of
        day, naive datetimes are taken as UTC and strings are accepted when
        they are ISO 8601.
        """
        value = self.date
        if isinstance(value, str):
            value = _parse_iso(value)
        if isinstance(value, dt.datetime):
            if value.tzinfo is None or value.utcoffset() is None:
                return value.replace(tzinfo=dt.UTC)
            return value
        if isinstance(value, dt.date):
            return dt.datetime.combine(value, DEFAULT_TIME_OF_DAY)
        return None


@dataclass(frozen=True)
class Backlink:
    """An inbound reference to a document.

    `source` is the identity key of the linking document; look it up in the
    registry to get the Document itself.
    """

    source: str
    context: str  # Line containing the link, before rewriting


@dataclass
class Document:
    """A single markdown document, on disk or materialized as a stub."""

    identity: str
    original_name: str  # Case preserved, used for output paths
    title: str
    is_date_file: bool = False
    is_stub: bool = False
    metadata: DocumentMetadata | None = None  # Set once metadata is merged
    inbound_links: list[Backlink] = field(default_factory=list)
    rendered_output: StringIO = field(default_factory=StringIO, repr=False)

    @property
    def date(self) -> dt.datetime | None:
        """Resolved date from merged metadata, or None."""
        if self.metadata is None:
            return None
        return self.metadata.resolved_date()


def _parse_iso(value: str) -> dt.datetime | dt.date | None:
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(value)
    except ValueError:
        return None
