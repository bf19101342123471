"""Identity normalization for document references.

A reference is either a filename on disk ("Second.md") or the text of a
wiki-link ("second"). Both normalize to the same identity key, which is the
only thing used to decide whether two references name the same document.
"""

from __future__ import annotations

import re
from typing import Protocol

from ..config import LINK_PREFIX, LINK_SUFFIX, MARKDOWN_EXTENSION

DATE_NAME_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2})" + re.escape(MARKDOWN_EXTENSION))


class IdentityNormalizer(Protocol):
    """Maps a link target or filename to its identity key."""

    def normalize(self, reference: str) -> str: ...


def remove_extension(filename: str) -> str:
    """Trim the markdown extension from a filename, if present.

    Matching is case-insensitive so "Notes.MD" and "Notes.md" both become "Notes".
    """
    if filename.lower().endswith(MARKDOWN_EXTENSION):
        return filename[: -len(MARKDOWN_EXTENSION)]
    return filename


def with_extension(reference: str) -> str:
    """Return the reference with exactly one markdown extension."""
    return remove_extension(reference) + MARKDOWN_EXTENSION


def normalize(reference: str) -> str:
    """Normalize a reference to its identity key.

    - Strips surrounding whitespace
    - Lowercases
    - Ensures a single ".md" suffix

    Idempotent: normalize(normalize(x)) == normalize(x).
    """
    return with_extension(reference.strip().lower())


def is_date_name(filename: str) -> bool:
    """Check whether a filename is a bare date, like 2020-04-19.md."""
    return DATE_NAME_PATTERN.fullmatch(filename) is not None


def create_link(original_name: str) -> str:
    """Build the output link path for a document.

    Links point at a sibling directory named after the lowercased file stem,
    with each space replaced by a hyphen:

        "Name With Spaces.md" -> "../name-with-spaces/"
    """
    name = remove_extension(original_name).lower()
    name = name.replace(" ", "-")
    return f"{LINK_PREFIX}{name}{LINK_SUFFIX}"


class DefaultNormalizer:
    """IdentityNormalizer backed by the module-level normalize()."""

    def normalize(self, reference: str) -> str:
        return normalize(reference)
