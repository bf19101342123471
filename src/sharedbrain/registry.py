"""Registry of documents keyed by identity.

The registry is the one place documents live. Backlinks refer to their
source by identity key and resolve it here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .errors import DuplicateDocumentError
from .models import Document
from .parser.identity import is_date_name, normalize, remove_extension, with_extension

log = logging.getLogger(__name__)


def create_document(original_name: str, *, is_stub: bool = False) -> Document:
    """Create a Document with its title defaulted from the filename."""
    return Document(
        identity=normalize(original_name),
        original_name=original_name,
        title=remove_extension(original_name),
        is_date_file=is_date_name(original_name),
        is_stub=is_stub,
    )


class DocumentRegistry:
    """Maps identity keys to Documents.

    Documents from the source directory are registered up front with
    register_known(). Anything else that gets linked to is created on first
    reference by resolve_or_create_stub().
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    @classmethod
    def from_names(cls, names: Iterable[str]) -> DocumentRegistry:
        """Build a registry from the filenames found on disk.

        Raises:
            DuplicateDocumentError: If two names differ only by case.
        """
        registry = cls()
        for name in names:
            registry.register_known(name)
        return registry

    def register_known(self, original_name: str) -> Document:
        """Register a document that exists in the source directory.

        Raises:
            DuplicateDocumentError: If the identity is already registered.
        """
        document = create_document(original_name)
        existing = self._documents.get(document.identity)
        if existing is not None:
            raise DuplicateDocumentError(
                document.identity, existing.original_name, original_name
            )
        self._documents[document.identity] = document
        return document

    def resolve_or_create_stub(self, reference: str) -> Document:
        """Look up a document by reference, creating a stub if it is unknown.

        Repeated calls with references that normalize to the same identity
        return the same Document.
        """
        identity = normalize(reference)
        document = self._documents.get(identity)
        if document is None:
            document = create_document(with_extension(reference.strip()), is_stub=True)
            self._documents[identity] = document
            log.debug("Created stub document %s", document.original_name)
        return document

    def get(self, reference: str) -> Document | None:
        return self._documents.get(normalize(reference))

    def __getitem__(self, reference: str) -> Document:
        document = self.get(reference)
        if document is None:
            raise KeyError(reference)
        return document

    def __contains__(self, reference: object) -> bool:
        return isinstance(reference, str) and normalize(reference) in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        # Snapshot so stubs can be registered while iterating
        return iter(list(self._documents.values()))

    def known(self) -> list[Document]:
        """Documents that came from the source directory."""
        return [doc for doc in self._documents.values() if not doc.is_stub]

    def stubs(self) -> list[Document]:
        """Documents materialized because something linked to them."""
        return [doc for doc in self._documents.values() if doc.is_stub]

    # IdentityNormalizer
    def normalize(self, reference: str) -> str:
        return normalize(reference)
