"""Errors raised while building the link graph and rendering documents.

Every error names the document identity it concerns so the CLI can report
which file stopped the run.
"""


class SharedBrainError(Exception):
    """Base class for errors that abort a sharedbrain run."""

    def __init__(self, identity: str, message: str) -> None:
        self.identity = identity
        self.message = message
        super().__init__(f"{identity}: {message}")


class DuplicateDocumentError(SharedBrainError):
    """Two source files normalize to the same identity key."""

    def __init__(self, identity: str, existing_name: str, new_name: str) -> None:
        self.existing_name = existing_name
        self.new_name = new_name
        super().__init__(
            identity,
            f"'{new_name}' collides with '{existing_name}' (names differ only by case)",
        )


class MalformedMetadataError(SharedBrainError):
    """The leading metadata block is unterminated or not valid TOML."""


class DateParseError(SharedBrainError):
    """A date-named document's filename is not a valid calendar date."""

    def __init__(self, identity: str, value: str) -> None:
        self.value = value
        super().__init__(identity, f"'{value}' is not a valid calendar date")


class UnsafeOutputPathError(SharedBrainError):
    """A document's output path would land outside the destination directory."""
