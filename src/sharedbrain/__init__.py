"""sharedbrain: wiki-link resolution and backlink injection for markdown notes."""

__version__ = "1.1.0"
