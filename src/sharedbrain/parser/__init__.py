"""Wiki-link parsing and identity normalization."""

from .identity import (
    IdentityNormalizer,
    create_link,
    is_date_name,
    normalize,
    remove_extension,
)
from .links import (
    LinkObserver,
    LinkOccurrence,
    convert_links,
    convert_links_on_line,
    create_parser,
    extract_links,
    wikilinks_plugin,
)

__all__ = [
    "IdentityNormalizer",
    "LinkObserver",
    "LinkOccurrence",
    "convert_links",
    "convert_links_on_line",
    "create_link",
    "create_parser",
    "extract_links",
    "is_date_name",
    "normalize",
    "remove_extension",
    "wikilinks_plugin",
]
