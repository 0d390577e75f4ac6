"""Content layer — front-matter records and directory collections."""

from mews.content.collection import ContentCollection
from mews.content.store import Content, ContentStore, parse_front_matter

__all__ = [
    "Content",
    "ContentCollection",
    "ContentStore",
    "parse_front_matter",
]
