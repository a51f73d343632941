"""Content store interface and an in-memory implementation.

The slideshow only needs two things from storage: a media query and a
document permalink.  ``InMemoryContentStore`` implements both over a list of
``MediaItem`` records and is what the CLI and the tests run against.
"""

import logging
import random
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from src.schemas.media_schema import MediaItem, MediaQuery
from src.schemas.slideshow_schema import SortOrder
from src.utils.file_utils import load_data

logger = logging.getLogger(__name__)


class ContentStoreError(Exception):
    """Raised by a content store that cannot answer a query."""


class ContentStore(ABC):
    """Resolves media queries and document permalinks."""

    @abstractmethod
    def query(self, query: MediaQuery) -> list[MediaItem]:
        """Return the items matching ``query``, in the requested order."""
        ...

    @abstractmethod
    def permalink(self, post_id: Optional[int]) -> str:
        """Public URL of a document."""
        ...


# Column names accepted in an orderby clause, mapped to MediaItem fields.
_SORT_FIELDS = {
    "menu_order": "menu_order",
    "id": "id",
    "date": "date",
    "modified": "modified",
    "title": "title",
    "name": "name",
    "author": "author",
    "parent": "parent_id",
    "mime_type": "mime_type",
    "comment_count": "comment_count",
}


def _sort_key(field: str):
    def key(item: MediaItem):
        value = getattr(item, field)
        if value is None:
            return 0
        if isinstance(value, str):
            return value.lower()
        return value

    return key


class InMemoryContentStore(ContentStore):
    """ContentStore over a fixed list of media items."""

    def __init__(
        self,
        items: Iterable[MediaItem] = (),
        permalink_template: str = "/?p={id}",
        rng: Optional[random.Random] = None,
    ) -> None:
        self.items: list[MediaItem] = list(items)
        self.permalink_template = permalink_template
        self.rng = rng or random.Random()

    def add(self, item: MediaItem) -> None:
        self.items.append(item)

    def permalink(self, post_id: Optional[int]) -> str:
        return self.permalink_template.format(id=post_id or 0)

    def _matches(self, item: MediaItem, query: MediaQuery) -> bool:
        if query.post_type and item.post_type != query.post_type:
            return False
        if query.mime_type and not item.mime_type.startswith(query.mime_type):
            return False
        if query.post_parent is not None and item.parent_id != query.post_parent:
            return False
        if query.include and item.id not in query.include:
            return False
        if query.exclude and item.id in query.exclude:
            return False
        return True

    def _sort(self, items: list[MediaItem], query: MediaQuery) -> list[MediaItem]:
        if query.order == SortOrder.RAND:
            self.rng.shuffle(items)
            return items

        clauses = [c.split() for c in query.orderby.split(",") if c.strip()]
        query_desc = query.order == SortOrder.DESC

        # Stable sorts applied from the least to the most significant clause.
        for clause in reversed(clauses):
            column = clause[0].lower()
            if column == "none":
                continue
            if column == "rand":
                self.rng.shuffle(items)
                continue
            field = _SORT_FIELDS.get(column)
            if field is None:
                logger.debug(f"Ignoring unknown sort column '{column}'")
                continue
            descending = clause[1].lower() == "desc" if len(clause) > 1 else query_desc
            items.sort(key=_sort_key(field), reverse=descending)
        return items

    def query(self, query: MediaQuery) -> list[MediaItem]:
        matches = [item for item in self.items if self._matches(item, query)]
        matches = self._sort(matches, query)
        if query.limit is not None and query.limit >= 0:
            matches = matches[: query.limit]
        logger.debug(f"Media query matched {len(matches)} item(s)")
        return matches


def load_store(path: str | Path, rng: Optional[random.Random] = None) -> InMemoryContentStore:
    """Build an InMemoryContentStore from a YAML or JSON fixture.

    The file holds either a list of media items or a mapping with a
    ``media`` list and an optional ``permalink_template``.
    """
    data = load_data(path)
    if isinstance(data, list):
        data = {"media": data}
    if not isinstance(data, dict):
        raise ValueError(f"Media fixture must be a list or a mapping: {path}")

    items = [MediaItem.model_validate(entry) for entry in data.get("media") or []]
    kwargs = {}
    if data.get("permalink_template"):
        kwargs["permalink_template"] = data["permalink_template"]
    return InMemoryContentStore(items, rng=rng, **kwargs)
