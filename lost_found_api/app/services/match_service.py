"""
Candidate matching between lost and found postings.

For a source item the candidates are the ``open`` items of the
opposite type that share at least one of

* category,
* color,
* location,
* a word of the source item's name, appearing as a whole word
  (case‑insensitively) in the candidate's name, description, category
  or color.

Single characters and common stop words in the source name are
ignored.  Attributes that are missing on the source item never match.
There is no scoring; every candidate satisfying the predicate is
returned once.
"""

import logging
import re
from typing import FrozenSet, List, Set

from ..core.db import Database
from ..schemas.item import ItemRead, ItemStatus
from .item_service import ITEM_COLUMNS, ItemService, row_to_item

logger = logging.getLogger(__name__)

ATTRIBUTE_FIELDS = ("category", "color", "location")
TEXT_FIELDS = ("name", "description", "category", "color")

STOP_WORDS: FrozenSet[str] = frozenset({
    "an", "and", "are", "as", "at", "be", "by", "for", "from", "in",
    "is", "it", "my", "of", "on", "or", "the", "to", "with",
})

_WORD_RE = re.compile(r"\w+", re.UNICODE)


def words(text: str | None) -> Set[str]:
    """Lower‑case words of ``text``."""
    if not text:
        return set()
    return set(_WORD_RE.findall(text.lower()))


def search_terms(text: str | None) -> List[str]:
    """Distinct search words of ``text`` in order of appearance.

    Single characters and stop words are dropped.
    """
    terms: List[str] = []
    for word in _WORD_RE.findall((text or "").lower()):
        if len(word) < 2 or word in STOP_WORDS or word in terms:
            continue
        terms.append(word)
    return terms


def is_candidate(source: ItemRead, item: ItemRead) -> bool:
    """True if ``item`` is a plausible counterpart of ``source``."""
    if item.type is not source.type.opposite or item.status is not ItemStatus.open:
        return False
    for field in ATTRIBUTE_FIELDS:
        value = getattr(source, field)
        if value is not None and getattr(item, field) == value:
            return True
    terms = search_terms(source.name)
    if not terms:
        return False
    candidate_words: Set[str] = set()
    for field in TEXT_FIELDS:
        candidate_words |= words(getattr(item, field))
    return any(term in candidate_words for term in terms)


class MatchService:
    """Read‑only lookup of plausible counterparts for an item."""

    @classmethod
    async def find_matches(cls, db: Database, item_id: int) -> List[ItemRead]:
        """Return the candidates for ``item_id``, newest first.

        Raises ``NotFoundError`` if the source item does not exist.
        """
        source = await ItemService.get_item(db, item_id)
        rows = db.connection.execute(
            f"SELECT {ITEM_COLUMNS} FROM items WHERE type = ? AND status = ? "
            "ORDER BY created_at DESC, id DESC",
            (source.type.opposite.value, ItemStatus.open.value),
        ).fetchall()
        matches = [item for item in map(row_to_item, rows) if is_candidate(source, item)]
        logger.debug("Item %s has %d match candidates", item_id, len(matches))
        return matches
