"""Dictionary Index - exact-match lookups against the dictionary store."""

import logging
import sqlite3
from typing import List, Union

from epub_reader.core.dictionary_entities import NOT_FOUND, DictionaryLookup, NotFound
from epub_reader.io.dictionary_store import DictionaryStore
from epub_reader.services.text_processing.text_normalization import normalize_text

logger = logging.getLogger(__name__)


class DictionaryIndex:
    """Looks up a selected token by exact word or reading.

    No fuzzy matching, tokenization or ranking: the first definition of the
    first matching entry wins. Lookups never raise.
    """

    def __init__(self, store: DictionaryStore):
        self.store = store

    def lookup(self, token: str) -> Union[DictionaryLookup, NotFound]:
        """Return the first matching definition or NOT_FOUND."""
        matches = self.lookup_all(token)
        return matches[0] if matches else NOT_FOUND

    def lookup_all(self, token: str) -> List[DictionaryLookup]:
        """Every matching definition, in entry then definition order."""
        query = normalize_text(token)
        if not query:
            return []
        try:
            return self.store.find_definitions(query)
        except sqlite3.Error as exc:
            # Closed store or no dictionary imported yet.
            logger.warning("Dictionary lookup for '%s' failed: %s", query, exc)
            return []
