"""Dictionary Importer - loads term-bank archives into the dictionary store."""

import json
import logging
import re
import zipfile
from pathlib import Path
from typing import List, Optional, Tuple

from epub_reader.core.cancellation import CancellationToken, ResourceGuard, check_cancelled, resource_guard
from epub_reader.core.dictionary_entities import ImportSummary
from epub_reader.core.errors import ImportTransactionError, OperationCancelled
from epub_reader.io.dictionary_store import DictionaryStore
from epub_reader.services.text_processing.structured_content import definitions_from_glossary

logger = logging.getLogger(__name__)

TERM_BANK_PREFIX = "term_bank_"
TERM_BANK_SUFFIX = ".json"
INDEX_FILE = "index.json"
# Yomitan v3 rows: [term, reading, definitionTags, rules, score, glossary, sequence, termTags]
GLOSSARY_INDEX = 5


def _natural_key(name: str) -> Tuple:
    return tuple(int(part) if part.isdigit() else part for part in re.split(r"(\d+)", name))


def term_bank_names(archive: zipfile.ZipFile) -> List[str]:
    """Term-bank members in numeric order (term_bank_2 before term_bank_10)."""
    names = [
        name
        for name in archive.namelist()
        if Path(name).name.startswith(TERM_BANK_PREFIX) and name.endswith(TERM_BANK_SUFFIX)
    ]
    return sorted(names, key=_natural_key)


def split_row(row: object) -> Tuple[str, str, object]:
    """Return (word, reading, glossary) from one term-bank row.

    Raises:
        ValueError: If the row is not a list starting with a non-empty word.
    """
    if not isinstance(row, list) or len(row) < 3:
        raise ValueError(f"Malformed term-bank row: {row!r}")
    word, reading = row[0], row[1]
    if not isinstance(word, str) or not word:
        raise ValueError(f"Term-bank row without a word: {row!r}")
    glossary = row[GLOSSARY_INDEX] if len(row) > GLOSSARY_INDEX else row[-1]
    return word, reading if isinstance(reading, str) else "", glossary


class DictionaryImporter:
    """
    Imports a lexicon archive in a single all-or-nothing transaction.

    Schema creation and every entry/definition write share one transaction;
    any failure, including cancellation, rolls the whole import back.
    """

    def __init__(
        self,
        store: DictionaryStore,
        default_language: str = "ja",
        guard: Optional[ResourceGuard] = None,
    ):
        self.store = store
        self.default_language = default_language
        self.guard = guard or resource_guard

    def import_archive(
        self,
        archive_path: Path,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ImportSummary:
        """
        Import every term bank of ``archive_path``.

        Args:
            archive_path: Zip archive containing ``term_bank_*.json`` files.
            cancel_token: Checked before every archive read and every row.

        Returns:
            ImportSummary with the number of entries and definitions written.

        Raises:
            ImportTransactionError: If anything fails; nothing is kept.
            OperationCancelled: If the import was cancelled; nothing is kept.
            ResourceBusyError: If another import into the same store is running.
        """
        archive_path = Path(archive_path)
        with self.guard.hold(self.store.db_path, "dictionary import"):
            try:
                return self._import(archive_path, cancel_token)
            except OperationCancelled:
                logger.info("Dictionary import of %s cancelled, rolled back", archive_path)
                raise
            except Exception as e:
                # Includes zipfile's NotImplementedError/RuntimeError and
                # RecursionError from pathologically nested glossaries.
                logger.error("Dictionary import of %s failed: %s", archive_path, e)
                raise ImportTransactionError(f"Failed to import dictionary {archive_path.name}: {e}") from e

    def _import(self, archive_path: Path, cancel_token: Optional[CancellationToken]) -> ImportSummary:
        check_cancelled(cancel_token)
        with zipfile.ZipFile(archive_path) as archive:
            names = term_bank_names(archive)
            if not names:
                raise ValueError("archive contains no term_bank_*.json files")
            title, language = self._read_index(archive)
            logger.info("Importing '%s' (%d term banks) from %s", title, len(names), archive_path)

            self.store.open()
            entries = 0
            definitions = 0
            with self.store.transaction() as cur:
                self.store.ensure_schema(cur)
                for name in names:
                    check_cancelled(cancel_token)
                    rows = json.loads(archive.read(name).decode("utf-8"))
                    if not isinstance(rows, list):
                        raise ValueError(f"{name} is not a list of terms")
                    for row in rows:
                        check_cancelled(cancel_token)
                        word, reading, glossary = split_row(row)
                        entry_id = self.store.upsert_entry(cur, word, reading, language)
                        entries += 1
                        for candidate in definitions_from_glossary(glossary):
                            if self.store.insert_definition(cur, entry_id, candidate.part_of_speech, candidate.text):
                                definitions += 1
                    logger.debug("Imported %s", name)

        logger.info("Dictionary '%s' imported: %d terms, %d new definitions", title, entries, definitions)
        return ImportSummary(title=title, term_banks=len(names), entries=entries, definitions=definitions)

    def _read_index(self, archive: zipfile.ZipFile) -> Tuple[str, str]:
        title = Path(archive.filename or "dictionary").stem
        language = self.default_language
        if INDEX_FILE not in archive.namelist():
            return title, language
        try:
            index = json.loads(archive.read(INDEX_FILE).decode("utf-8"))
        except ValueError as e:
            logger.warning("Ignoring unreadable %s: %s", INDEX_FILE, e)
            return title, language
        if isinstance(index, dict):
            title = str(index.get("title") or title)
            language = str(index.get("sourceLanguage") or language)
        return title, language
