"""Dictionary entities shared by the importer, the store and the index."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DictionaryEntry:
    id: Optional[int]
    word: str
    reading: str
    language: Optional[str]


@dataclass(frozen=True)
class Definition:
    id: Optional[int]
    entry_id: int
    part_of_speech: str
    text: str


@dataclass(frozen=True)
class DefinitionCandidate:
    """Definition produced by walking one structured-content block."""

    part_of_speech: str
    text: str


@dataclass(frozen=True)
class DictionaryLookup:
    """A matching entry joined with one of its definitions."""

    entry_id: int
    word: str
    reading: str
    part_of_speech: str
    definition: str


@dataclass(frozen=True)
class ImportSummary:
    title: str
    term_banks: int
    entries: int
    definitions: int


class NotFound:
    """Sentinel returned by lookups without a match. Falsy."""

    _instance: Optional["NotFound"] = None

    def __new__(cls) -> "NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()
