"""Settings Manager - Handles data locations and runtime configuration."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DATA_DIR = Path.home() / ".epub_reader"
DICTIONARY_DB_NAME = "japanese_english_dictionary.db"
LIBRARY_FILE_NAME = "books.json"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class SettingsManager:
    """
    Manages settings from the environment.

    Reads a .env file in the project root; variables already set in the
    process environment take precedence.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    @staticmethod
    def _get(name: str) -> Optional[str]:
        value = os.getenv(name)
        return value.strip() if value and value.strip() else None

    def get_data_dir(self) -> Path:
        """Directory holding the library document, books and dictionary."""
        value = self._get("EPUB_READER_DATA_DIR")
        return Path(value).expanduser() if value else DEFAULT_DATA_DIR

    def get_library_path(self) -> Path:
        return self.get_data_dir() / LIBRARY_FILE_NAME

    def get_books_dir(self) -> Path:
        return self.get_data_dir() / "books"

    def get_dictionary_db_path(self) -> Path:
        value = self._get("EPUB_READER_DICTIONARY_DB")
        return Path(value).expanduser() if value else self.get_data_dir() / DICTIONARY_DB_NAME

    def get_dictionary_language(self) -> str:
        return self._get("EPUB_READER_DICTIONARY_LANGUAGE") or "ja"

    def get_log_level(self) -> int:
        """Logging level from EPUB_READER_LOG_LEVEL (name or number), INFO by default."""
        value = self._get("EPUB_READER_LOG_LEVEL")
        if value is None:
            return logging.INFO
        if value.isdigit():
            return int(value)
        level = logging.getLevelName(value.upper())
        return level if isinstance(level, int) else logging.INFO

    def configure_logging(self) -> None:
        """Install a single stream handler on the root logger."""
        logging.basicConfig(level=self.get_log_level(), format=LOG_FORMAT, force=True)

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)
