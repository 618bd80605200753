"""Vocabulary repositories - persistence for known words and encounter counts."""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Set

from glossia.core import ConfigError

logger = logging.getLogger(__name__)

GLOSSIA_DIR_NAME = ".glossia"


def default_vocabulary_dir() -> Path:
    """Per-user configuration directory holding vocabulary files."""
    return Path.home() / GLOSSIA_DIR_NAME


class VocabularyRepository(ABC):
    """
    Abstract storage for the learner's vocabulary.

    Implementations (JsonVocabularyRepository, InMemoryVocabularyRepository)
    handle storage details so the manager only deals in sets and counts.
    """

    @abstractmethod
    def load_known_words(self) -> Set[str]:
        pass

    @abstractmethod
    def save_known_words(self, words: Set[str]) -> None:
        pass

    @abstractmethod
    def load_encounters(self) -> Dict[str, int]:
        pass

    @abstractmethod
    def save_encounters(self, encounters: Dict[str, int]) -> None:
        pass


class InMemoryVocabularyRepository(VocabularyRepository):
    """Simple in-memory repository used for testing. No persistence."""

    def __init__(self, known_words: Optional[Set[str]] = None, encounters: Optional[Dict[str, int]] = None):
        self.known_words: Set[str] = set(known_words or set())
        self.encounters: Dict[str, int] = dict(encounters or {})
        self.known_saves = 0
        self.encounter_saves = 0

    def load_known_words(self) -> Set[str]:
        return set(self.known_words)

    def save_known_words(self, words: Set[str]) -> None:
        self.known_words = set(words)
        self.known_saves += 1

    def load_encounters(self) -> Dict[str, int]:
        return dict(self.encounters)

    def save_encounters(self, encounters: Dict[str, int]) -> None:
        self.encounters = dict(encounters)
        self.encounter_saves += 1


class JsonVocabularyRepository(VocabularyRepository):
    """
    Stores vocabulary as two JSON files in one directory.

    Format:
    - known_words.json: {"words": ["alpha", "beta", ...]}
    - word_encounters.json: {"encounters": {"gamma": 3, ...}}

    Missing files read as empty. Writes go to a temporary file in the
    same directory and are moved into place with os.replace.
    """

    KNOWN_WORDS_FILENAME = "known_words.json"
    ENCOUNTERS_FILENAME = "word_encounters.json"

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory is not None else default_vocabulary_dir()

    @property
    def known_words_path(self) -> Path:
        return self.directory / self.KNOWN_WORDS_FILENAME

    @property
    def encounters_path(self) -> Path:
        return self.directory / self.ENCOUNTERS_FILENAME

    def load_known_words(self) -> Set[str]:
        data = self._read_json(self.known_words_path)
        words = data.get("words", [])
        if not isinstance(words, list):
            raise ConfigError(f"Invalid known words file {self.known_words_path}: 'words' must be a list")
        return {str(w).lower() for w in words}

    def save_known_words(self, words: Set[str]) -> None:
        self._write_json(self.known_words_path, {"words": sorted(words)})
        logger.debug(f"Saved {len(words)} known words to {self.known_words_path}")

    def load_encounters(self) -> Dict[str, int]:
        data = self._read_json(self.encounters_path)
        encounters = data.get("encounters", {})
        if not isinstance(encounters, dict):
            raise ConfigError(f"Invalid encounters file {self.encounters_path}: 'encounters' must be an object")
        try:
            return {str(word).lower(): int(count) for word, count in encounters.items() if int(count) > 0}
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid encounter count in {self.encounters_path}: {e}") from e

    def save_encounters(self, encounters: Dict[str, int]) -> None:
        self._write_json(self.encounters_path, {"encounters": dict(sorted(encounters.items()))})

    def _read_json(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Failed to read {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid vocabulary file {path}: expected a JSON object")
        return data

    def _write_json(self, path: Path, data: Dict[str, Any]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    tmp.write(json.dumps(data, indent=2, ensure_ascii=False))
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ConfigError(f"Failed to write {path}: {e}") from e
