"""
English to Dwarven word dictionary with inflected-form fallback.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Protocol

logger = logging.getLogger("dwarven-names")

ROOT_MAP_FILE_NAME = "english-root-map.json"


class TranslationDictionary(Protocol):
    """Protocol for word-level translation lookup, enabling easy stubbing in tests."""

    def try_translate(self, word: str) -> tuple[str, ...] | None:
        """Return the ordered translation candidates for a word, or None."""
        ...


def _clean_translations(values: Iterable[Any]) -> tuple[str, ...]:
    """Keep non-blank strings, dropping exact duplicates in first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        if isinstance(value, str) and value.strip():
            seen.setdefault(value, None)
    return tuple(seen)


def _build_entries(raw: Mapping[str, Any]) -> dict[str, tuple[str, ...]]:
    entries: dict[str, tuple[str, ...]] = {}
    for word, values in raw.items():
        if not isinstance(word, str) or not word.strip():
            continue
        if not isinstance(values, (list, tuple)):
            continue
        translations = _clean_translations(values)
        if translations:
            entries[word.lower()] = translations
        else:
            # A later spelling of the same word without translations drops it
            entries.pop(word.lower(), None)
    return entries


def _build_root_map(raw: Mapping[str, Any]) -> dict[str, str]:
    root_map: dict[str, str] = {}
    for form, root in raw.items():
        if not isinstance(form, str) or not form.strip():
            continue
        if isinstance(root, str) and root.strip():
            root_map[form.lower()] = root
    return root_map


def _read_json_object(path: Path, label: str) -> dict[str, Any] | None:
    """Read a JSON object from disk, logging and returning None on any failure."""
    if not path.is_file():
        logger.warning(f"{label} not found at {path}; continuing without it")
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {label} from {path}: {e}")
        return None
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {label} at {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.error(f"{label} at {path} must contain a JSON object, got {type(data).__name__}")
        return None

    return data


class DwarvenDictionary:
    """Immutable English to Dwarven dictionary.

    Maps English words (case-insensitive) to an ordered tuple of Dwarven
    translation candidates; the first candidate is the canonical one. Words
    missing from the dictionary are looked up once more through a root map
    that resolves inflected forms ("scars", "frothing") to their dictionary
    root ("scar", "froth").

    The lookup tables are built once and exposed only through read-only views,
    so a single instance can be shared between any number of reader threads.

    Example:
        >>> dictionary = DwarvenDictionary.from_mapping(
        ...     {"scar": ["urrïth"]}, root_map={"scars": "scar"}
        ... )
        >>> dictionary.try_translate("Scars")
        ('urrïth',)
        >>> dictionary.try_translate("unknown") is None
        True
    """

    def __init__(
        self,
        entries: Mapping[str, tuple[str, ...]] | None = None,
        root_map: Mapping[str, str] | None = None,
    ) -> None:
        """Wrap already-cleaned tables keyed by lowercase words.

        Prefer load() or from_mapping(), which clean raw data first.
        """
        self._entries: Mapping[str, tuple[str, ...]] = MappingProxyType(dict(entries or {}))
        self._root_map: Mapping[str, str] = MappingProxyType(dict(root_map or {}))

    @classmethod
    def empty(cls) -> "DwarvenDictionary":
        """Dictionary with no translations; every lookup misses."""
        return cls()

    @classmethod
    def from_mapping(
        cls,
        entries: Mapping[str, Any],
        root_map: Mapping[str, Any] | None = None,
    ) -> "DwarvenDictionary":
        """Build a dictionary from in-memory data shaped like the JSON files.

        Args:
            entries: English word -> list of Dwarven translations
            root_map: Optional inflected form -> root word

        Returns:
            DwarvenDictionary with the same cleaning rules as load()
        """
        return cls(_build_entries(entries), _build_root_map(root_map or {}))

    @classmethod
    def load(cls, dictionary_path: Path, root_map_path: Path | None = None) -> "DwarvenDictionary":
        """Load the dictionary and root map JSON files.

        Missing or broken files never raise: each file degrades independently
        to an empty table, so search falls back to plain normalized names.

        Expected formats:
            dwarven-dictionary.json: {"scar": ["urrïth"], "froth": ["gulgun"]}
            english-root-map.json:   {"scars": "scar", "frothing": "froth"}

        Args:
            dictionary_path: Path to the dictionary JSON file
            root_map_path: Path to the root map JSON file; defaults to
                           english-root-map.json next to the dictionary

        Returns:
            Loaded DwarvenDictionary, possibly empty
        """
        dictionary_path = Path(dictionary_path)
        if root_map_path is None:
            root_map_path = dictionary_path.parent / ROOT_MAP_FILE_NAME
        root_map_path = Path(root_map_path)

        entries: dict[str, tuple[str, ...]] = {}
        raw_entries = _read_json_object(dictionary_path, "Dwarven dictionary")
        if raw_entries is not None:
            entries = _build_entries(raw_entries)
            logger.info(f"Loaded {len(entries)} dwarven translations from {dictionary_path}")

        root_map: dict[str, str] = {}
        raw_root_map = _read_json_object(root_map_path, "English root map")
        if raw_root_map is not None:
            root_map = _build_root_map(raw_root_map)
            logger.info(f"Loaded {len(root_map)} root map entries from {root_map_path}")

        return cls(entries, root_map)

    @property
    def entries(self) -> Mapping[str, tuple[str, ...]]:
        """Read-only view of the dictionary, keyed by lowercase English word."""
        return self._entries

    @property
    def root_count(self) -> int:
        """Number of inflected forms in the root map."""
        return len(self._root_map)

    def try_translate(self, word: str) -> tuple[str, ...] | None:
        """Look up the Dwarven translations of an English word.

        Tries a direct case-insensitive match first; on a miss, resolves the
        word through the root map and looks up its root. A root that is not
        itself in the dictionary is treated as a miss.

        Args:
            word: English word in any casing

        Returns:
            Ordered translation candidates, or None when nothing matches
        """
        if not word or not word.strip():
            return None

        key = word.lower()
        translations = self._entries.get(key)
        if translations is not None:
            return translations

        root = self._root_map.get(key)
        if root is not None:
            return self._entries.get(root.lower())

        return None

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DwarvenDictionary(entries={len(self._entries)}, roots={len(self._root_map)})"
