"""
Configuration for locating the Dwarven dictionary files.
"""

import logging
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from .translation.dictionary import ROOT_MAP_FILE_NAME, DwarvenDictionary

logger = logging.getLogger("dwarven-names")

DEFAULT_DICTIONARY_PATH = Path("data") / "dwarven-dictionary.json"
DICTIONARY_PATH_ENV = "DWARVEN_DICTIONARY_PATH"
ROOT_MAP_PATH_ENV = "DWARVEN_ROOT_MAP_PATH"


class DictionaryConfig(BaseModel):
    """Locations of the dictionary and root map JSON files.

    The root map lives next to the dictionary unless configured otherwise.
    """

    dictionary_path: Path = Field(
        default=DEFAULT_DICTIONARY_PATH,
        description="Path to the English -> Dwarven dictionary JSON file"
    )
    root_map_path: Path | None = Field(
        default=None,
        description="Path to the inflected form -> root JSON file (default: next to the dictionary)"
    )

    @property
    def resolved_root_map_path(self) -> Path:
        if self.root_map_path is not None:
            return self.root_map_path
        return self.dictionary_path.parent / ROOT_MAP_FILE_NAME

    @classmethod
    def from_env(cls, base_dir: Path | None = None) -> "DictionaryConfig":
        """Build the configuration from environment variables and a .env file
        found in the current directory or one of its parents.

        DWARVEN_DICTIONARY_PATH is resolved against the current directory.
        Without it, the default data/dwarven-dictionary.json is resolved
        against base_dir (the application root, default: current directory).

        Args:
            base_dir: Directory the default dictionary path is relative to

        Returns:
            DictionaryConfig with absolute paths
        """
        load_dotenv(find_dotenv(usecwd=True))

        configured = os.getenv(DICTIONARY_PATH_ENV, "").strip()
        if configured:
            dictionary_path = Path(configured).resolve()
        else:
            dictionary_path = (Path(base_dir) if base_dir else Path.cwd()) / DEFAULT_DICTIONARY_PATH

        root_map = os.getenv(ROOT_MAP_PATH_ENV, "").strip()
        root_map_path = Path(root_map).resolve() if root_map else None

        logger.debug(f"📂 Dictionary path: {dictionary_path}")
        return cls(dictionary_path=dictionary_path, root_map_path=root_map_path)


def load_dictionary(config: DictionaryConfig | None = None) -> DwarvenDictionary:
    """Load the process-wide dictionary snapshot at startup.

    Args:
        config: Dictionary locations; read from the environment when omitted

    Returns:
        DwarvenDictionary, empty when the files are missing or broken
    """
    if config is None:
        config = DictionaryConfig.from_env()
    return DwarvenDictionary.load(config.dictionary_path, config.resolved_root_map_path)
