"""
Dwarven names - search aliases and Dwarven translations for world entity names.
"""

from .config import DictionaryConfig, load_dictionary
from .entity import NamedEntity
from .normalization import normalize_for_search
from .translation import DwarvenDictionary, SearchAliases, TranslationDictionary, build_aliases

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("dwarven-names")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "DictionaryConfig",
    "DwarvenDictionary",
    "NamedEntity",
    "SearchAliases",
    "TranslationDictionary",
    "build_aliases",
    "load_dictionary",
    "normalize_for_search",
]
