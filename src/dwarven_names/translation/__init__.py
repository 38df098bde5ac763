"""
English to Dwarven name translation for search aliases.

Provides an immutable word dictionary with inflected-form fallback and the
alias generator that turns entity names into normalized search aliases plus
a translated display name.
"""

from .aliases import build_aliases, translate_to_dwarven, translate_token
from .dictionary import DwarvenDictionary, TranslationDictionary
from .models import SearchAliases

__all__ = [
    "DwarvenDictionary",
    "SearchAliases",
    "TranslationDictionary",
    "build_aliases",
    "translate_to_dwarven",
    "translate_token",
]
