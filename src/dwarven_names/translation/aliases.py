"""
Search alias generation and English to Dwarven name translation.

Entity names such as "The Scar of Froths" or "Goredscars the Disgusting
Shadows" are translated word by word with a small fixed grammar:

    the X of Y   ->  "X' Y'"      (determiner and "of" dropped)
    X of Y       ->  "X' Y'"
    the A N      ->  "A'N'"       (adjective and noun compounded)
    X            ->  "X'" or X unchanged

Single words the dictionary does not know are split into known sub-words
("Frigidheart" -> "frigid" + "heart") before giving up on them.
"""

import logging
import re

from ..normalization import normalize_for_search
from .dictionary import TranslationDictionary
from .models import SearchAliases

logger = logging.getLogger("dwarven-names")

_TOKEN_DELIMITERS = re.compile(r"[ \-_'\"]")
_DETERMINERS = frozenset({"the", "a", "an"})

MIN_COMPOUND_LENGTH = 4
MIN_COMPOUND_PART = 2
# Longer unbroken tokens are not natural-language words; skip decomposition
MAX_COMPOUND_LENGTH = 256


def build_aliases(name: str | None, dictionary: TranslationDictionary | None) -> SearchAliases:
    """Build the search aliases and Dwarven display name for an entity name.

    The normalized name is always an alias. When a dictionary is given and at
    least one word of the name translates, the translated name becomes the
    display name and its normalized form a second alias.

    Args:
        name: Entity name as it appears in the world data, may be None
        dictionary: Translation dictionary, or None to skip translation

    Returns:
        SearchAliases snapshot

    Example:
        >>> d = DwarvenDictionary.from_mapping({"vomit": ["ôggon"]})
        >>> result = build_aliases("The Vomit", d)
        >>> sorted(result.aliases)
        ['the oggon', 'the vomit']
        >>> result.dwarven_display
        'The ôggon'
    """
    aliases: set[str] = set()

    normalized_base = normalize_for_search(name)
    if normalized_base:
        aliases.add(normalized_base)

    dwarven_display = None
    if dictionary is not None:
        translated = translate_to_dwarven(name, dictionary)
        if translated:
            dwarven_display = translated
            normalized_translated = normalize_for_search(translated)
            if normalized_translated:
                aliases.add(normalized_translated)

    return SearchAliases(aliases=frozenset(aliases), dwarven_display=dwarven_display)


def tokenize(name: str) -> list[str]:
    """Split a name on spaces, hyphens, underscores and quotes."""
    tokens = (token.strip() for token in _TOKEN_DELIMITERS.split(name))
    return [token for token in tokens if token]


def _is_determiner(token: str) -> bool:
    return token.lower() in _DETERMINERS


def _is_of(token: str) -> bool:
    return token.lower() == "of"


def translate_to_dwarven(name: str | None, dictionary: TranslationDictionary) -> str | None:
    """Translate a whole name, or return None when no word translates.

    Patterns are matched greedily from left to right; at each position the
    first pattern whose words all translate consumes its tokens. Untranslated
    single tokens are kept with their original casing.

    Args:
        name: English entity name
        dictionary: Translation dictionary

    Returns:
        Space-joined translated fragments, or None
    """
    if name is None or not name.strip():
        return None

    tokens = tokenize(name)
    if not tokens:
        return None

    fragments: list[str] = []
    any_translated = False
    i = 0

    while i < len(tokens):
        token = tokens[i]

        # the X of Y
        if _is_determiner(token) and i + 4 <= len(tokens) and _is_of(tokens[i + 2]):
            x = translate_token(tokens[i + 1], dictionary)
            y = translate_token(tokens[i + 3], dictionary) if x is not None else None
            if y is not None:
                fragments.append(x + " " + y)
                any_translated = True
                i += 4
                continue

        # X of Y
        if not _is_determiner(token) and i + 3 <= len(tokens) and _is_of(tokens[i + 1]):
            x = translate_token(token, dictionary)
            y = translate_token(tokens[i + 2], dictionary) if x is not None else None
            if y is not None:
                fragments.append(x + " " + y)
                any_translated = True
                i += 3
                continue

        # the Adjective Noun
        if _is_determiner(token) and i + 3 <= len(tokens):
            adjective = translate_token(tokens[i + 1], dictionary)
            noun = translate_token(tokens[i + 2], dictionary) if adjective is not None else None
            if noun is not None:
                fragments.append(adjective + noun)
                any_translated = True
                i += 3
                continue

        translated = translate_token(token, dictionary)
        if translated is not None:
            fragments.append(translated)
            any_translated = True
        else:
            fragments.append(token)
        i += 1

    if not any_translated:
        return None

    return " ".join(fragments)


def _first_translation(word: str, dictionary: TranslationDictionary) -> str | None:
    translations = dictionary.try_translate(word)
    if translations:
        return translations[0]
    return None


def translate_token(token: str, dictionary: TranslationDictionary) -> str | None:
    """Translate one word, splitting unknown compounds into known sub-words.

    Args:
        token: Single English word
        dictionary: Translation dictionary

    Returns:
        Canonical (first) translation, a concatenated compound translation,
        or None
    """
    translated = _first_translation(token, dictionary)
    if translated is not None:
        return translated
    return translate_compound(token, dictionary)


def translate_compound(
    token: str,
    dictionary: TranslationDictionary,
    _undecomposable: set[str] | None = None,
) -> str | None:
    """Translate an unbroken word as a concatenation of dictionary words.

    Split points are tried from the shortest left part upwards; both parts
    are at least two characters long. The left part must be a dictionary
    word; the right part is either a dictionary word or, recursively, another
    compound. The first split that works wins.

    Example:
        "goredscars" -> "gored" + "scars" -> "ugzol" + "urrith"

    Args:
        token: Word of at least MIN_COMPOUND_LENGTH characters
        dictionary: Translation dictionary

    Returns:
        Concatenated translations without separator, or None
    """
    if len(token) < MIN_COMPOUND_LENGTH or len(token) > MAX_COMPOUND_LENGTH:
        return None

    # Suffixes already shown not to decompose, shared across the recursion
    undecomposable = set() if _undecomposable is None else _undecomposable
    if token in undecomposable:
        return None

    for split in range(MIN_COMPOUND_PART, len(token) - MIN_COMPOUND_PART + 1):
        left, right = token[:split], token[split:]

        left_translated = _first_translation(left, dictionary)
        if left_translated is None:
            continue

        right_translated = _first_translation(right, dictionary)
        if right_translated is not None:
            logger.debug(f"Compound '{token}' split as '{left}' + '{right}'")
            return left_translated + right_translated

        right_translated = translate_compound(right, dictionary, undecomposable)
        if right_translated is not None:
            return left_translated + right_translated

    undecomposable.add(token)
    return None
