"""
Search normalization for entity names.
"""

import unicodedata


def normalize_for_search(text: str | None) -> str:
    """Normalize text for accent-insensitive, case-insensitive matching.

    Lowercases the text, decomposes it with Unicode NFD so that accents are
    separated from their base letters, strips the combining marks, then
    collapses every run of whitespace (tabs and newlines included) into a
    single space and trims the ends.

    Args:
        text: Input text to normalize, may be None

    Returns:
        Normalized text, or an empty string for None/blank input

    Example:
        >>> normalize_for_search("  Ngáthsesh   the\\tGreat  ")
        'ngathsesh the great'
        >>> normalize_for_search(None)
        ''
    """
    if text is None or not text.strip():
        return ""

    # Normalize to NFD form (decompose accents)
    nfd = unicodedata.normalize("NFD", text.lower())
    # Strip combining marks (accents)
    stripped = "".join(c for c in nfd if not unicodedata.combining(c))
    return " ".join(stripped.split())
