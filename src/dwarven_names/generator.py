#!/usr/bin/env python3
"""
Generate the Dwarven dictionary and English root map from language raws.

Reads the game's language definition files and writes the two JSON documents
loaded by DwarvenDictionary:

- language_DWARF.txt:  [T_WORD:SCAR:urrïth] lines -> dwarven-dictionary.json
- language_words.txt:  [WORD:SCAR] blocks with [NOUN:scar:scars] and similar
                       lines -> english-root-map.json

Usage:
    dwarven-dictionary --dry-run
    dwarven-dictionary --source raws/language_DWARF.txt --output data/dwarven-dictionary.json
    dwarven-dictionary --validate-only
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from urllib.parse import urlparse

import httpx

from .config import DictionaryConfig
from .translation.dictionary import ROOT_MAP_FILE_NAME

logger = logging.getLogger("dwarven-names.generator")

DEFAULT_DWARF_SOURCE = (
    "https://raw.githubusercontent.com/DF-Wiki/DFRawFunctions/master/raws/v50/language_DWARF.txt"
)
DWARF_FILE_NAME = "language_DWARF.txt"
WORDS_FILE_NAME = "language_words.txt"
WORD_FORM_TAGS = frozenset({"NOUN", "VERB", "ADJ", "PREFIX"})
PREVIEW_LENGTH = 500


class GeneratorError(Exception):
    """Raised when a language source cannot be read or an output is unusable."""


def decode_raws(data: bytes) -> str:
    """Decode a language file, falling back to the game's CP437 encoding.

    Example:
        >>> decode_raws("urrïth".encode("cp437"))
        'urrïth'
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("cp437")


def read_source(source: str, timeout: float = 30.0) -> str:
    """Read a language file from an http(s) URL or a local path.

    Args:
        source: URL or filesystem path
        timeout: HTTP timeout in seconds

    Returns:
        File contents as text

    Raises:
        GeneratorError: If the source cannot be fetched or read
    """
    if urlparse(source).scheme in ("http", "https"):
        try:
            response = httpx.get(source, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.TimeoutException:
            raise GeneratorError(f"Timed out fetching {source}") from None
        except httpx.HTTPStatusError as e:
            raise GeneratorError(
                f"{source} returned HTTP {e.response.status_code}: {e.response.reason_phrase}"
            ) from None
        except httpx.RequestError as e:
            raise GeneratorError(f"Failed to fetch {source}: {e}") from None
        return decode_raws(response.content)

    path = Path(source).resolve()
    if not path.is_file():
        raise GeneratorError(f"Could not find source file at '{path}'")

    try:
        return decode_raws(path.read_bytes())
    except OSError as e:
        raise GeneratorError(f"Failed to read {path}: {e}") from None


def derive_words_source(dwarf_source: str) -> str:
    """Locate language_words.txt next to the Dwarf language file.

    Example:
        >>> derive_words_source("raws/v50/language_DWARF.txt")
        'raws/v50/language_words.txt'
    """
    if dwarf_source.lower().endswith(DWARF_FILE_NAME.lower()):
        return dwarf_source[: -len(DWARF_FILE_NAME)] + WORDS_FILE_NAME

    directory, separator, _ = dwarf_source.rpartition("/")
    if not separator:
        return WORDS_FILE_NAME
    return f"{directory}/{WORDS_FILE_NAME}"


def _bracket_contents(line: str) -> str | None:
    trimmed = line.strip()
    if not trimmed.startswith("[") or not trimmed.endswith("]"):
        return None
    return trimmed.lstrip("[").rstrip("]")


def parse_translations(raw_text: str) -> dict[str, list[str]]:
    """Collect [T_WORD:<english>:<dwarven>] entries.

    English words are grouped case-insensitively (the first spelling seen is
    kept); translations are deduplicated by exact value and sorted.

    Args:
        raw_text: Contents of language_DWARF.txt

    Returns:
        English word -> sorted Dwarven translations, sorted by word
    """
    spellings: dict[str, str] = {}
    buffer: dict[str, set[str]] = {}

    for line in raw_text.split("\n"):
        trimmed = line.strip()
        if not trimmed.startswith("[T_WORD:"):
            continue

        parts = trimmed.lstrip("[").rstrip("]").split(":")
        if len(parts) < 3:
            continue

        english = parts[1].strip()
        dwarven = parts[2].strip()
        if not english or not dwarven:
            continue

        key = english.lower()
        spellings.setdefault(key, english)
        buffer.setdefault(key, set()).add(dwarven)

    return {spellings[key]: sorted(buffer[key]) for key in sorted(buffer)}


def parse_language_words(raw_text: str) -> dict[str, str]:
    """Map inflected English forms to their [WORD:...] root.

    Every colon-separated form on a NOUN, VERB, ADJ or PREFIX line points at
    the most recent [WORD:...] root. Forms starting with a digit are flags,
    not words, and are skipped. The first root seen for a form wins.

    Example:
        [WORD:SCAR]
            [NOUN:scar:scars]
            [VERB:scar:scars:scarred:scarred:scarring]

        -> {"scar": "SCAR", "scarred": "SCAR", "scarring": "SCAR", "scars": "SCAR"}

    Args:
        raw_text: Contents of language_words.txt

    Returns:
        Inflected form -> root word, sorted by form
    """
    result: dict[str, tuple[str, str]] = {}
    current_root = None

    for line in raw_text.split("\n"):
        inner = _bracket_contents(line)
        if inner is None or ":" not in inner:
            continue

        tag, payload = inner.split(":", 1)

        if tag.upper() == "WORD":
            current_root = payload.strip()
            continue

        if not current_root or tag.upper() not in WORD_FORM_TAGS:
            continue

        for form in payload.split(":"):
            form = form.strip()
            if form and not form[0].isdigit() and form.lower() not in result:
                result[form.lower()] = (form, current_root)

    return {result[key][0]: result[key][1] for key in sorted(result)}


def count_entries(path: Path) -> int:
    """Count the top-level entries of a JSON object file.

    Raises:
        GeneratorError: If the file is not a readable JSON object
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise GeneratorError(f"Failed to read {path}: {e}") from None

    if not isinstance(data, dict):
        raise GeneratorError(f"{path} must contain a JSON object of key/value pairs")

    return len(data)


def _to_json(data: dict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def generate(
    source: str,
    words_source: str,
    output: Path,
    root_map_output: Path,
    dry_run: bool = False,
    validate_only: bool = False,
) -> int:
    """Parse both language files and write, preview or validate the outputs.

    Args:
        source: Path or URL of language_DWARF.txt
        words_source: Path or URL of language_words.txt
        output: Dictionary JSON path
        root_map_output: Root map JSON path
        dry_run: Print a preview of both documents instead of writing them
        validate_only: Compare entry counts of the existing files only

    Returns:
        Process exit code (0 on success, 1 on failure)

    Raises:
        GeneratorError: If a source or existing output cannot be read
    """
    print("Dwarven dictionary generator")
    print(f"Dwarf source : {source}")
    print(f"Words source : {words_source}")
    print(f"Dictionary   : {output}")
    print(f"Root map     : {root_map_output}")
    print("Mode   : DRY RUN" if dry_run else "Mode   : VALIDATE" if validate_only else "Mode   : WRITE")
    print()

    translations = parse_translations(read_source(source))
    root_map = parse_language_words(read_source(words_source))

    if not translations:
        print("No translations were discovered. Aborting.")
        return 1

    if not root_map:
        print("No root map entries were discovered. Aborting.")
        return 1

    dictionary_json = _to_json(translations)
    root_map_json = _to_json(root_map)

    print(f"Entries parsed from dwarf source: {len(translations)}")
    print(f"Entries parsed from words source: {len(root_map)}")

    existing_count = None
    if output.is_file():
        existing_count = count_entries(output)
        print(f"Entries in existing dictionary: {existing_count}")
    elif validate_only:
        print(f"Validation requires an existing dictionary at {output}.")
        return 1

    if validate_only:
        if existing_count != len(translations):
            print(f"Validation failed. Expected {len(translations)} entries but found {existing_count}.")
            return 1

        if root_map_output.is_file():
            existing_root_count = count_entries(root_map_output)
            if existing_root_count != len(root_map):
                print(
                    f"Root map validation failed. Expected {len(root_map)} entries "
                    f"but found {existing_root_count}."
                )
                return 1

        print("Validation succeeded. Counts match.")
        return 0

    if dry_run:
        print(f"Dry run requested; first {PREVIEW_LENGTH} characters of generated dictionary JSON:")
        print(dictionary_json[:PREVIEW_LENGTH])
        print()
        print(f"First {PREVIEW_LENGTH} characters of generated root map JSON:")
        print(root_map_json[:PREVIEW_LENGTH])
        return 0

    for path, content, expected, label in (
        (output, dictionary_json, len(translations), "dictionary"),
        (root_map_output, root_map_json, len(root_map), "root map"),
    ):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote {label} to {path}")

        written = count_entries(path)
        if written != expected:
            print(
                f"Warning: wrote {label} but counts mismatch "
                f"(expected {expected}, file has {written})."
            )
            return 1

    print(f"Wrote {len(translations)} entries to {output}")
    print(f"Wrote {len(root_map)} entries to {root_map_output}")
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Generate the Dwarven dictionary and English root map JSON files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview generated JSON from the default online raws
  dwarven-dictionary --dry-run

  # Generate from local raws
  dwarven-dictionary --source raws/language_DWARF.txt

  # Check that the committed files match the raws
  dwarven-dictionary --validate-only
        """,
    )

    parser.add_argument(
        "--source",
        default=DEFAULT_DWARF_SOURCE,
        help="Path or URL of language_DWARF.txt (default: DF-Wiki v50 raws)"
    )
    parser.add_argument(
        "--words-source",
        default=None,
        help="Path or URL of language_words.txt (default: next to --source)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Dictionary JSON output (default: DWARVEN_DICTIONARY_PATH or data/dwarven-dictionary.json)"
    )
    parser.add_argument(
        "--output-root-map",
        type=Path,
        default=None,
        help="Root map JSON output (default: english-root-map.json next to the dictionary output)"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry-run",
        action="store_true",
        help="Show a preview of the generated JSON without writing files"
    )
    mode.add_argument(
        "--validate-only", "--validate",
        dest="validate_only",
        action="store_true",
        help="Only compare entry counts of the existing files with the raws"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the dictionary generator."""
    args = parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    config = DictionaryConfig.from_env()
    output = args.output or config.dictionary_path
    if args.output_root_map:
        root_map_output = args.output_root_map
    elif args.output:
        root_map_output = args.output.parent / ROOT_MAP_FILE_NAME
    else:
        root_map_output = config.resolved_root_map_path
    words_source = args.words_source or derive_words_source(args.source)

    try:
        return generate(
            source=args.source,
            words_source=words_source,
            output=output,
            root_map_output=root_map_output,
            dry_run=args.dry_run,
            validate_only=args.validate_only,
        )
    except GeneratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
