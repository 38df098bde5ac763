"""
Unit tests for the dictionary generator.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from dwarven_names.generator import (
    GeneratorError,
    count_entries,
    decode_raws,
    derive_words_source,
    generate,
    main,
    parse_language_words,
    parse_translations,
    read_source,
)
from dwarven_names.translation import DwarvenDictionary


DWARF_RAWS = """language_DWARF

[OBJECT:LANGUAGE]

[TRANSLATION:DWARF]
\t[T_WORD:ABBEY:kôlthrok]
\t[T_WORD:SCAR:urrïth]
\t[T_WORD:Scar:aban]
\t[T_WORD:scar:urrïth]
\t[T_WORD:FROTH:gulgun]
\t[T_WORD:EMPTY:]
\t[T_WORD::ogon]
\t[T_WORD:BROKEN]
not a directive [T_WORD:IGNORED:x]
"""

WORDS_RAWS = """language_words

[OBJECT:LANGUAGE]

[WORD:SCAR]
\t[NOUN:scar:scars:]
\t\t[FRONT_COMPOUND_NOUN_SING]
\t[VERB:scar:scars:scarred:scarred:scarring]
[WORD:FROTH]
\t[NOUN:froth:froths:]
\t[ADJ:frothy]
\t[PREFIX:froth]
\t[THEME:1:froth]
[WORD:SCARRED]
\t[ADJ:scarred:5]
"""


@pytest.fixture
def raws(tmp_path: Path) -> tuple[Path, Path]:
    """Write both language files side by side."""
    dwarf = tmp_path / "language_DWARF.txt"
    words = tmp_path / "language_words.txt"
    dwarf.write_text(DWARF_RAWS, encoding="utf-8")
    words.write_text(WORDS_RAWS, encoding="utf-8")
    return dwarf, words


class TestParseTranslations:
    """Test [T_WORD:...] parsing."""

    def test_groups_case_insensitively(self) -> None:
        """Test English keys merge across casing, first spelling kept."""
        translations = parse_translations(DWARF_RAWS)

        assert translations == {
            "ABBEY": ["kôlthrok"],
            "FROTH": ["gulgun"],
            "SCAR": ["aban", "urrïth"],
        }

    def test_skips_incomplete_lines(self) -> None:
        """Test lines without both words are ignored."""
        assert parse_translations("[T_WORD:EMPTY:]\n[T_WORD::ogon]\n[T_WORD:X]") == {}

    def test_handles_crlf(self) -> None:
        """Test Windows line endings."""
        assert parse_translations("[T_WORD:AXE:nur]\r\n[T_WORD:RED:ber]\r\n") == {
            "AXE": ["nur"],
            "RED": ["ber"],
        }


class TestParseLanguageWords:
    """Test [WORD:...] block parsing."""

    def test_maps_forms_to_roots(self) -> None:
        """Test word forms point at the most recent root."""
        root_map = parse_language_words(WORDS_RAWS)

        assert root_map == {
            "froth": "FROTH",
            "froths": "FROTH",
            "frothy": "FROTH",
            "scar": "SCAR",
            "scarred": "SCAR",
            "scarring": "SCAR",
            "scars": "SCAR",
        }

    def test_first_root_wins(self) -> None:
        """Test a form keeps the first root that declared it."""
        root_map = parse_language_words("[WORD:A]\n[NOUN:shared]\n[WORD:B]\n[VERB:Shared]")
        assert root_map == {"shared": "A"}

    def test_forms_before_any_root_ignored(self) -> None:
        """Test form lines outside a WORD block are skipped."""
        assert parse_language_words("[NOUN:orphan]\n[WORD:X]\n[noun:x]") == {"x": "X"}

    def test_keys_sorted_case_insensitively(self) -> None:
        """Test output keys are ordered ignoring case."""
        root_map = parse_language_words("[WORD:R]\n[NOUN:beta:Alpha:gamma]")
        assert list(root_map) == ["Alpha", "beta", "gamma"]


class TestSources:
    """Test reading sources and deriving the words file location."""

    def test_derive_words_source(self) -> None:
        """Test language_words.txt is found next to the Dwarf file."""
        assert derive_words_source("raws/v50/language_DWARF.txt") == "raws/v50/language_words.txt"
        assert derive_words_source("https://example.org/raws/language_dwarf.txt") == (
            "https://example.org/raws/language_words.txt"
        )
        assert derive_words_source("raws/dwarf.txt") == "raws/language_words.txt"
        assert derive_words_source("dwarf.txt") == "language_words.txt"

    def test_read_local_file(self, raws: tuple[Path, Path]) -> None:
        """Test local paths are read as UTF-8."""
        assert "urrïth" in read_source(str(raws[0]))

    def test_read_missing_file(self, tmp_path: Path) -> None:
        """Test a missing local file raises GeneratorError."""
        with pytest.raises(GeneratorError, match="Could not find source file"):
            read_source(str(tmp_path / "missing.txt"))

    def test_read_url(self) -> None:
        """Test http(s) sources are downloaded."""
        response = MagicMock()
        response.content = DWARF_RAWS.encode("utf-8")
        with patch("dwarven_names.generator.httpx.get", return_value=response) as mock_get:
            text = read_source("https://example.org/language_DWARF.txt")

        assert text == DWARF_RAWS
        mock_get.assert_called_once()
        response.raise_for_status.assert_called_once()

    def test_read_url_timeout(self) -> None:
        """Test HTTP timeouts become GeneratorError."""
        with patch("dwarven_names.generator.httpx.get", side_effect=httpx.ConnectTimeout("slow")):
            with pytest.raises(GeneratorError, match="Timed out"):
                read_source("https://example.org/language_DWARF.txt")

    def test_read_url_connection_error(self) -> None:
        """Test connection errors become GeneratorError."""
        request = httpx.Request("GET", "https://example.org/language_DWARF.txt")
        error = httpx.ConnectError("refused", request=request)
        with patch("dwarven_names.generator.httpx.get", side_effect=error):
            with pytest.raises(GeneratorError, match="Failed to fetch"):
                read_source("https://example.org/language_DWARF.txt")

    def test_read_cp437_file(self, tmp_path: Path) -> None:
        """Test raws saved in the game's CP437 encoding keep their accents."""
        path = tmp_path / "language_DWARF.txt"
        path.write_bytes("[T_WORD:SCAR:urrïth]\n[T_WORD:VOMIT:ôggon]\n".encode("cp437"))

        translations = parse_translations(read_source(str(path)))

        assert translations == {"SCAR": ["urrïth"], "VOMIT": ["ôggon"]}

    def test_read_cp437_url(self) -> None:
        """Test downloaded raws fall back to CP437 as well."""
        response = MagicMock()
        response.content = "[T_WORD:SCAR:urrïth]".encode("cp437")
        with patch("dwarven_names.generator.httpx.get", return_value=response):
            text = read_source("https://example.org/language_DWARF.txt")

        assert text == "[T_WORD:SCAR:urrïth]"

    def test_decode_prefers_utf8(self) -> None:
        """Test valid UTF-8 is never reinterpreted as CP437."""
        assert decode_raws("urrïth".encode("utf-8")) == "urrïth"
        assert decode_raws("urrïth".encode("cp437")) == "urrïth"


class TestCountEntries:
    """Test counting entries of existing output files."""

    def test_counts_object_entries(self, tmp_path: Path) -> None:
        """Test top-level keys are counted."""
        path = tmp_path / "dict.json"
        path.write_text(json.dumps({"SCAR": ["urrïth"], "FROTH": ["gulgun"]}), encoding="utf-8")

        assert count_entries(path) == 2

    def test_rejects_non_object(self, tmp_path: Path) -> None:
        """Test counting requires a JSON object."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(GeneratorError, match="JSON object"):
            count_entries(path)

    def test_rejects_non_utf8_file(self, tmp_path: Path) -> None:
        """Test an undecodable output file becomes GeneratorError."""
        path = tmp_path / "dict.json"
        path.write_bytes(b'{"a": "\xff"}')

        with pytest.raises(GeneratorError, match="Failed to read"):
            count_entries(path)

    def test_validate_reports_non_utf8_output(
        self, raws: tuple[Path, Path], tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """Test the CLI reports an undecodable dictionary with exit code 1."""
        output = tmp_path / "dict.json"
        output.write_bytes(b'{"a": "\xff"}')

        code = main([
            "--source", str(raws[0]),
            "--words-source", str(raws[1]),
            "--output", str(output),
            "--validate-only",
        ])

        assert code == 1
        assert "Failed to read" in capsys.readouterr().err


class TestGenerate:
    """Test the write, dry-run and validate modes."""

    def test_write_outputs(self, raws: tuple[Path, Path], tmp_path: Path) -> None:
        """Test both JSON files are written and loadable."""
        output = tmp_path / "data" / "dwarven-dictionary.json"
        root_map_output = tmp_path / "data" / "english-root-map.json"

        code = generate(str(raws[0]), str(raws[1]), output, root_map_output)

        assert code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["SCAR"] == ["aban", "urrïth"]
        assert "urrïth" in output.read_text(encoding="utf-8")

        dictionary = DwarvenDictionary.load(output)
        assert dictionary.try_translate("scarring") == ("aban", "urrïth")
        assert dictionary.try_translate("froths") == ("gulgun",)

    def test_dry_run_writes_nothing(
        self, raws: tuple[Path, Path], tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """Test dry run only prints a preview."""
        output = tmp_path / "out" / "dict.json"
        root_map_output = tmp_path / "out" / "roots.json"

        code = generate(str(raws[0]), str(raws[1]), output, root_map_output, dry_run=True)

        assert code == 0
        assert not output.exists()
        assert not root_map_output.exists()
        assert "Dry run requested" in capsys.readouterr().out

    def test_validate_matching_counts(self, raws: tuple[Path, Path], tmp_path: Path) -> None:
        """Test validation passes against freshly generated files."""
        output = tmp_path / "dict.json"
        root_map_output = tmp_path / "roots.json"
        assert generate(str(raws[0]), str(raws[1]), output, root_map_output) == 0

        assert generate(str(raws[0]), str(raws[1]), output, root_map_output, validate_only=True) == 0

    def test_validate_count_mismatch(self, raws: tuple[Path, Path], tmp_path: Path) -> None:
        """Test validation fails when the dictionary is out of date."""
        output = tmp_path / "dict.json"
        output.write_text(json.dumps({"SCAR": ["urrïth"]}), encoding="utf-8")

        code = generate(str(raws[0]), str(raws[1]), output, tmp_path / "roots.json", validate_only=True)

        assert code == 1

    def test_validate_root_map_mismatch(self, raws: tuple[Path, Path], tmp_path: Path) -> None:
        """Test validation checks an existing root map too."""
        output = tmp_path / "dict.json"
        root_map_output = tmp_path / "roots.json"
        assert generate(str(raws[0]), str(raws[1]), output, root_map_output) == 0
        root_map_output.write_text(json.dumps({"scar": "SCAR"}), encoding="utf-8")

        assert generate(str(raws[0]), str(raws[1]), output, root_map_output, validate_only=True) == 1

    def test_validate_requires_dictionary(self, raws: tuple[Path, Path], tmp_path: Path) -> None:
        """Test validation fails without an existing dictionary."""
        code = generate(
            str(raws[0]), str(raws[1]), tmp_path / "dict.json", tmp_path / "roots.json", validate_only=True
        )
        assert code == 1

    def test_no_translations_aborts(self, raws: tuple[Path, Path], tmp_path: Path) -> None:
        """Test an empty Dwarf source aborts without writing."""
        raws[0].write_text("[OBJECT:LANGUAGE]\n", encoding="utf-8")
        output = tmp_path / "dict.json"

        assert generate(str(raws[0]), str(raws[1]), output, tmp_path / "roots.json") == 1
        assert not output.exists()

    def test_no_root_map_aborts(self, raws: tuple[Path, Path], tmp_path: Path) -> None:
        """Test an empty words source aborts without writing."""
        raws[1].write_text("[OBJECT:LANGUAGE]\n", encoding="utf-8")
        output = tmp_path / "dict.json"

        assert generate(str(raws[0]), str(raws[1]), output, tmp_path / "roots.json") == 1
        assert not output.exists()


class TestMain:
    """Test the command line entry point."""

    def test_main_derives_words_source(
        self, raws: tuple[Path, Path], tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the words file is found next to --source."""
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "generated" / "dict.json"

        code = main(["--source", str(raws[0]), "--output", str(output)])

        assert code == 0
        assert output.exists()
        assert (tmp_path / "generated" / "english-root-map.json").exists()

    def test_main_reports_errors(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        """Test source errors are reported with exit code 1."""
        monkeypatch.chdir(tmp_path)

        code = main(["--source", str(tmp_path / "language_DWARF.txt"), "--dry-run"])

        assert code == 1
        assert "Could not find source file" in capsys.readouterr().err

    def test_dry_run_and_validate_are_exclusive(self) -> None:
        """Test conflicting modes are rejected by the parser."""
        with pytest.raises(SystemExit):
            main(["--dry-run", "--validate-only"])
