# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for fonts/codepage.py."""

from pathlib import Path

import pytest

from pdffontmaker.exceptions import EncodingNotFoundError
from pdffontmaker.fonts.codepage import (
    CODE_PAGE_SIZE,
    CodePageEntry,
    CodePageMap,
    glyph_name_for,
    load_code_page,
    parse_map_lines,
)
from pdffontmaker.fonts.constants import ENCODINGS


class TestGlyphNameFor:
    """Tests for Unicode to glyph name lookup."""

    @pytest.mark.parametrize(
        ("uv", "name"),
        [
            (0x0020, "space"),
            (0x0041, "A"),
            (0x00E9, "eacute"),
            (0x20AC, "Euro"),
            (0x0152, "OE"),
            (0x015A, "Sacute"),
        ],
    )
    def test_glyph_list_names(self, uv: int, name: str) -> None:
        """Names come from the Adobe Glyph List for New Fonts."""
        assert glyph_name_for(uv) == name

    @pytest.mark.parametrize(
        ("uv", "name"),
        [
            (0x0430, "afii10065"),
            (0x0410, "afii10017"),
            (0x0451, "afii10071"),
            (0x05D0, "afii57664"),
        ],
    )
    def test_legacy_glyph_list(self, uv: int, name: str) -> None:
        """Characters outside the new-fonts list use their legacy afii name."""
        assert glyph_name_for(uv) == name

    def test_cp1251_letters_use_legacy_names(self) -> None:
        """Cyrillic code pages name their letters from the full glyph list."""
        code_map = load_code_page("cp1251")
        assert code_map[0xE0] == CodePageEntry(0x0430, "afii10065")
        assert code_map[0xC0] == CodePageEntry(0x0410, "afii10017")
        assert not any(entry.name.startswith("uni04") for entry in code_map)

    @pytest.mark.parametrize(("uv", "name"), [(0xE000, "uniE000"), (0x1234, "uni1234")])
    def test_fallback_name(self, uv: int, name: str) -> None:
        """Characters without a list name get a uniXXXX name."""
        assert glyph_name_for(uv) == name


class TestBuiltinCodePages:
    """Tests for code pages derived from Python codecs."""

    def test_cp1252(self) -> None:
        """Printable, control and undefined codes of cp1252."""
        code_map = load_code_page("cp1252")
        assert len(code_map) == CODE_PAGE_SIZE
        assert code_map[0x41] == CodePageEntry(0x41, "A")
        assert code_map[0x20] == CodePageEntry(0x20, "space")
        assert code_map[0x80] == CodePageEntry(0x20AC, "Euro")
        assert code_map[0x8C] == CodePageEntry(0x0152, "OE")
        assert code_map[0xE9] == CodePageEntry(0xE9, "eacute")

    def test_control_codes_keep_unicode(self) -> None:
        """Control characters have a Unicode value but no glyph."""
        code_map = load_code_page("cp1252")
        assert code_map[0x00] == CodePageEntry(0x00, ".notdef")
        assert code_map[0x0A] == CodePageEntry(0x0A, ".notdef")
        assert code_map[0x7F] == CodePageEntry(0x7F, ".notdef")
        assert code_map[0x0A].is_notdef

    @pytest.mark.parametrize("code", [0x81, 0x8D, 0x8F, 0x90, 0x9D])
    def test_undefined_codes(self, code: int) -> None:
        """Codes the codec cannot decode are undefined."""
        assert load_code_page("cp1252")[code] == CodePageEntry(None, ".notdef")

    def test_code_points_skip_notdef(self) -> None:
        """code_points lists the named codes in code order."""
        code_points = load_code_page("cp1252").code_points()
        assert len(code_points) == 256 - 33 - 5
        assert code_points[0] == 0x20
        assert 0x20AC in code_points
        assert 0x0A not in code_points

    def test_iso_8859_1_c1_controls(self) -> None:
        """ISO-8859-1 codes 0x80-0x9F are control characters."""
        code_map = load_code_page("ISO-8859-1")
        assert code_map[0x80] == CodePageEntry(0x80, ".notdef")
        assert code_map[0xE9].name == "eacute"
        assert len(code_map.code_points()) == 256 - 65

    def test_koi8_r(self) -> None:
        """Cyrillic code pages map to Cyrillic characters."""
        code_map = load_code_page("KOI8-R")
        assert code_map[0xC1].uv == 0x0430
        assert code_map[0x41].name == "A"

    def test_names_are_case_insensitive(self) -> None:
        """Encoding names are matched without regard to case."""
        assert list(load_code_page("iso-8859-2")) == list(load_code_page("ISO-8859-2"))

    @pytest.mark.parametrize("encoding", list(ENCODINGS.values()))
    def test_every_listed_encoding_loads(self, encoding: str) -> None:
        """Each encoding offered to users has a code page."""
        code_map = load_code_page(encoding)
        assert code_map.encoding == encoding
        assert code_map[0x41].name == "A"

    def test_unknown_encoding(self) -> None:
        """Unknown encodings raise EncodingNotFoundError."""
        with pytest.raises(EncodingNotFoundError) as exc_info:
            load_code_page("cp9999")
        assert exc_info.value.name == "cp9999"


class TestMapFiles:
    """Tests for code pages read from map files."""

    def test_parse_map_lines(self) -> None:
        """Each line sets one code; other codes are undefined."""
        entries = parse_map_lines(["!41 U+0041 A", "!80 U+20AC Euro", "", "!FF U+00FF ydieresis"])
        assert len(entries) == CODE_PAGE_SIZE
        assert entries[0x41] == CodePageEntry(0x41, "A")
        assert entries[0x80] == CodePageEntry(0x20AC, "Euro")
        assert entries[0xFF] == CodePageEntry(0xFF, "ydieresis")
        assert entries[0x42] == CodePageEntry(None, ".notdef")

    def test_map_file_overrides_builtin(self, tmp_dir: Path) -> None:
        """A map file in the map directory takes precedence."""
        (tmp_dir / "cp1252.map").write_text("!41 U+0042 B\n", encoding="latin-1")
        code_map = load_code_page("CP1252", tmp_dir)
        assert code_map[0x41] == CodePageEntry(0x42, "B")
        assert code_map[0x80].uv is None

    def test_custom_encoding(self, tmp_dir: Path) -> None:
        """Encodings without a codec load from their map file."""
        (tmp_dir / "custom.map").write_text("!20 U+0020 space\n", encoding="latin-1")
        code_map = load_code_page("custom", tmp_dir)
        assert code_map.code_points() == [0x20]

    def test_empty_map_file(self, tmp_dir: Path) -> None:
        """An empty map file is an unknown encoding."""
        (tmp_dir / "empty.map").write_text("\n\n", encoding="latin-1")
        with pytest.raises(EncodingNotFoundError):
            load_code_page("empty", tmp_dir)

    def test_falls_back_without_map_file(self, tmp_dir: Path) -> None:
        """Without a matching file the built-in table is used."""
        assert load_code_page("cp1252", tmp_dir)[0x80].name == "Euro"


class TestCodePageMap:
    """Tests for CodePageMap."""

    def test_requires_256_entries(self) -> None:
        """A map with the wrong number of entries is rejected."""
        with pytest.raises(ValueError):
            CodePageMap("short", (CodePageEntry(None, ".notdef"),) * 10)
