# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for pdf.py."""

import re
from pathlib import Path

import pytest
from conftest import new_pdf, open_pdf
from pikepdf import Name

from pdffontmaker.maker import make_font
from pdffontmaker.pdf import (
    build_font_dictionary,
    encode_text,
    parse_differences,
    write_specimen,
)


class TestParseDifferences:
    """Tests for Differences string parsing."""

    def test_codes_and_names(self) -> None:
        """Numbers become codes; slashes are stripped from names."""
        assert parse_differences("128 /Euro /bullet 200 /Egrave") == [
            128,
            "Euro",
            "bullet",
            200,
            "Egrave",
        ]

    @pytest.mark.parametrize("diff", [None, ""])
    def test_empty(self, diff: str | None) -> None:
        """No differences gives an empty list."""
        assert parse_differences(diff) == []


class TestBuildFontDictionary:
    """Tests for font dictionaries built from definitions."""

    def test_truetype_subset(self, font_file: Path) -> None:
        """An embedded subset gets a tagged name and a FontFile2 stream."""
        definition = make_font(font_file)
        pdf = new_pdf()
        font = build_font_dictionary(pdf, definition)
        assert font.Subtype == Name.TrueType
        assert re.fullmatch(r"/[A-Z]{6}\+TestFont-Regular", str(font.BaseFont))
        assert font.FirstChar == 0
        assert font.LastChar == 255
        assert len(font.Widths) == 256
        assert font.Widths[0x41] == 600
        assert font.Encoding == Name.WinAnsiEncoding

        descriptor = font.FontDescriptor
        assert descriptor.FontName == font.BaseFont
        assert descriptor.Flags == 32
        assert [int(v) for v in descriptor.FontBBox] == [
            int(v) for v in definition.descriptor["FontBBox"].strip("[]").split()
        ]
        stream = descriptor.FontFile2
        assert stream.Length1 == len(definition.data)
        assert stream.read_bytes() == definition.data

    def test_truetype_full_font(self, font_file: Path) -> None:
        """A font embedded whole keeps its plain name."""
        definition = make_font(font_file, subset=False)
        font = build_font_dictionary(new_pdf(), definition)
        assert font.BaseFont == Name("/TestFont-Regular")
        assert "/FontFile2" in font.FontDescriptor

    def test_not_embedded(self, font_file: Path) -> None:
        """Without embedding there is no font file stream."""
        definition = make_font(font_file, embed=False)
        font = build_font_dictionary(new_pdf(), definition)
        assert font.BaseFont == Name("/TestFont-Regular")
        assert "/FontFile2" not in font.FontDescriptor

    def test_type1(self, type1_files: Path) -> None:
        """Type 1 programs use FontFile with three lengths."""
        definition = make_font(type1_files)
        font = build_font_dictionary(new_pdf(), definition)
        assert font.Subtype == Name.Type1
        stream = font.FontDescriptor.FontFile
        assert stream.Length1 == definition.size1
        assert stream.Length2 == definition.size2
        assert stream.Length3 == 0
        assert font.FontDescriptor.StemV == 88

    def test_differences_encoding(self, font_file: Path) -> None:
        """A non-default encoding gets an Encoding dictionary."""
        definition = make_font(font_file, "cp1250")
        font = build_font_dictionary(new_pdf(), definition)
        encoding = font.Encoding
        assert encoding.Type == Name.Encoding
        assert encoding.BaseEncoding == Name.WinAnsiEncoding
        differences = list(encoding.Differences)
        assert 140 in differences
        assert differences[differences.index(140) + 1] == Name("/Sacute")


class TestEncodeText:
    """Tests for text encoding through the Unicode runs."""

    def test_encode(self, font_file: Path) -> None:
        """Characters map to their code page codes."""
        definition = make_font(font_file, embed=False)
        assert encode_text(definition, "AB€é") == b"AB\x80\xe9"

    def test_unknown_characters(self, font_file: Path) -> None:
        """Characters outside the code page become '?'."""
        definition = make_font(font_file, embed=False)
        assert encode_text(definition, "AĀ") == b"A?"


class TestWriteSpecimen:
    """Tests for specimen pages."""

    def test_specimen(self, font_file: Path, tmp_dir: Path) -> None:
        """The specimen has one page using the font as F1."""
        definition = make_font(font_file)
        path = write_specimen(definition, tmp_dir / "specimen.pdf", "ABC\nCBA")
        assert path.exists()
        pdf = open_pdf(path)
        assert len(pdf.pages) == 1
        page = pdf.pages[0]
        font = page.Resources.Font.F1
        assert font.Subtype == Name.TrueType
        assert font.FontDescriptor.FontFile2.read_bytes() == definition.data
        content = page.Contents.read_bytes()
        assert b"(ABC) Tj" in content
        assert b"Tf" in content
