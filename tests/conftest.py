# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pytest fixtures for the pdffontmaker test suite."""

import struct
from pathlib import Path

import pytest
from font_helpers import build_test_font
from pikepdf import Pdf

# -- Global PDF tracker --

_tracked_pdfs: list[Pdf] = []


@pytest.fixture(autouse=True)
def _auto_close_pdfs():
    """Close all tracked PDF objects after each test."""
    yield
    for pdf in reversed(_tracked_pdfs):
        try:
            pdf.close()
        except Exception:
            pass
    _tracked_pdfs.clear()


def new_pdf(**kwargs) -> Pdf:
    """Create a tracked Pdf (auto-closed after test)."""
    pdf = Pdf.new(**kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


def open_pdf(source, **kwargs) -> Pdf:
    """Open a tracked Pdf (auto-closed after test)."""
    pdf = Pdf.open(source, **kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


# -- Fixtures --


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Temporary directory for tests.

    Args:
        tmp_path: Pytest-provided temporary directory.

    Returns:
        Path to the temporary directory.
    """
    return tmp_path


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    """TrueType font with simple, composite and nested composite glyphs.

    Glyph order: .notdef, A, B, C, acute, Aacute (A + acute),
    Amacron (Aacute + C). The last two glyphs share their advance width,
    so the font stores fewer long horizontal metrics than glyphs.

    Returns:
        Font data as bytes.
    """
    return build_test_font()


@pytest.fixture
def font_file(tmp_dir: Path, font_bytes: bytes) -> Path:
    """The default test font on disk.

    Returns:
        Path to TestFont.ttf.
    """
    path = tmp_dir / "TestFont.ttf"
    path.write_bytes(font_bytes)
    return path


def make_pfb(clear_text: bytes, binary: bytes) -> bytes:
    """Builds PFB data from its two segments (without the trailer)."""
    data = struct.pack("<BBL", 0x80, 1, len(clear_text)) + clear_text
    data += struct.pack("<BBL", 0x80, 2, len(binary)) + binary
    data += b"\x80\x03"
    return data


SAMPLE_AFM = """StartFontMetrics 4.1
FontName Test-Type1
FullName Test Type1
Weight Bold
ItalicAngle -12
IsFixedPitch false
FontBBox -50 -210 1000 900
UnderlinePosition -100
UnderlineThickness 50
CapHeight 700
Ascender 720
Descender -190
StdVW 88
StartCharMetrics 4
C -1 ; WX 250 ; N .notdef ; B 0 0 0 0 ;
C 32 ; WX 278 ; N space ; B 0 0 0 0 ;
C 65 ; WX 667 ; N A ; B 10 0 650 700 ;
C 66 ; WX 611 ; N B ; B 60 0 580 700 ;
EndCharMetrics
EndFontMetrics
"""


@pytest.fixture
def type1_files(tmp_dir: Path) -> Path:
    """A Type 1 font (PFB + AFM) on disk.

    Returns:
        Path to TestType1.pfb; TestType1.afm sits next to it.
    """
    pfb = tmp_dir / "TestType1.pfb"
    pfb.write_bytes(make_pfb(b"%!PS-AdobeFont-1.0: Test-Type1", b"\x01\x02\x03\x04"))
    (tmp_dir / "TestType1.afm").write_text(SAMPLE_AFM, encoding="latin-1")
    return pfb
