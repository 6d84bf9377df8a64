# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""PDF font dictionaries and specimen pages built from font definitions."""

import logging
import random
import string
from pathlib import Path

import pikepdf
from pikepdf import Array, Dictionary, Name, Operator, Pdf, Stream

from .maker import FontDefinition
from .utils import FONT_TYPE_TRUETYPE

logger = logging.getLogger(__name__)

FIRST_CHAR = 0
LAST_CHAR = 255

SPECIMEN_FONT_SIZE = 24
SPECIMEN_MEDIA_BOX = (0, 0, 595, 842)


def _generate_subset_prefix() -> str:
    """Generates a random 6-letter uppercase subset prefix.

    Returns:
        String like "ABCDEF+" for use as a font subset tag.
    """
    letters = "".join(random.choices(string.ascii_uppercase, k=6))
    return f"{letters}+"


def parse_differences(diff: str | None) -> list[int | str]:
    """Splits a Differences string into codes and glyph names.

    Args:
        diff: String such as ``"128 /Euro /bullet 200 /Egrave"``.

    Returns:
        List of integer codes and glyph names (without the slash).
    """
    if not diff:
        return []
    items: list[int | str] = []
    for token in diff.split():
        if token.startswith("/"):
            items.append(token[1:])
        else:
            items.append(int(token))
    return items


def _parse_bbox(value: int | str) -> list[int]:
    return [int(v) for v in str(value).strip("[]").split()]


def _build_encoding(definition: FontDefinition) -> pikepdf.Object:
    if not definition.diff:
        return Name.WinAnsiEncoding
    differences = [
        item if isinstance(item, int) else Name(f"/{item}")
        for item in parse_differences(definition.diff)
    ]
    return Dictionary(
        Type=Name.Encoding,
        BaseEncoding=Name.WinAnsiEncoding,
        Differences=Array(differences),
    )


def _create_font_stream(pdf: Pdf, definition: FontDefinition) -> tuple[Name, Stream]:
    font_stream = Stream(pdf, definition.data)
    if definition.type == FONT_TYPE_TRUETYPE:
        font_stream[Name.Length1] = len(definition.data)
        return Name.FontFile2, font_stream
    font_stream[Name.Length1] = definition.size1
    font_stream[Name.Length2] = definition.size2
    font_stream[Name.Length3] = 0
    return Name.FontFile, font_stream


def build_font_dictionary(pdf: Pdf, definition: FontDefinition) -> Dictionary:
    """Creates a simple font dictionary for a font definition.

    Args:
        pdf: Document the font objects are created in.
        definition: Font definition.

    Returns:
        Indirect font dictionary with Widths, FontDescriptor and Encoding.
    """
    base_font = definition.name
    if definition.embed and definition.subsetted:
        base_font = _generate_subset_prefix() + base_font

    desc = definition.descriptor
    font_descriptor = Dictionary(
        Type=Name.FontDescriptor,
        FontName=Name(f"/{base_font}"),
        Flags=desc["Flags"],
        FontBBox=Array(_parse_bbox(desc["FontBBox"])),
        ItalicAngle=desc["ItalicAngle"],
        Ascent=desc["Ascent"],
        Descent=desc["Descent"],
        CapHeight=desc["CapHeight"],
        StemV=desc["StemV"],
        MissingWidth=desc["MissingWidth"],
    )
    if definition.embed and definition.data:
        key, font_stream = _create_font_stream(pdf, definition)
        font_descriptor[key] = pdf.make_indirect(font_stream)

    subtype = Name.TrueType if definition.type == FONT_TYPE_TRUETYPE else Name.Type1
    font = Dictionary(
        Type=Name.Font,
        Subtype=subtype,
        BaseFont=Name(f"/{base_font}"),
        FirstChar=FIRST_CHAR,
        LastChar=LAST_CHAR,
        Widths=pdf.make_indirect(Array(definition.widths)),
        FontDescriptor=pdf.make_indirect(font_descriptor),
        Encoding=_build_encoding(definition),
    )
    return pdf.make_indirect(font)


def encode_text(definition: FontDefinition, text: str) -> bytes:
    """Encodes text in the code page of a definition.

    Characters outside the code page are replaced by '?'.
    """
    codes: dict[int, int] = {}
    for code, value in definition.unicode_ranges.items():
        uv, count = value if isinstance(value, tuple) else (value, 1)
        for i in range(count):
            codes.setdefault(uv + i, code + i)
    return bytes(codes.get(ord(char), ord("?")) for char in text)


def write_specimen(definition: FontDefinition, path: str | Path, text: str) -> Path:
    """Writes a one-page PDF showing text set in the font.

    Args:
        definition: Font definition.
        path: Output PDF path.
        text: Text to show, one line per line of text.

    Returns:
        Path to the written PDF.
    """
    path = Path(path)
    with Pdf.new() as pdf:
        font = build_font_dictionary(pdf, definition)
        left, _, _, top = SPECIMEN_MEDIA_BOX
        leading = SPECIMEN_FONT_SIZE * 1.2
        instructions = [
            ([], Operator("BT")),
            ([Name.F1, SPECIMEN_FONT_SIZE], Operator("Tf")),
            ([leading], Operator("TL")),
            ([left + 56, top - 56 - SPECIMEN_FONT_SIZE], Operator("Td")),
        ]
        for line in text.splitlines() or [""]:
            instructions.append(
                ([pikepdf.String(encode_text(definition, line))], Operator("Tj"))
            )
            instructions.append(([], Operator("T*")))
        instructions.append(([], Operator("ET")))
        content = pikepdf.unparse_content_stream(instructions)

        page = pikepdf.Page(
            Dictionary(
                Type=Name.Page,
                MediaBox=Array(list(SPECIMEN_MEDIA_BOX)),
                Resources=Dictionary(Font=Dictionary(F1=font)),
                Contents=Stream(pdf, content),
            )
        )
        pdf.pages.append(page)
        pdf.save(path)
    logger.debug("Wrote specimen: %s", path)
    return path
