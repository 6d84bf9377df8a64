# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""TrueType parser.

Decodes the tables needed to describe a TrueType font for PDF output:
identity (name), metrics (head, hhea, hmtx, OS/2, post), outlines (loca,
glyf) and the Unicode character map (cmap).
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from ..exceptions import (
    InvalidMagicNumberError,
    PostScriptNameNotFoundError,
    UnicodeSubtableNotFoundError,
    UnrecognizedVersionError,
    UnsupportedFormatError,
    UnsupportedSubtableFormatError,
)
from ..utils import round_half_away
from .constants import (
    ARG_1_AND_2_ARE_WORDS,
    CMAP_ENCODING_UNICODE_BMP,
    CMAP_END_CODE,
    CMAP_FORMAT_4,
    CMAP_PLATFORM_WINDOWS,
    FSSELECTION_BOLD,
    FSTYPE_BITMAP_ONLY,
    FSTYPE_RESTRICTED_LICENSE,
    HEAD_MAGIC_NUMBER,
    LOCA_SHORT,
    MORE_COMPONENTS,
    NAME_ID_POSTSCRIPT,
    POST_STANDARD_NAMES_COUNT,
    POST_VERSION_2,
    SFNT_VERSION_CFF,
    SFNT_VERSION_TRUETYPE,
    TAG_CMAP,
    TAG_GLYF,
    TAG_HEAD,
    TAG_HHEA,
    TAG_HMTX,
    TAG_LOCA,
    TAG_MAXP,
    TAG_NAME,
    TAG_OS2,
    TAG_POST,
    WE_HAVE_A_SCALE,
    WE_HAVE_A_TWO_BY_TWO,
    WE_HAVE_AN_X_AND_Y_SCALE,
)
from .reader import FontReader
from .tables import Glyph, Table, TableDirectory

logger = logging.getLogger(__name__)

# Characters not allowed in a PDF font name
_FORBIDDEN_NAME_CHARS = re.compile(r"[ \[\](){}<>/%]")


@dataclass
class TrueTypeFont:
    """Result of parsing one TrueType font.

    Each parse step owns the fields it writes: the cmap step fills
    ``chars``, the hmtx/loca/glyf/post steps fill ``glyphs``.
    """

    directory: TableDirectory = field(default_factory=TableDirectory)
    glyphs: list[Glyph] = field(default_factory=list)
    chars: dict[int, int] = field(default_factory=dict)

    units_per_em: int = 1000
    x_min: int = 0
    y_min: int = 0
    x_max: int = 0
    y_max: int = 0
    index_to_loc_format: int = LOCA_SHORT
    num_h_metrics: int = 0
    num_glyphs: int = 0

    postscript_name: str = ""
    embeddable: bool = True
    bold: bool = False
    typo_ascender: int = 0
    typo_descender: int = 0
    cap_height: int | None = None

    italic_angle: int = 0
    underline_position: int = 0
    underline_thickness: int = 0
    is_fixed_pitch: bool = False
    has_glyph_names: bool = False

    def scale(self, value: float) -> int:
        """Converts font units to 1/1000 em, halves away from zero."""
        return round_half_away(value * 1000 / self.units_per_em)

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        return (self.x_min, self.y_min, self.x_max, self.y_max)


class TrueTypeParser:
    """Parses a TrueType font from a FontReader.

    The parser does not own the reader; the caller closes it. The same
    reader is used later by the subsetter to load original table data.
    """

    def __init__(self, reader: FontReader) -> None:
        self.reader = reader
        self.font = TrueTypeFont()

    def parse(self) -> TrueTypeFont:
        """Runs all parse steps in order.

        Returns:
            The populated TrueTypeFont.

        Raises:
            UnsupportedFormatError: For CFF-flavored OpenType fonts.
            UnrecognizedVersionError: For an unknown sfnt version.
            TableNotFoundError: If a required table is missing.
            InvalidMagicNumberError: If the head magic number is wrong.
            UnicodeSubtableNotFoundError: If there is no (3, 1) cmap.
            UnsupportedSubtableFormatError: If the (3, 1) cmap is not format 4.
            PostScriptNameNotFoundError: If the font has no PostScript name.
        """
        self.parse_offset_table()
        self.parse_head()
        self.parse_hhea()
        self.parse_maxp()
        self.parse_hmtx()
        self.parse_loca()
        self.parse_glyf()
        self.parse_cmap()
        self.parse_name()
        self.parse_os2()
        self.parse_post()
        logger.debug(
            "Parsed TrueType font '%s': %d glyphs, %d mapped characters",
            self.font.postscript_name,
            self.font.num_glyphs,
            len(self.font.chars),
        )
        return self.font

    def _seek_table(self, tag: str, skip: int = 0) -> Table:
        table = self.font.directory.require_table(tag)
        self.reader.seek(table.offset + skip)
        return table

    def parse_offset_table(self) -> None:
        reader = self.reader
        version = reader.read_ulong()
        if version == SFNT_VERSION_CFF:
            raise UnsupportedFormatError()
        if version != SFNT_VERSION_TRUETYPE:
            raise UnrecognizedVersionError(version)
        num_tables = reader.read_ushort()
        reader.skip(3 * 2)  # searchRange, entrySelector, rangeShift
        for _ in range(num_tables):
            tag = reader.read(4).decode("latin-1")
            checksum = reader.read(4)
            offset = reader.read_ulong()
            length = reader.read_ulong()
            self.font.directory.add(
                Table(tag=tag, offset=offset, length=length, checksum=checksum)
            )
        logger.debug("Table directory: %s", ", ".join(self.font.directory.tags()))

    def parse_head(self) -> None:
        reader = self.reader
        font = self.font
        self._seek_table(TAG_HEAD, 3 * 4)
        magic_number = reader.read_ulong()
        if magic_number != HEAD_MAGIC_NUMBER:
            raise InvalidMagicNumberError(magic_number)
        reader.skip(2)
        font.units_per_em = reader.read_ushort()
        reader.skip(2 * 8)
        font.x_min = reader.read_short()
        font.y_min = reader.read_short()
        font.x_max = reader.read_short()
        font.y_max = reader.read_short()
        reader.skip(3 * 2)
        font.index_to_loc_format = reader.read_short()

    def parse_hhea(self) -> None:
        self._seek_table(TAG_HHEA, 4 + 15 * 2)
        self.font.num_h_metrics = self.reader.read_ushort()

    def parse_maxp(self) -> None:
        self._seek_table(TAG_MAXP, 4)
        self.font.num_glyphs = self.reader.read_ushort()

    def parse_hmtx(self) -> None:
        reader = self.reader
        font = self.font
        self._seek_table(TAG_HMTX)
        font.glyphs = []
        width = 0
        for _ in range(font.num_h_metrics):
            width = reader.read_ushort()
            lsb = reader.read_short()
            font.glyphs.append(Glyph(width=width, lsb=lsb))
        # Trailing glyphs share the last advance width
        for _ in range(font.num_h_metrics, font.num_glyphs):
            lsb = reader.read_short()
            font.glyphs.append(Glyph(width=width, lsb=lsb))

    def parse_loca(self) -> None:
        reader = self.reader
        font = self.font
        self._seek_table(TAG_LOCA)
        if font.index_to_loc_format == LOCA_SHORT:
            offsets = [2 * reader.read_ushort() for _ in range(font.num_glyphs + 1)]
        else:
            offsets = [reader.read_ulong() for _ in range(font.num_glyphs + 1)]
        for i in range(font.num_glyphs):
            glyph = font.glyphs[i]
            glyph.offset = offsets[i]
            glyph.length = offsets[i + 1] - offsets[i]

    def parse_glyf(self) -> None:
        reader = self.reader
        table_offset = self.font.directory.require_table(TAG_GLYF).offset
        for glyph in self.font.glyphs:
            if glyph.length <= 0:
                continue
            reader.seek(table_offset + glyph.offset)
            if reader.read_short() >= 0:
                continue
            # Composite glyph: skip the bounding box
            reader.skip(4 * 2)
            offset = 5 * 2
            components = {}
            while True:
                flags = reader.read_ushort()
                index = reader.read_ushort()
                components[offset + 2] = index
                skip = 2 * 2 if flags & ARG_1_AND_2_ARE_WORDS else 2
                if flags & WE_HAVE_A_SCALE:
                    skip += 2
                elif flags & WE_HAVE_AN_X_AND_Y_SCALE:
                    skip += 4
                elif flags & WE_HAVE_A_TWO_BY_TWO:
                    skip += 8
                reader.skip(skip)
                offset += 2 * 2 + skip
                if not flags & MORE_COMPONENTS:
                    break
            glyph.components = components

    def parse_cmap(self) -> None:
        reader = self.reader
        font = self.font
        cmap = self._seek_table(TAG_CMAP, 2)
        num_subtables = reader.read_ushort()
        subtable_offset = None
        for _ in range(num_subtables):
            platform_id = reader.read_ushort()
            encoding_id = reader.read_ushort()
            offset = reader.read_ulong()
            if (
                platform_id == CMAP_PLATFORM_WINDOWS
                and encoding_id == CMAP_ENCODING_UNICODE_BMP
            ):
                subtable_offset = offset
        if subtable_offset is None:
            raise UnicodeSubtableNotFoundError()

        reader.seek(cmap.offset + subtable_offset)
        subtable_format = reader.read_ushort()
        if subtable_format != CMAP_FORMAT_4:
            raise UnsupportedSubtableFormatError(subtable_format)

        reader.skip(2 * 2)  # length, language
        seg_count = reader.read_ushort() // 2
        reader.skip(3 * 2)  # searchRange, entrySelector, rangeShift
        end_codes = [reader.read_ushort() for _ in range(seg_count)]
        reader.skip(2)  # reservedPad
        start_codes = [reader.read_ushort() for _ in range(seg_count)]
        id_deltas = [reader.read_short() for _ in range(seg_count)]
        range_offset_pos = reader.tell()
        id_range_offsets = [reader.read_ushort() for _ in range(seg_count)]

        font.chars = {}
        skipped = 0
        for i in range(seg_count):
            start = start_codes[i]
            end = end_codes[i]
            delta = id_deltas[i]
            range_offset = id_range_offsets[i]
            if range_offset > 0:
                reader.seek(range_offset_pos + 2 * i + range_offset)
            for code in range(start, end + 1):
                if code == CMAP_END_CODE:
                    break
                if range_offset > 0:
                    gid = reader.read_ushort()
                    if gid > 0:
                        gid += delta
                else:
                    gid = code + delta
                gid %= 0x10000
                if gid == 0:
                    continue
                if gid >= font.num_glyphs:
                    skipped += 1
                    continue
                font.chars[code] = gid
        if skipped:
            logger.debug("Ignored %d cmap entries beyond the glyph count", skipped)

    def parse_name(self) -> None:
        reader = self.reader
        font = self.font
        name_table = self._seek_table(TAG_NAME, 2)
        count = reader.read_ushort()
        string_offset = reader.read_ushort()
        for _ in range(count):
            reader.skip(3 * 2)  # platformID, encodingID, languageID
            name_id = reader.read_ushort()
            length = reader.read_ushort()
            offset = reader.read_ushort()
            if name_id != NAME_ID_POSTSCRIPT:
                continue
            position = reader.tell()
            reader.seek(name_table.offset + string_offset + offset)
            raw = reader.read(length)
            name = raw.replace(b"\x00", b"").decode("latin-1")
            name = _FORBIDDEN_NAME_CHARS.sub("", name)
            if name:
                font.postscript_name = name
                return
            reader.seek(position)
        raise PostScriptNameNotFoundError()

    def parse_os2(self) -> None:
        reader = self.reader
        font = self.font
        self._seek_table(TAG_OS2)
        version = reader.read_ushort()
        reader.skip(3 * 2)  # xAvgCharWidth, usWeightClass, usWidthClass
        fs_type = reader.read_ushort()
        font.embeddable = fs_type != FSTYPE_RESTRICTED_LICENSE and not (
            fs_type & FSTYPE_BITMAP_ONLY
        )
        reader.skip(11 * 2 + 10 + 4 * 4 + 4)
        fs_selection = reader.read_ushort()
        font.bold = bool(fs_selection & FSSELECTION_BOLD)
        reader.skip(2 * 2)  # usFirstCharIndex, usLastCharIndex
        font.typo_ascender = reader.read_short()
        font.typo_descender = reader.read_short()
        if version >= 2:
            reader.skip(3 * 2 + 2 * 4 + 2)
            font.cap_height = reader.read_short()
        else:
            font.cap_height = None

    def parse_post(self) -> None:
        reader = self.reader
        font = self.font
        self._seek_table(TAG_POST)
        version = reader.read_ulong()
        font.italic_angle = reader.read_short()
        reader.skip(2)  # fractional part of the italic angle
        font.underline_position = reader.read_short()
        font.underline_thickness = reader.read_short()
        font.is_fixed_pitch = reader.read_ulong() != 0
        if version != POST_VERSION_2:
            font.has_glyph_names = False
            return

        # minMemType42 .. maxMemType1, numGlyphs
        reader.skip(4 * 4 + 2)
        indices = [reader.read_ushort() for _ in range(font.num_glyphs)]
        num_names = max((i - POST_STANDARD_NAMES_COUNT + 1 for i in indices), default=0)
        names = []
        for _ in range(num_names):
            length = reader.read_uchar()
            names.append(reader.read(length).decode("latin-1"))
        for glyph, index in zip(font.glyphs, indices):
            if index >= POST_STANDARD_NAMES_COUNT:
                glyph.name = names[index - POST_STANDARD_NAMES_COUNT]
            else:
                glyph.name = index
        font.has_glyph_names = True


def parse_truetype(source: str | Path | bytes) -> TrueTypeFont:
    """Parses a TrueType font from a path or from bytes.

    Args:
        source: Font file path or font data.

    Returns:
        The parsed font.
    """
    with FontReader(source) as reader:
        return TrueTypeParser(reader).parse()
