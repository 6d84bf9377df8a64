# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""TrueType subsetting.

Reduces a parsed TrueType font to the glyphs needed for a set of Unicode
code points. Glyph ids are renumbered densely in closure order (glyph 0
first, then each requested character followed by its composite
components), and every table that depends on glyph ids or on the
character map is rebuilt: cmap, hhea, hmtx, loca, glyf, maxp and post.
Only the tables PDF viewers need for a TrueType program are emitted.
"""

import logging
import struct
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path

from .constants import (
    CHECKSUM_MAGIC,
    CMAP_ENCODING_UNICODE_BMP,
    CMAP_END_CODE,
    CMAP_FORMAT_4,
    CMAP_PLATFORM_WINDOWS,
    HEAD_CHECKSUM_ADJUSTMENT_OFFSET,
    HHEA_NUM_H_METRICS_OFFSET,
    LOCA_SHORT,
    MAXP_NUM_GLYPHS_OFFSET,
    POST_HEADER_SIZE,
    POST_STANDARD_NAMES_COUNT,
    POST_VERSION_3,
    SFNT_VERSION_TRUETYPE,
    SUBSET_TABLE_TAGS,
    TAG_CMAP,
    TAG_GLYF,
    TAG_HEAD,
    TAG_HHEA,
    TAG_HMTX,
    TAG_LOCA,
    TAG_MAXP,
    TAG_POST,
)
from .reader import FontReader
from .tables import (
    binary_search_params,
    calc_checksum,
    pad4,
    patch_bytes,
)
from .truetype import TrueTypeFont, TrueTypeParser

logger = logging.getLogger(__name__)

_ZERO_ADJUSTMENT = b"\x00\x00\x00\x00"


def _checksum_adjustment(checksum: bytes) -> bytes:
    """Computes checkSumAdjustment from the whole-font checksum.

    The value is 0xB1B0AFBA minus the checksum, in 32-bit arithmetic.
    """
    value = struct.unpack(">L", checksum)[0]
    return struct.pack(">L", (CHECKSUM_MAGIC - value) & 0xFFFFFFFF)


class FontSubsetter:
    """Builds a subsetted TrueType program from a parsed font.

    The reader must stay open while subsetting: original table data and
    glyph outlines are read from it on demand.

    Attributes:
        font: Parsed font; its glyph subset slots and directory are updated.
        glyph_order: Original glyph ids in new glyph id order.
        subset_chars: Sorted code points retained in the subset.
    """

    def __init__(self, font: TrueTypeFont, reader: FontReader) -> None:
        self.font = font
        self.reader = reader
        self.glyph_order: list[int] = []
        self.subset_chars: list[int] = []

    def subset(self, code_points: Iterable[int]) -> None:
        """Selects the glyphs needed for the given code points.

        Glyph 0 is always selected. Code points absent from the font's
        character map are ignored. Calling this again with the same code
        points yields the same glyph order.

        Args:
            code_points: Unicode code points to retain.
        """
        for glyph in self.font.glyphs:
            glyph.subset_slot = None
        self.glyph_order = []
        retained = []
        self._add_glyph(0)
        for code_point in code_points:
            gid = self.font.chars.get(code_point)
            if gid is None:
                continue
            retained.append(code_point)
            self._add_glyph(gid)
        self.subset_chars = sorted(set(retained))
        logger.debug(
            "Subset selects %d of %d glyphs for %d characters",
            len(self.glyph_order),
            self.font.num_glyphs,
            len(self.subset_chars),
        )

    def _add_glyph(self, gid: int) -> None:
        glyph = self.font.glyphs[gid]
        if glyph.subset_slot is not None:
            return
        glyph.subset_slot = len(self.glyph_order)
        self.glyph_order.append(gid)
        if glyph.components:
            for component_gid in glyph.components.values():
                self._add_glyph(component_gid)

    def _slot(self, gid: int) -> int:
        return self.font.glyphs[gid].subset_slot

    def build(self) -> bytes:
        """Rebuilds the dependent tables and assembles the subset font.

        Returns:
            The complete font program.

        Raises:
            TableNotFoundError: If a table needed for rebuilding is missing.
        """
        self._build_cmap()
        self._build_hhea()
        self._build_hmtx()
        self._build_loca()
        self._build_glyf()
        self._build_maxp()
        self._build_post()
        return self._build_font()

    def _cmap_segments(self) -> list[tuple[int, int]]:
        chars = self.subset_chars
        segments = []
        start = end = chars[0]
        for char in chars[1:]:
            if char > end + 1:
                segments.append((start, end))
                start = char
            end = char
        segments.append((start, end))
        segments.append((CMAP_END_CODE, CMAP_END_CODE))
        return segments

    def _build_cmap(self) -> None:
        if not self.subset_chars:
            return
        chars = self.font.chars
        segments = self._cmap_segments()
        seg_count = len(segments)

        start_codes = []
        end_codes = []
        id_deltas = []
        id_range_offsets = []
        glyph_ids = bytearray()
        for i, (start, end) in enumerate(segments):
            start_codes.append(start)
            end_codes.append(end)
            if start != end:
                id_deltas.append(0)
                id_range_offsets.append(len(glyph_ids) + (seg_count - i) * 2)
                for code in range(start, end + 1):
                    glyph_ids += struct.pack(">H", self._slot(chars[code]))
                continue
            slot = self._slot(chars[start]) if start < CMAP_END_CODE else 0
            id_deltas.append((slot - start) & 0xFFFF)
            id_range_offsets.append(0)

        search_range, entry_selector, range_shift = binary_search_params(seg_count, 2)
        body = struct.pack(
            ">HHHH", 2 * seg_count, search_range, entry_selector, range_shift
        )
        body += struct.pack(f">{seg_count}H", *end_codes)
        body += struct.pack(">H", 0)  # reservedPad
        body += struct.pack(f">{seg_count}H", *start_codes)
        body += struct.pack(f">{seg_count}H", *id_deltas)
        body += struct.pack(f">{seg_count}H", *id_range_offsets)
        body += bytes(glyph_ids)

        data = struct.pack(">HH", 0, 1)  # version, numTables
        data += struct.pack(
            ">HHL", CMAP_PLATFORM_WINDOWS, CMAP_ENCODING_UNICODE_BMP, 12
        )
        data += struct.pack(">HHH", CMAP_FORMAT_4, 6 + len(body), 0)
        data += body
        self.font.directory.set_table(TAG_CMAP, data)

    def _build_hhea(self) -> None:
        directory = self.font.directory
        data = directory.load_table_bytes(self.reader, TAG_HHEA)
        data = patch_bytes(
            data, HHEA_NUM_H_METRICS_OFFSET, struct.pack(">H", len(self.glyph_order))
        )
        directory.set_table(TAG_HHEA, data)

    def _build_hmtx(self) -> None:
        glyphs = self.font.glyphs
        data = b"".join(
            struct.pack(">Hh", glyphs[gid].width, glyphs[gid].lsb)
            for gid in self.glyph_order
        )
        self.font.directory.set_table(TAG_HMTX, data)

    def _build_loca(self) -> None:
        glyphs = self.font.glyphs
        if self.font.index_to_loc_format == LOCA_SHORT:
            fmt = ">H"
            divisor = 2
        else:
            fmt = ">L"
            divisor = 1
        entries = []
        offset = 0
        for gid in self.glyph_order:
            entries.append(struct.pack(fmt, offset // divisor))
            offset += glyphs[gid].length
        entries.append(struct.pack(fmt, offset // divisor))
        self.font.directory.set_table(TAG_LOCA, b"".join(entries))

    def _build_glyf(self) -> None:
        glyphs = self.font.glyphs
        table_offset = self.font.directory.require_table(TAG_GLYF).offset
        data = bytearray()
        for gid in self.glyph_order:
            glyph = glyphs[gid]
            self.reader.seek(table_offset + glyph.offset)
            glyph_data = bytearray(self.reader.read(glyph.length))
            if glyph.components:
                for offset, component_gid in glyph.components.items():
                    glyph_data[offset : offset + 2] = struct.pack(
                        ">H", self._slot(component_gid)
                    )
            data += glyph_data
        self.font.directory.set_table(TAG_GLYF, bytes(data))

    def _build_maxp(self) -> None:
        directory = self.font.directory
        data = directory.load_table_bytes(self.reader, TAG_MAXP)
        data = patch_bytes(
            data, MAXP_NUM_GLYPHS_OFFSET, struct.pack(">H", len(self.glyph_order))
        )
        directory.set_table(TAG_MAXP, data)

    def _build_post(self) -> None:
        reader = self.reader
        table = self.font.directory.require_table(TAG_POST)
        reader.seek(table.offset)
        header = reader.read(POST_HEADER_SIZE)
        if not self.font.has_glyph_names:
            data = POST_VERSION_3 + header[4:]
            self.font.directory.set_table(TAG_POST, data)
            return

        # Custom names are appended in glyph order, one copy per glyph
        indices = [struct.pack(">H", len(self.glyph_order))]
        names = bytearray()
        num_names = 0
        for gid in self.glyph_order:
            name = self.font.glyphs[gid].name
            if isinstance(name, str):
                indices.append(
                    struct.pack(">H", POST_STANDARD_NAMES_COUNT + num_names)
                )
                encoded = name.encode("latin-1")
                names.append(len(encoded))
                names += encoded
                num_names += 1
            else:
                indices.append(struct.pack(">H", name or 0))
        data = header + b"".join(indices) + bytes(names)
        self.font.directory.set_table(TAG_POST, data)

    def _build_font(self) -> bytes:
        directory = self.font.directory
        tags = [tag for tag in SUBSET_TABLE_TAGS if tag in directory]
        for tag in tags:
            directory.load_table_bytes(self.reader, tag)

        # The head checksum is computed with a zero checkSumAdjustment
        head = directory.require_table(TAG_HEAD)
        head_content = patch_bytes(
            head.content, HEAD_CHECKSUM_ADJUSTMENT_OFFSET, _ZERO_ADJUSTMENT
        )
        directory.set_table(TAG_HEAD, head_content)

        # Output offsets stay local; the directory keeps the source offsets
        offset = 12 + 16 * len(tags)
        tables = []
        for tag in tags:
            table = directory.require_table(tag)
            tables.append(replace(table, offset=offset))
            offset += len(table.data)

        search_range, entry_selector, range_shift = binary_search_params(
            len(tables), 16
        )
        offset_table = struct.pack(
            ">LHHHH",
            SFNT_VERSION_TRUETYPE,
            len(tables),
            search_range,
            entry_selector,
            range_shift,
        )
        for table in tables:
            offset_table += table.tag.encode("latin-1")
            offset_table += table.checksum
            offset_table += struct.pack(">LL", table.offset, table.length)

        font_checksum = calc_checksum(
            calc_checksum(offset_table) + b"".join(t.checksum for t in tables)
        )
        adjustment = _checksum_adjustment(font_checksum)

        # Patch only the emitted head bytes; its directory checksum stays as is
        tables = [
            replace(
                t,
                data=patch_bytes(t.data, HEAD_CHECKSUM_ADJUSTMENT_OFFSET, adjustment),
            )
            if t.tag == TAG_HEAD
            else t
            for t in tables
        ]

        data = offset_table + b"".join(t.data for t in tables)
        logger.debug(
            "Assembled subset font: %d tables, %d bytes", len(tables), len(data)
        )
        return pad4(data)


def subset_font(source: str | Path | bytes, code_points: Iterable[int]) -> bytes:
    """Parses a TrueType font and returns a subset for the code points.

    Args:
        source: Font file path or font data.
        code_points: Unicode code points to retain.

    Returns:
        The subsetted font program.
    """
    with FontReader(source) as reader:
        font = TrueTypeParser(reader).parse()
        subsetter = FontSubsetter(font, reader)
        subsetter.subset(code_points)
        return subsetter.build()
