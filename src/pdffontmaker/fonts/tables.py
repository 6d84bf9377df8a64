# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Table directory model: tables, glyphs and sfnt checksums."""

import logging
import struct
from dataclasses import dataclass, field

from ..exceptions import TableNotFoundError
from .reader import FontReader

logger = logging.getLogger(__name__)


def pad4(data: bytes) -> bytes:
    """Pads data with zero bytes to a multiple of four."""
    remainder = len(data) % 4
    if remainder:
        data += b"\x00" * (4 - remainder)
    return data


def calc_checksum(data: bytes) -> bytes:
    """Computes the sfnt checksum of 4-byte aligned data.

    Each 4-byte group is summed as two big-endian 16-bit halves, the
    carry of the low half is folded into the high half, and both halves
    are truncated to 16 bits. The result equals the 32-bit sum of all
    big-endian words modulo 2**32.

    Args:
        data: Bytes whose length is a multiple of four.

    Returns:
        The checksum as 4 big-endian bytes.
    """
    high = 0
    low = 0
    for i in range(0, len(data), 4):
        high += (data[i] << 8) + data[i + 1]
        low += (data[i + 2] << 8) + data[i + 3]
    return struct.pack(">HH", (high + (low >> 16)) & 0xFFFF, low & 0xFFFF)


def binary_search_params(count: int, unit: int) -> tuple[int, int, int]:
    """Computes searchRange, entrySelector and rangeShift.

    Args:
        count: Number of entries (cmap segments or tables).
        unit: Size of one entry in bytes (2 for cmap, 16 for tables).

    Returns:
        Tuple (search_range, entry_selector, range_shift).
    """
    entry_selector = count.bit_length() - 1 if count > 0 else 0
    search_range = unit * (1 << entry_selector)
    range_shift = unit * count - search_range
    return search_range, entry_selector, range_shift


def patch_bytes(data: bytes, offset: int, value: bytes) -> bytes:
    """Returns a copy of data with value written at offset."""
    patched = bytearray(data)
    patched[offset : offset + len(value)] = value
    return bytes(patched)


@dataclass(frozen=True)
class Table:
    """One entry of the table directory.

    Attributes:
        tag: Four-character table tag.
        offset: Offset of the table in the source font.
        length: Logical (unpadded) length.
        data: Table content padded to 4 bytes, or None while not loaded.
        checksum: Checksum as 4 big-endian bytes.
    """

    tag: str
    offset: int
    length: int
    data: bytes | None = None
    checksum: bytes = b"\x00\x00\x00\x00"

    @classmethod
    def with_data(cls, tag: str, data: bytes, offset: int = 0) -> "Table":
        """Creates a table from content, padding it and computing its checksum."""
        padded = pad4(data)
        return cls(
            tag=tag,
            offset=offset,
            length=len(data),
            data=padded,
            checksum=calc_checksum(padded),
        )

    @property
    def is_loaded(self) -> bool:
        return self.data is not None

    @property
    def content(self) -> bytes:
        """Logical content without padding."""
        if self.data is None:
            return b""
        return self.data[: self.length]


@dataclass
class Glyph:
    """Per-glyph metrics and outline bookkeeping.

    Attributes:
        width: Advance width in font units.
        lsb: Left side bearing in font units.
        name: Custom glyph name, standard Macintosh name index, or None.
        offset: Outline offset within the original glyf table.
        length: Outline length in bytes.
        subset_slot: New glyph id when selected for a subset.
        components: For composite glyphs, maps the byte offset of each
            component glyph id field to the referenced glyph id.
    """

    width: int = 0
    lsb: int = 0
    name: str | int | None = None
    offset: int = 0
    length: int = 0
    subset_slot: int | None = None
    components: dict[int, int] | None = None

    @property
    def is_composite(self) -> bool:
        return bool(self.components)


@dataclass
class TableDirectory:
    """Map of tag to table, in directory order.

    Tables are created without content while the offset table is read,
    loaded lazily from the source, and replaced whole when rebuilt.
    """

    tables: dict[str, Table] = field(default_factory=dict)

    def __contains__(self, tag: str) -> bool:
        return tag in self.tables

    def __len__(self) -> int:
        return len(self.tables)

    def tags(self) -> list[str]:
        return list(self.tables)

    def add(self, table: Table) -> None:
        self.tables[table.tag] = table

    def require_table(self, tag: str) -> Table:
        """Returns the table for a tag.

        Raises:
            TableNotFoundError: If the font has no such table.
        """
        table = self.tables.get(tag)
        if table is None:
            raise TableNotFoundError(tag)
        return table

    def load_table_bytes(self, reader: FontReader, tag: str) -> bytes:
        """Loads the original content of a table, once.

        The padded length is read from the source; missing padding at the
        end of the file is filled with zero bytes. The checksum is
        recomputed from the loaded content.

        Args:
            reader: Reader over the source font.
            tag: Table tag.

        Returns:
            The logical (unpadded) content.
        """
        table = self.require_table(tag)
        if not table.is_loaded:
            reader.seek(table.offset)
            data = pad4(reader.read(table.length))
            table = Table(
                tag=tag,
                offset=table.offset,
                length=table.length,
                data=data,
                checksum=calc_checksum(data),
            )
            self.tables[tag] = table
            logger.debug("Loaded table '%s' (%d bytes)", tag, table.length)
        return table.content

    def set_table(self, tag: str, data: bytes) -> Table:
        """Replaces the content of a table and recomputes its checksum."""
        previous = self.tables.get(tag)
        offset = previous.offset if previous is not None else 0
        table = Table.with_data(tag, data, offset)
        self.tables[tag] = table
        return table
