# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Binary cursor over font files and in-memory font data.

All multi-byte integers in sfnt files are big-endian. The only
little-endian field read here is the segment size in a PFB header.
"""

import io
import logging
import struct
from pathlib import Path
from typing import BinaryIO

from ..exceptions import FontIOError, FontReadError

logger = logging.getLogger(__name__)


class FontReader:
    """Seekable big-endian reader over a font file or a bytes buffer.

    Can be used as a context manager; the underlying handle is closed
    on exit, including when an exception propagates.
    """

    def __init__(self, source: str | Path | bytes) -> None:
        """Initializes the FontReader.

        Args:
            source: Path of a font file, or the font data itself.

        Raises:
            FontIOError: If the file cannot be opened.
        """
        if isinstance(source, (bytes, bytearray)):
            self.name = "<memory>"
            self._stream: BinaryIO = io.BytesIO(bytes(source))
        else:
            self.name = str(source)
            try:
                self._stream = open(source, "rb")
            except OSError as e:
                raise FontIOError(self.name) from e

    def __enter__(self) -> "FontReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Releases the underlying handle."""
        self._stream.close()

    def read(self, n: int) -> bytes:
        """Reads exactly n bytes.

        Returns:
            The bytes read; empty when n <= 0.

        Raises:
            FontReadError: If fewer than n bytes remain.
        """
        if n <= 0:
            return b""
        data = self._stream.read(n)
        if len(data) != n:
            raise FontReadError(self.name)
        return data

    def seek(self, offset: int) -> None:
        self._stream.seek(offset, io.SEEK_SET)

    def skip(self, offset: int) -> None:
        self._stream.seek(offset, io.SEEK_CUR)

    def tell(self) -> int:
        return self._stream.tell()

    def read_uchar(self) -> int:
        return self.read(1)[0]

    def read_ushort(self) -> int:
        return struct.unpack(">H", self.read(2))[0]

    def read_short(self) -> int:
        value = self.read_ushort()
        if value >= 0x8000:
            value -= 0x10000
        return value

    def read_ulong(self) -> int:
        return struct.unpack(">L", self.read(4))[0]

    def read_ulong_le(self) -> int:
        """Reads an unsigned 32-bit little-endian integer (PFB headers)."""
        return struct.unpack("<L", self.read(4))[0]


class FontWriter:
    """Binary writer for generated font programs."""

    def __init__(self, path: str | Path) -> None:
        """Initializes the FontWriter.

        Args:
            path: Destination file, truncated if it exists.

        Raises:
            FontIOError: If the file cannot be opened for writing.
        """
        self.name = str(path)
        try:
            self._stream = open(path, "wb")
        except OSError as e:
            raise FontIOError(self.name) from e

    def __enter__(self) -> "FontWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._stream.close()

    def write(self, data: bytes) -> int:
        """Writes data at the current position.

        Raises:
            FontIOError: If the write fails.
        """
        try:
            return self._stream.write(data)
        except OSError as e:
            raise FontIOError(self.name) from e
