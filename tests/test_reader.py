# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for fonts/reader.py."""

from pathlib import Path

import pytest

from pdffontmaker.exceptions import FontIOError, FontReadError, MakeFontError
from pdffontmaker.fonts.reader import FontReader, FontWriter


class TestFontReaderIntegers:
    """Tests for the typed big-endian readers."""

    def test_read_uchar(self) -> None:
        """Reads one unsigned byte."""
        with FontReader(b"\xfe") as reader:
            assert reader.read_uchar() == 0xFE

    def test_read_ushort(self) -> None:
        """Reads a big-endian unsigned 16-bit value."""
        with FontReader(b"\x12\x34") as reader:
            assert reader.read_ushort() == 0x1234

    def test_read_ulong(self) -> None:
        """Reads a big-endian unsigned 32-bit value."""
        with FontReader(b"\x5f\x0f\x3c\xf5") as reader:
            assert reader.read_ulong() == 0x5F0F3CF5

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (b"\x00\x00", 0),
            (b"\x7f\xff", 32767),
            (b"\x80\x00", -32768),
            (b"\xff\xff", -1),
            (b"\xff\x38", -200),
        ],
    )
    def test_read_short(self, raw: bytes, expected: int) -> None:
        """Values >= 0x8000 are negative."""
        with FontReader(raw) as reader:
            assert reader.read_short() == expected

    def test_read_ulong_le(self) -> None:
        """Reads a little-endian unsigned 32-bit value."""
        with FontReader(b"\x10\x00\x00\x00") as reader:
            assert reader.read_ulong_le() == 16


class TestFontReaderCursor:
    """Tests for read/seek/skip/tell."""

    def test_read_zero_returns_empty(self) -> None:
        """read(n) with n <= 0 returns b'' without moving."""
        with FontReader(b"abc") as reader:
            assert reader.read(0) == b""
            assert reader.read(-4) == b""
            assert reader.tell() == 0

    def test_seek_skip_tell(self) -> None:
        """Absolute and relative moves."""
        with FontReader(bytes(range(16))) as reader:
            reader.seek(4)
            assert reader.tell() == 4
            reader.skip(3)
            assert reader.read(2) == b"\x07\x08"
            reader.skip(-4)
            assert reader.read_uchar() == 5

    def test_short_read_raises(self) -> None:
        """Reading past the end raises FontReadError."""
        with FontReader(b"\x00\x01\x02") as reader:
            with pytest.raises(FontReadError):
                reader.read_ulong()

    def test_read_error_is_io_error(self) -> None:
        """FontReadError is a FontIOError, a MakeFontError and an OSError."""
        error = FontReadError("<memory>")
        assert isinstance(error, FontIOError)
        assert isinstance(error, MakeFontError)
        assert isinstance(error, OSError)


class TestFontReaderFiles:
    """Tests for file-backed readers."""

    def test_reads_file(self, tmp_dir: Path) -> None:
        """A path source is opened in binary mode."""
        path = tmp_dir / "data.bin"
        path.write_bytes(b"\x00\x01\x00\x00")
        with FontReader(path) as reader:
            assert reader.read_ulong() == 0x00010000
            assert reader.name == str(path)

    def test_missing_file_raises(self, tmp_dir: Path) -> None:
        """A missing file raises FontIOError with the path."""
        path = tmp_dir / "missing.ttf"
        with pytest.raises(FontIOError) as exc_info:
            FontReader(path)
        assert exc_info.value.values == (str(path),)

    def test_closed_on_exception(self, tmp_dir: Path) -> None:
        """The handle is released when an exception leaves the block."""
        path = tmp_dir / "data.bin"
        path.write_bytes(b"\x00")
        with pytest.raises(FontReadError):
            with FontReader(path) as reader:
                reader.read(8)
        assert reader._stream.closed


class TestFontWriter:
    """Tests for FontWriter."""

    def test_write(self, tmp_dir: Path) -> None:
        """Written bytes land in the file."""
        path = tmp_dir / "out.bin"
        with FontWriter(path) as writer:
            assert writer.write(b"abc") == 3
            writer.write(b"def")
        assert path.read_bytes() == b"abcdef"

    def test_unwritable_path_raises(self, tmp_dir: Path) -> None:
        """Opening inside a missing directory raises FontIOError."""
        with pytest.raises(FontIOError):
            FontWriter(tmp_dir / "missing" / "out.bin")
