# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Single-byte code page maps.

A code page map has 256 entries, one per byte value, each holding the
Unicode value of the character (or None) and its glyph name. Maps are
read from ``<encoding>.map`` files when a map directory is given, using
the line syntax ``!<hex code> U+<hex unicode> <glyph name>``, and are
otherwise derived from the Python codec of the encoding, with glyph
names from the Adobe Glyph List.
"""

import codecs
import functools
import logging
import unicodedata
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from fontTools.agl import LEGACY_AGL2UV, UV2AGL

from ..exceptions import EncodingNotFoundError
from .constants import ENCODING_CODECS, NOTDEF

logger = logging.getLogger(__name__)

CODE_PAGE_SIZE = 256


@dataclass(frozen=True)
class CodePageEntry:
    """One code of a code page.

    Attributes:
        uv: Unicode value, or None when the code is undefined.
        name: Glyph name, ".notdef" for undefined and control codes.
    """

    uv: int | None
    name: str

    @property
    def is_notdef(self) -> bool:
        return self.name == NOTDEF


_UNDEFINED = CodePageEntry(None, NOTDEF)


@dataclass(frozen=True)
class CodePageMap:
    """A 256-entry code page."""

    encoding: str
    entries: tuple[CodePageEntry, ...]

    def __post_init__(self) -> None:
        if len(self.entries) != CODE_PAGE_SIZE:
            raise ValueError(
                f"Code page needs {CODE_PAGE_SIZE} entries, got {len(self.entries)}"
            )

    def __getitem__(self, code: int) -> CodePageEntry:
        return self.entries[code]

    def __iter__(self) -> Iterator[CodePageEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return CODE_PAGE_SIZE

    def code_points(self) -> list[int]:
        """Returns the Unicode values of all named codes, in code order."""
        return [entry.uv for entry in self.entries if not entry.is_notdef]


@functools.cache
def _get_uv2agl() -> dict[int, str]:
    """Returns a reverse Adobe Glyph List mapping (Unicode -> glyph name).

    The full list maps each name to a list of code points; names standing
    for a sequence of characters are skipped. When multiple glyph names
    map to the same Unicode value, an ``afiiNNNNN`` name wins (the name
    Cyrillic, Hebrew and Arabic Type 1 fonts use), otherwise the first
    encountered name.
    """
    uv2agl: dict[int, str] = {}
    for name, uvs in LEGACY_AGL2UV.items():
        if len(uvs) != 1:
            continue
        uv = uvs[0]
        current = uv2agl.get(uv)
        if current is None or (
            name.startswith("afii") and not current.startswith("afii")
        ):
            uv2agl[uv] = name
    return uv2agl


def glyph_name_for(uv: int) -> str:
    """Returns the glyph name for a Unicode value.

    Names from the Adobe Glyph List for New Fonts are preferred, then the
    full Adobe Glyph List, then a ``uniXXXX`` name.
    """
    name = UV2AGL.get(uv) or _get_uv2agl().get(uv)
    if name is None:
        name = f"uni{uv:04X}"
    return name


def parse_map_lines(lines: Iterable[str]) -> tuple[CodePageEntry, ...]:
    """Parses map file lines into 256 entries.

    Blank lines are skipped; codes absent from the lines are undefined.

    Args:
        lines: Lines of the form ``!<hex code> U+<hex unicode> <glyph name>``.

    Returns:
        Tuple of 256 entries.
    """
    entries = [_UNDEFINED] * CODE_PAGE_SIZE
    for line in lines:
        values = line.rstrip().split(" ")
        if len(values) < 3:
            continue
        code = int(values[0][1:], 16)
        uv = int(values[1][2:], 16)
        entries[code] = CodePageEntry(uv, values[2])
    return tuple(entries)


def _derive_entries(codec_name: str) -> tuple[CodePageEntry, ...]:
    decoder = codecs.lookup(codec_name)
    entries = []
    for code in range(CODE_PAGE_SIZE):
        try:
            char, _ = decoder.decode(bytes([code]))
        except UnicodeDecodeError:
            entries.append(_UNDEFINED)
            continue
        uv = ord(char)
        if unicodedata.category(char) == "Cc":
            entries.append(CodePageEntry(uv, NOTDEF))
        else:
            entries.append(CodePageEntry(uv, glyph_name_for(uv)))
    return tuple(entries)


@functools.cache
def _builtin_code_page(encoding: str) -> CodePageMap:
    codec_name = ENCODING_CODECS[encoding.lower()]
    return CodePageMap(encoding, _derive_entries(codec_name))


def load_code_page(encoding: str, map_dir: str | Path | None = None) -> CodePageMap:
    """Loads the code page map of an encoding.

    Args:
        encoding: Encoding name, such as "cp1252" or "ISO-8859-2".
        map_dir: Optional directory holding ``<encoding>.map`` files. A map
            file found there takes precedence over the built-in table.

    Returns:
        The code page map.

    Raises:
        EncodingNotFoundError: If the encoding is unknown or its map file
            is empty.
    """
    if map_dir is not None:
        map_file = Path(map_dir) / f"{encoding.lower()}.map"
        if map_file.is_file():
            lines = [
                line
                for line in map_file.read_text(encoding="latin-1").splitlines()
                if line.strip()
            ]
            if not lines:
                raise EncodingNotFoundError(encoding)
            logger.debug("Loaded code page '%s' from %s", encoding, map_file)
            return CodePageMap(encoding, parse_map_lines(lines))

    if encoding.lower() not in ENCODING_CODECS:
        raise EncodingNotFoundError(encoding)
    return _builtin_code_page(encoding)
