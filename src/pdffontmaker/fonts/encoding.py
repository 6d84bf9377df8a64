# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Encoding codec for font definitions.

Turns a code page map into the two compact forms stored in a font
definition: Unicode ranges (consecutive codes mapping to consecutive
Unicode values collapse into one run) and the PDF Differences string
relative to the default encoding.
"""

import logging

from .codepage import CodePageMap

logger = logging.getLogger(__name__)

# First code compared when building the Differences string
FIRST_DIFFERENCE_CODE = 32


def make_unicode_array(code_map: CodePageMap) -> dict[int, int | tuple[int, int]]:
    """Collapses the code to Unicode mapping into runs.

    Codes without a Unicode value are skipped. A run extends while both
    the code and the Unicode value advance by one.

    Args:
        code_map: Code page map.

    Returns:
        Dictionary keyed by the first code of each run; the value is the
        Unicode value for a single code, or (first Unicode value, run
        length) for longer runs.
    """
    ranges: list[list[int]] = []
    current = None
    for code, entry in enumerate(code_map):
        uv = entry.uv
        if uv is None:
            continue
        if current is not None and current[1] + 1 == code and current[3] + 1 == uv:
            current[1] += 1
            current[3] += 1
            continue
        if current is not None:
            ranges.append(current)
        current = [code, code, uv, uv]
    if current is not None:
        ranges.append(current)

    result: dict[int, int | tuple[int, int]] = {}
    for code_start, code_end, uv_start, _ in ranges:
        count = code_end - code_start + 1
        result[code_start] = (uv_start, count) if count > 1 else uv_start
    return result


def make_font_encoding(code_map: CodePageMap, reference_map: CodePageMap) -> str:
    """Builds the Differences string against a reference encoding.

    Codes 32 to 255 whose glyph name differs from the reference are
    listed as ``/name``; a code number precedes each run of consecutive
    differing codes.

    Args:
        code_map: Target code page map.
        reference_map: Code page map of the base encoding.

    Returns:
        Space-separated differences, empty when the names all match.
    """
    parts = []
    last = 0
    for code in range(FIRST_DIFFERENCE_CODE, len(code_map)):
        name = code_map[code].name
        if name == reference_map[code].name:
            continue
        if code != last + 1:
            parts.append(str(code))
        last = code
        parts.append(f"/{name}")
    return " ".join(parts)
