# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font parsing, subsetting and encoding."""

from .codepage import CodePageEntry, CodePageMap, load_code_page
from .constants import DEFAULT_ENCODING, ENCODINGS
from .encoding import make_font_encoding, make_unicode_array
from .metrics import FontMetrics, build_descriptor, build_widths
from .reader import FontReader, FontWriter
from .subsetter import FontSubsetter, subset_font
from .tables import Glyph, Table, TableDirectory, binary_search_params, calc_checksum
from .truetype import TrueTypeFont, TrueTypeParser, parse_truetype
from .type1 import AfmMetrics, parse_afm, read_pfb_segments

__all__ = [
    # Binary access
    "FontReader",
    "FontWriter",
    # Table directory
    "Glyph",
    "Table",
    "TableDirectory",
    "binary_search_params",
    "calc_checksum",
    # TrueType
    "TrueTypeFont",
    "TrueTypeParser",
    "parse_truetype",
    "FontSubsetter",
    "subset_font",
    # Type 1
    "AfmMetrics",
    "parse_afm",
    "read_pfb_segments",
    # Encodings
    "CodePageEntry",
    "CodePageMap",
    "DEFAULT_ENCODING",
    "ENCODINGS",
    "load_code_page",
    "make_font_encoding",
    "make_unicode_array",
    # Metrics
    "FontMetrics",
    "build_descriptor",
    "build_widths",
]
