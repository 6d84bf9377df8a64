# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Constants for font parsing, subsetting and encodings."""

# Offset table signatures
SFNT_VERSION_TRUETYPE = 0x00010000
SFNT_VERSION_CFF = 0x4F54544F  # 'OTTO'

# head table
HEAD_MAGIC_NUMBER = 0x5F0F3CF5
HEAD_CHECKSUM_ADJUSTMENT_OFFSET = 8
CHECKSUM_MAGIC = 0xB1B0AFBA

# Fixed field offsets patched during subsetting
HHEA_NUM_H_METRICS_OFFSET = 34
MAXP_NUM_GLYPHS_OFFSET = 4

# post table
POST_VERSION_2 = 0x00020000
POST_VERSION_3 = b"\x00\x03\x00\x00"
POST_HEADER_SIZE = 32
POST_STANDARD_NAMES_COUNT = 258

# loca formats (head.indexToLocFormat)
LOCA_SHORT = 0
LOCA_LONG = 1

# Composite glyph component flags
ARG_1_AND_2_ARE_WORDS = 0x0001
WE_HAVE_A_SCALE = 0x0008
MORE_COMPONENTS = 0x0020
WE_HAVE_AN_X_AND_Y_SCALE = 0x0040
WE_HAVE_A_TWO_BY_TWO = 0x0080

# OS/2 fsType / fsSelection
FSTYPE_RESTRICTED_LICENSE = 0x0002
FSTYPE_BITMAP_ONLY = 0x0200
FSSELECTION_BOLD = 0x0020

# name table
NAME_ID_POSTSCRIPT = 6

# cmap
CMAP_PLATFORM_WINDOWS = 3
CMAP_ENCODING_UNICODE_BMP = 1
CMAP_FORMAT_4 = 4
CMAP_END_CODE = 0xFFFF

TAG_CMAP = "cmap"
TAG_CVT = "cvt "
TAG_FPGM = "fpgm"
TAG_GLYF = "glyf"
TAG_HEAD = "head"
TAG_HHEA = "hhea"
TAG_HMTX = "hmtx"
TAG_LOCA = "loca"
TAG_MAXP = "maxp"
TAG_NAME = "name"
TAG_OS2 = "OS/2"
TAG_POST = "post"
TAG_PREP = "prep"

# Tables kept in a subsetted font, in output order
SUBSET_TABLE_TAGS = (
    TAG_CMAP,
    TAG_CVT,
    TAG_FPGM,
    TAG_GLYF,
    TAG_HEAD,
    TAG_HHEA,
    TAG_HMTX,
    TAG_LOCA,
    TAG_MAXP,
    TAG_NAME,
    TAG_POST,
    TAG_PREP,
)

NOTDEF = ".notdef"

# Encoding used when none is requested; differences are computed against it
DEFAULT_ENCODING = "cp1252"

# Display label -> encoding name
ENCODINGS = {
    "cp1250 (Central Europe)": "cp1250",
    "cp1251 (Cyrillic)": "cp1251",
    "cp1252 (Western Europe)": "cp1252",
    "cp1253 (Greek)": "cp1253",
    "cp1254 (Turkish)": "cp1254",
    "cp1255 (Hebrew)": "cp1255",
    "cp1257 (Baltic)": "cp1257",
    "cp1258 (Vietnamese)": "cp1258",
    "cp874 (Thai)": "cp874",
    "ISO-8859-1 (Western Europe)": "ISO-8859-1",
    "ISO-8859-2 (Central Europe)": "ISO-8859-2",
    "ISO-8859-4 (Baltic)": "ISO-8859-4",
    "ISO-8859-5 (Cyrillic)": "ISO-8859-5",
    "ISO-8859-7 (Greek)": "ISO-8859-7",
    "ISO-8859-9 (Turkish)": "ISO-8859-9",
    "ISO-8859-11 (Thai)": "ISO-8859-11",
    "ISO-8859-15 (Western Europe)": "ISO-8859-15",
    "ISO-8859-16 (Central Europe)": "ISO-8859-16",
    "KOI8-R (Russian)": "KOI8-R",
    "KOI8-U (Ukrainian)": "KOI8-U",
}

# Lowercased encoding name -> Python codec
ENCODING_CODECS = {
    "cp1250": "cp1250",
    "cp1251": "cp1251",
    "cp1252": "cp1252",
    "cp1253": "cp1253",
    "cp1254": "cp1254",
    "cp1255": "cp1255",
    "cp1257": "cp1257",
    "cp1258": "cp1258",
    "cp874": "cp874",
    "iso-8859-1": "iso8859_1",
    "iso-8859-2": "iso8859_2",
    "iso-8859-4": "iso8859_4",
    "iso-8859-5": "iso8859_5",
    "iso-8859-7": "iso8859_7",
    "iso-8859-9": "iso8859_9",
    "iso-8859-11": "iso8859_11",
    "iso-8859-15": "iso8859_15",
    "iso-8859-16": "iso8859_16",
    "koi8-r": "koi8_r",
    "koi8-u": "koi8_u",
}
