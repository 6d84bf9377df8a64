# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font metrics, descriptor and width table assembly."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .codepage import CODE_PAGE_SIZE, CodePageEntry, CodePageMap
from .truetype import TrueTypeFont
from .type1 import AfmMetrics

logger = logging.getLogger(__name__)

# PDF font descriptor flags (ISO 32000)
FLAG_FIXED_PITCH = 1 << 0
FLAG_NONSYMBOLIC = 1 << 5
FLAG_ITALIC = 1 << 6

STEMV_BOLD = 120
STEMV_REGULAR = 70


@dataclass
class FontMetrics:
    """Font-wide metrics in 1/1000 em, independent of the font type.

    Attributes:
        font_name: PostScript name.
        bold: True for bold or black weights.
        italic_angle: Italic angle in degrees.
        is_fixed_pitch: True for monospaced fonts.
        ascender: Typographic ascender.
        descender: Typographic descender.
        underline_thickness: Underline thickness.
        underline_position: Underline position.
        font_bbox: Font bounding box [xMin, yMin, xMax, yMax].
        cap_height: Cap height, or None when the font does not define it.
        std_vw: Dominant vertical stem width, or None.
        missing_width: Width of the .notdef glyph.
    """

    font_name: str
    bold: bool = False
    italic_angle: int = 0
    is_fixed_pitch: bool = False
    ascender: int = 0
    descender: int = 0
    underline_thickness: int = 0
    underline_position: int = 0
    font_bbox: list[int] = field(default_factory=lambda: [0, 0, 0, 0])
    cap_height: int | None = None
    std_vw: int | None = None
    missing_width: int = 0


def metrics_from_truetype(font: TrueTypeFont) -> FontMetrics:
    """Scales the metrics of a parsed TrueType font to 1/1000 em."""
    scale = font.scale
    return FontMetrics(
        font_name=font.postscript_name,
        bold=font.bold,
        italic_angle=font.italic_angle,
        is_fixed_pitch=font.is_fixed_pitch,
        ascender=scale(font.typo_ascender),
        descender=scale(font.typo_descender),
        underline_thickness=scale(font.underline_thickness),
        underline_position=scale(font.underline_position),
        font_bbox=[scale(value) for value in font.bbox],
        cap_height=None if font.cap_height is None else scale(font.cap_height),
        missing_width=scale(font.glyphs[0].width) if font.glyphs else 0,
    )


def metrics_from_afm(afm: AfmMetrics) -> FontMetrics:
    """Converts AFM metrics, which are already in 1/1000 em."""
    return FontMetrics(
        font_name=afm.font_name or "",
        bold=afm.bold,
        italic_angle=afm.italic_angle,
        is_fixed_pitch=afm.is_fixed_pitch,
        ascender=afm.ascender or 0,
        descender=afm.descender or 0,
        underline_thickness=afm.underline_thickness,
        underline_position=afm.underline_position,
        font_bbox=list(afm.font_bbox),
        cap_height=afm.cap_height,
        std_vw=afm.std_vw,
        missing_width=afm.missing_width,
    )


def compute_flags(metrics: FontMetrics) -> int:
    """Computes the descriptor Flags value.

    The font is always declared nonsymbolic; FixedPitch and Italic are
    added from the metrics.
    """
    flags = FLAG_NONSYMBOLIC
    if metrics.is_fixed_pitch:
        flags |= FLAG_FIXED_PITCH
    if metrics.italic_angle != 0:
        flags |= FLAG_ITALIC
    return flags


def build_descriptor(metrics: FontMetrics) -> dict[str, int | str]:
    """Builds the font descriptor entries of a font definition.

    Args:
        metrics: Font metrics.

    Returns:
        Ordered dictionary with Ascent, Descent, CapHeight, Flags,
        FontBBox, ItalicAngle, StemV and MissingWidth.
    """
    if metrics.std_vw is not None:
        stem_v = metrics.std_vw
    elif metrics.bold:
        stem_v = STEMV_BOLD
    else:
        stem_v = STEMV_REGULAR
    cap_height = metrics.cap_height
    if cap_height is None:
        cap_height = metrics.ascender
    return {
        "Ascent": metrics.ascender,
        "Descent": metrics.descender,
        "CapHeight": cap_height,
        "Flags": compute_flags(metrics),
        "FontBBox": "[{}]".format(" ".join(str(v) for v in metrics.font_bbox)),
        "ItalicAngle": metrics.italic_angle,
        "StemV": stem_v,
        "MissingWidth": metrics.missing_width,
    }


def build_widths(
    code_map: CodePageMap,
    missing_width: int,
    width_of: Callable[[CodePageEntry], int | None],
) -> tuple[list[int], list[str]]:
    """Builds the 256-entry width table for a code page.

    Codes named ".notdef" keep the missing width. A named code whose
    glyph is not in the font also keeps it and is reported.

    Args:
        code_map: Code page map.
        missing_width: Width used for undefined and missing characters.
        width_of: Returns the width of an entry's glyph, or None when
            the font has no glyph for it.

    Returns:
        Tuple (widths, missing) where missing lists the glyph names of
        characters the font lacks.
    """
    widths = [missing_width] * CODE_PAGE_SIZE
    missing = []
    for code, entry in enumerate(code_map):
        if entry.is_notdef:
            continue
        width = width_of(entry)
        if width is None:
            missing.append(entry.name)
            continue
        widths[code] = width
    if missing:
        logger.debug("%d characters missing from the font", len(missing))
    return widths, missing


def truetype_width_lookup(
    font: TrueTypeFont,
) -> Callable[[CodePageEntry], int | None]:
    """Returns a width lookup by Unicode value for a TrueType font."""

    def width_of(entry: CodePageEntry) -> int | None:
        gid = font.chars.get(entry.uv) if entry.uv is not None else None
        if gid is None:
            return None
        return font.scale(font.glyphs[gid].width)

    return width_of


def afm_width_lookup(afm: AfmMetrics) -> Callable[[CodePageEntry], int | None]:
    """Returns a width lookup by glyph name for AFM metrics."""

    def width_of(entry: CodePageEntry) -> int | None:
        return afm.widths.get(entry.name)

    return width_of
