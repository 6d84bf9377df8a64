# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Type 1 fonts: PFB segments and AFM metrics."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from ..exceptions import (
    AfmMissingFontNameError,
    FileEmptyError,
    FontFileNotFoundError,
    Type1SegmentMarkerError,
)
from .constants import NOTDEF
from .reader import FontReader

logger = logging.getLogger(__name__)

PFB_SEGMENT_MARKER = 0x80

_BOLD_WEIGHT = re.compile(r"bold|black", re.IGNORECASE)

# AFM keys parsed as integers
_INT_KEYS = {
    "Ascender": "ascender",
    "Descender": "descender",
    "UnderlineThickness": "underline_thickness",
    "UnderlinePosition": "underline_position",
    "CapHeight": "cap_height",
    "StdVW": "std_vw",
    "ItalicAngle": "italic_angle",
}


def _read_segment_size(reader: FontReader) -> int:
    marker = reader.read_uchar()
    if marker != PFB_SEGMENT_MARKER:
        raise Type1SegmentMarkerError()
    reader.skip(1)  # segment type
    return reader.read_ulong_le()


def read_pfb_segments(path: str | Path) -> tuple[bytes, int, int]:
    """Reads the clear-text and binary segments of a PFB file.

    Args:
        path: Path to the .pfb file.

    Returns:
        Tuple (data, size1, size2) where data is both segments without
        their headers.

    Raises:
        Type1SegmentMarkerError: If a segment header is invalid.
        FontIOError: If the file cannot be read.
    """
    with FontReader(path) as reader:
        size1 = _read_segment_size(reader)
        data1 = reader.read(size1)
        size2 = _read_segment_size(reader)
        data2 = reader.read(size2)
    logger.debug("PFB segments: %d + %d bytes", size1, size2)
    return data1 + data2, size1, size2


@dataclass
class AfmMetrics:
    """Metrics read from an AFM file, in 1/1000 em."""

    font_name: str | None = None
    weight: str | None = None
    ascender: int | None = None
    descender: int | None = None
    underline_thickness: int = 0
    underline_position: int = 0
    cap_height: int | None = None
    std_vw: int | None = None
    italic_angle: int = 0
    is_fixed_pitch: bool = False
    font_bbox: list[int] = field(default_factory=lambda: [0, 0, 0, 0])
    widths: dict[str, int] = field(default_factory=dict)

    @property
    def bold(self) -> bool:
        return self.weight is not None and bool(_BOLD_WEIGHT.search(self.weight))

    @property
    def missing_width(self) -> int:
        return self.widths.get(NOTDEF, 0)


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on")


def parse_afm(path: str | Path) -> AfmMetrics:
    """Parses the metrics of an AFM file.

    Character metric lines (``C code ; WX width ; N name ; ...``) give the
    width of each glyph name. Ascender and descender default to the top
    and bottom of the font bounding box.

    Args:
        path: Path to the .afm file.

    Returns:
        The parsed metrics.

    Raises:
        FontFileNotFoundError: If the file does not exist.
        FileEmptyError: If the file is empty.
        AfmMissingFontNameError: If there is no FontName entry.
    """
    path = Path(path)
    if not path.is_file():
        raise FontFileNotFoundError(str(path))
    lines = [
        line for line in path.read_text(encoding="latin-1").splitlines() if line
    ]
    if not lines:
        raise FileEmptyError(str(path))

    metrics = AfmMetrics()
    for line in lines:
        values = line.rstrip().split(" ")
        if len(values) < 2:
            continue
        key = values[0]
        if key == "C":
            if len(values) > 7:
                metrics.widths[values[7]] = int(values[4])
        elif key == "FontName":
            metrics.font_name = values[1]
        elif key == "Weight":
            metrics.weight = values[1]
        elif key in _INT_KEYS:
            setattr(metrics, _INT_KEYS[key], int(float(values[1])))
        elif key == "IsFixedPitch":
            metrics.is_fixed_pitch = _parse_bool(values[1])
        elif key == "FontBBox" and len(values) >= 5:
            metrics.font_bbox = [int(v) for v in values[1:5]]

    if metrics.font_name is None:
        raise AfmMissingFontNameError()
    if metrics.ascender is None:
        metrics.ascender = metrics.font_bbox[3]
    if metrics.descender is None:
        metrics.descender = metrics.font_bbox[1]
    return metrics
