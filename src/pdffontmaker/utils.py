# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Utility functions for font definition generation."""

import logging
import math
import sys
from pathlib import Path

from .exceptions import UnrecognizedExtensionError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

FONT_TYPE_TRUETYPE = "TrueType"
FONT_TYPE_TYPE1 = "Type1"

# Font file extension -> font type
FONT_EXTENSIONS = {
    "ttf": FONT_TYPE_TRUETYPE,
    "otf": FONT_TYPE_TRUETYPE,
    "pfb": FONT_TYPE_TYPE1,
}


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configures logging for pdffontmaker.

    Args:
        verbose: If True, DEBUG level is used.
        quiet: If True, only ERROR and higher are output.
            Takes precedence over verbose.

    Returns:
        Configured logger for pdffontmaker.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    package_logger = logging.getLogger("pdffontmaker")
    package_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)

    logger.debug("Logging configured with level: %s", logging.getLevelName(level))
    return package_logger


def round_half_away(value: float) -> int:
    """Rounds to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def get_font_type(font_file: Path) -> str:
    """Returns the font type for a font file from its extension.

    Args:
        font_file: Path to the font program.

    Returns:
        "TrueType" or "Type1".

    Raises:
        UnrecognizedExtensionError: If the extension is not supported.
    """
    ext = font_file.suffix.lower().lstrip(".")
    font_type = FONT_EXTENSIONS.get(ext)
    if font_type is None:
        raise UnrecognizedExtensionError(ext)
    return font_type
