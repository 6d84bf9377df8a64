# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Unit tests for utils.py."""

import logging
from pathlib import Path

import pytest

from pdffontmaker.exceptions import UnrecognizedExtensionError
from pdffontmaker.utils import (
    LOG_FORMAT,
    get_font_type,
    round_half_away,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_default_level_is_info(self) -> None:
        """Default log level is INFO."""
        logger = setup_logging()
        assert logger.level == logging.INFO

    def test_verbose_sets_debug(self) -> None:
        """verbose=True sets DEBUG level."""
        logger = setup_logging(verbose=True)
        assert logger.level == logging.DEBUG

    def test_quiet_sets_error(self) -> None:
        """quiet=True sets ERROR level."""
        logger = setup_logging(quiet=True)
        assert logger.level == logging.ERROR

    def test_quiet_takes_precedence(self) -> None:
        """quiet takes precedence over verbose."""
        logger = setup_logging(verbose=True, quiet=True)
        assert logger.level == logging.ERROR

    def test_returns_package_logger(self) -> None:
        """Returns the pdffontmaker logger."""
        logger = setup_logging()
        assert logger.name == "pdffontmaker"

    def test_has_handler(self) -> None:
        """Repeated setup leaves exactly one handler."""
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_handler_has_formatter(self) -> None:
        """Handler has correct format."""
        logger = setup_logging()
        handler = logger.handlers[0]
        assert handler.formatter is not None
        assert handler.formatter._fmt == LOG_FORMAT


class TestRoundHalfAway:
    """Tests for round_half_away."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0.5, 1),
            (1.5, 2),
            (2.5, 3),
            (-0.5, -1),
            (-2.5, -3),
            (1.49, 1),
            (-1.49, -1),
            (0.0, 0),
            (7, 7),
        ],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        """Halves round away from zero, unlike round()."""
        assert round_half_away(value) == expected


class TestGetFontType:
    """Tests for get_font_type."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Font.ttf", "TrueType"),
            ("Font.otf", "TrueType"),
            ("Font.OTF", "TrueType"),
            ("Font.pfb", "Type1"),
            ("Font.PFB", "Type1"),
        ],
    )
    def test_known_extensions(self, name: str, expected: str) -> None:
        """Extensions are matched case-insensitively."""
        assert get_font_type(Path(name)) == expected

    @pytest.mark.parametrize("name", ["Font.woff", "Font.afm", "Font"])
    def test_unknown_extension(self, name: str) -> None:
        """Other extensions raise UnrecognizedExtensionError."""
        with pytest.raises(UnrecognizedExtensionError):
            get_font_type(Path(name))

    def test_error_names_extension(self) -> None:
        """The error message names the lowercase extension."""
        with pytest.raises(UnrecognizedExtensionError) as exc_info:
            get_font_type(Path("Font.WOFF2"))
        assert str(exc_info.value) == "Unrecognized font file extension: woff2."
