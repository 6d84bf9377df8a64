# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Custom exceptions for pdffontmaker.

Every exception carries a message catalog key and the values that are
substituted into the message. The text itself comes from the
:class:`~pdffontmaker.messages.Translator`, so errors can be rendered in
any supported locale.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .messages import Translator


class MakeFontError(Exception):
    """Base exception for all pdffontmaker errors."""

    key = "error_unknown"

    def __init__(self, *values: object) -> None:
        super().__init__(*values)
        self.values = values

    def render(self, translator: "Translator | None" = None) -> str:
        """Renders the error message.

        Args:
            translator: Translator to use. Defaults to the English catalog.

        Returns:
            The formatted, localized message.
        """
        if translator is None:
            from .messages import get_translator

            translator = get_translator()
        return translator.format(self.key, *self.values)

    def __str__(self) -> str:
        return self.render()


class FontIOError(MakeFontError, OSError):
    """A font or metrics file could not be opened or written."""

    key = "error_file_open"


class FontReadError(FontIOError):
    """A read went past the end of the font data."""

    key = "error_file_read"


class FontFileNotFoundError(MakeFontError):
    """Font file (or its AFM companion) does not exist."""

    key = "error_file_not_found"


class FileEmptyError(MakeFontError):
    """File exists but is empty or unreadable."""

    key = "error_file_empty"


class UnrecognizedExtensionError(MakeFontError):
    """Font file extension is not ttf, otf or pfb."""

    key = "error_extension"


class UnsupportedFormatError(MakeFontError):
    """Font uses PostScript (CFF) outlines."""

    key = "error_open_type_unsupported"


class UnrecognizedVersionError(MakeFontError):
    """Offset table signature is not a TrueType signature."""

    key = "error_file_version"

    def __init__(self, version: int) -> None:
        super().__init__(version)
        self.version = version


class TableNotFoundError(MakeFontError):
    """A required table is missing from the table directory."""

    key = "error_table_not_found"

    def __init__(self, tag: str) -> None:
        super().__init__(tag)
        self.tag = tag


class InvalidMagicNumberError(MakeFontError):
    """The head table magic number is wrong."""

    key = "error_magic_number"

    def __init__(self, value: int) -> None:
        super().__init__(value)
        self.value = value


class UnicodeSubtableNotFoundError(MakeFontError):
    """No Windows Unicode BMP (3, 1) cmap subtable."""

    key = "error_unicode_not_found"


class UnsupportedSubtableFormatError(MakeFontError):
    """The Unicode cmap subtable is not format 4."""

    key = "error_table_format"

    def __init__(self, subtable_format: int) -> None:
        super().__init__(subtable_format)
        self.format = subtable_format


class PostScriptNameNotFoundError(MakeFontError):
    """The name table has no usable PostScript name."""

    key = "error_postscript_not_found"


class NotEmbeddableError(MakeFontError):
    """OS/2 fsType forbids embedding."""

    key = "error_license"


class EncodingNotFoundError(MakeFontError):
    """The requested code page is unknown."""

    key = "error_encoding_not_found"

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name


class Type1SegmentMarkerError(MakeFontError):
    """A PFB segment header does not start with the 0x80 marker."""

    key = "error_invalid_type"


class AfmMissingFontNameError(MakeFontError):
    """The AFM file has no FontName entry."""

    key = "error_font_name"


class OutputExistsError(MakeFontError):
    """A generated file already exists and overwriting was not requested."""

    key = "error_file_exists"
