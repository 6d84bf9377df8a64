# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""pdffontmaker - Generate PDF font definitions from TrueType and Type 1 fonts."""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    EncodingNotFoundError,
    FontIOError,
    MakeFontError,
    NotEmbeddableError,
    TableNotFoundError,
)
from .maker import (
    FontDefinition,
    MakeFontResult,
    generate_directory,
    generate_font_files,
    make_font,
)

try:
    __version__ = version("pdffontmaker")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    "make_font",
    "generate_font_files",
    "generate_directory",
    "FontDefinition",
    "MakeFontResult",
    "MakeFontError",
    "FontIOError",
    "TableNotFoundError",
    "NotEmbeddableError",
    "EncodingNotFoundError",
]
