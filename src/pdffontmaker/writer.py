# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Output files: JSON font definitions and compressed font programs."""

import json
import logging
import zlib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .fonts.reader import FontWriter
from .utils import FONT_TYPE_TYPE1

if TYPE_CHECKING:
    from .maker import FontDefinition

logger = logging.getLogger(__name__)

DEFINITION_SUFFIX = ".json"
FONT_PROGRAM_SUFFIX = ".z"


def definition_path_for(font_file: Path, output_dir: Path) -> Path:
    """Returns the definition file path for a font file."""
    return output_dir / f"{font_file.stem}{DEFINITION_SUFFIX}"


def font_program_path_for(font_file: Path, output_dir: Path) -> Path:
    """Returns the compressed font program path for a font file."""
    return output_dir / f"{font_file.stem}{FONT_PROGRAM_SUFFIX}"


def definition_to_dict(definition: "FontDefinition") -> dict[str, Any]:
    """Converts a definition to the JSON-serializable structure.

    Keys follow the font definition format read by PDF writers: ``cw``
    holds the 256 widths keyed by code and ``uv`` the Unicode runs, where
    a run of several codes is ``[first Unicode value, length]``.
    """
    data: dict[str, Any] = {
        "type": definition.type,
        "name": definition.name,
        "enc": definition.encoding,
        "up": definition.underline_position,
        "ut": definition.underline_thickness,
    }
    if definition.embed:
        data["file"] = definition.file
        if definition.type == FONT_TYPE_TYPE1:
            data["size1"] = definition.size1
            data["size2"] = definition.size2
        else:
            data["originalsize"] = definition.original_size
            if definition.subsetted:
                data["subsetted"] = True
    data["desc"] = dict(definition.descriptor)
    data["cw"] = {str(code): width for code, width in enumerate(definition.widths)}
    if definition.diff:
        data["diff"] = definition.diff
    data["uv"] = {
        str(code): list(value) if isinstance(value, tuple) else value
        for code, value in definition.unicode_ranges.items()
    }
    return data


def write_definition(
    definition: "FontDefinition", font_file: Path, output_dir: Path
) -> Path:
    """Writes the JSON font definition.

    Args:
        definition: Font definition.
        font_file: Source font file; its stem names the output.
        output_dir: Output directory.

    Returns:
        Path to the written file.

    Raises:
        FontIOError: If the file cannot be written.
    """
    path = definition_path_for(font_file, output_dir)
    content = json.dumps(definition_to_dict(definition), indent=4) + "\n"
    with FontWriter(path) as writer:
        writer.write(content.encode("utf-8"))
    logger.debug("Wrote font definition: %s", path)
    return path


def write_font_program(
    definition: "FontDefinition", font_file: Path, output_dir: Path
) -> Path:
    """Writes the zlib-compressed font program and records its file name.

    Args:
        definition: Font definition with embedded data.
        font_file: Source font file; its stem names the output.
        output_dir: Output directory.

    Returns:
        Path to the written file.

    Raises:
        FontIOError: If the file cannot be written.
    """
    path = font_program_path_for(font_file, output_dir)
    with FontWriter(path) as writer:
        writer.write(zlib.compress(definition.data))
    definition.file = path.name
    logger.debug(
        "Wrote compressed font program: %s (%d bytes uncompressed)",
        path,
        len(definition.data),
    )
    return path


def load_definition(path: str | Path) -> dict[str, Any]:
    """Reads a JSON font definition written by write_definition."""
    return json.loads(Path(path).read_text(encoding="utf-8"))
