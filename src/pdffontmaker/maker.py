# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font definition generation.

``make_font`` turns a TrueType or Type 1 font into a FontDefinition:
metrics, descriptor, widths and encoding data for one code page, plus
the (optionally subsetted) font program to embed. ``generate_font_files``
and ``generate_directory`` write the definitions to disk.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from tqdm import tqdm

from .exceptions import (
    FontFileNotFoundError,
    MakeFontError,
    NotEmbeddableError,
    OutputExistsError,
)
from .fonts.codepage import CodePageMap, load_code_page
from .fonts.constants import DEFAULT_ENCODING
from .fonts.encoding import make_font_encoding, make_unicode_array
from .fonts.metrics import (
    FontMetrics,
    afm_width_lookup,
    build_descriptor,
    build_widths,
    metrics_from_afm,
    metrics_from_truetype,
    truetype_width_lookup,
)
from .fonts.reader import FontReader
from .fonts.subsetter import FontSubsetter
from .fonts.truetype import TrueTypeParser
from .fonts.type1 import parse_afm, read_pfb_segments
from .messages import Translator, get_translator
from .utils import FONT_EXTENSIONS, FONT_TYPE_TRUETYPE, get_font_type
from .writer import definition_path_for, write_definition, write_font_program

logger = logging.getLogger(__name__)


@dataclass
class FontDefinition:
    """Everything a PDF writer needs to use a font with one code page.

    Attributes:
        type: "TrueType" or "Type1".
        name: PostScript name of the font.
        encoding: Code page name.
        underline_position: Underline position in 1/1000 em.
        underline_thickness: Underline thickness in 1/1000 em.
        descriptor: Font descriptor entries.
        widths: 256 character widths in 1/1000 em.
        diff: Differences from the default encoding, or None.
        unicode_ranges: Code to Unicode runs.
        embed: True if the font program is embedded.
        subsetted: True if the embedded TrueType program is a subset.
        data: Font program to embed (empty when not embedded).
        original_size: Length of the TrueType program.
        size1: Length of the Type 1 clear-text segment.
        size2: Length of the Type 1 binary segment.
        file: Name of the written font program file, once written.
        warnings: Non-fatal messages, such as missing characters.
    """

    type: str
    name: str
    encoding: str
    underline_position: int
    underline_thickness: int
    descriptor: dict[str, int | str]
    widths: list[int]
    diff: str | None
    unicode_ranges: dict[int, int | tuple[int, int]]
    embed: bool = True
    subsetted: bool = False
    data: bytes = b""
    original_size: int = 0
    size1: int = 0
    size2: int = 0
    file: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class MakeFontResult:
    """Result of generating the files of one font.

    Attributes:
        success: True if the definition was written.
        input_path: Path to the font file.
        definition_path: Path to the written definition.
        font_path: Path to the compressed font program, when embedded.
        warnings: Rendered warning messages.
        processing_time: Processing time in seconds.
        error: Rendered error message if success=False.
        error_type: Exception class of the failure, if any.
        definition: The generated definition.
    """

    success: bool
    input_path: Path
    definition_path: Path | None = None
    font_path: Path | None = None
    warnings: list[str] = field(default_factory=list)
    processing_time: float = 0.0
    error: str | None = None
    error_type: type[MakeFontError] | None = None
    definition: FontDefinition | None = None


def _make_truetype(
    font_file: Path, code_map: CodePageMap, embed: bool, subset: bool
) -> tuple[FontMetrics, list[int], list[str], bytes]:
    with FontReader(font_file) as reader:
        font = TrueTypeParser(reader).parse()
        data = b""
        if embed:
            if not font.embeddable:
                raise NotEmbeddableError()
            if subset:
                subsetter = FontSubsetter(font, reader)
                subsetter.subset(code_map.code_points())
                data = subsetter.build()
            else:
                data = font_file.read_bytes()
    metrics = metrics_from_truetype(font)
    widths, missing = build_widths(
        code_map, metrics.missing_width, truetype_width_lookup(font)
    )
    return metrics, widths, missing, data


def _make_type1(
    font_file: Path, code_map: CodePageMap, embed: bool
) -> tuple[FontMetrics, list[int], list[str], bytes, int, int]:
    data = b""
    size1 = size2 = 0
    if embed:
        data, size1, size2 = read_pfb_segments(font_file)
    afm = parse_afm(font_file.with_suffix(".afm"))
    metrics = metrics_from_afm(afm)
    widths, missing = build_widths(
        code_map, metrics.missing_width, afm_width_lookup(afm)
    )
    return metrics, widths, missing, data, size1, size2


def make_font(
    font_file: str | Path,
    encoding: str = DEFAULT_ENCODING,
    embed: bool = True,
    subset: bool = True,
    *,
    map_dir: str | Path | None = None,
    translator: Translator | None = None,
) -> FontDefinition:
    """Builds the font definition of a font for a code page.

    Args:
        font_file: Path to a .ttf, .otf or .pfb file. Type 1 fonts need
            the .afm file next to the .pfb file.
        encoding: Code page name.
        embed: If True, the font program is included in the definition.
        subset: If True, an embedded TrueType program is subsetted to the
            characters of the code page.
        map_dir: Optional directory with ``<encoding>.map`` files.
        translator: Translator for warning messages (English by default).

    Returns:
        The font definition.

    Raises:
        FontFileNotFoundError: If the font file does not exist.
        UnrecognizedExtensionError: If the font type is not supported.
        EncodingNotFoundError: If the encoding is unknown.
        NotEmbeddableError: If embedding is requested but not allowed.
        MakeFontError: For any parsing error of the font program.
    """
    font_file = Path(font_file)
    if not font_file.is_file():
        raise FontFileNotFoundError(str(font_file))
    font_type = get_font_type(font_file)
    translator = translator or get_translator()

    code_map = load_code_page(encoding, map_dir)
    size1 = size2 = 0
    if font_type == FONT_TYPE_TRUETYPE:
        metrics, widths, missing, data = _make_truetype(
            font_file, code_map, embed, subset
        )
    else:
        metrics, widths, missing, data, size1, size2 = _make_type1(
            font_file, code_map, embed
        )
        subset = False

    diff = None
    if encoding.lower() != DEFAULT_ENCODING:
        diff = make_font_encoding(code_map, load_code_page(DEFAULT_ENCODING, map_dir))
        diff = diff or None

    warnings = []
    for name in missing:
        message = translator.format("warning_character_missing", name)
        logger.warning(message)
        warnings.append(message)

    definition = FontDefinition(
        type=font_type,
        name=metrics.font_name,
        encoding=encoding,
        underline_position=metrics.underline_position,
        underline_thickness=metrics.underline_thickness,
        descriptor=build_descriptor(metrics),
        widths=widths,
        diff=diff,
        unicode_ranges=make_unicode_array(code_map),
        embed=embed,
        subsetted=embed and subset,
        data=data,
        original_size=len(data) if font_type == FONT_TYPE_TRUETYPE else 0,
        size1=size1,
        size2=size2,
        warnings=warnings,
    )
    logger.debug(
        "Font definition for %s (%s, %s): %d bytes embedded",
        definition.name,
        font_type,
        encoding,
        len(data),
    )
    return definition


def generate_font_files(
    font_file: str | Path,
    output_dir: str | Path | None = None,
    encoding: str = DEFAULT_ENCODING,
    embed: bool = True,
    subset: bool = True,
    *,
    map_dir: str | Path | None = None,
    force_overwrite: bool = False,
    locale: str = "en",
) -> MakeFontResult:
    """Generates the definition and compressed font program of a font.

    Fatal errors are reported in the result instead of raised.

    Args:
        font_file: Path to the font file.
        output_dir: Directory for the generated files. Defaults to the
            directory of the font file.
        encoding: Code page name.
        embed: If True, the compressed font program is written.
        subset: If True, the embedded TrueType program is subsetted.
        map_dir: Optional directory with ``<encoding>.map`` files.
        force_overwrite: If True, existing files are overwritten.
        locale: Locale of the rendered messages.

    Returns:
        MakeFontResult describing the outcome.
    """
    font_file = Path(font_file)
    output_dir = Path(output_dir) if output_dir is not None else font_file.parent
    translator = get_translator(locale)
    start_time = time.monotonic()

    try:
        definition_path = definition_path_for(font_file, output_dir)
        if definition_path.exists() and not force_overwrite:
            raise OutputExistsError(str(definition_path))

        definition = make_font(
            font_file,
            encoding,
            embed,
            subset,
            map_dir=map_dir,
            translator=translator,
        )
        output_dir.mkdir(parents=True, exist_ok=True)
        font_path = None
        if embed:
            font_path = write_font_program(definition, font_file, output_dir)
            logger.info(translator.format("info_compressed_generated", font_path.name))
        definition_path = write_definition(definition, font_file, output_dir)
        logger.info(translator.format("info_file_generated", definition_path.name))
    except MakeFontError as e:
        message = e.render(translator)
        logger.error("Error for %s: %s", font_file.name, message)
        return MakeFontResult(
            success=False,
            input_path=font_file,
            processing_time=time.monotonic() - start_time,
            error=message,
            error_type=type(e),
        )

    return MakeFontResult(
        success=True,
        input_path=font_file,
        definition_path=definition_path,
        font_path=font_path,
        warnings=list(definition.warnings),
        processing_time=time.monotonic() - start_time,
        definition=definition,
    )


def find_font_files(input_dir: Path, recursive: bool = False) -> list[Path]:
    """Returns the supported font files of a directory, sorted."""
    pattern = "**/*" if recursive else "*"
    return sorted(
        path
        for path in input_dir.glob(pattern)
        if path.is_file() and path.suffix.lower().lstrip(".") in FONT_EXTENSIONS
    )


def generate_directory(
    input_dir: str | Path,
    output_dir: str | Path | None = None,
    encoding: str = DEFAULT_ENCODING,
    embed: bool = True,
    subset: bool = True,
    *,
    recursive: bool = False,
    map_dir: str | Path | None = None,
    force_overwrite: bool = False,
    locale: str = "en",
    show_progress: bool = True,
    on_progress: Callable[[int, int, str], None] | None = None,
) -> list[MakeFontResult]:
    """Generates font definitions for all fonts of a directory.

    Args:
        input_dir: Directory with .ttf, .otf and .pfb files.
        output_dir: Optional output directory. If None, files are written
            next to each font.
        encoding: Code page name.
        embed: If True, font programs are embedded.
        subset: If True, TrueType programs are subsetted.
        recursive: If True, subdirectories are included.
        map_dir: Optional directory with ``<encoding>.map`` files.
        force_overwrite: If True, existing outputs are overwritten.
        locale: Locale of the rendered messages.
        show_progress: If True, a progress bar is shown.
        on_progress: Optional callback(current_idx, total, filename)
            called before each file.

    Returns:
        List of MakeFontResult for all processed files.

    Raises:
        FontFileNotFoundError: If the input directory does not exist.
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise FontFileNotFoundError(str(input_dir))

    font_files = find_font_files(input_dir, recursive)
    if not font_files:
        logger.warning("No font files found in: %s", input_dir)
        return []

    logger.info(
        "Found: %d font file(s) in %s%s",
        len(font_files),
        input_dir,
        " (recursive)" if recursive else "",
    )

    progress_bar = None
    if show_progress:
        progress_bar = tqdm(
            total=len(font_files),
            desc="Generating",
            unit="file",
            ncols=80,
        )

    results: list[MakeFontResult] = []
    try:
        for idx, font_file in enumerate(font_files):
            if on_progress is not None:
                on_progress(idx, len(font_files), font_file.name)
            if output_dir is not None:
                target_dir = Path(output_dir) / font_file.parent.relative_to(input_dir)
            else:
                target_dir = font_file.parent
            results.append(
                generate_font_files(
                    font_file,
                    target_dir,
                    encoding,
                    embed,
                    subset,
                    map_dir=map_dir,
                    force_overwrite=force_overwrite,
                    locale=locale,
                )
            )
            if progress_bar is not None:
                progress_bar.update(1)
                progress_bar.set_postfix_str(font_file.name)
    finally:
        if progress_bar is not None:
            progress_bar.close()

    successful = sum(1 for r in results if r.success)
    logger.info(
        "Directory generation completed: %d successful, %d failed",
        successful,
        len(results) - successful,
    )
    return results
