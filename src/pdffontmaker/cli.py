# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Click-based CLI for pdffontmaker.

This module provides the command-line interface for generating font
definitions and compressed font programs from TrueType and Type 1 fonts.
"""

# Standard Library
import logging
import sys
from pathlib import Path

# Third Party
import click
from colorama import Fore, Style, init

# Local
from . import __version__
from .exceptions import FontFileNotFoundError, MakeFontError
from .fonts.constants import DEFAULT_ENCODING, ENCODINGS
from .maker import MakeFontResult, generate_directory, generate_font_files
from .messages import ALLOWED_LOCALES, DEFAULT_LOCALE, get_translator
from .utils import setup_logging

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_FILE_NOT_FOUND = 2
EXIT_GENERATION_FAILED = 3

SPECIMEN_TEXT = "The quick brown fox jumps over the lazy dog.\n0123456789"

logger = logging.getLogger(__name__)


def print_success(msg: str) -> None:
    """Prints a success message in green.

    Args:
        msg: The message to output.
    """
    click.echo(f"{Fore.GREEN}\u2713{Style.RESET_ALL} {msg}")


def print_error(msg: str) -> None:
    """Prints an error message in red.

    Args:
        msg: The error message to output.
    """
    click.echo(f"{Fore.RED}\u2717 Error:{Style.RESET_ALL} {msg}", err=True)


def print_warning(msg: str) -> None:
    """Prints a warning in yellow.

    Args:
        msg: The warning to output.
    """
    click.echo(f"{Fore.YELLOW}\u26a0{Style.RESET_ALL} {msg}")


def _print_result(result: MakeFontResult, quiet: bool, locale: str) -> None:
    """Prints the generation result in a formatted way.

    Args:
        result: The generation result.
        quiet: If True, only output errors.
        locale: Locale of the messages.
    """
    if not result.success:
        print_error(f"{result.input_path.name}: {result.error}")
        return
    if quiet:
        return
    translator = get_translator(locale)
    if result.font_path is not None:
        print_success(
            translator.format("info_compressed_generated", result.font_path.name)
        )
    print_success(
        translator.format("info_file_generated", result.definition_path.name)
        + f" ({result.processing_time:.2f}s)"
    )
    for warning in result.warnings:
        print_warning(warning)


def _exit_code_for(result: MakeFontResult) -> int:
    if result.success:
        return EXIT_SUCCESS
    if result.error_type is not None and issubclass(
        result.error_type, FontFileNotFoundError
    ):
        return EXIT_FILE_NOT_FOUND
    return EXIT_GENERATION_FAILED


def _write_specimen(
    result: MakeFontResult, specimen: Path, quiet: bool, locale: str
) -> None:
    from .pdf import write_specimen

    if specimen.is_dir():
        specimen = specimen / f"{result.input_path.stem}.pdf"
    write_specimen(result.definition, specimen, SPECIMEN_TEXT)
    if not quiet:
        print_success(get_translator(locale).format("info_specimen_generated", specimen))


@click.command()
@click.argument("input_path", required=False, type=click.Path(exists=True))
@click.option(
    "-e",
    "--encoding",
    default=DEFAULT_ENCODING,
    help="Code page of the font definition, one of: "
    + ", ".join(ENCODINGS.values())
    + f" (default: {DEFAULT_ENCODING})",
)
@click.option(
    "--embed/--no-embed",
    default=True,
    help="Embed the font program (default: enabled)",
)
@click.option(
    "--subset/--no-subset",
    default=True,
    help="Subset embedded TrueType fonts to the code page (default: enabled)",
)
@click.option(
    "-m",
    "--map-dir",
    type=click.Path(exists=True, file_okay=False),
    help="Directory with <encoding>.map files overriding the built-in code pages",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False),
    help="Output directory (default: next to the font)",
)
@click.option(
    "--locale",
    type=click.Choice(list(ALLOWED_LOCALES)),
    default=DEFAULT_LOCALE,
    help=f"Language of the messages (default: {DEFAULT_LOCALE})",
)
@click.option(
    "--specimen",
    type=click.Path(),
    help="Also write a PDF specimen page to this file or directory",
)
@click.option(
    "-r",
    "--recursive",
    is_flag=True,
    help="Process directories recursively",
)
@click.option(
    "-f",
    "--force",
    is_flag=True,
    help="Overwrite existing files",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Only output errors",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Detailed output",
)
@click.version_option(version=__version__)
def main(
    input_path: str | None,
    encoding: str,
    embed: bool,
    subset: bool,
    map_dir: str | None,
    output_dir: str | None,
    locale: str,
    specimen: str | None,
    recursive: bool,
    force: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Generates PDF font definitions.

    INPUT is a .ttf, .otf or .pfb font file (with its .afm file next to
    a .pfb file), or a directory of fonts.
    """
    # Initialize colorama for Windows compatibility
    init()

    if input_path is None:
        click.echo(click.get_current_context().get_help())
        sys.exit(EXIT_GENERAL_ERROR)

    setup_logging(verbose=verbose, quiet=quiet)

    input_path_obj = Path(input_path)

    try:
        if input_path_obj.is_dir():
            results = generate_directory(
                input_path_obj,
                output_dir,
                encoding,
                embed,
                subset,
                recursive=recursive,
                map_dir=map_dir,
                force_overwrite=force,
                locale=locale,
                show_progress=not quiet,
            )
        else:
            results = [
                generate_font_files(
                    input_path_obj,
                    output_dir,
                    encoding,
                    embed,
                    subset,
                    map_dir=map_dir,
                    force_overwrite=force,
                    locale=locale,
                )
            ]

        exit_code = EXIT_SUCCESS
        for result in results:
            _print_result(result, quiet, locale)
            if result.success and specimen is not None:
                _write_specimen(result, Path(specimen), quiet, locale)
            if exit_code == EXIT_SUCCESS:
                exit_code = _exit_code_for(result)

    except FontFileNotFoundError as e:
        print_error(e.render(get_translator(locale)))
        exit_code = EXIT_FILE_NOT_FOUND
    except MakeFontError as e:
        print_error(e.render(get_translator(locale)))
        exit_code = EXIT_GENERATION_FAILED
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {e}")
        exit_code = EXIT_GENERAL_ERROR

    sys.exit(exit_code)
