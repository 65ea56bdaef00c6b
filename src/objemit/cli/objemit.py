"""
objemit - Object File Emitter Command-Line Interface
=====================================================

This module implements a command-line front end for the object emitter.
It reads a raw code image, places it at an origin address and writes it
out in one of the emitter's object file formats.

Usage Examples
--------------
Intel HEX at $0100:
    $ objemit program.img -f hex --org 0x100

Loader binary with a load address:
    $ objemit program.img -f mos --org $C000 --load $C000 -o program.bin

Short hex records, explicit entry point:
    $ objemit program.img -f hex --record-length 16 --start 0x100

Verbose mode:
    $ objemit -v program.img
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from objemit import __version__
from objemit.cli.errors import ExitCode, handle_cli_exception
from objemit.config import ADDRESS_MASK, MAX_HEX_RECORD_LENGTH, EmitterConfig
from objemit.emitter import emit_image
from objemit.errors import ErrorCollector
from objemit.formats import default_extension, parse_format


def parse_address(text: str) -> int:
    """
    Parse a 16-bit address in assembler notation.

    Accepts $FF, 0xFF, 0FFh and decimal.

    Raises:
        click.BadParameter: If the text is not a valid address
    """
    value_str = text.strip()
    try:
        if value_str.startswith("$"):
            value = int(value_str[1:], 16)
        elif value_str.lower().startswith("0x"):
            value = int(value_str[2:], 16)
        elif value_str.lower().endswith("h"):
            value = int(value_str[:-1], 16)
        else:
            value = int(value_str)
    except ValueError:
        raise click.BadParameter(f"invalid address: {text}") from None

    if not 0 <= value <= ADDRESS_MASK:
        raise click.BadParameter(f"address out of range: {text}")
    return value


def _address_option(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    return parse_address(value)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output object file (default: input with .bin or .hex)",
)
@click.option(
    "-f", "--format", "format_name",
    type=click.Choice(["bin", "mos", "hex"], case_sensitive=False),
    default="bin",
    show_default=True,
    help="Object format: raw binary, loader binary with header, or Intel HEX",
)
@click.option(
    "--org",
    callback=_address_option,
    default="0",
    help="Address of the first input byte",
)
@click.option(
    "--load",
    callback=_address_option,
    help="Load address. Binary code before it is dropped; "
         "the mos format writes it into the header.",
)
@click.option(
    "--record-length",
    type=click.IntRange(1, MAX_HEX_RECORD_LENGTH),
    default=MAX_HEX_RECORD_LENGTH,
    show_default=True,
    help="Maximum data bytes per hex record",
)
@click.option(
    "--start",
    callback=_address_option,
    help="Entry point for the hex end-of-file record (default: --org)",
)
@click.option(
    "--fill/--no-fill",
    default=True,
    help="Pad the binary image up to the last address",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="objemit")
def main(
    input_file: Path,
    output: Optional[Path],
    format_name: str,
    org: int,
    load: Optional[int],
    record_length: int,
    start: Optional[int],
    fill: bool,
    verbose: bool,
) -> None:
    """
    Write a code image as an object file.

    INPUT_FILE holds the raw bytes to place at the --org address.

    \b
    Examples:
        objemit code.img                  # Outputs code.bin
        objemit code.img -f hex           # Outputs code.hex
        objemit code.img -f mos --load 0x100 --org 0x100
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    try:
        fmt = parse_format(format_name)
        output_file = output if output is not None else input_file.with_suffix(default_extension(fmt))
        if output_file.resolve() == input_file.resolve():
            raise click.BadParameter(
                f"output file {output_file} would overwrite the input, use -o to choose another name"
            )

        config = EmitterConfig(
            format=fmt,
            load_address=load,
            hex_record_length=record_length,
            fill_gaps=fill,
        )
        errors = ErrorCollector()

        if verbose:
            click.echo(f"Format: {fmt.name}")
            if load is not None:
                click.echo(f"Load address: ${load:04X}")

        data = input_file.read_bytes()
        obj = emit_image(data, config, origin=org, start_address=start, error_sink=errors)
        output_file.write_bytes(obj)

        if verbose:
            click.echo(f"Wrote {len(obj)} bytes to {output_file}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Emission")

    if errors.has_errors():
        click.echo(errors.report(), err=True)
        sys.exit(ExitCode.BUILD_ERROR)


if __name__ == "__main__":
    main()
