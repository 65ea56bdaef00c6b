"""
Object File Formats
===================

The emitter writes one of three object file formats:

- **RAW_BINARY**: flat memory image starting at address 0 (or at the first
  written address when a load address is set). Unwritten gaps are filled
  with $FF.
- **LOADER_BINARY**: a 3-byte loader header ($FF marker, then the load
  address low byte first) followed by a RAW_BINARY body. This is the
  MOS Technology style loadable binary.
- **HEX_RECORD**: Intel HEX text, one record per line, ending with an
  end-of-file record.
"""

from enum import Enum

from objemit.errors import InvalidFormatError


class ObjectFormat(Enum):
    """Output format selector."""
    RAW_BINARY = "bin"
    LOADER_BINARY = "mos"
    HEX_RECORD = "hex"

    @property
    def is_binary(self) -> bool:
        """True for the two physically sequential binary formats."""
        return self is not ObjectFormat.HEX_RECORD


# Names accepted by parse_format(), lower case
_FORMAT_ALIASES = {
    "bin": ObjectFormat.RAW_BINARY,
    "b": ObjectFormat.RAW_BINARY,
    "binary": ObjectFormat.RAW_BINARY,
    "raw": ObjectFormat.RAW_BINARY,
    "raw_binary": ObjectFormat.RAW_BINARY,
    "mos": ObjectFormat.LOADER_BINARY,
    "m": ObjectFormat.LOADER_BINARY,
    "loader": ObjectFormat.LOADER_BINARY,
    "loader_binary": ObjectFormat.LOADER_BINARY,
    "hex": ObjectFormat.HEX_RECORD,
    "h": ObjectFormat.HEX_RECORD,
    "ihex": ObjectFormat.HEX_RECORD,
    "hex_record": ObjectFormat.HEX_RECORD,
}

_DEFAULT_EXTENSIONS = {
    ObjectFormat.RAW_BINARY: ".bin",
    ObjectFormat.LOADER_BINARY: ".bin",
    ObjectFormat.HEX_RECORD: ".hex",
}


def parse_format(name: str | ObjectFormat) -> ObjectFormat:
    """
    Convert a format name to an ObjectFormat.

    Matching is case-insensitive and accepts the short selector letters
    used on assembler command lines.

    Args:
        name: Format name such as "hex", "MOS" or "b"

    Returns:
        The matching ObjectFormat

    Raises:
        InvalidFormatError: If the name is not recognized
    """
    if isinstance(name, ObjectFormat):
        return name
    if not isinstance(name, str):
        raise InvalidFormatError(name)

    fmt = _FORMAT_ALIASES.get(name.strip().lower())
    if fmt is None:
        raise InvalidFormatError(name)
    return fmt


def default_extension(fmt: ObjectFormat) -> str:
    """Return the default output file extension for a format."""
    return _DEFAULT_EXTENSIONS[fmt]
