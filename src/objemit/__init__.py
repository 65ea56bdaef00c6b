"""
objemit - Object File Emitter for Cross-Assemblers
==================================================

This package provides the object-code output stage of a two-pass
cross-assembler for 16-bit address space targets. It takes assembled bytes
tagged with their logical address and writes them as an object file.

Supported Formats
-----------------
- **RAW_BINARY**: flat memory image, gaps filled with $FF
- **LOADER_BINARY**: $FF marker, load address (low byte first), then the
  flat image from the load address on
- **HEX_RECORD**: Intel HEX text with checksummed data records and an
  end-of-file record

Main Components
---------------
- **ObjectEmitter**: address-tracked writer driven by code generation
- **EmitterConfig**: format, load address, hex record length, gap filling
- **ErrorCollector**: default sink for the two recoverable address
  conditions (non-sequential object code, object code before ORG)
- **hexrec**: hex record encoding, buffering and verification

Quick Start
-----------
    >>> import io
    >>> from objemit import ObjectEmitter, EmitterConfig, ObjectFormat
    >>> out = io.BytesIO()
    >>> emitter = ObjectEmitter(out, EmitterConfig(format=ObjectFormat.HEX_RECORD))
    >>> emitter.begin()
    >>> emitter.set_origin(0x0100)
    >>> emitter.write(b"\\x3E\\x41")
    >>> emitter.end(start_address=0x0100)
    >>> print(out.getvalue().decode("ascii"), end="")
    :020100003E417E
    :00010001FE

Or use the command-line tool:
    $ objemit program.img -f hex --org 0x100
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from objemit.config import EmitterConfig, MAX_HEX_RECORD_LENGTH
from objemit.emitter import ObjectEmitter, emit_image, FILL_BYTE, LOADER_MARKER
from objemit.errors import (
    ObjEmitError,
    ConfigurationError,
    InvalidFormatError,
    EmitterStateError,
    HexRecordError,
    EmitErrorKind,
    ErrorSink,
    ErrorCollector,
)
from objemit.formats import ObjectFormat, parse_format, default_extension
from objemit.hexrec import (
    RecordType,
    HexRecord,
    HexRecordBuffer,
    hex_checksum,
    encode_record,
    decode_record,
    read_hex_records,
    hex_to_image,
)

__all__ = [
    "__version__",
    # Emitter
    "ObjectEmitter",
    "emit_image",
    "FILL_BYTE",
    "LOADER_MARKER",
    # Configuration
    "EmitterConfig",
    "MAX_HEX_RECORD_LENGTH",
    "ObjectFormat",
    "parse_format",
    "default_extension",
    # Errors
    "ObjEmitError",
    "ConfigurationError",
    "InvalidFormatError",
    "EmitterStateError",
    "HexRecordError",
    "EmitErrorKind",
    "ErrorSink",
    "ErrorCollector",
    # Hex records
    "RecordType",
    "HexRecord",
    "HexRecordBuffer",
    "hex_checksum",
    "encode_record",
    "decode_record",
    "read_hex_records",
    "hex_to_image",
]
