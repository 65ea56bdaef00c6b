"""
Object Emitter
==============

The object emitter is the last stage of the assembler's second pass. Code
generation hands it bytes together with the logical address they belong
to, and the emitter serializes them into the selected object file format.

Address Tracking
----------------
The emitter keeps two cursors:

- **logical address**: where the next byte belongs in target memory
- **physical cursor**: how many body bytes have been written to a binary
  file so far

Binary formats are physically sequential, so a gap between the two cursors
is padded with $FF before the next write. Moving the logical address
backwards cannot be represented in such a file: the emitter latches a
non-sequential state, reports NON_SEQUENTIAL_WRITE for every write while
latched, and freezes both cursors until an origin change moves forward
again (relative to the frozen address).

When a load address is configured, writes before it are reported as
WRITE_BEFORE_ORIGIN and dropped, while the logical address keeps counting.
The first origin change while the physical cursor is still below the load
address moves the cursor there without padding.

Hex records carry their own address, so HEX_RECORD output never pads and
never reports either condition. Bytes are buffered into a record that is
flushed when it is full or when the next byte is not contiguous with it.

Example:
    >>> import io
    >>> out = io.BytesIO()
    >>> emitter = ObjectEmitter(out, EmitterConfig(format=ObjectFormat.RAW_BINARY))
    >>> emitter.begin()
    >>> emitter.write(b"\\x01\\x02")
    >>> emitter.set_origin(5)
    >>> emitter.write(b"\\x03")
    >>> emitter.end()
    >>> out.getvalue().hex()
    '0102ffffff03'
"""

import io
import logging
from typing import BinaryIO, Iterable, Optional

from objemit.config import ADDRESS_MASK, EmitterConfig
from objemit.errors import (
    EmitErrorKind,
    EmitterStateError,
    ErrorCollector,
    ErrorSink,
    InvalidFormatError,
)
from objemit.formats import ObjectFormat
from objemit.hexrec import HexRecordBuffer, RecordType, encode_record

logger = logging.getLogger(__name__)


# Byte written into gaps of a binary image
FILL_BYTE = 0xFF

# First byte of the LOADER_BINARY header
LOADER_MARKER = 0xFF


class ObjectEmitter:
    """
    Address-tracked writer for one object file.

    One emitter exists per assembly run. The driver calls begin() once,
    then set_origin(), write(), skip() and fill_value() in program order,
    and end() once.

    Attributes:
        config: The validated configuration
        error_sink: Receives NON_SEQUENTIAL_WRITE and WRITE_BEFORE_ORIGIN
    """

    def __init__(
        self,
        stream: BinaryIO,
        config: Optional[EmitterConfig] = None,
        error_sink: Optional[ErrorSink] = None,
    ):
        """
        Create an emitter.

        Args:
            stream: Binary output stream, owned by the caller
            config: Emitter settings (default: RAW_BINARY, no load address)
            error_sink: Callable receiving each reported error kind
                (default: a new ErrorCollector)

        Raises:
            InvalidFormatError: If the configured format is unknown
            ConfigurationError: If another setting is out of range
        """
        self.config = config if config is not None else EmitterConfig()
        self.config.validate()

        self._stream = stream
        self.error_sink = error_sink if error_sink is not None else ErrorCollector()

        self._logical_address = 0
        self._physical_cursor = 0
        self._non_sequential = False
        self._record = HexRecordBuffer(self.config.hex_record_length)
        self._started = False
        self._finished = False

    # =========================================================================
    # State Accessors
    # =========================================================================

    @property
    def format(self) -> ObjectFormat:
        return self.config.format

    @property
    def logical_address(self) -> int:
        return self._logical_address

    @property
    def physical_cursor(self) -> int:
        return self._physical_cursor

    @property
    def non_sequential(self) -> bool:
        return self._non_sequential

    @property
    def record_address(self) -> int:
        return self._record.address

    @property
    def pending_bytes(self) -> int:
        """Number of bytes buffered in the current hex record."""
        return len(self._record)

    @property
    def finished(self) -> bool:
        return self._finished

    # =========================================================================
    # Operations
    # =========================================================================

    def begin(self) -> None:
        """
        Write the file header, if the format has one.

        Raises:
            EmitterStateError: If begin() was already called
        """
        self._check_open()
        if self._started:
            raise EmitterStateError("object file header already written")
        self._started = True
        if self.format is ObjectFormat.LOADER_BINARY:
            load = self.config.load_address or 0
            self._stream.write(bytes([LOADER_MARKER, load & 0xFF, load >> 8]))
            logger.debug(f"Loader header for load address ${load:04X}")

    def set_origin(self, addr: int) -> None:
        """
        Change the logical address.

        Args:
            addr: New logical address (reduced to 16 bits)
        """
        self._check_open()
        addr &= ADDRESS_MASK
        if self._is_binary():
            self._non_sequential = addr < self._logical_address
            if self._non_sequential:
                logger.debug(
                    f"Origin ${addr:04X} below ${self._logical_address:04X}, "
                    f"object code is non-sequential"
                )
            if self._before_load_address():
                self._physical_cursor = addr
        else:
            logger.debug(f"Origin ${addr:04X}")
        self._logical_address = addr

    def write(self, data: bytes | bytearray | Iterable[int]) -> None:
        """
        Emit bytes at the current logical address.

        Args:
            data: Bytes to write; an empty sequence does nothing

        Raises:
            ValueError: If an element is not a byte value
        """
        self._check_open()
        data = bytes(data)
        if not data:
            return
        if self._is_binary():
            self._write_binary(data)
        else:
            self._write_hex(data)

    def skip(self, count: int) -> None:
        """
        Advance the logical address without writing anything.

        Binary formats keep the address frozen while non-sequential.

        Args:
            count: Number of addresses to skip
        """
        self._check_open()
        if count == 0:
            return
        if self._is_binary() and self._non_sequential:
            return
        self._advance(count)

    def fill_value(self, count: int, value: int) -> None:
        """
        Emit count copies of one byte value.

        Args:
            count: Number of bytes
            value: Byte value (only the low 8 bits are used)
        """
        self._check_open()
        if count == 0:
            return
        data = bytes([value & 0xFF]) * count
        if self._is_binary():
            self._write_binary(data)
        else:
            self._write_hex(data)

    def flush(self) -> None:
        """
        Write out the pending hex record, if any.

        The next record always starts at the current logical address.
        Binary formats have nothing to flush.
        """
        self._check_open()
        if self._is_binary():
            return
        self._flush_record()

    def end(self, start_address: int = 0) -> None:
        """
        Finalize the object file.

        Args:
            start_address: Entry point written into the hex end-of-file
                record (ignored by the binary formats)

        Raises:
            EmitterStateError: If the file was already finalized
        """
        self._check_open()
        if self._is_binary():
            if self.config.fill_gaps and not self._before_load_address():
                self._fill_to_logical()
        else:
            self._flush_record()
            start_address &= ADDRESS_MASK
            self._write_text(encode_record(start_address, RecordType.END_OF_FILE))
            logger.debug(f"End-of-file record, start address ${start_address:04X}")
        self._finished = True

    # =========================================================================
    # Binary Formats
    # =========================================================================

    def _write_binary(self, data: bytes) -> None:
        if self._non_sequential:
            self._report(EmitErrorKind.NON_SEQUENTIAL_WRITE)
            return

        if self._before_load_address():
            self._report(EmitErrorKind.WRITE_BEFORE_ORIGIN)
        else:
            self._fill_to_logical()
            self._stream.write(data)
            self._physical_cursor = (self._physical_cursor + len(data)) & ADDRESS_MASK
        self._advance(len(data))

    def _fill_to_logical(self) -> None:
        gap = self._logical_address - self._physical_cursor
        if gap > 0:
            self._stream.write(bytes([FILL_BYTE]) * gap)
            self._physical_cursor = self._logical_address

    def _before_load_address(self) -> bool:
        return (
            self.config.load_address_set
            and self._physical_cursor < self.config.load_address
        )

    # =========================================================================
    # Hex Records
    # =========================================================================

    def _write_hex(self, data: bytes) -> None:
        if self._record.next_address != self._logical_address:
            self._flush_record()
        for byte in data:
            if self._record.is_full():
                self._flush_record()
            self._record.append(byte)
            self._advance(1)

    def _flush_record(self) -> None:
        address = self._record.address
        payload = self._record.take_and_clear(self._logical_address)
        if payload:
            self._write_text(encode_record(address, RecordType.DATA, payload))
            logger.debug(f"Data record ${address:04X}, {len(payload)} bytes")

    def _write_text(self, record: str) -> None:
        self._stream.write(record.encode("ascii"))

    # =========================================================================
    # Helpers
    # =========================================================================

    def _is_binary(self) -> bool:
        fmt = self.config.format
        if not isinstance(fmt, ObjectFormat):
            raise InvalidFormatError(fmt)
        return fmt.is_binary

    def _advance(self, count: int) -> None:
        self._logical_address = (self._logical_address + count) & ADDRESS_MASK

    def _report(self, kind: EmitErrorKind) -> None:
        logger.warning(f"{kind.message} at ${self._logical_address:04X}")
        self.error_sink(kind)

    def _check_open(self) -> None:
        if self._finished:
            raise EmitterStateError("object file already finalized")


# =============================================================================
# Convenience Functions
# =============================================================================

def emit_image(
    data: bytes,
    config: Optional[EmitterConfig] = None,
    origin: int = 0,
    start_address: Optional[int] = None,
    error_sink: Optional[ErrorSink] = None,
) -> bytes:
    """
    Emit one contiguous block of code as a complete object file.

    Args:
        data: Code bytes
        config: Emitter settings
        origin: Address of the first byte
        start_address: Entry point for the hex end-of-file record
            (default: origin)
        error_sink: Receives reported error kinds

    Returns:
        The object file contents
    """
    out = io.BytesIO()
    emitter = ObjectEmitter(out, config, error_sink=error_sink)
    emitter.begin()
    emitter.set_origin(origin)
    emitter.write(data)
    emitter.end(origin if start_address is None else start_address)
    return out.getvalue()
