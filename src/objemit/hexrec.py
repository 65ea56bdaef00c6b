"""
Intel HEX Records
=================

This module encodes, buffers and decodes Intel HEX records.

Record Layout
-------------
Each record is one ASCII line:

    :CCAAAATTDD...DDSS

- CC: number of data bytes
- AAAA: starting address, big-endian
- TT: record type (00 data, 01 end-of-file)
- DD: data bytes
- SS: checksum

Every field is two uppercase hex digits per byte.

Checksum
--------
The checksum is the two's complement of the low byte of the sum of the
count, both address bytes, the type and every data byte. Adding all bytes
of a valid record, checksum included, therefore gives 0 modulo 256.

Example:
    >>> encode_record(0x0000, RecordType.END_OF_FILE)
    ':00000001FF\\n'
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable

from objemit.errors import HexRecordError


class RecordType(IntEnum):
    """Intel HEX record types produced by the emitter."""
    DATA = 0x00
    END_OF_FILE = 0x01


START_MARKER = ":"


def hex_checksum(count: int, address: int, record_type: int, payload: Iterable[int] = ()) -> int:
    """
    Calculate the checksum of one hex record.

    Args:
        count: Byte count field
        address: 16-bit starting address
        record_type: Record type field
        payload: Data bytes

    Returns:
        Checksum byte (0x00 - 0xFF)

    Example:
        >>> hex_checksum(2, 0x0100, RecordType.DATA, [0x3E, 0x41])
        126
    """
    total = (count & 0xFF) + ((address >> 8) & 0xFF) + (address & 0xFF) + (record_type & 0xFF)
    for byte in payload:
        total += byte & 0xFF
    return -total & 0xFF


def encode_record(address: int, record_type: int, payload: bytes = b"") -> str:
    """
    Serialize one hex record, including its line terminator.

    Args:
        address: 16-bit starting address
        record_type: Record type field
        payload: Data bytes (at most 255)

    Returns:
        The record as text, e.g. ":020000000102FB\\n"
    """
    if len(payload) > 0xFF:
        raise ValueError(f"hex record payload too long: {len(payload)} bytes")

    address &= 0xFFFF
    count = len(payload)
    fields = bytes([count, address >> 8, address & 0xFF, record_type & 0xFF]) + bytes(payload)
    checksum = hex_checksum(count, address, record_type, payload)
    return f"{START_MARKER}{fields.hex().upper()}{checksum:02X}\n"


# =============================================================================
# Record Buffer
# =============================================================================

class HexRecordBuffer:
    """
    Accumulates the data bytes of one hex record.

    The buffer knows the address its first byte belongs to and its
    capacity, but nothing about where records are written. The emitter
    decides when to take the contents and encode them.

    Attributes:
        address: Address of the first buffered byte
        capacity: Maximum number of bytes in one record
    """

    def __init__(self, capacity: int, address: int = 0):
        if capacity < 1:
            raise ValueError(f"record buffer capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.address = address & 0xFFFF
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    @property
    def next_address(self) -> int:
        """Address the next appended byte would have (not wrapped)."""
        return self.address + len(self._data)

    def append(self, byte: int) -> None:
        if self.is_full():
            raise OverflowError("hex record buffer is full")
        self._data.append(byte & 0xFF)

    def is_full(self) -> bool:
        return len(self._data) >= self.capacity

    def is_empty(self) -> bool:
        return not self._data

    def take_and_clear(self, next_address: int) -> bytes:
        """
        Return the buffered bytes and restart the buffer.

        Args:
            next_address: Address the next record will start at

        Returns:
            The buffered bytes (possibly empty)
        """
        data = bytes(self._data)
        self._data.clear()
        self.address = next_address & 0xFFFF
        return data


# =============================================================================
# Decoding
# =============================================================================

@dataclass(frozen=True)
class HexRecord:
    """
    One decoded hex record.

    Attributes:
        address: Starting address
        record_type: Record type field
        payload: Data bytes
        checksum: Checksum byte as stored
    """
    address: int
    record_type: int
    payload: bytes
    checksum: int

    @property
    def is_eof(self) -> bool:
        return self.record_type == RecordType.END_OF_FILE


def decode_record(line: str) -> HexRecord:
    """
    Parse and verify one hex record.

    Args:
        line: Record text, with or without its line terminator

    Returns:
        The decoded record

    Raises:
        HexRecordError: If the record is malformed or its checksum is wrong
    """
    text = line.strip()
    if not text.startswith(START_MARKER):
        raise HexRecordError(line, "missing start marker")

    digits = text[1:]
    if len(digits) % 2 != 0:
        raise HexRecordError(line, "odd number of hex digits")
    try:
        raw = bytes.fromhex(digits)
    except ValueError:
        raise HexRecordError(line, "invalid hex digits") from None

    if len(raw) < 5:
        raise HexRecordError(line, "record too short")

    count = raw[0]
    if len(raw) != count + 5:
        raise HexRecordError(line, f"byte count {count} does not match {len(raw) - 5} data bytes")

    if sum(raw) & 0xFF != 0:
        raise HexRecordError(line, "checksum mismatch")

    return HexRecord(
        address=(raw[1] << 8) | raw[2],
        record_type=raw[3],
        payload=raw[4:-1],
        checksum=raw[-1],
    )


def read_hex_records(text: str) -> list[HexRecord]:
    """Decode every non-blank line of a hex file."""
    return [decode_record(line) for line in text.splitlines() if line.strip()]


def hex_to_image(records: Iterable[HexRecord]) -> dict[int, int]:
    """
    Collect the data bytes of a record sequence by address.

    Reading stops at the first end-of-file record. Later records for the
    same address overwrite earlier ones.

    Returns:
        Mapping of address to byte value
    """
    image: dict[int, int] = {}
    for record in records:
        if record.is_eof:
            break
        if record.record_type != RecordType.DATA:
            continue
        for offset, byte in enumerate(record.payload):
            image[(record.address + offset) & 0xFFFF] = byte
    return image
