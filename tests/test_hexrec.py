"""
Hex Record Unit Tests
=====================

Tests for Intel HEX record encoding, buffering and decoding.

Test Categories
---------------
1. Checksum: calculation and the zero-sum property
2. Encoding: record text layout
3. Buffer: HexRecordBuffer operations
4. Decoding: parsing, verification and image reconstruction
"""

import pytest

from objemit.errors import HexRecordError
from objemit.hexrec import (
    HexRecordBuffer,
    RecordType,
    decode_record,
    encode_record,
    hex_checksum,
    hex_to_image,
    read_hex_records,
)


# =============================================================================
# Checksum
# =============================================================================

class TestChecksum:
    """Tests for hex_checksum()."""

    def test_end_of_file_record(self):
        assert hex_checksum(0, 0x0000, RecordType.END_OF_FILE) == 0xFF

    def test_data_record(self):
        # :0300300002337A1E is the classic example record
        assert hex_checksum(3, 0x0030, RecordType.DATA, [0x02, 0x33, 0x7A]) == 0x1E

    def test_sum_is_zero(self):
        payload = bytes(range(0xF0, 0x100))
        checksum = hex_checksum(len(payload), 0xBEEF, RecordType.DATA, payload)
        total = len(payload) + 0xBE + 0xEF + RecordType.DATA + sum(payload) + checksum
        assert total % 256 == 0

    def test_zero_sum_gives_zero_checksum(self):
        assert hex_checksum(0, 0x0000, RecordType.DATA) == 0x00


# =============================================================================
# Encoding
# =============================================================================

class TestEncodeRecord:
    """Tests for encode_record()."""

    def test_data_record_layout(self):
        assert encode_record(0x0030, RecordType.DATA, b"\x02\x33\x7A") == ":0300300002337A1E\n"

    def test_end_of_file_record(self):
        assert encode_record(0x0000, RecordType.END_OF_FILE) == ":00000001FF\n"

    def test_address_big_endian(self):
        record = encode_record(0x1234, RecordType.DATA, b"\x00")
        assert record[3:7] == "1234"

    def test_hex_digits_uppercase(self):
        record = encode_record(0xABCD, RecordType.DATA, b"\xEF")
        assert record == ":01ABCD00EF98\n"

    def test_payload_too_long(self):
        with pytest.raises(ValueError):
            encode_record(0, RecordType.DATA, bytes(256))


# =============================================================================
# Record Buffer
# =============================================================================

class TestHexRecordBuffer:
    """Tests for HexRecordBuffer."""

    def test_starts_empty(self):
        buf = HexRecordBuffer(4, address=0x10)
        assert buf.is_empty()
        assert not buf.is_full()
        assert len(buf) == 0
        assert buf.next_address == 0x10

    def test_fills_to_capacity(self):
        buf = HexRecordBuffer(2)
        buf.append(0x01)
        assert not buf.is_full()
        buf.append(0x02)
        assert buf.is_full()
        with pytest.raises(OverflowError):
            buf.append(0x03)

    def test_take_and_clear(self):
        buf = HexRecordBuffer(4, address=0x100)
        buf.append(0xAA)
        buf.append(0xBB)
        assert buf.next_address == 0x102

        assert buf.take_and_clear(0x200) == b"\xAA\xBB"
        assert buf.is_empty()
        assert buf.address == 0x200
        assert buf.take_and_clear(0x300) == b""
        assert buf.address == 0x300

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            HexRecordBuffer(0)


# =============================================================================
# Decoding
# =============================================================================

class TestDecodeRecord:
    """Tests for decode_record() and friends."""

    def test_decode_data_record(self):
        record = decode_record(":0300300002337A1E\n")
        assert record.address == 0x0030
        assert record.record_type == RecordType.DATA
        assert record.payload == b"\x02\x33\x7A"
        assert record.checksum == 0x1E
        assert not record.is_eof

    def test_decode_lowercase(self):
        assert decode_record(":0300300002337a1e").payload == b"\x02\x33\x7A"

    def test_decode_eof(self):
        assert decode_record(":00000001FF").is_eof

    @pytest.mark.parametrize("line,reason", [
        ("0300300002337A1E", "start marker"),
        (":0300300002337A1", "odd number"),
        (":03003000Z2337A1E", "invalid hex"),
        (":000000", "too short"),
        (":0400300002337A1D", "byte count"),
        (":0300300002337A1F", "checksum"),
    ])
    def test_malformed(self, line, reason):
        with pytest.raises(HexRecordError, match=reason):
            decode_record(line)

    def test_read_skips_blank_lines(self):
        records = read_hex_records(":0100000001FE\n\n:00000001FF\n")
        assert len(records) == 2

    def test_image_stops_at_eof(self):
        records = read_hex_records(
            ":020010000102EB\n"
            ":00000001FF\n"
            ":0100200003DC\n"
        )
        assert hex_to_image(records) == {0x10: 0x01, 0x11: 0x02}
