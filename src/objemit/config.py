"""
Emitter Configuration
=====================

The assembler's option parser decides the output format, load address,
hex record length and gap filling. This module holds those settings in a
single dataclass that the emitter validates on construction.
"""

from dataclasses import dataclass
from typing import Optional

from objemit.errors import ConfigurationError, InvalidFormatError
from objemit.formats import ObjectFormat


# Capacity of one hex record buffer in bytes
MAX_HEX_RECORD_LENGTH = 32

# Address space of the target CPU
ADDRESS_MASK = 0xFFFF


@dataclass(frozen=True)
class EmitterConfig:
    """
    Settings for one object emitter.

    Instances are immutable; an emitter keeps its settings for the whole run.

    Attributes:
        format: Output format
        load_address: Address the loader places the image at. When set,
            binary writes below it are suppressed and LOADER_BINARY writes
            it into the header.
        hex_record_length: Maximum data bytes per hex record
        fill_gaps: Pad the binary image up to the final logical address
            when the output is finalized
    """
    format: ObjectFormat = ObjectFormat.RAW_BINARY
    load_address: Optional[int] = None
    hex_record_length: int = MAX_HEX_RECORD_LENGTH
    fill_gaps: bool = True

    @property
    def load_address_set(self) -> bool:
        return self.load_address is not None

    def validate(self) -> None:
        """
        Check every setting.

        Raises:
            InvalidFormatError: If format is not an ObjectFormat
            ConfigurationError: If a numeric setting is out of range
        """
        if not isinstance(self.format, ObjectFormat):
            raise InvalidFormatError(self.format)

        if not 1 <= self.hex_record_length <= MAX_HEX_RECORD_LENGTH:
            raise ConfigurationError(
                f"hex record length must be 1-{MAX_HEX_RECORD_LENGTH}, "
                f"got {self.hex_record_length}"
            )

        if self.load_address is not None and not 0 <= self.load_address <= ADDRESS_MASK:
            raise ConfigurationError(
                f"load address out of range: {self.load_address}"
            )
