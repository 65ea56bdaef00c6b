"""
Object Emitter Error Hierarchy
==============================

This module defines the exceptions and the recoverable error conditions
used by the object emitter.

Exception Hierarchy
-------------------
ObjEmitError (base)
├── ConfigurationError - invalid emitter configuration
│   └── InvalidFormatError - unknown output format selector (fatal)
├── EmitterStateError - operation called in the wrong lifecycle state
└── HexRecordError - malformed hex record when decoding

Recoverable Conditions
----------------------
Two address-discipline conditions are NOT raised. They are reported by kind
through an error sink and emission continues:

- NON_SEQUENTIAL_WRITE: object code written after the logical address
  moved backwards in a sequential binary format
- WRITE_BEFORE_ORIGIN: object code written before the configured load
  address was reached

The default sink is ErrorCollector, which records every report so the
caller can decide afterwards whether the run failed.
"""

from enum import Enum
from typing import Callable, Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ObjEmitError(Exception):
    """
    Base exception for all object emitter errors.

    Callers can catch every emitter-related exception with one clause:

        try:
            emitter.end()
        except ObjEmitError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigurationError(ObjEmitError):
    """
    Invalid emitter configuration.

    Raised when an EmitterConfig value is out of range, for example a hex
    record length of zero or a load address above $FFFF.
    """
    pass


class InvalidFormatError(ConfigurationError):
    """
    Output format selector did not match any known format.

    This is fatal: the write discipline is undefined for an unknown format,
    so the run must stop before anything is written.

    Attributes:
        selector: The value that failed to match
    """

    def __init__(self, selector: object):
        self.selector = selector
        super().__init__(f"invalid object file format: {selector!r}")


# =============================================================================
# Runtime Exceptions
# =============================================================================

class EmitterStateError(ObjEmitError):
    """
    Emitter operation called after the output was finalized.

    end() closes the object file logically; any further write, skip,
    origin change or a second end() is a programming error in the driver.
    """
    pass


class HexRecordError(ObjEmitError):
    """
    Malformed hex record.

    Raised by the hex record decoder for a missing start marker, invalid
    hex digits, a byte count that does not match the payload, or a
    checksum that does not make the record sum to zero.

    Attributes:
        line: The offending record text
        reason: What was wrong with it
    """

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"bad hex record {line!r}: {reason}")


# =============================================================================
# Recoverable Error Conditions
# =============================================================================

class EmitErrorKind(Enum):
    """
    Address-discipline conditions reported through the error sink.

    The value of each member is the message the assembler prints for it.
    """
    NON_SEQUENTIAL_WRITE = "non-sequential object code"
    WRITE_BEFORE_ORIGIN = "object code before ORG"

    @property
    def message(self) -> str:
        return self.value


# Anything callable with an EmitErrorKind can act as a sink
ErrorSink = Callable[[EmitErrorKind], None]


class ErrorCollector:
    """
    Collects reported error conditions for batch reporting.

    The emitter calls the collector once per occurrence and keeps going,
    so a single run can surface every misplaced write.

    Example:
        collector = ErrorCollector()
        emitter = ObjectEmitter(stream, config, error_sink=collector)
        ...
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: Optional[int] = None):
        """
        Initialize the error collector.

        Args:
            max_errors: Stop recording after this many reports (None: no limit).
                The total count keeps increasing.
        """
        self.errors: list[EmitErrorKind] = []
        self.max_errors = max_errors
        self._total = 0

    def __call__(self, kind: EmitErrorKind) -> None:
        self.add(kind)

    def add(self, kind: EmitErrorKind) -> None:
        """Record one occurrence of an error condition."""
        self._total += 1
        if self.max_errors is None or len(self.errors) < self.max_errors:
            self.errors.append(kind)

    def clear(self) -> None:
        """Forget all recorded errors."""
        self.errors.clear()
        self._total = 0

    def has_errors(self) -> bool:
        """Return True if any condition has been reported."""
        return self._total > 0

    def error_count(self) -> int:
        """Return the number of reports, including any beyond max_errors."""
        return self._total

    def count(self, kind: EmitErrorKind) -> int:
        """Return how many recorded reports are of the given kind."""
        return sum(1 for error in self.errors if error is kind)

    def report(self) -> str:
        """
        Format all recorded errors for display.

        Returns:
            One "error: <message>" line per report, then a summary line
        """
        lines = [f"error: {kind.message}" for kind in self.errors]

        hidden = self._total - len(self.errors)
        if hidden > 0:
            lines.append(f"... {hidden} more not shown")

        error_word = "error" if self._total == 1 else "errors"
        lines.append(f"\n{self._total} {error_word}")

        return "\n".join(lines)
