# extractor/chunk_reader.py
# Bounds-checked cursor over a RIFF byte buffer.
# Every read made while parsing a WAV file goes through this class.

import struct

import numpy as np

from extractor.errors import ErrorReason, InvalidArgumentError

UINT16: struct.Struct = struct.Struct("<H")
UINT32: struct.Struct = struct.Struct("<I")
INT16: struct.Struct = struct.Struct("<h")

# Explicit little-endian int16, independent of host byte order
INT16_LE: np.dtype = np.dtype("<i2")


class ChunkReader:
    """
    Sequential reader over an in-memory byte buffer.

    Reads advance ``offset`` only when they succeed. A read that would run
    past the end of the buffer raises ``InvalidArgumentError`` with reason
    ``TRUNCATED`` and leaves the cursor untouched.
    """

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self.data: bytes = data
        self.length: int = len(data)
        self.offset: int = offset

    @property
    def remaining(self) -> int:
        return max(0, self.length - self.offset)

    @property
    def at_end(self) -> bool:
        return self.offset >= self.length

    # ── Internal ─────────────────────────────────────────────────

    def _take(self, size: int, what: str) -> bytes:
        new_offset: int = self.offset + size
        if new_offset > self.length:
            raise InvalidArgumentError(
                ErrorReason.TRUNCATED,
                f"Data too short when trying to read {what}: "
                f"need {size} bytes at offset {self.offset}, "
                f"only {self.remaining} left",
            )
        chunk: bytes = bytes(self.data[self.offset:new_offset])
        self.offset = new_offset
        return chunk

    # ── Reads ────────────────────────────────────────────────────

    def expect_text(self, expected: str) -> None:
        """Consume ``expected`` literally or fail without moving the cursor."""
        size: int = len(expected)
        if self.offset + size > self.length:
            raise InvalidArgumentError(
                ErrorReason.TRUNCATED,
                f"Data too short when trying to read {expected!r}",
            )
        found: str = bytes(self.data[self.offset:self.offset + size]).decode("latin-1")
        if found != expected:
            raise InvalidArgumentError(
                ErrorReason.HEADER_MISMATCH,
                f"Header mismatch: expected {expected!r} but found {found!r}",
            )
        self.offset += size

    def read_value(self, fmt: struct.Struct) -> int:
        """Read one fixed-width little-endian integer described by ``fmt``."""
        raw: bytes = self._take(fmt.size, "value")
        return fmt.unpack(raw)[0]

    def read_uint16(self) -> int:
        return self.read_value(UINT16)

    def read_uint32(self) -> int:
        return self.read_value(UINT32)

    def read_fixed_string(self, length: int) -> str:
        """Read exactly ``length`` raw bytes as text (one char per byte)."""
        return self._take(length, "string").decode("latin-1")

    def read_int16_array(self, count: int) -> np.ndarray:
        """Read ``count`` consecutive little-endian int16 values."""
        raw: bytes = self._take(count * INT16.size, f"{count} int16 samples")
        return np.frombuffer(raw, dtype=INT16_LE)

    def skip(self, size: int) -> None:
        # May step past the end; callers stop on at_end.
        self.offset += size
