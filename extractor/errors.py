# extractor/errors.py
# Error type raised by the WAV codec, the segment finder and the trim pipeline.

from enum import Enum


class ErrorReason(Enum):
    """What exactly was wrong with the input."""

    TRUNCATED = "truncated"
    HEADER_MISMATCH = "header_mismatch"
    FMT_CHUNK_SIZE = "fmt_chunk_size"
    AUDIO_FORMAT = "audio_format"
    BITS_PER_SAMPLE = "bits_per_sample"
    BYTES_PER_FRAME = "bytes_per_frame"
    BYTES_PER_SECOND = "bytes_per_second"
    CHANNEL_COUNT = "channel_count"
    SAMPLE_RATE = "sample_rate"
    DUPLICATE_DATA = "duplicate_data"
    MISSING_DATA = "missing_data"
    EMPTY_INPUT = "empty_input"
    PARTIAL_FRAME = "partial_frame"
    FILE_TOO_LARGE = "file_too_large"
    EMPTY_WINDOW = "empty_window"


class InvalidArgumentError(ValueError):
    """
    Malformed or unsupported input.

    Every failure carries a ``reason`` so callers can tell a wrong PCM format
    from a wrong bit depth or from inconsistent byte counts without parsing
    the message.
    """

    def __init__(self, reason: ErrorReason, message: str) -> None:
        super().__init__(message)
        self.reason: ErrorReason = reason
        self.message: str = message

    def __str__(self) -> str:
        return f"{self.message} [{self.reason.value}]"
