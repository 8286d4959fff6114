# extractor/wav_encoder.py
# Writes float samples as a 16-bit little-endian PCM WAV file.

import struct
from typing import Sequence, Union

import numpy as np

from extractor.errors import ErrorReason, InvalidArgumentError
from extractor.wav_format import (
    BITS_PER_SAMPLE,
    BYTES_PER_SAMPLE,
    COMPRESSION_CODE_PCM,
    DATA_CHUNK_ID,
    FORMAT_CHUNK_ID,
    FORMAT_CHUNK_SIZE,
    HEADER_SIZE,
    RIFF_CHUNK_ID,
    RIFF_TYPE,
    UINT16_MAX,
    UINT32_MAX,
    float_to_int16,
)

# id, size, type | id, size, code, channels, rate, bytes/s, bytes/frame, bits | id, size
HEADER_STRUCT: struct.Struct = struct.Struct("<4sI4s4sIHHIIHH4sI")

SampleInput = Union[np.ndarray, Sequence[float]]


def _validate_encode_args(sample_count: int, sample_rate: int, channel_count: int) -> None:
    if not (0 < sample_rate <= UINT32_MAX):
        raise InvalidArgumentError(
            ErrorReason.SAMPLE_RATE,
            f"sample_rate must be in (0, 2^32), got: {sample_rate}",
        )
    if not (0 < channel_count <= UINT16_MAX):
        raise InvalidArgumentError(
            ErrorReason.CHANNEL_COUNT,
            f"channel_count must be in (0, 2^16), got: {channel_count}",
        )
    if sample_count <= 0:
        raise InvalidArgumentError(
            ErrorReason.EMPTY_INPUT,
            "Sample count must be positive.",
        )
    if sample_count % channel_count != 0:
        raise InvalidArgumentError(
            ErrorReason.PARTIAL_FRAME,
            f"Sample count {sample_count} is not a multiple of "
            f"channel_count {channel_count}",
        )

    file_size: int = HEADER_SIZE + sample_count * BYTES_PER_SAMPLE
    if file_size > UINT32_MAX:
        raise InvalidArgumentError(
            ErrorReason.FILE_TOO_LARGE,
            f"Provided channels and frames cannot be encoded as a WAV: "
            f"{file_size} bytes exceeds the 32-bit size field",
        )
    bytes_per_frame: int = channel_count * BYTES_PER_SAMPLE
    if bytes_per_frame > UINT16_MAX or sample_rate * bytes_per_frame > UINT32_MAX:
        raise InvalidArgumentError(
            ErrorReason.FILE_TOO_LARGE,
            f"sample_rate={sample_rate} with channel_count={channel_count} "
            f"overflows the WAV byte-rate fields",
        )


def encode_wav(samples: SampleInput, sample_rate: int, channel_count: int) -> bytes:
    """
    Encode interleaved float samples as a complete WAV file.

    Args:
        samples:       Float samples, interleaved by channel. Values outside
                       [-1.0, 1.0] are clamped.
        sample_rate:   Frames per second, 1..2^32-1.
        channel_count: Channels per frame, 1..2^16-1.

    Returns:
        The file's bytes: 44-byte header followed by int16 samples.
    """
    # Checked before touching the sample data
    sample_count: int = len(samples)
    _validate_encode_args(sample_count, sample_rate, channel_count)

    bytes_per_frame: int = channel_count * BYTES_PER_SAMPLE
    data_size: int = sample_count * BYTES_PER_SAMPLE
    file_size: int = HEADER_SIZE + data_size

    header: bytes = HEADER_STRUCT.pack(
        RIFF_CHUNK_ID.encode("ascii"),
        file_size - 8,
        RIFF_TYPE.encode("ascii"),
        FORMAT_CHUNK_ID.encode("ascii"),
        FORMAT_CHUNK_SIZE,
        COMPRESSION_CODE_PCM,
        channel_count,
        sample_rate,
        sample_rate * bytes_per_frame,
        bytes_per_frame,
        BITS_PER_SAMPLE,
        DATA_CHUNK_ID.encode("ascii"),
        data_size,
    )
    pcm: bytes = float_to_int16(np.asarray(samples, dtype=np.float32)).tobytes()
    return header + pcm
