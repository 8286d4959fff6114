# extractor/wav_decoder.py
# Strict decoder for 16-bit integer PCM WAV buffers.

from typing import Optional, Tuple

import numpy as np

from extractor.chunk_reader import ChunkReader
from extractor.errors import ErrorReason, InvalidArgumentError
from extractor.wav_format import (
    BITS_PER_SAMPLE,
    COMPRESSION_CODE_PCM,
    DATA_CHUNK_ID,
    FORMAT_CHUNK_ID,
    FORMAT_CHUNK_SIZE,
    FORMAT_CHUNK_SIZE_EXTENDED,
    RIFF_CHUNK_ID,
    RIFF_TYPE,
    WavMetadata,
    int16_to_float,
)


def decode_wav(data: bytes) -> Tuple[np.ndarray, WavMetadata]:
    """
    Decode a complete WAV file held in memory.

    Args:
        data: The whole file's bytes.

    Returns:
        (samples, metadata) where samples is a float32 array interleaved by
        channel and metadata describes rate, channel count and frame count.

    Raises:
        InvalidArgumentError: on the first header field or chunk that is
            truncated, malformed, or not 16-bit PCM.
    """
    reader: ChunkReader = ChunkReader(data)

    # ── RIFF / fmt header ────────────────────────────────────────
    reader.expect_text(RIFF_CHUNK_ID)
    reader.read_uint32()  # total size, not cross-checked
    reader.expect_text(RIFF_TYPE)
    reader.expect_text(FORMAT_CHUNK_ID)

    format_chunk_size: int = reader.read_uint32()
    if format_chunk_size not in (FORMAT_CHUNK_SIZE, FORMAT_CHUNK_SIZE_EXTENDED):
        raise InvalidArgumentError(
            ErrorReason.FMT_CHUNK_SIZE,
            f"Bad fmt chunk size for WAV: expected 16 or 18, but got {format_chunk_size}",
        )

    audio_format: int = reader.read_uint16()
    if audio_format != COMPRESSION_CODE_PCM:
        raise InvalidArgumentError(
            ErrorReason.AUDIO_FORMAT,
            f"Bad audio format for WAV: expected 1 (PCM), but got {audio_format}",
        )

    channel_count: int = reader.read_uint16()
    sample_rate: int = reader.read_uint32()
    bytes_per_second: int = reader.read_uint32()
    bytes_per_frame: int = reader.read_uint16()
    # bits_per_sample counts one channel, bytes_per_frame counts all of them
    bits_per_sample: int = reader.read_uint16()

    if bits_per_sample != BITS_PER_SAMPLE:
        raise InvalidArgumentError(
            ErrorReason.BITS_PER_SAMPLE,
            f"Can only read 16-bit WAV files, but received {bits_per_sample}",
        )
    if channel_count == 0:
        raise InvalidArgumentError(
            ErrorReason.CHANNEL_COUNT,
            "Bad channel count in WAV header: expected at least 1, but got 0",
        )

    expected_bytes_per_frame: int = (bits_per_sample * channel_count + 7) // 8
    if bytes_per_frame != expected_bytes_per_frame:
        raise InvalidArgumentError(
            ErrorReason.BYTES_PER_FRAME,
            f"Bad bytes per frame in WAV header: expected "
            f"{expected_bytes_per_frame} but got {bytes_per_frame}",
        )
    expected_bytes_per_second: int = bytes_per_frame * sample_rate
    if bytes_per_second != expected_bytes_per_second:
        raise InvalidArgumentError(
            ErrorReason.BYTES_PER_SECOND,
            f"Bad bytes per second in WAV header: expected "
            f"{expected_bytes_per_second} but got {bytes_per_second} "
            f"(sample_rate={sample_rate}, bytes_per_frame={bytes_per_frame})",
        )

    if format_chunk_size == FORMAT_CHUNK_SIZE_EXTENDED:
        reader.skip(2)

    # ── Chunk walk ───────────────────────────────────────────────
    samples: Optional[np.ndarray] = None
    frame_count: int = 0
    while not reader.at_end:
        chunk_id: str = reader.read_fixed_string(4)
        chunk_size: int = reader.read_uint32()
        if chunk_id != DATA_CHUNK_ID:
            reader.skip(chunk_size)
            continue

        if samples is not None:
            raise InvalidArgumentError(
                ErrorReason.DUPLICATE_DATA,
                "More than one data chunk found in WAV",
            )
        frame_count = chunk_size // bytes_per_frame
        values: np.ndarray = reader.read_int16_array(frame_count * channel_count)
        samples = int16_to_float(values)
        reader.skip(chunk_size - frame_count * bytes_per_frame)

    if samples is None:
        raise InvalidArgumentError(
            ErrorReason.MISSING_DATA,
            "No data chunk found in WAV",
        )

    metadata: WavMetadata = WavMetadata(
        sample_rate=sample_rate,
        channel_count=channel_count,
        frame_count=frame_count,
    )
    return samples, metadata
