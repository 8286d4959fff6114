# extractor/wav_format.py
# Shared WAV constants, metadata record and sample conversions.

from dataclasses import dataclass

import numpy as np

RIFF_CHUNK_ID: str = "RIFF"
RIFF_TYPE: str = "WAVE"
FORMAT_CHUNK_ID: str = "fmt "
DATA_CHUNK_ID: str = "data"

FORMAT_CHUNK_SIZE: int = 16
FORMAT_CHUNK_SIZE_EXTENDED: int = 18
COMPRESSION_CODE_PCM: int = 1
BITS_PER_SAMPLE: int = 16
BYTES_PER_SAMPLE: int = BITS_PER_SAMPLE // 8

# RIFF (12) + fmt (24) + data prefix (8)
HEADER_SIZE: int = 44

UINT16_MAX: int = 0xFFFF
UINT32_MAX: int = 0xFFFFFFFF
INT16_MIN: int = -32768
INT16_MAX: int = 32767

SAMPLE_SCALE: float = 32768.0


@dataclass(frozen=True)
class WavMetadata:
    """Format description of a decoded 16-bit PCM file."""
    sample_rate: int
    channel_count: int
    frame_count: int = 0
    bits_per_sample: int = BITS_PER_SAMPLE

    @property
    def bytes_per_frame(self) -> int:
        return self.channel_count * BYTES_PER_SAMPLE

    @property
    def bytes_per_second(self) -> int:
        return self.sample_rate * self.bytes_per_frame


def int16_to_float(values: np.ndarray) -> np.ndarray:
    """Map int16 PCM values to float32 in [-1.0, 1.0)."""
    return values.astype(np.float32) / np.float32(SAMPLE_SCALE)


def float_to_int16(samples: np.ndarray) -> np.ndarray:
    """
    Saturating float -> int16 conversion.

    ``round(sample * 32768)`` with halves rounded away from zero, then clamped
    to the int16 range so out-of-range input clips instead of wrapping.
    """
    scaled: np.ndarray = np.asarray(samples, dtype=np.float64) * SAMPLE_SCALE
    scaled = np.nan_to_num(scaled, nan=0.0)
    rounded: np.ndarray = np.sign(scaled) * np.floor(np.abs(scaled) + 0.5)
    clipped: np.ndarray = np.clip(rounded, INT16_MIN, INT16_MAX)
    return clipped.astype("<i2")
