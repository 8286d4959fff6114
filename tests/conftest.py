"""Pytest fixtures shared by the extractor tests."""

import struct
from typing import Callable, Optional

import numpy as np
import pytest


def _build_raw_wav(
    pcm: np.ndarray,
    sample_rate: int = 16000,
    channels: int = 1,
    fmt_size: int = 16,
    audio_format: int = 1,
    bits_per_sample: int = 16,
    bytes_per_frame: Optional[int] = None,
    bytes_per_second: Optional[int] = None,
    riff_id: bytes = b"RIFF",
    riff_type: bytes = b"WAVE",
    fmt_id: bytes = b"fmt ",
    chunks_before_data: bytes = b"",
    chunks_after_data: bytes = b"",
) -> bytes:
    """Assemble a WAV file field by field so any header value can be corrupted."""
    if bytes_per_frame is None:
        bytes_per_frame = (bits_per_sample * channels + 7) // 8
    if bytes_per_second is None:
        bytes_per_second = bytes_per_frame * sample_rate

    payload: bytes = np.asarray(pcm, dtype="<i2").tobytes()
    fmt_body: bytes = struct.pack(
        "<HHIIHH",
        audio_format, channels, sample_rate, bytes_per_second, bytes_per_frame, bits_per_sample,
    )
    if fmt_size == 18:
        fmt_body += b"\x00\x00"

    body: bytes = (
        riff_type
        + fmt_id + struct.pack("<I", fmt_size) + fmt_body
        + chunks_before_data
        + b"data" + struct.pack("<I", len(payload)) + payload
        + chunks_after_data
    )
    return riff_id + struct.pack("<I", len(body)) + body


@pytest.fixture
def build_raw_wav() -> Callable[..., bytes]:
    """Factory for hand-assembled WAV bytes."""
    return _build_raw_wav


@pytest.fixture
def sample_rate() -> int:
    """Standard sample rate."""
    return 16000


@pytest.fixture
def speech_like_audio(sample_rate: int) -> np.ndarray:
    """Two seconds of faint noise with a loud 0.5 s burst starting at 1.2 s."""
    rng = np.random.default_rng(42)
    audio: np.ndarray = ((rng.random(2 * sample_rate) * 2 - 1) * 0.001).astype(np.float32)
    start: int = int(1.2 * sample_rate)
    t: np.ndarray = np.arange(sample_rate // 2, dtype=np.float32) / sample_rate
    audio[start:start + sample_rate // 2] = 0.5 * np.sin(2 * np.pi * 440 * t)
    return audio


@pytest.fixture
def silence_audio(sample_rate: int) -> np.ndarray:
    """Two seconds of digital silence."""
    return np.zeros(2 * sample_rate, dtype=np.float32)
