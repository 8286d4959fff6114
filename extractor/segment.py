# extractor/segment.py
# Loudest-window search and channel downmix.

from typing import Tuple

import numpy as np

from extractor.errors import ErrorReason, InvalidArgumentError


def downmix_to_mono(samples: np.ndarray, channel_count: int) -> np.ndarray:
    """
    Average the channels of every frame into one mono sample.

    Args:
        samples:       Float samples interleaved by channel.
        channel_count: Channels per frame.

    Returns:
        float32 array with one sample per complete frame.
    """
    if channel_count <= 1:
        return samples
    frame_count: int = len(samples) // channel_count
    frames: np.ndarray = np.asarray(samples[: frame_count * channel_count]).reshape(
        frame_count, channel_count
    )
    return frames.mean(axis=1, dtype=np.float64).astype(np.float32)


def find_loudest_window(samples: np.ndarray, window_length: int) -> int:
    """
    Return the start of the ``window_length`` span with the largest sum of
    absolute sample values.

    The sum is kept as a running total: each step removes the sample leaving
    the window and adds the one entering it, so the whole scan is O(n). Only a
    strictly larger sum replaces the best so far, which makes the earliest of
    several equally loud windows the answer.

    If the window is at least as long as the buffer the whole buffer is the
    answer and 0 is returned.
    """
    sample_total: int = len(samples)
    if window_length >= sample_total:
        return 0
    if window_length <= 0:
        raise InvalidArgumentError(
            ErrorReason.EMPTY_WINDOW,
            f"window_length must be positive, got {window_length}",
        )

    volume: np.ndarray = np.abs(np.asarray(samples, dtype=np.float64))

    # running[k] is the sum over [k, k + window_length)
    running: np.ndarray = np.empty(sample_total - window_length + 1, dtype=np.float64)
    running[0] = volume[:window_length].sum()
    running[1:] = volume[window_length:] - volume[:-window_length]
    np.cumsum(running, out=running)

    # argmax picks the first maximum, same as a strict > update
    return int(np.argmax(running))


def extract_loudest_window(samples: np.ndarray, window_length: int) -> Tuple[int, np.ndarray]:
    """Return (start, slice) of the loudest window; see find_loudest_window."""
    start: int = find_loudest_window(samples, window_length)
    return start, samples[start:start + window_length]
