import logging
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from application.ports.byte_sink_port import IByteSink
from application.ports.byte_source_port import IByteSource
from extractor.errors import ErrorReason, InvalidArgumentError
from extractor.segment import downmix_to_mono, extract_loudest_window
from extractor.wav_decoder import decode_wav
from extractor.wav_encoder import encode_wav
from extractor.wav_format import WavMetadata
from infrastructure.io.file_byte_sink import FileByteSink
from infrastructure.io.file_byte_source import FileByteSource

logger = logging.getLogger("extract_loudest")

STATUS_SAVED: str = "saved"
STATUS_SKIPPED: str = "skipped"


@dataclass
class TrimOutcome:
    """Result of trimming one recording."""
    status: str                       # saved | skipped
    average_volume: float
    metadata: WavMetadata
    start_frame: int = 0
    frame_count: int = 0
    wav_bytes: Optional[bytes] = None

    @property
    def saved(self) -> bool:
        return self.status == STATUS_SAVED


def trim_to_loudest_segment(
    wav_data          : bytes,
    desired_length_ms : int,
    min_volume        : float,
) -> TrimOutcome:
    """
    In-memory pipeline: decode → downmix → loudest window → gate → encode.

    Args:
        wav_data:          Bytes of a 16-bit PCM WAV file.
        desired_length_ms: Length of the clip to cut, in milliseconds.
        min_volume:        Minimum average absolute sample value of the clip;
                           quieter clips are skipped instead of encoded.

    Returns:
        TrimOutcome with status "saved" and the mono clip's WAV bytes, or
        status "skipped" and no bytes when the clip is too quiet.

    Raises:
        InvalidArgumentError: the input is not a usable WAV file, or the
            requested length is zero samples at the file's sample rate.
    """
    samples: np.ndarray
    metadata: WavMetadata
    samples, metadata = decode_wav(wav_data)

    if metadata.channel_count > 1:
        samples = downmix_to_mono(samples, metadata.channel_count)

    desired_samples: int = (desired_length_ms * metadata.sample_rate) // 1000
    if desired_samples <= 0:
        raise InvalidArgumentError(
            ErrorReason.EMPTY_WINDOW,
            f"{desired_length_ms} ms is zero samples at {metadata.sample_rate} Hz",
        )

    start: int
    clip: np.ndarray
    start, clip = extract_loudest_window(samples, desired_samples)

    total_volume: float = float(np.abs(clip, dtype=np.float64).sum())
    average_volume: float = total_volume / desired_samples

    if average_volume < min_volume:
        return TrimOutcome(
            status=STATUS_SKIPPED,
            average_volume=average_volume,
            metadata=metadata,
            start_frame=start,
            frame_count=len(clip),
        )

    wav_bytes: bytes = encode_wav(clip, metadata.sample_rate, 1)
    return TrimOutcome(
        status=STATUS_SAVED,
        average_volume=average_volume,
        metadata=metadata,
        start_frame=start,
        frame_count=len(clip),
        wav_bytes=wav_bytes,
    )


def trim_file(
    input_path        : str,
    output_path       : str,
    desired_length_ms : int = 1000,
    min_volume        : float = 0.004,
    source            : Optional[IByteSource] = None,
    sink              : Optional[IByteSink] = None,
    progress_callback : Optional[Callable[[int, int, str], None]] = None,
) -> TrimOutcome:
    """
    Trim one file on disk: read → trim → write (only when saved).

    Args:
        input_path:        Source WAV file.
        output_path:       Destination for the trimmed mono clip.
        desired_length_ms: Clip length in milliseconds.
        min_volume:        Average-volume gate, see trim_to_loudest_segment.
        source:            Byte source; defaults to FileByteSource.
        sink:              Byte sink; defaults to FileByteSink.
        progress_callback: Optional callback (step_idx, total_steps, step_name).
    """
    source = source or FileByteSource()
    sink = sink or FileByteSink()

    steps = [
        "Reading input file",
        "Finding loudest segment",
        "Writing output file",
    ]
    total_steps = len(steps)

    def _report(step_idx: int) -> None:
        if progress_callback:
            progress_callback(step_idx, total_steps, steps[step_idx])

    _report(0)
    wav_data: bytes = source.read_bytes(input_path)

    _report(1)
    outcome: TrimOutcome = trim_to_loudest_segment(wav_data, desired_length_ms, min_volume)

    if outcome.saved:
        _report(2)
        sink.write_bytes(output_path, outcome.wav_bytes)
        logger.debug("saved %s (%d frames from %d)", output_path, outcome.frame_count, outcome.start_frame)
    return outcome
