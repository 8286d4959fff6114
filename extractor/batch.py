# extractor/batch.py
# Runs the trim pipeline over many files. Files never affect each other:
# a failure is recorded on its own result and the batch moves on.

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from application.dto.batch_dto import BatchTrimResultDTO, TrimRequestDTO, TrimResultDTO
from application.ports.byte_sink_port import IByteSink
from application.ports.byte_source_port import IByteSource
from extractor.core import TrimOutcome, trim_file

logger = logging.getLogger("extract_loudest")


def _run_one(
    request: TrimRequestDTO,
    desired_length_ms: int,
    min_volume: float,
    source: Optional[IByteSource],
    sink: Optional[IByteSink],
) -> TrimResultDTO:
    result = TrimResultDTO(input_path=request.input_path, output_path=request.output_path)
    try:
        outcome: TrimOutcome = trim_file(
            input_path=request.input_path,
            output_path=request.output_path,
            desired_length_ms=desired_length_ms,
            min_volume=min_volume,
            source=source,
            sink=sink,
        )
    except Exception as e:
        result.status = "error"
        result.error = str(e)
        logger.error("Failed on '%s' => '%s': %s", request.input_path, request.output_path, e)
        return result

    result.status = outcome.status
    result.average_volume = outcome.average_volume
    if outcome.saved:
        logger.info("Saved to '%s'", request.output_path)
    else:
        logger.info(
            "Skipped '%s' as too quiet (%.6f)", request.input_path, outcome.average_volume
        )
    return result


def run_batch(
    requests          : List[TrimRequestDTO],
    desired_length_ms : int = 1000,
    min_volume        : float = 0.004,
    workers           : int = 1,
    source            : Optional[IByteSource] = None,
    sink              : Optional[IByteSink] = None,
    progress_callback : Optional[Callable[[TrimResultDTO], None]] = None,
) -> BatchTrimResultDTO:
    """
    Trim every request and collect the outcomes.

    Args:
        requests:          Input/output path pairs.
        desired_length_ms: Clip length in milliseconds.
        min_volume:        Average-volume gate.
        workers:           Number of files processed at once. 1 runs the
                           batch sequentially in the calling thread.
        source, sink:      Optional byte source/sink, shared by all files.
        progress_callback: Called once per finished file with its result.

    Returns:
        BatchTrimResultDTO with one result per request, in request order.
    """
    batch = BatchTrimResultDTO(total=len(requests))

    def _finish(result: TrimResultDTO) -> TrimResultDTO:
        if progress_callback:
            progress_callback(result)
        return result

    if workers <= 1:
        for request in requests:
            batch.results.append(
                _finish(_run_one(request, desired_length_ms, min_volume, source, sink))
            )
        return batch

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(_run_one, request, desired_length_ms, min_volume, source, sink)
            for request in requests
        ]
        for future in futures:
            batch.results.append(_finish(future.result()))
    return batch
