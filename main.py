#!/usr/bin/env python3
"""
Extract Loudest Section CLI
Cut the loudest fixed-length stretch out of every matching WAV recording.

Usage:
    python main.py "recordings/*.wav" trimmed
    python main.py "recordings/*/*.wav" trimmed --length-ms 1500 --min-volume 0.01
    python main.py "~/speech/yes/*.wav" out/yes --workers 8 --quiet
"""

import argparse
import logging
import sys
import time

from tqdm import tqdm

from application.dto.batch_dto import BatchTrimResultDTO, TrimResultDTO
from extractor.batch import run_batch
from extractor.printer import OutputPrinter
from extractor.utils import (
    DEFAULT_PARAMS,
    build_requests,
    ensure_output_dirs,
    expand_input_pattern,
    validate_params,
)


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="extract-loudest",
        description="Trim WAV recordings to their loudest fixed-length segment.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py "clips/*.wav" out
  python main.py "clips/*.wav" out --length-ms 1000 --min-volume 0.004

Parameter guide:
  --length-ms   1000  = one-second clips (typical for single words)
  --min-volume  0.004 = drop near-silent clips | 0 = keep everything
  --workers     1     = sequential           | N = N files at once
        """,
    )

    parser.add_argument(
        "input",
        metavar="INPUT_GLOB",
        help="Glob pattern matching the input WAV files (quote it to stop shell expansion).",
    )
    parser.add_argument(
        "output",
        metavar="OUTPUT_ROOT",
        help="Directory the trimmed files are written to, keeping their base names.",
    )

    trim_group = parser.add_argument_group("Trim Parameters")
    trim_group.add_argument(
        "--length-ms",
        "-l",
        type=int,
        default=DEFAULT_PARAMS["length_ms"],
        metavar="MS",
        help=f"Length of the extracted segment in milliseconds (default: {DEFAULT_PARAMS['length_ms']}).",
    )
    trim_group.add_argument(
        "--min-volume",
        "-m",
        type=float,
        default=DEFAULT_PARAMS["min_volume"],
        metavar="LEVEL",
        help=f"Skip clips whose average absolute sample value is below this (default: {DEFAULT_PARAMS['min_volume']}).",
    )
    trim_group.add_argument(
        "--workers",
        "-j",
        type=int,
        default=DEFAULT_PARAMS["workers"],
        metavar="N",
        help=f"Number of files processed in parallel (default: {DEFAULT_PARAMS['workers']}).",
    )

    out_group = parser.add_argument_group("Output Options")
    out_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress all output except errors.",
    )
    out_group.add_argument(
        "--no-color",
        "-n",
        action="store_true",
        help="Disable colored output (also auto-disabled when NO_COLOR env var is set).",
    )
    out_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every file's outcome as it happens.",
    )

    return parser


def main(argv=None) -> int:
    parser: argparse.ArgumentParser = build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    printer: OutputPrinter = OutputPrinter(quiet=args.quiet, no_color=args.no_color)

    try:
        validate_params(args.length_ms, args.min_volume, args.workers)
    except ValueError as exc:
        printer.error(str(exc))
        return 1

    input_paths = expand_input_pattern(args.input)
    if not input_paths:
        printer.error(
            f"No files match '{args.input}'.",
            hint="Check the pattern, and quote it so the shell does not expand it.",
        )
        return 1

    printer.info(f"Found {len(input_paths)} recordings matching '{args.input}'.")
    requests = build_requests(input_paths, args.output)
    try:
        ensure_output_dirs([r.output_path for r in requests])
    except OSError as exc:
        printer.error(f"Could not create output directory: {exc}")
        return 1

    start_time = time.time()
    try:
        batch: BatchTrimResultDTO
        if args.quiet:
            batch = run_batch(
                requests,
                desired_length_ms=args.length_ms,
                min_volume=args.min_volume,
                workers=args.workers,
            )
        else:
            with tqdm(total=len(requests), desc="Trimming", unit="file") as pbar:

                def cli_callback(result: TrimResultDTO) -> None:
                    pbar.update(1)

                batch = run_batch(
                    requests,
                    desired_length_ms=args.length_ms,
                    min_volume=args.min_volume,
                    workers=args.workers,
                    progress_callback=cli_callback,
                )
    except KeyboardInterrupt:
        printer.error("Trimming cancelled.", hint="Files already written were kept.")
        return 130

    for result in batch.results:
        printer.result(result)
    printer.summary(batch, time.time() - start_time)
    return 0


if __name__ == "__main__":
    sys.exit(main())
