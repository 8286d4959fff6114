# extractor/printer.py
# Centralized CLI output: one line per file plus a batch summary.

import os
import sys
from typing import Optional

from application.dto.batch_dto import BatchTrimResultDTO, TrimResultDTO


class OutputPrinter:
    """
    Output formatter for the extract-loudest CLI.

    - Saved and skipped files go to stdout, failures to stderr.
    - Colour is optional and disabled by ``NO_COLOR``.
    - Quiet mode hides everything except failures.
    """

    SYMBOLS : dict[str, str] = {
        "saved"   : "✅",
        "skipped" : "⏭️ ",
        "error"   : "❌",
        "info"    : "ℹ️ ",
        "hint"    : "→",
    }

    COLORS : dict[str, str] = {
        "green"  : "32",
        "red"    : "31",
        "yellow" : "33",
        "cyan"   : "36",
        "dim"    : "90",
    }

    def __init__(self, quiet : bool = False, no_color : bool = False) -> None:
        self.quiet    : bool = quiet
        self.no_color : bool = no_color or bool(os.environ.get("NO_COLOR", ""))

    def _colorize(self, text : str, code : str) -> str:
        """Apply ANSI color code if color output is enabled."""
        if self.no_color:
            return text
        return f"\033[{code}m{text}\033[0m"

    # ── Per-file lines ───────────────────────────────────────────

    def saved(self, output_path : str) -> None:
        if self.quiet:
            return
        symbol : str = self._colorize(self.SYMBOLS["saved"], self.COLORS["green"])
        print(f"{symbol}  Saved to '{output_path}'")

    def skipped(self, input_path : str, average_volume : float) -> None:
        if self.quiet:
            return
        symbol : str = self._colorize(self.SYMBOLS["skipped"], self.COLORS["yellow"])
        volume : str = self._colorize(f"({average_volume:.6f})", self.COLORS["dim"])
        print(f"{symbol} Skipped '{input_path}' as too quiet {volume}")

    def error(self, message : str, hint : Optional[str] = None) -> None:
        """Print an error to stderr with an optional fix hint. Never silenced."""
        symbol : str = self._colorize(self.SYMBOLS["error"], self.COLORS["red"])
        msg    : str = self._colorize(message, self.COLORS["red"])
        print(f"{symbol}  {msg}", file=sys.stderr)
        if hint:
            h : str = self._colorize(f"{self.SYMBOLS['hint']} {hint}", self.COLORS["cyan"])
            print(f"    {h}", file=sys.stderr)

    def info(self, message : str) -> None:
        if self.quiet:
            return
        symbol : str = self._colorize(self.SYMBOLS["info"], self.COLORS["cyan"])
        print(f"{symbol} {message}")

    def result(self, result : TrimResultDTO) -> None:
        """Dispatch one batch result to the matching line style."""
        if result.status == "saved":
            self.saved(result.output_path)
        elif result.status == "skipped":
            self.skipped(result.input_path, result.average_volume or 0.0)
        else:
            self.error(
                f"Failed on '{result.input_path}' => '{result.output_path}': {result.error}"
            )

    # ── Summary ──────────────────────────────────────────────────

    def summary(self, batch : BatchTrimResultDTO, elapsed : float) -> None:
        if self.quiet:
            return
        counts : str = (
            f"{batch.saved} saved, {batch.skipped} skipped, {batch.failed} failed"
        )
        label : str = self._colorize(f"{batch.total} files", self.COLORS["green"])
        print(f"\n{label}: {counts} in {elapsed:.1f}s")
