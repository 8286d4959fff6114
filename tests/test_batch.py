import logging
import os

import numpy as np
import pytest
import soundfile as sf

from application.dto.batch_dto import BatchTrimResultDTO, TrimRequestDTO, TrimResultDTO
from extractor.batch import run_batch
from extractor.printer import OutputPrinter
from extractor.utils import (
    DEFAULT_PARAMS,
    build_requests,
    ensure_output_dirs,
    expand_input_pattern,
    get_output_path,
    validate_param_range,
    validate_params,
)
from main import main

# Test Constants
SAMPLE_RATE: int = 16000


# Helpers


def make_recording(path: str, loud: bool = True, duration: float = 1.5, sr: int = SAMPLE_RATE) -> None:
    """Write a mono PCM_16 WAV: a half-second tone burst after silence, or pure silence."""
    num_frames: int = int(sr * duration)
    audio: np.ndarray = np.zeros(num_frames, dtype=np.float32)
    if loud:
        t: np.ndarray = np.arange(sr // 2, dtype=np.float32) / sr
        audio[sr // 2: sr] = 0.5 * np.sin(2 * np.pi * 330 * t)
    sf.write(path, audio, sr, subtype="PCM_16")


@pytest.fixture
def recordings(tmp_path) -> str:
    """A directory holding two loud takes, one silent take and one broken file."""
    root: str = os.path.join(str(tmp_path), "in")
    os.makedirs(root)
    make_recording(os.path.join(root, "a_yes.wav"))
    make_recording(os.path.join(root, "b_no.wav"))
    make_recording(os.path.join(root, "c_silent.wav"), loud=False)
    with open(os.path.join(root, "d_broken.wav"), "wb") as f:
        f.write(b"RIFF\x00\x00\x00\x00WAVEjunk")
    return root


class TestRunBatch:
    """Tests for independent per-file processing."""

    def test_each_file_gets_its_own_outcome(self, recordings: str, tmp_path) -> None:
        out_root: str = os.path.join(str(tmp_path), "out")
        os.makedirs(out_root)
        requests = build_requests(expand_input_pattern(os.path.join(recordings, "*.wav")), out_root)

        batch: BatchTrimResultDTO = run_batch(requests, 1000, 0.004)

        assert [r.status for r in batch.results] == ["saved", "saved", "skipped", "error"]
        assert batch.total == 4
        assert batch.saved == 2
        assert batch.skipped == 1
        assert batch.failed == 1
        assert batch.failed_paths == [os.path.join(recordings, "d_broken.wav")]
        assert "Header mismatch" in batch.results[3].error

    def test_only_saved_files_are_written(self, recordings: str, tmp_path) -> None:
        out_root: str = os.path.join(str(tmp_path), "out")
        os.makedirs(out_root)
        requests = build_requests(expand_input_pattern(os.path.join(recordings, "*.wav")), out_root)
        run_batch(requests, 1000, 0.004)
        assert sorted(os.listdir(out_root)) == ["a_yes.wav", "b_no.wav"]

    def test_missing_file_does_not_stop_batch(self, recordings: str, tmp_path) -> None:
        out_root: str = str(tmp_path)
        requests = [
            TrimRequestDTO(os.path.join(recordings, "gone.wav"), os.path.join(out_root, "gone.wav")),
            TrimRequestDTO(os.path.join(recordings, "a_yes.wav"), os.path.join(out_root, "a_yes.wav")),
        ]
        batch: BatchTrimResultDTO = run_batch(requests)
        assert [r.status for r in batch.results] == ["error", "saved"]

    def test_parallel_workers_keep_request_order(self, recordings: str, tmp_path) -> None:
        requests = build_requests(
            expand_input_pattern(os.path.join(recordings, "*.wav")), str(tmp_path)
        )
        sequential = run_batch(requests, 1000, 0.004, workers=1)
        parallel = run_batch(requests, 1000, 0.004, workers=4)
        assert [r.status for r in parallel.results] == [r.status for r in sequential.results]
        assert [r.input_path for r in parallel.results] == [r.input_path for r in sequential.results]

    def test_progress_callback_sees_every_file(self, recordings: str, tmp_path) -> None:
        requests = build_requests(
            expand_input_pattern(os.path.join(recordings, "*.wav")), str(tmp_path)
        )
        seen: list = []
        run_batch(requests, progress_callback=lambda r: seen.append(r.status))
        assert len(seen) == 4

    def test_outcomes_are_logged(self, recordings: str, tmp_path, caplog) -> None:
        requests = build_requests(
            expand_input_pattern(os.path.join(recordings, "*.wav")), str(tmp_path)
        )
        with caplog.at_level(logging.INFO, logger="extract_loudest"):
            run_batch(requests, 1000, 0.004)
        assert "Saved to" in caplog.text
        assert "as too quiet" in caplog.text
        assert "Failed on" in caplog.text


class TestPathHelpers:
    """Tests for input expansion and output derivation."""

    def test_output_keeps_base_name(self) -> None:
        assert get_output_path("data/yes/a1.wav", "out") == os.path.join("out", "a1.wav")

    def test_nested_output_root(self) -> None:
        assert get_output_path("/x/y/z.wav", "out/yes") == os.path.join("out/yes", "z.wav")

    def test_pattern_expansion_is_sorted_and_files_only(self, tmp_path) -> None:
        for name in ("b.wav", "a.wav"):
            open(os.path.join(str(tmp_path), name), "wb").close()
        os.makedirs(os.path.join(str(tmp_path), "dir.wav"))
        result = expand_input_pattern(os.path.join(str(tmp_path), "*.wav"))
        assert [os.path.basename(p) for p in result] == ["a.wav", "b.wav"]

    def test_pattern_without_matches_is_empty(self, tmp_path) -> None:
        assert expand_input_pattern(os.path.join(str(tmp_path), "*.wav")) == []

    def test_tilde_is_expanded(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        open(os.path.join(str(tmp_path), "h.wav"), "wb").close()
        assert expand_input_pattern("~/*.wav") == [os.path.join(str(tmp_path), "h.wav")]

    def test_ensure_output_dirs_creates_parents(self, tmp_path) -> None:
        paths = [os.path.join(str(tmp_path), "o", "yes", "a.wav"), os.path.join(str(tmp_path), "o", "no", "b.wav")]
        ensure_output_dirs(paths)
        assert os.path.isdir(os.path.join(str(tmp_path), "o", "yes"))
        assert os.path.isdir(os.path.join(str(tmp_path), "o", "no"))


class TestParams:
    """Tests for parameter validation."""

    def test_defaults_are_valid(self) -> None:
        validate_params(DEFAULT_PARAMS["length_ms"], DEFAULT_PARAMS["min_volume"], DEFAULT_PARAMS["workers"])

    def test_out_of_range_raises(self) -> None:
        with pytest.raises(ValueError, match="must be between"):
            validate_param_range(1.5, "min_volume", 0.0, 1.0)

    def test_zero_length_rejected(self) -> None:
        with pytest.raises(ValueError, match="length_ms"):
            validate_params(0, 0.004)

    def test_too_many_workers_rejected(self) -> None:
        with pytest.raises(ValueError, match="workers"):
            validate_params(1000, 0.004, workers=1000)


class TestOutputPrinter:
    """Tests for CLI output formatting."""

    def test_saved_goes_to_stdout(self, capsys) -> None:
        OutputPrinter(no_color=True).saved("out/a.wav")
        captured = capsys.readouterr()
        assert "Saved to 'out/a.wav'" in captured.out

    def test_skipped_shows_volume(self, capsys) -> None:
        OutputPrinter(no_color=True).skipped("in/a.wav", 0.0012)
        captured = capsys.readouterr()
        assert "too quiet" in captured.out
        assert "0.001200" in captured.out

    def test_error_result_goes_to_stderr(self, capsys) -> None:
        result = TrimResultDTO("in/x.wav", "out/x.wav", status="error", error="boom")
        OutputPrinter(no_color=True).result(result)
        captured = capsys.readouterr()
        assert "Failed on 'in/x.wav'" in captured.err
        assert "boom" in captured.err
        assert captured.out == ""

    def test_quiet_hides_everything_but_errors(self, capsys) -> None:
        printer = OutputPrinter(quiet=True, no_color=True)
        printer.saved("a.wav")
        printer.info("hello")
        printer.error("Critical failure.")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Critical failure." in captured.err

    def test_summary_counts(self, capsys) -> None:
        batch = BatchTrimResultDTO(
            results=[
                TrimResultDTO("a", "a", status="saved"),
                TrimResultDTO("b", "b", status="skipped"),
                TrimResultDTO("c", "c", status="error"),
            ],
            total=3,
        )
        OutputPrinter(no_color=True).summary(batch, 1.25)
        captured = capsys.readouterr()
        assert "3 files: 1 saved, 1 skipped, 1 failed in 1.2s" in captured.out

    def test_no_color_env_variable(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        assert OutputPrinter().no_color is True

    def test_color_enabled_includes_ansi(self, capsys, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        OutputPrinter(no_color=False).saved("x.wav")
        assert "\033[" in capsys.readouterr().out


class TestMain:
    """End-to-end CLI runs."""

    def test_batch_run_writes_outputs(self, recordings: str, tmp_path, capsys) -> None:
        out_root: str = os.path.join(str(tmp_path), "trimmed", "words")
        code: int = main([os.path.join(recordings, "*.wav"), out_root, "--no-color"])
        assert code == 0
        assert sorted(os.listdir(out_root)) == ["a_yes.wav", "b_no.wav"]
        data, sr = sf.read(os.path.join(out_root, "a_yes.wav"))
        assert sr == SAMPLE_RATE
        assert len(data) == SAMPLE_RATE
        captured = capsys.readouterr()
        assert "2 saved, 1 skipped, 1 failed" in captured.out
        assert "d_broken.wav" in captured.err

    def test_quiet_run(self, recordings: str, tmp_path, capsys) -> None:
        code: int = main([os.path.join(recordings, "a_*.wav"), os.path.join(str(tmp_path), "o"), "-q", "-j", "2"])
        assert code == 0
        assert capsys.readouterr().out == ""
        assert os.path.exists(os.path.join(str(tmp_path), "o", "a_yes.wav"))

    def test_no_matches_exits_with_error(self, tmp_path, capsys) -> None:
        code: int = main([os.path.join(str(tmp_path), "*.wav"), str(tmp_path), "--no-color"])
        assert code == 1
        assert "No files match" in capsys.readouterr().err

    def test_invalid_length_exits_with_error(self, recordings: str, tmp_path, capsys) -> None:
        code: int = main([os.path.join(recordings, "*.wav"), str(tmp_path), "--length-ms", "0"])
        assert code == 1
        assert "length_ms" in capsys.readouterr().err
