"""Tests for the command-line interface.

``main`` takes an argv list and returns an exit status, so the CLI is
exercised in-process with pytest's ``capsys`` and ``tmp_path``.
"""

from pathlib import Path

import pytest

from py_pager.cli import EXIT_OK, EXIT_USAGE, main
from py_pager.memory.policies import Policy


def _write(path: Path, pages: tuple[int, ...]) -> Path:
    """Write a one-per-line trace file."""
    path.write_text("".join(f"{p}\n" for p in pages))
    return path


class TestRunCommand:
    """Verify ``py-pager run``."""

    def test_prints_every_policy(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Each policy appears in the results table."""
        trace = _write(tmp_path / "t.txt", (1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5))
        status = main(["run", "--trace", str(trace), "--frames", "3", "--pages", "8"])
        out = capsys.readouterr().out
        assert status == EXIT_OK
        for policy in Policy:
            assert policy.value in out
        opt_row = next(line for line in out.splitlines() if line.startswith("OPT"))
        assert opt_row.split()[1] == "7"

    def test_generated_trace_is_saved(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Without --trace a seeded trace is generated and can be saved."""
        saved = tmp_path / "generated.txt"
        status = main(
            ["run", "--length", "40", "--pages", "16", "--frames", "4", "--seed", "1",
             "--save-trace", str(saved)]
        )
        capsys.readouterr()
        assert status == EXIT_OK
        lines = saved.read_text().splitlines()
        expected_length = 40
        assert len(lines) == expected_length
        assert lines[0] == "0"

    def test_seeded_runs_repeat(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The same seed prints the same table."""
        argv = ["run", "--length", "60", "--pages", "16", "--frames", "4", "--seed", "5"]
        main(argv)
        first = capsys.readouterr().out
        main(argv)
        assert capsys.readouterr().out == first

    def test_verbose_prints_trace_and_log(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Verbose mode lists the trace and per-fault events."""
        trace = _write(tmp_path / "t.txt", (0, 1, 0))
        main(["run", "--trace", str(trace), "--frames", "2", "--pages", "4", "--verbose"])
        out = capsys.readouterr().out
        assert "Reference string (in row order):" in out
        assert "[DEBUG] LRU#1: Fault on page 1" in out
        assert "Page Replacement Algorithm: MRU" in out

    def test_steps_window_limits_log(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """--steps shows only log entries for the chosen trace positions."""
        trace = _write(tmp_path / "t.txt", (0, 1, 2, 3))
        status = main(
            ["run", "--trace", str(trace), "--frames", "1", "--pages", "4", "--verbose",
             "--steps", "2:3"]
        )
        out = capsys.readouterr().out
        assert status == EXIT_OK
        assert "[DEBUG] LRU#2: Fault on page 2 -> frame 0 (evicted page 1)" in out
        assert "LRU#1:" not in out
        assert "Run started" not in out

    def test_fifo_cursor_flag(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--fifo cursor selects the historical FIFO."""
        trace = _write(tmp_path / "t.txt", (1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5))
        main(["run", "--trace", str(trace), "--frames", "3", "--pages", "8", "--fifo", "cursor"])
        out = capsys.readouterr().out
        fifo_row = next(line for line in out.splitlines() if line.startswith("FIFO"))
        assert fifo_row.split()[1] == "11"


class TestRunErrors:
    """Verify input errors exit with status 2."""

    def test_out_of_range_trace(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A page beyond --pages is reported, not ignored."""
        trace = _write(tmp_path / "t.txt", (0, 9))
        status = main(["run", "--trace", str(trace), "--pages", "4", "--frames", "2"])
        assert status == EXIT_USAGE
        assert "error: line 2" in capsys.readouterr().err

    def test_zero_frames(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A non-positive frame count is rejected before running."""
        status = main(["run", "--frames", "0"])
        assert status == EXIT_USAGE
        assert "num_frames" in capsys.readouterr().err

    def test_trace_longer_than_length(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """--length caps a trace file as well as generated traces."""
        trace = _write(tmp_path / "t.txt", (0, 1, 2, 3, 4, 5, 6))
        status = main(
            ["run", "--trace", str(trace), "--pages", "8", "--frames", "2", "--length", "3"]
        )
        assert status == EXIT_USAGE
        assert "longer than 3" in capsys.readouterr().err

    @pytest.mark.parametrize("window", ["5", "a:b", "1:"])
    def test_bad_steps_window(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str], window: str
    ) -> None:
        """A malformed --steps window is a usage error."""
        trace = _write(tmp_path / "t.txt", (0, 1))
        status = main(["run", "--trace", str(trace), "--verbose", "--steps", window])
        assert status == EXIT_USAGE
        assert "--steps" in capsys.readouterr().err

    def test_missing_trace_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """An unreadable trace file is an input error."""
        status = main(["run", "--trace", str(tmp_path / "nope.txt")])
        assert status == EXIT_USAGE
        assert capsys.readouterr().err.startswith("error:")


class TestGenerateCommand:
    """Verify ``py-pager generate``."""

    def test_writes_requested_length(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """The output file holds exactly --length references."""
        out_file = tmp_path / "reference_string.txt"
        status = main(["generate", "--output", str(out_file), "--length", "25", "--seed", "2"])
        assert status == EXIT_OK
        assert "Wrote 25 references" in capsys.readouterr().out
        expected_length = 25
        assert len(out_file.read_text().split()) == expected_length

    def test_output_is_required(self) -> None:
        """argparse rejects a missing --output."""
        with pytest.raises(SystemExit):
            main(["generate"])
