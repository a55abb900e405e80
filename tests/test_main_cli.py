"""Tests for report command output and exit status."""

from __future__ import annotations

from pathlib import Path

import pytest

from gains_ledger.main import main

_CANONICAL_HEADER = "order_id,timestamp,asset,kind,quantity,unit_price,gross_value"


def _write_file(path: Path, lines: list[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_main_report_prints_sections_and_grand_totals(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Print per-file results and grand totals for matching files.

    Returns:
        None: Assertions validate printed report text.

    Raises:
        AssertionError: Raised when report output differs.
    """

    _write_file(
        tmp_path / "2024" / "a" / "statement.csv",
        [
            "Statement",
            "Account",
            _CANONICAL_HEADER,
            "1,t1,BTC,buy,10,10,100",
            "2,t2,BTC,buy,5,12,60",
            "3,t3,BTC,sell,12,20,240",
        ],
    )
    pattern = str(tmp_path / "2024" / "*" / "*.csv")

    main(["--pattern", pattern, "--no-progress"])

    output = capsys.readouterr().out
    assert f"Found 1 file(s) matching: {pattern}" in output
    heading = f"Results for file: {tmp_path / '2024' / 'a' / 'statement.csv'}"
    assert heading in output
    assert output.index(heading) < output.index("=== FIFO Results ===")
    assert "Total Realized Gain (FIFO): 116.00 THB" in output
    assert "[*] FIFO > MA (116.0 vs. 112.0)" in output
    assert "Grand Total (FIFO): 116.00 THB" in output
    assert "Grand Total (Moving Average): 112.00 THB" in output


def test_main_report_without_matches_prints_notice(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Print a notice and exit normally when nothing matches."""

    pattern = str(tmp_path / "*.csv")

    main(["report", "--pattern", pattern, "--no-progress"])

    assert capsys.readouterr().out.strip() == f"No CSV files found for pattern: {pattern}"


def test_main_report_exits_nonzero_when_a_file_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Keep processing after a bad file and exit with status 1.

    Returns:
        None: Assertions validate isolation and exit code.

    Raises:
        AssertionError: Raised when a failure aborts the run or exits cleanly.
    """

    _write_file(tmp_path / "a_short.csv", ["only one line"])
    _write_file(tmp_path / "b_good.csv", [_CANONICAL_HEADER, "1,t1,ETH,buy,1,10,10", "2,t2,ETH,sell,1,15,15"])

    with pytest.raises(SystemExit) as exit_info:
        main(["report", "--pattern", str(tmp_path / "*.csv"), "--skiprows", "0", "--method", "fifo", "--no-progress"])

    assert exit_info.value.code == 1
    output = capsys.readouterr().out
    assert "Grand Total (FIFO) from all files: 5.00 THB" in output
    assert f"Results for file: {tmp_path / 'a_short.csv'}\n[!] Skipped file:" in output


def test_main_rejects_invalid_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    """Exit with usage status when settings fail validation."""

    monkeypatch.setenv("CSV_SKIPROWS", "-3")

    with pytest.raises(SystemExit) as exit_info:
        main(["report", "--no-progress"])

    assert exit_info.value.code == 2
