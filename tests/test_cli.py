"""End-to-end tests for the command-line front end."""
from __future__ import annotations

import pytest

from txn_insights.cli import COMMANDS, main, parse_args
from txn_insights.core.config import get_settings
from txn_insights.core.logger import shutdown_logging
from tests.helpers.transactions import record


@pytest.fixture()
def data_file(write_transactions):
    return write_transactions(
        [
            record(100, "Alice", "Bob", issue_id=1, issue_solved=True, issue_message="Resolved by KYC"),
            record(50, "Bob", "Carol", issue_id=2, issue_solved=False, issue_message="Pending review"),
            record(30, "Alice", "Carol", issue_id=9, issue_solved=False),
        ]
    )


def _run(capsys, *argv: str) -> tuple[int, str, str]:
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_every_command_has_a_parser() -> None:
    assert parse_args(["top", "--count", "2"]).count == 2
    assert parse_args(["open-issues", "Alice"]).client == "Alice"
    assert set(COMMANDS) >= {"total", "max", "clients", "top-sender"}


def test_total_and_total_by_sender(capsys, data_file) -> None:
    code, out, _ = _run(capsys, "--data-file", str(data_file), "total")
    assert code == 0
    assert out.strip() == "$ 180.00"

    code, out, _ = _run(capsys, "--data-file", str(data_file), "total", "--sender", "Alice")
    assert code == 0
    assert out.strip() == "$ 130.00"


def test_currency_symbol_comes_from_settings(capsys, data_file, monkeypatch) -> None:
    monkeypatch.setenv("TXN_INSIGHTS_CURRENCY_SYMBOL", "£")
    get_settings.cache_clear()

    _, out, _ = _run(capsys, "--data-file", str(data_file), "max")

    assert out.strip() == "£ 100.00"


def test_scalar_commands(capsys, data_file) -> None:
    assert _run(capsys, "--data-file", str(data_file), "clients")[1].strip() == "3"
    assert _run(capsys, "--data-file", str(data_file), "top-sender")[1].strip() == "Alice"
    assert _run(capsys, "--data-file", str(data_file), "open-issues", "Carol")[1].strip() == "yes"
    assert _run(capsys, "--data-file", str(data_file), "open-issues", "Nobody")[1].strip() == "no"


def test_issue_commands(capsys, data_file) -> None:
    _, out, _ = _run(capsys, "--data-file", str(data_file), "unsolved-issues")
    assert out.split() == ["2", "9"]

    _, out, _ = _run(capsys, "--data-file", str(data_file), "solved-messages")
    assert out.strip().splitlines() == ["Resolved by KYC"]


def test_table_commands(capsys, data_file) -> None:
    code, out, _ = _run(capsys, "--data-file", str(data_file), "top")
    assert code == 0
    assert "Top 3 transactions by amount" in out
    assert out.index("100.00") < out.index("50.00") < out.index("30.00")

    code, out, _ = _run(capsys, "--data-file", str(data_file), "by-beneficiary")
    assert code == 0
    assert "30.00" in out
    assert "50.00" not in out

    code, out, _ = _run(capsys, "--data-file", str(data_file), "by-beneficiary", "--grouped")
    assert code == 0
    assert "30.00" in out and "50.00" in out


def test_summary(capsys, data_file) -> None:
    code, out, _ = _run(capsys, "--data-file", str(data_file), "summary")

    assert code == 0
    assert "Transaction summary" in out
    assert "$ 180" in out
    assert "Alice" in out


def test_failed_query_exits_non_zero(capsys, data_file) -> None:
    code, out, err = _run(capsys, "--data-file", str(data_file), "top", "--count", "5")

    assert code == 1
    assert out == ""
    assert "Insufficient transactions for top 5" in err


def test_missing_file_answers_from_empty_data(capsys, tmp_path) -> None:
    missing = str(tmp_path / "missing.json")

    assert _run(capsys, "--data-file", missing, "total")[1].strip() == "$ 0.00"
    assert _run(capsys, "--data-file", missing, "top-sender")[1].strip() == "(none)"
    code, _, err = _run(capsys, "--data-file", missing, "max")
    assert code == 1
    assert "No transactions available" in err

    code, out, _ = _run(capsys, "--data-file", missing, "summary")
    assert code == 0
    assert "n/a" in out


@pytest.mark.parametrize("count", ["0", "-2", "three"])
def test_top_count_must_be_a_positive_int(capsys, count: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["top", "--count", count])

    assert excinfo.value.code == 2
    err = capsys.readouterr().err
    assert "--count" in err
    assert "Traceback" not in err


def test_log_level_option_overrides_settings(capsys, data_file, monkeypatch, tmp_path) -> None:
    quiet_dir = tmp_path / "quiet"
    monkeypatch.setenv("TXN_INSIGHTS_LOG_DIR", str(quiet_dir))
    get_settings.cache_clear()
    assert _run(capsys, "--log-level", "error", "--data-file", str(data_file), "clients")[0] == 0
    shutdown_logging()

    verbose_dir = tmp_path / "verbose"
    monkeypatch.setenv("TXN_INSIGHTS_LOG_DIR", str(verbose_dir))
    get_settings.cache_clear()
    assert _run(capsys, "--data-file", str(data_file), "clients")[0] == 0
    shutdown_logging()

    (quiet_log,) = quiet_dir.glob("*.log")
    (verbose_log,) = verbose_dir.glob("*.log")
    assert "Loading transactions" not in quiet_log.read_text(encoding="utf-8")
    assert "Loading transactions" in verbose_log.read_text(encoding="utf-8")
