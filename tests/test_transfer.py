import pytest

from ordserve.transfer import TransferLog, run_transfer


def make_log() -> TransferLog:
    return TransferLog(rows=[(1, "a"), (2, "b"), (3, "c")])


def test_delete_and_trim_together_is_an_error():
    log = make_log()
    with pytest.raises(ValueError, match="Cannot use both --delete and --trim"):
        run_transfer(log, delete=True, trim=2)
    assert log.stats() == (3, 1, 3)


def test_delete_empties_the_log():
    log = make_log()
    lines = run_transfer(log, delete=True)
    assert lines == ["deleting transfer log table"]
    assert log.stats() == (0, None, None)


def test_empty_log_reports_zero_rows():
    assert run_transfer(TransferLog()) == ["the transfer table has 0 rows"]


def test_trim_removes_lower_heights():
    log = make_log()
    lines = run_transfer(log, trim=2)
    assert lines == [
        "deleting transfer logs for blocks before 2",
        "the transfer table has 2 rows from height 2 to height 3",
    ]
    assert [height for height, _ in log.rows] == [2, 3]


def test_trim_zero_keeps_everything():
    log = make_log()
    run_transfer(log, trim=0)
    assert log.stats() == (3, 1, 3)


def test_stats_only_when_no_action():
    log = make_log()
    assert run_transfer(log) == ["the transfer table has 3 rows from height 1 to height 3"]
    assert len(log.rows) == 3


def test_output_is_printed(capsys):
    run_transfer(TransferLog())
    assert capsys.readouterr().out == "the transfer table has 0 rows\n"


def test_trim_past_all_rows_leaves_empty_log():
    log = make_log()
    lines = run_transfer(log, trim=10)
    assert lines[-1] == "the transfer table has 0 rows"
    assert log.rows == []