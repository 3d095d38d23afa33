"""
Tests for the batch orchestrator
"""

import threading

from encodingman.batch import resolve_workers, run_batch, run_one
from encodingman.model import BatchSummary, FileOutcome, OutcomeStatus
from encodingman.tempfiles import TempFileManager

from samples import JP_TEXT


def _mixed_set(work_dir, sjis_csv, utf8_bom_txt, xlsx_file):
    return [sjis_csv, utf8_bom_txt, work_dir / "unreadable.csv", xlsx_file]


def _comparable(summary):
    return [(r.path, r.status, r.encoding, r.confidence, r.error) for r in summary.results]


def test_mixed_batch_summary(work_dir, sjis_csv, utf8_bom_txt, xlsx_file, config, temp_manager):
    paths = _mixed_set(work_dir, sjis_csv, utf8_bom_txt, xlsx_file)

    summary = run_batch(paths, config, temp_manager)

    assert summary.total == 4
    assert summary.converted == 1
    assert summary.already_utf8 == 1
    assert summary.errors == 1
    assert summary.binary == 1
    assert not summary.cancelled
    assert [r.path for r in summary.results] == [str(p) for p in paths]
    assert [r.status for r in summary.results] == [
        OutcomeStatus.CONVERTED,
        OutcomeStatus.ALREADY_TARGET,
        OutcomeStatus.ERROR,
        OutcomeStatus.BINARY,
    ]
    assert summary.results[2].error.startswith("UnreadableSource: ")


def test_corrupted_file_is_never_converted(sjis_csv, utf8_bom_txt, corrupted_csv, xlsx_file, config, temp_manager):
    paths = [sjis_csv, utf8_bom_txt, corrupted_csv, xlsx_file]

    summary = run_batch(paths, config, temp_manager, workers=2)

    assert summary.total == 4
    assert summary.converted == 1
    assert summary.already_utf8 == 1
    assert summary.results[2].status in (OutcomeStatus.ERROR, OutcomeStatus.BINARY)
    assert summary.binary + summary.errors == 2
    assert not any(p.name.startswith("corrupted") for p in temp_manager.owned)


def test_error_row_has_readable_message(work_dir, config, temp_manager):
    row = run_one(work_dir / "missing.txt", config, temp_manager)
    assert row.status is OutcomeStatus.ERROR
    assert row.error.startswith("UnreadableSource: ")
    assert "missing.txt" in row.error


def test_concurrent_runs_are_deterministic(work_dir, sjis_csv, utf8_bom_txt, xlsx_file, config, tmp_path):
    paths = _mixed_set(work_dir, sjis_csv, utf8_bom_txt, xlsx_file)
    for i in range(12):
        p = work_dir / f"extra_{i:02d}.txt"
        p.write_bytes(JP_TEXT.encode(["cp932", "euc_jp", "utf-8"][i % 3]))
        paths.append(p)

    first = run_batch(paths, config, TempFileManager(tmp_path / "run1"), workers=4)
    second = run_batch(paths, config, TempFileManager(tmp_path / "run2"), workers=4)
    sequential = run_batch(paths, config, TempFileManager(tmp_path / "run3"), workers=1)

    assert _comparable(first) == _comparable(second) == _comparable(sequential)
    assert first.counts == second.counts == sequential.counts
    assert [r.path for r in first.results] == [str(p) for p in paths]


def test_concurrent_same_named_files_never_share_output(tmp_path, config, temp_manager):
    paths = []
    for i in range(6):
        d = tmp_path / f"dir{i}"
        d.mkdir()
        p = d / "data.csv"
        p.write_bytes(JP_TEXT.encode("cp932"))
        paths.append(p)

    summary = run_batch(paths, config, temp_manager, workers=3)

    outputs = [r.output_path for r in summary.results]
    assert summary.converted == 6
    assert len(set(outputs)) == 6


def test_cancel_before_start_reports_partial_summary(sjis_csv, utf8_bom_txt, config, temp_manager):
    cancel = threading.Event()
    cancel.set()

    for workers in (1, 2):
        summary = run_batch([sjis_csv, utf8_bom_txt], config, temp_manager, workers=workers, cancel=cancel)
        assert summary.total == 0
        assert summary.cancelled


def test_empty_batch(config, temp_manager):
    summary = run_batch([], config, temp_manager, workers=4)
    assert summary.total == 0
    assert not summary.cancelled
    assert summary.counts == {status: 0 for status in OutcomeStatus}


def test_summary_counts():
    rows = [
        FileOutcome("a", OutcomeStatus.CONVERTED),
        FileOutcome("b", OutcomeStatus.CONVERTED),
        FileOutcome("c", OutcomeStatus.ERROR, error="x"),
    ]
    summary = BatchSummary.from_outcomes(rows)
    assert summary.total == 3
    assert summary.converted == 2
    assert summary.errors == 1
    assert summary.binary == 0
    assert summary.results == tuple(rows)


def test_resolve_workers():
    assert resolve_workers(3) == 3
    assert resolve_workers(0) >= 1
    assert resolve_workers(None) >= 1
