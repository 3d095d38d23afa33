# encodingman/batch.py

from __future__ import annotations
import logging
import os
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .config import PipelineConfig
from .model import BatchSummary, FileOutcome, OutcomeStatus
from .pipeline import process_file
from .tempfiles import TempFileManager

logger = logging.getLogger(__name__)


def run_one(path: Path, config: PipelineConfig, temp: TempFileManager) -> FileOutcome:
    """Process a single path, turning any failure into an error row."""
    try:
        return process_file(path, config, temp)
    except Exception as exc:
        logger.warning("Failed to process %s: %s", path, exc)
        return FileOutcome(
            path=str(path),
            status=OutcomeStatus.ERROR,
            error=f"{type(exc).__name__}: {exc}",
        )


def resolve_workers(workers: Optional[int]) -> int:
    if not workers or workers <= 0:
        return os.cpu_count() or 1
    return workers


def run_batch(
    paths: Iterable[Path],
    config: PipelineConfig,
    temp: TempFileManager,
    workers: Optional[int] = 1,
    cancel: Optional[threading.Event] = None,
) -> BatchSummary:
    """Run the pipeline over every path and summarize the outcomes.

    Files are independent, so up to ``workers`` run at once (``None`` or 0
    means one per core). Results are reported in input order regardless of
    completion order. Setting ``cancel`` stops dispatching new files; files
    already running finish and are included in the (partial) summary.
    """
    jobs = list(enumerate(Path(p) for p in paths))
    workers = resolve_workers(workers)
    results: Dict[int, FileOutcome] = {}

    def cancelled() -> bool:
        return cancel is not None and cancel.is_set()

    if workers == 1:
        for i, path in jobs:
            if cancelled():
                break
            results[i] = run_one(path, config, temp)
    else:
        queue: Iterator[Tuple[int, Path]] = iter(jobs)
        with ThreadPoolExecutor(max_workers=workers) as ex:
            pending: Dict[Future, int] = {}

            def dispatch() -> None:
                if cancelled():
                    return
                job = next(queue, None)
                if job is not None:
                    i, path = job
                    pending[ex.submit(run_one, path, config, temp)] = i

            for _ in range(workers):
                dispatch()
            while pending:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for fut in done:
                    results[pending.pop(fut)] = fut.result()
                    dispatch()

    ordered = [results[i] for i in sorted(results)]
    summary = BatchSummary.from_outcomes(ordered, cancelled=len(ordered) < len(jobs))
    logger.info(
        "Batch done: %d file(s), %d converted, %d already target, %d binary, %d error(s)",
        summary.total, summary.converted, summary.already_target, summary.binary, summary.errors,
    )
    return summary
