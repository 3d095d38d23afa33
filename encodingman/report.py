# encodingman/report.py

from __future__ import annotations
import csv
from pathlib import Path

from .model import BatchSummary

HEADER = ["path", "status", "encoding", "confidence", "output_path", "lossy", "error"]


def write_csv(out_path: Path, summary: BatchSummary) -> None:
    """Write batch results to a CSV file.

    Args:
        out_path (Path): Destination CSV file path.
        summary (BatchSummary): Results of a batch run, in input order.

    Returns:
        None
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        for r in summary.results:
            writer.writerow([
                r.path,
                r.status.value,
                r.encoding,
                f"{r.confidence:.2f}",
                r.output_path,
                str(r.lossy).lower(),
                r.error,
            ])
