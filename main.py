# main.py

"""
Orchestrator: read settings (JSON + CLI), detect encodings, convert to the target encoding,
optionally write a CSV report and open the result.
"""
from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from encodingman.batch import run_batch
from encodingman.candidates import supported_encodings
from encodingman.classify import is_binary_extension
from encodingman.config import AppConfig, PipelineConfig, default_config_path, load_config
from encodingman.convert import TARGETS
from encodingman.errors import EncodingmanError, LaunchError
from encodingman.launcher import launch
from encodingman.model import BatchSummary, Decision, DetectionResult, FileClass, OutcomeStatus
from encodingman.pipeline import (
    convert_detected,
    convert_with_override,
    detect,
    preview_output,
    process_file,
    read_source,
)
from encodingman.report import write_csv
from encodingman.selector import MODES
from encodingman.tempfiles import TempFileManager
from encodingman.walk import expand_inputs

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_ERRORS = 3
EXIT_NEEDS_CONFIRMATION = 4


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    p = argparse.ArgumentParser(
        description="Detect the character encoding of text files and convert them without touching the originals."
    )
    p.add_argument("inputs", nargs="*", help="Files or directories (directories are scanned recursively).")
    p.add_argument("--target", choices=sorted(TARGETS), help="Target encoding (default from config: utf-8-bom).")
    p.add_argument("--threshold", type=float, help="Confidence threshold used in threshold mode.")
    p.add_argument("--mode", choices=MODES, help="smart: always accept the best candidate; threshold: ask below it.")
    p.add_argument(
        "--encoding",
        help=f"Skip detection and read the single input with this encoding ({', '.join(supported_encodings())}).",
    )
    p.add_argument("--preview-lines", type=int, help="Lines of decoded text to show for a single file.")
    p.add_argument("--workers", type=int, help="Parallel workers for batches (0 = one per core).")
    p.add_argument("--output-dir", type=str, help="Directory for converted files (default: system temp dir).")
    p.add_argument("--report", type=str, help="Write a CSV report of a batch run to this path.")
    p.add_argument("--launch", action="store_true", help="Open the converted file with the configured application.")
    p.add_argument("--config", type=str, help="Optional JSON config (flags override).")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return p.parse_args(argv)


def _get_effective_config(args: argparse.Namespace) -> AppConfig:
    """Load JSON configuration, giving precedence to CLI flags."""
    cfg = load_config(Path(args.config) if args.config else default_config_path())
    if args.target:
        cfg.target_encoding = args.target
    if args.threshold is not None:
        cfg.confidence_threshold = args.threshold
    if args.mode:
        cfg.mode = args.mode
    if args.preview_lines is not None:
        cfg.preview_lines = args.preview_lines
    if args.workers is not None:
        cfg.workers = args.workers
    return cfg


def _print_detection(result: DetectionResult) -> None:
    print(f"[INFO] {result.path}: {result.best.candidate.label} (confidence {result.confidence:.2f})")
    for rank, scored in enumerate(result.ranked):
        flag = "" if scored.decoded_ok else "  (decode failed)"
        print(f"         {rank}. {scored.candidate.label:<14} {scored.confidence:.2f}{flag}")
    _print_preview("Preview", result.preview)


def _print_preview(title: str, lines: Sequence[str]) -> None:
    if not lines:
        return
    print(f"[INFO] {title}:")
    for line in lines:
        print(f"    {line}")


def _open(path: Path, cfg: AppConfig) -> None:
    try:
        launch(path, cfg.default_app)
    except LaunchError as exc:
        print(f"[WARN] {exc}", file=sys.stderr)


def run_single(path: Path, args: argparse.Namespace, cfg: AppConfig, pcfg: PipelineConfig, temp: TempFileManager) -> int:
    """Detect and convert one file, printing the ranked candidates."""
    try:
        if args.encoding:
            outcome = convert_with_override(path, args.encoding, pcfg, temp)
        elif is_binary_extension(path):
            process_file(path, pcfg, temp)
            outcome = None
        else:
            data = read_source(path)
            selection = detect(data, path, pcfg)
            if selection.result.file_class is FileClass.BINARY:
                outcome = None
            else:
                _print_detection(selection.result)
                if selection.decision is Decision.NEEDS_CONFIRMATION:
                    print(
                        f"[WARN] Confidence below {pcfg.confidence_threshold:.2f}; "
                        "re-run with --encoding to choose the source encoding.",
                        file=sys.stderr,
                    )
                    return EXIT_NEEDS_CONFIRMATION
                outcome = convert_detected(path, data, selection, pcfg, temp)
    except EncodingmanError as exc:
        print(f"[ERR] {type(exc).__name__}: {exc}", file=sys.stderr)
        return EXIT_ERRORS

    if outcome is None:
        print(f"[INFO] Binary file, passed through unchanged: {path}")
        opened = path
    elif outcome.changed:
        print(f"[INFO] Converted {outcome.source} -> {outcome.target}: {outcome.output_path}")
        if outcome.lossy:
            print(f"[WARN] {outcome.substitutions} character(s) could not be represented and were substituted.")
        opened = outcome.output_path
        try:
            _print_preview("Converted preview", preview_output(outcome.output_path, pcfg))
        except EncodingmanError as exc:
            print(f"[WARN] {exc}", file=sys.stderr)
    else:
        print(f"[INFO] Already {pcfg.target.name}, nothing to convert: {path}")
        opened = path

    if args.launch:
        _open(opened, cfg)
    return EXIT_OK


def _print_summary(summary: BatchSummary, report_path: Optional[Path]) -> None:
    """Print summary information to stdout."""
    for row in summary.results:
        if row.status is OutcomeStatus.ERROR:
            print(f"[ERR]  {row.path}: {row.error}", file=sys.stderr)
        elif row.status is OutcomeStatus.CONVERTED:
            print(f"[INFO] {row.path}: {row.encoding} -> {row.output_path}")
        else:
            print(f"[INFO] {row.path}: {row.status.value}")
    print(
        f"[INFO] Done. Total: {summary.total} | Converted: {summary.converted} | "
        f"Already target: {summary.already_target} | Binary: {summary.binary} | Errors: {summary.errors}"
    )
    if summary.cancelled:
        print("[WARN] Batch was cancelled; remaining files were not processed.")
    if report_path:
        print(f"[INFO] Report: {report_path.resolve()}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main orchestration function.

    Returns:
        int: Exit code.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = _get_effective_config(args)
    try:
        pcfg = cfg.snapshot()
    except EncodingmanError as exc:
        print(f"[ERR] {exc}", file=sys.stderr)
        return EXIT_USAGE

    if not args.inputs:
        print("[ERR] At least one input file or directory is required.", file=sys.stderr)
        return EXIT_USAGE

    temp = TempFileManager(Path(args.output_dir) if args.output_dir else None)
    if args.launch and not args.output_dir and not cfg.keep_temp_file:
        temp.purge()

    inputs: List[Path] = [Path(p) for p in args.inputs]
    if len(inputs) == 1 and not inputs[0].is_dir():
        return run_single(inputs[0], args, cfg, pcfg, temp)

    if args.encoding:
        print("[ERR] --encoding applies to a single input file only.", file=sys.stderr)
        return EXIT_USAGE

    paths = expand_inputs(inputs)
    print(f"[INFO] Processing {len(paths)} file(s)")
    summary = run_batch(paths, pcfg, temp, workers=cfg.workers)

    report_path = Path(args.report) if args.report else None
    if report_path:
        write_csv(report_path, summary)
    _print_summary(summary, report_path)
    return EXIT_ERRORS if summary.errors else EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
