# encodingman/pipeline.py

"""
Per-file pipeline: classify, score, select, convert.

All state for one file (bytes, decoded text, scores) lives in the calls
below and is dropped when the outcome is returned.
"""
from __future__ import annotations
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Union

from .candidates import resolve_candidate
from .classify import SAMPLE_SIZE, classify, is_binary_extension
from .config import PipelineConfig
from .convert import convert_file, decode_source
from .errors import UnreadableSource
from .model import (
    ConversionOutcome,
    Decision,
    DetectionResult,
    EncodingCandidate,
    FileClass,
    FileOutcome,
    OutcomeStatus,
)
from .scorer import best_candidate, score_all
from .selector import Selection, select
from .tempfiles import TempFileManager

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_source(path: Path) -> bytes:
    """Read the whole file, read-only."""
    try:
        with Path(path).open("rb") as f:
            return f.read()
    except OSError as exc:
        raise UnreadableSource(f"Cannot read {path}: {exc}", {"path": str(path)}) from exc


def preview_lines(text: str, n: int) -> List[str]:
    """First ``n`` lines of ``text`` without their line terminators."""
    if n <= 0:
        return []
    return text.splitlines()[:n]


def preview_output(path: PathLike, config: PipelineConfig) -> List[str]:
    """First lines of a converted file, read back in the target encoding."""
    data = read_source(path)
    target = config.target
    if target.bom and data.startswith(target.bom):
        data = data[len(target.bom):]
    return preview_lines(data.decode(target.codec, errors="replace"), config.preview_lines)


def detect(data: bytes, path: PathLike, config: PipelineConfig) -> Selection:
    """Classify ``data`` and, for text, rank every candidate encoding."""
    if classify(data[:SAMPLE_SIZE], path) is FileClass.BINARY:
        result = DetectionResult(path=str(path), file_class=FileClass.BINARY)
        return Selection(result=result, decision=Decision.AUTO_CONVERT, already_target=False)

    ranked = score_all(data)
    winner = best_candidate(ranked)
    text = decode_source(data, winner.candidate)
    selection = select(
        path,
        ranked,
        config.target.source_name,
        config.confidence_threshold,
        config.mode,
        preview_lines(text, config.preview_lines),
    )
    if not data:
        # an empty file is already in every encoding
        selection = replace(selection, already_target=True)
    logger.debug(
        "%s: %s (%.2f), runner-up %s",
        path, winner.name, winner.confidence,
        ranked[1].name if len(ranked) > 1 else "-",
    )
    return selection


def _convert_to_temp(
    path: Path,
    data: bytes,
    source: EncodingCandidate,
    config: PipelineConfig,
    temp: TempFileManager,
) -> ConversionOutcome:
    out = temp.allocate(path, config.target.tag)
    try:
        outcome = convert_file(path, data, source, config.target, out)
    except Exception:
        temp.cleanup(out)
        raise
    if not outcome.changed:
        temp.cleanup(out)
    return outcome


def convert_detected(
    path: PathLike,
    data: bytes,
    selection: Selection,
    config: PipelineConfig,
    temp: TempFileManager,
) -> ConversionOutcome:
    """Write the winning interpretation of ``data`` in the target encoding."""
    winner = selection.result.best
    if selection.already_target:
        return ConversionOutcome(
            source=winner.name, target=config.target.name, output_path=None, changed=False,
        )
    return _convert_to_temp(Path(path), data, winner.candidate, config, temp)


def convert_with_override(
    path: PathLike,
    encoding: str,
    config: PipelineConfig,
    temp: TempFileManager,
) -> ConversionOutcome:
    """Convert using a user-chosen source encoding instead of the detected one."""
    source = resolve_candidate(encoding)
    path = Path(path)
    return _convert_to_temp(path, read_source(path), source, config, temp)


def process_file(path: PathLike, config: PipelineConfig, temp: TempFileManager) -> FileOutcome:
    """Run the full pipeline on one file. Errors propagate to the caller."""
    path = Path(path)
    if is_binary_extension(path):
        if not path.is_file():
            raise UnreadableSource(f"File not found: {path}", {"path": str(path)})
        return FileOutcome(path=str(path), status=OutcomeStatus.BINARY)

    data = read_source(path)
    selection = detect(data, path, config)
    if selection.result.file_class is FileClass.BINARY:
        return FileOutcome(path=str(path), status=OutcomeStatus.BINARY)

    winner = selection.result.best
    outcome = convert_detected(path, data, selection, config, temp)
    return FileOutcome(
        path=str(path),
        status=OutcomeStatus.CONVERTED if outcome.changed else OutcomeStatus.ALREADY_TARGET,
        encoding=winner.candidate.label,
        confidence=winner.confidence,
        output_path=str(outcome.output_path) if outcome.output_path else "",
        lossy=outcome.lossy,
    )
