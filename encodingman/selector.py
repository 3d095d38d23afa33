# encodingman/selector.py

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from .model import Decision, DetectionResult, FileClass, ScoredCandidate

MODE_SMART = "smart"
MODE_THRESHOLD = "threshold"
MODES = (MODE_SMART, MODE_THRESHOLD)


@dataclass(frozen=True)
class Selection:
    """A detection plus what should happen next."""
    result: DetectionResult
    decision: Decision
    already_target: bool


def decide(confidence: float, threshold: float, mode: str = MODE_SMART) -> Decision:
    """Apply the auto-vs-confirm policy.

    In smart mode the locally best candidate is always accepted; the
    threshold only gates automatic conversion in threshold mode.
    """
    if mode == MODE_SMART or confidence >= threshold:
        return Decision.AUTO_CONVERT
    return Decision.NEEDS_CONFIRMATION


def is_already_target(winner: ScoredCandidate, target_source_name: str) -> bool:
    """True when the winning candidate already is the target encoding and mark state."""
    return winner.candidate.name == target_source_name


def select(
    path: Union[str, Path],
    ranked: Sequence[ScoredCandidate],
    target_source_name: str,
    threshold: float,
    mode: str = MODE_SMART,
    preview: Sequence[str] = (),
) -> Selection:
    """Build the DetectionResult for a text file and the policy decision."""
    winner = ranked[0]
    result = DetectionResult(
        path=str(path),
        file_class=FileClass.TEXT,
        best=winner,
        ranked=tuple(ranked),
        preview=tuple(preview),
    )
    return Selection(
        result=result,
        decision=decide(winner.confidence, threshold, mode),
        already_target=is_already_target(winner, target_source_name),
    )
