# encodingman/model.py

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple


class FileClass(str, Enum):
    """Coarse classification of a file's content."""
    BINARY = "binary"
    TEXT = "text"


class Decision(str, Enum):
    """What the selector wants the caller to do with a detection."""
    AUTO_CONVERT = "auto_convert"
    NEEDS_CONFIRMATION = "needs_confirmation"


class OutcomeStatus(str, Enum):
    CONVERTED = "converted"
    ALREADY_TARGET = "already_target"
    BINARY = "binary"
    ERROR = "error"


@dataclass(frozen=True)
class EncodingCandidate:
    """A named encoding worth trying, with its tie-break priority."""
    name: str         # python codec label, e.g. "cp932", "utf-8-sig"
    label: str        # display label, e.g. "Shift_JIS"
    rank: int         # 0 is the highest priority
    bom: bytes = b""  # leading mark that must be present for this candidate
    single_byte: bool = False


@dataclass(frozen=True)
class ScoredCandidate:
    """An encoding candidate together with how well it explains the bytes."""
    candidate: EncodingCandidate
    confidence: float   # 0.0 .. 1.0
    decoded_ok: bool    # decoded with at most the tolerated error rate
    replacements: int = 0
    script_chars: int = 0
    total_chars: int = 0

    @property
    def name(self) -> str:
        return self.candidate.name


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of classification and scoring for one file."""
    path: str
    file_class: FileClass
    best: Optional[ScoredCandidate] = None
    ranked: Tuple[ScoredCandidate, ...] = ()
    preview: Tuple[str, ...] = ()

    @property
    def encoding(self) -> str:
        return self.best.name if self.best else ""

    @property
    def confidence(self) -> float:
        return self.best.confidence if self.best else 0.0


@dataclass(frozen=True)
class ConversionOutcome:
    """Result of re-encoding one file into the target encoding."""
    source: str
    target: str
    output_path: Optional[Path]  # None when nothing was written
    changed: bool                # output bytes differ from the input bytes
    lossy: bool = False
    substitutions: int = 0


@dataclass(frozen=True)
class FileOutcome:
    """One row of a batch run."""
    path: str
    status: OutcomeStatus
    encoding: str = ""
    confidence: float = 0.0
    output_path: str = ""
    lossy: bool = False
    error: str = ""


@dataclass(frozen=True)
class BatchSummary:
    """Ordered per-file outcomes of a batch run plus counts per status."""
    results: Tuple[FileOutcome, ...] = ()
    cancelled: bool = False
    counts: Dict[OutcomeStatus, int] = field(default_factory=dict)

    @classmethod
    def from_outcomes(cls, outcomes: List[FileOutcome], cancelled: bool = False) -> "BatchSummary":
        counts = Counter(o.status for o in outcomes)
        return cls(
            results=tuple(outcomes),
            cancelled=cancelled,
            counts={status: counts.get(status, 0) for status in OutcomeStatus},
        )

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def converted(self) -> int:
        return self.counts.get(OutcomeStatus.CONVERTED, 0)

    @property
    def already_target(self) -> int:
        return self.counts.get(OutcomeStatus.ALREADY_TARGET, 0)

    # batch views label this bucket "already UTF-8"
    already_utf8 = already_target

    @property
    def binary(self) -> int:
        return self.counts.get(OutcomeStatus.BINARY, 0)

    @property
    def errors(self) -> int:
        return self.counts.get(OutcomeStatus.ERROR, 0)
