# encodingman/scorer.py

"""Decode a byte stream under every candidate and score each attempt.

Each encoding is handled by a strategy object with a uniform
``attempt(data) -> ScoredCandidate`` method. Supporting a new encoding means
one strategy (often an existing class) plus one entry in ``STRATEGIES``.

The weights below are tuning constants, checked against the labelled
samples under ``tests/``; change them together with those tests.
"""
from __future__ import annotations
import unicodedata
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from charset_normalizer.md import mess_ratio

from .candidates import generate_candidates
from .errors import DecodeFailure
from .model import EncodingCandidate, ScoredCandidate

W_VALIDITY = 0.5
W_PLAUSIBILITY = 0.4
W_BASE = 0.1
W_NOISE = 1.0

CONTROL_PENALTY = 0.1
ERROR_PENALTY = 0.3

# replacement characters per decoded character tolerated before a decode
# counts as structurally invalid
MAX_ERROR_RATE = 0.001

HALFWIDTH_KANA_WEIGHT = 0.2
JIS_SYMBOL_WEIGHT = 0.5

SINGLE_BYTE_DISCOUNT = 0.35
MULTIBYTE_FLOOR = 0.75

TIE_EPSILON = 0.01

# characters handed to the mess detector; longer texts are judged by their head
CHAOS_WINDOW = 65536

REPLACEMENT = "\ufffd"

_WHITESPACE = frozenset("\t\n\r\f\v")
_NOISE_CATEGORIES = frozenset({"Cc", "Co", "Cn", "Cs"})

_JAPANESE_RANGES = (
    (0x3000, 0x303F),  # CJK symbols and punctuation
    (0x3040, 0x309F),  # hiragana
    (0x30A0, 0x30FF),  # katakana
    (0x31F0, 0x31FF),  # katakana phonetic extensions
    (0x3400, 0x4DBF),  # CJK extension A
    (0x4E00, 0x9FFF),  # CJK unified ideographs
    (0xF900, 0xFAFF),  # CJK compatibility ideographs
    (0xFF00, 0xFF60),  # fullwidth forms
    (0xFFE0, 0xFFEF),
)
_HALFWIDTH_KANA = (0xFF61, 0xFF9F)
# non-kana symbols present in JIS X 0208 and its vendor extensions
_JIS_SYMBOL_RANGES = (
    (0x00A7, 0x00B6),
    (0x00D7, 0x00D7),
    (0x00F7, 0x00F7),
    (0x0391, 0x03C9),  # greek
    (0x0401, 0x0451),  # cyrillic
    (0x2010, 0x2312),  # punctuation, letterlike, arrows, math
    (0x2460, 0x24FF),  # enclosed alphanumerics
    (0x2500, 0x257F),  # box drawing
    (0x25A0, 0x26FF),  # shapes
)


def _in_ranges(cp: int, ranges: Sequence[tuple]) -> bool:
    for lo, hi in ranges:
        if lo <= cp <= hi:
            return True
    return False


@dataclass
class TextStats:
    """Character counts of one decoded text."""
    total: int = 0
    non_ascii: int = 0
    replacements: int = 0
    noise: int = 0        # controls (minus whitespace), private use, unassigned
    script: int = 0       # kana, kanji and fullwidth forms
    halfwidth: int = 0
    symbols: int = 0


def text_stats(text: str) -> TextStats:
    stats = TextStats(total=len(text), replacements=text.count(REPLACEMENT))
    for ch in text:
        if ch < "\x80":
            if (ch < " " and ch not in _WHITESPACE) or ch == "\x7f":
                stats.noise += 1
            continue
        stats.non_ascii += 1
        if ch == REPLACEMENT:
            continue
        cp = ord(ch)
        if _HALFWIDTH_KANA[0] <= cp <= _HALFWIDTH_KANA[1]:
            stats.halfwidth += 1
        elif _in_ranges(cp, _JAPANESE_RANGES):
            stats.script += 1
        elif _in_ranges(cp, _JIS_SYMBOL_RANGES):
            stats.symbols += 1
        if unicodedata.category(ch) in _NOISE_CATEGORIES:
            stats.noise += 1
    return stats


def chaos(text: str) -> float:
    """Mess ratio of decoded text per charset_normalizer, clamped to [0, 1]."""
    if not text:
        return 0.0
    return min(1.0, mess_ratio(text[:CHAOS_WINDOW], maximum_threshold=1.0))


def combine(validity: float, plausibility: float, stats: TextStats) -> float:
    """Fold the validity and plausibility terms and the penalties into [0, 1]."""
    score = W_VALIDITY * validity + W_PLAUSIBILITY * plausibility + W_BASE
    if stats.noise:
        score -= CONTROL_PENALTY + W_NOISE * stats.noise / stats.total
    if stats.replacements:
        score -= ERROR_PENALTY
    return round(max(0.0, min(1.0, score)), 6)


# --- strategies -----------------------------------------------------------------


class DecodeStrategy:
    """Decode bytes under one candidate and score the result.

    The base class judges plausibility by how little mess the decoded text
    shows; subclasses refine ``plausibility`` for their encoding family.
    """

    def __init__(self, candidate: EncodingCandidate, codec: Optional[str] = None):
        self.candidate = candidate
        self.codec = codec or candidate.name

    def payload(self, data: bytes) -> bytes:
        return data

    def decode(self, data: bytes) -> str:
        return self.payload(data).decode(self.codec, errors="replace")

    def plausibility(self, text: str, stats: TextStats) -> float:
        return 1.0 - chaos(text)

    def attempt(self, data: bytes) -> ScoredCandidate:
        text = self.decode(data)
        stats = text_stats(text)
        if not stats.total:
            return self._scored(1.0, True, stats)
        error_rate = stats.replacements / stats.total
        if error_rate > MAX_ERROR_RATE and not self.candidate.single_byte:
            return self._scored(0.0, False, stats)
        return self._scored(combine(1.0 - error_rate, self.plausibility(text, stats), stats), True, stats)

    def _scored(self, confidence: float, ok: bool, stats: TextStats) -> ScoredCandidate:
        return ScoredCandidate(
            candidate=self.candidate,
            confidence=confidence,
            decoded_ok=ok,
            replacements=stats.replacements,
            script_chars=stats.script,
            total_chars=stats.total,
        )


class BomStrategy(DecodeStrategy):
    """Unicode form identified by its byte-order mark: a clean decode is certain."""

    def payload(self, data: bytes) -> bytes:
        return data[len(self.candidate.bom):]

    def attempt(self, data: bytes) -> ScoredCandidate:
        scored = super().attempt(data)
        if scored.decoded_ok and not scored.replacements:
            return replace(scored, confidence=1.0)
        return scored


class JapaneseStrategy(DecodeStrategy):
    """Variable-width Japanese encodings, judged by in-script density and mess."""

    def plausibility(self, text: str, stats: TextStats) -> float:
        clean = super().plausibility(text, stats)
        if not stats.non_ascii:
            return clean
        weighted = (
            stats.script
            + HALFWIDTH_KANA_WEIGHT * stats.halfwidth
            + JIS_SYMBOL_WEIGHT * stats.symbols
        )
        return min(clean, weighted / stats.non_ascii)


STRATEGIES: Dict[str, Callable[[EncodingCandidate], DecodeStrategy]] = {
    "utf-8-sig": lambda c: BomStrategy(c, "utf-8"),
    "utf-16-le": BomStrategy,
    "utf-16-be": BomStrategy,
    "utf-8": DecodeStrategy,
    "cp932": JapaneseStrategy,
    "euc_jp": JapaneseStrategy,
    "iso2022_jp": JapaneseStrategy,
    "cp1252": DecodeStrategy,
}


def strategy_for(candidate: EncodingCandidate) -> DecodeStrategy:
    try:
        factory = STRATEGIES[candidate.name]
    except KeyError:
        raise DecodeFailure(f"No decoder registered for {candidate.name}") from None
    return factory(candidate)


# --- scoring --------------------------------------------------------------------


def rank_scores(scores: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
    """Order by confidence; among scores within TIE_EPSILON of the top, priority wins.

    Failed decodes always sort after successful ones.
    """
    ordered = sorted(scores, key=lambda s: (not s.decoded_ok, -s.confidence, s.candidate.rank))
    if not ordered:
        return ordered
    top = ordered[0]
    tied = [
        s for s in ordered
        if s.decoded_ok == top.decoded_ok and top.confidence - s.confidence <= TIE_EPSILON
    ]
    winner = min(tied, key=lambda s: s.candidate.rank)
    ordered.remove(winner)
    return [winner] + ordered


def score_candidates(data: bytes, candidates: Sequence[EncodingCandidate]) -> List[ScoredCandidate]:
    """Score every candidate against the full byte stream, best first."""
    scored = [strategy_for(c).attempt(data) for c in candidates]
    if any(not s.candidate.single_byte and s.confidence >= MULTIBYTE_FLOOR for s in scored):
        scored = [
            replace(s, confidence=round(max(0.0, s.confidence - SINGLE_BYTE_DISCOUNT), 6))
            if s.candidate.single_byte else s
            for s in scored
        ]
    return rank_scores(scored)


def score_all(data: bytes) -> List[ScoredCandidate]:
    return score_candidates(data, generate_candidates(data))


def best_candidate(ranked: Sequence[ScoredCandidate]) -> ScoredCandidate:
    """Return the winner, or raise when no candidate decoded at all."""
    if not any(s.decoded_ok for s in ranked):
        raise DecodeFailure("No candidate encoding could decode the data")
    return ranked[0]
