"""
Tests for candidate generation and encoding label resolution
"""

import codecs

import pytest

from encodingman.candidates import (
    CANDIDATES,
    SHIFT_JIS,
    UTF8,
    UTF8_BOM,
    UTF16_BE,
    UTF16_LE,
    WINDOWS_1252,
    generate_candidates,
    resolve_candidate,
    supported_encodings,
)
from encodingman.errors import DecodeFailure


def test_ranks_follow_priority_order():
    assert [c.rank for c in CANDIDATES] == list(range(len(CANDIDATES)))
    assert [c.name for c in CANDIDATES] == [
        "utf-8-sig", "utf-8", "utf-16-le", "utf-16-be", "cp932", "euc_jp", "iso2022_jp", "cp1252",
    ]


def test_bom_candidates_only_when_mark_present():
    names = [c.name for c in generate_candidates(b"plain ascii")]
    assert "utf-8-sig" not in names
    assert "utf-16-le" not in names
    assert "utf-16-be" not in names
    assert names[0] == "utf-8"
    assert names[-1] == "cp1252"


def test_utf8_bom_candidate_comes_first():
    cands = generate_candidates(codecs.BOM_UTF8 + b"x")
    assert cands[0] is UTF8_BOM
    assert UTF16_LE not in cands


@pytest.mark.parametrize("bom, expected", [
    (codecs.BOM_UTF16_LE, UTF16_LE),
    (codecs.BOM_UTF16_BE, UTF16_BE),
])
def test_utf16_boms(bom, expected):
    cands = generate_candidates(bom + b"a\x00")
    assert expected in cands
    assert UTF8_BOM not in cands


def test_every_non_bom_candidate_is_always_proposed():
    cands = generate_candidates(b"")
    assert [c for c in CANDIDATES if not c.bom] == cands


@pytest.mark.parametrize("label, expected", [
    ("Shift_JIS", SHIFT_JIS),
    ("sjis", SHIFT_JIS),
    ("CP932", SHIFT_JIS),
    ("UTF-8", UTF8),
    ("utf-8-bom", UTF8_BOM),
    ("UTF-8 (BOM)", UTF8_BOM),
    ("windows-1252", WINDOWS_1252),
    (" utf-16le ", UTF16_LE),
])
def test_resolve_candidate_aliases(label, expected):
    assert resolve_candidate(label) is expected


def test_resolve_unknown_label_raises():
    with pytest.raises(DecodeFailure):
        resolve_candidate("klingon-8")


def test_supported_encodings_lists_every_candidate():
    labels = supported_encodings()
    assert len(labels) == len(CANDIDATES)
    assert "Shift_JIS" in labels
    assert all(resolve_candidate(label) for label in labels)
