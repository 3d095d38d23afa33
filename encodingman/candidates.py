# encodingman/candidates.py

from __future__ import annotations
import codecs
from typing import Dict, List, Tuple

from .errors import DecodeFailure
from .model import EncodingCandidate

# --- fixed candidate set, highest priority first --------------------------------

UTF8_BOM = EncodingCandidate("utf-8-sig", "UTF-8 (BOM)", 0, bom=codecs.BOM_UTF8)
UTF8 = EncodingCandidate("utf-8", "UTF-8", 1)
UTF16_LE = EncodingCandidate("utf-16-le", "UTF-16LE", 2, bom=codecs.BOM_UTF16_LE)
UTF16_BE = EncodingCandidate("utf-16-be", "UTF-16BE", 3, bom=codecs.BOM_UTF16_BE)
SHIFT_JIS = EncodingCandidate("cp932", "Shift_JIS", 4)
EUC_JP = EncodingCandidate("euc_jp", "EUC-JP", 5)
ISO_2022_JP = EncodingCandidate("iso2022_jp", "ISO-2022-JP", 6)
WINDOWS_1252 = EncodingCandidate("cp1252", "windows-1252", 7, single_byte=True)

CANDIDATES: Tuple[EncodingCandidate, ...] = (
    UTF8_BOM, UTF8, UTF16_LE, UTF16_BE, SHIFT_JIS, EUC_JP, ISO_2022_JP, WINDOWS_1252,
)

_ALIASES: Dict[str, EncodingCandidate] = {
    "utf-8-sig": UTF8_BOM,
    "utf-8-bom": UTF8_BOM,
    "utf8-bom": UTF8_BOM,
    "utf-8": UTF8,
    "utf8": UTF8,
    "utf-16le": UTF16_LE,
    "utf-16-le": UTF16_LE,
    "utf-16be": UTF16_BE,
    "utf-16-be": UTF16_BE,
    "shift_jis": SHIFT_JIS,
    "shift-jis": SHIFT_JIS,
    "sjis": SHIFT_JIS,
    "cp932": SHIFT_JIS,
    "windows-31j": SHIFT_JIS,
    "euc-jp": EUC_JP,
    "euc_jp": EUC_JP,
    "eucjp": EUC_JP,
    "iso-2022-jp": ISO_2022_JP,
    "iso2022_jp": ISO_2022_JP,
    "iso2022jp": ISO_2022_JP,
    "windows-1252": WINDOWS_1252,
    "cp1252": WINDOWS_1252,
    "latin-1": WINDOWS_1252,
}
for _c in CANDIDATES:
    _ALIASES.setdefault(_c.label.lower(), _c)


def generate_candidates(head: bytes) -> List[EncodingCandidate]:
    """Return the candidates worth evaluating for a text file, in rank order.

    Byte-order-mark candidates are proposed only when their mark is
    literally present at the start of ``head``; the rest always are.
    """
    return [c for c in CANDIDATES if not c.bom or head.startswith(c.bom)]


def resolve_candidate(label: str) -> EncodingCandidate:
    """Map a user-facing encoding label to its candidate."""
    key = (label or "").strip().lower()
    try:
        return _ALIASES[key]
    except KeyError:
        raise DecodeFailure(f"Unknown encoding: {label}", {"encoding": label}) from None


def supported_encodings() -> List[str]:
    """Display labels for a manual-override picker."""
    return [c.label for c in CANDIDATES]
