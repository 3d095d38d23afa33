# encodingman/classify.py

from __future__ import annotations
import codecs
from pathlib import Path
from typing import Optional, Union

from .model import FileClass

SAMPLE_SIZE = 8192

# share of control bytes above which a sample is treated as binary
BINARY_RATIO_THRESHOLD = 0.10

# office / container / page-description formats are never text-recoded
BINARY_EXTENSIONS = frozenset({
    "xls", "xlsx", "xlsm", "xlsb", "xltx", "ods",
    "doc", "docx", "docm", "dotx", "odt",
    "ppt", "pptx", "pptm", "odp", "key", "pages", "numbers",
    "pdf", "ps", "eps", "xps", "oxps", "epub",
})

# whitespace, bell, backspace, ESC (ISO-2022 shifts) and the high half;
# high bytes are judged separately by `invalid_sequence_bytes`
_TEXT_BYTES = bytes({7, 8, 9, 10, 11, 12, 13, 27} | set(range(0x20, 0x7F)) | set(range(0x80, 0x100)))

_UNICODE_BOMS = (codecs.BOM_UTF8, codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)

# multi-byte encodings whose lead/continuation patterns make high bytes legitimate
SEQUENCE_CODECS = ("utf-8", "cp932", "euc_jp")

REPLACEMENT = "\ufffd"


# --- sniffers -------------------------------------------------------------------


def _is_pdf(head: bytes) -> bool:
    return head.startswith(b"%PDF-")


def _is_zip(head: bytes) -> bool:
    return head.startswith((b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08"))


def _is_ole2(head: bytes) -> bool:
    # legacy .xls/.doc/.ppt compound document
    return head.startswith(b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1")


def _is_image(head: bytes) -> bool:
    return (
        head.startswith(b"\x89PNG\r\n\x1a\n")
        or head.startswith(b"\xFF\xD8\xFF")
        or head.startswith((b"GIF87a", b"GIF89a"))
    )


def _is_archive(head: bytes) -> bool:
    return (
        head.startswith(b"\x1F\x8B\x08")
        or head.startswith(b"7z\xBC\xAF\x27\x1C")
        or head.startswith(b"Rar!\x1A\x07")
    )


def _has_binary_signature(head: bytes) -> bool:
    return _is_pdf(head) or _is_zip(head) or _is_ole2(head) or _is_image(head) or _is_archive(head)


# --- public API -----------------------------------------------------------------


def extension_of(path: Union[str, Path]) -> str:
    p = Path(path)
    return p.suffix[1:].lower() if p.suffix else ""


def is_binary_extension(path: Union[str, Path]) -> bool:
    """Return True for formats that are classified binary without sampling."""
    return extension_of(path) in BINARY_EXTENSIONS


def has_unicode_bom(sample: bytes) -> bool:
    return sample.startswith(_UNICODE_BOMS)


def _suspect_chars(text: str) -> int:
    # cp932 maps stray bytes to C1 controls or private use instead of failing
    return sum(
        1 for ch in text
        if ch >= "\x80" and (ch <= "\x9f" or ch == REPLACEMENT or "\ue000" <= ch <= "\uf8ff")
    )


def invalid_sequence_bytes(sample: bytes) -> int:
    """High bytes that form no valid sequence, under the most forgiving of SEQUENCE_CODECS."""
    if not sample or max(sample) < 0x80:
        return 0
    return min(_suspect_chars(sample.decode(codec, errors="replace")) for codec in SEQUENCE_CODECS)


def control_ratio(sample: bytes) -> float:
    """Share of bytes that are neither printable, whitespace nor part of a valid multi-byte sequence."""
    if not sample:
        return 0.0
    controls = len(sample.translate(None, _TEXT_BYTES))
    return (controls + invalid_sequence_bytes(sample)) / len(sample)


def classify(sample: bytes, path: Optional[Union[str, Path]] = None) -> FileClass:
    """Decide whether a byte sample is text or binary.

    Never raises. The extension rule wins over content; an empty sample is
    text; a Unicode byte-order mark exempts the sample from the NUL rule.
    """
    if path is not None and is_binary_extension(path):
        return FileClass.BINARY
    if not sample:
        return FileClass.TEXT
    if _has_binary_signature(sample):
        return FileClass.BINARY
    if has_unicode_bom(sample):
        return FileClass.TEXT
    if b"\x00" in sample:
        return FileClass.BINARY
    if control_ratio(sample) > BINARY_RATIO_THRESHOLD:
        return FileClass.BINARY
    return FileClass.TEXT
