# encodingman/convert.py

from __future__ import annotations
import codecs
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .errors import DecodeFailure, UnsupportedTarget, UnwritableOutput
from .model import ConversionOutcome, EncodingCandidate
from .scorer import MAX_ERROR_RATE, REPLACEMENT, strategy_for

logger = logging.getLogger(__name__)

# written in place of characters the target encoding cannot represent
SUBSTITUTION = "?"


@dataclass(frozen=True)
class TargetEncoding:
    """An encoding files can be converted into."""
    name: str          # configuration value
    codec: str
    bom: bytes
    source_name: str   # candidate name that reads this target back
    tag: str           # output file name tag


UTF8_BOM_TARGET = TargetEncoding("utf-8-bom", "utf-8", codecs.BOM_UTF8, "utf-8-sig", "utf8")
UTF8_TARGET = TargetEncoding("utf-8", "utf-8", b"", "utf-8", "utf8")
SHIFT_JIS_TARGET = TargetEncoding("shift_jis", "cp932", b"", "cp932", "sjis")

TARGETS: Dict[str, TargetEncoding] = {
    t.name: t for t in (UTF8_BOM_TARGET, UTF8_TARGET, SHIFT_JIS_TARGET)
}
_TARGET_ALIASES = {
    "utf-8-sig": "utf-8-bom",
    "utf8-bom": "utf-8-bom",
    "utf8": "utf-8",
    "shift-jis": "shift_jis",
    "sjis": "shift_jis",
    "cp932": "shift_jis",
}


def resolve_target(name: str) -> TargetEncoding:
    """Look up a target encoding by name; anything unsupported is rejected."""
    key = (name or "").strip().lower()
    key = _TARGET_ALIASES.get(key, key)
    try:
        return TARGETS[key]
    except KeyError:
        raise UnsupportedTarget(
            f"Unsupported target encoding: {name!r} (expected one of {', '.join(TARGETS)})",
            {"target": name},
        ) from None


@dataclass(frozen=True)
class ConvertedBytes:
    data: bytes
    substitutions: int = 0

    @property
    def lossy(self) -> bool:
        return self.substitutions > 0


def decode_source(data: bytes, source: EncodingCandidate) -> str:
    """Decode under the source candidate; a leading byte-order mark is not content."""
    text = strategy_for(source).decode(data)
    if text and not source.single_byte:
        if text.count(REPLACEMENT) / len(text) > MAX_ERROR_RATE:
            raise DecodeFailure(
                f"Data cannot be decoded as {source.label}",
                {"encoding": source.name},
            )
    if text.startswith("\ufeff"):
        text = text[1:]
    return text


def _encode_substituting(text: str, codec: str):
    parts = []
    missing = 0
    for ch in text:
        try:
            parts.append(ch.encode(codec))
        except UnicodeEncodeError:
            parts.append(SUBSTITUTION.encode(codec))
            missing += 1
    return b"".join(parts), missing


def encode_text(text: str, target: TargetEncoding) -> ConvertedBytes:
    """Encode text for the target, prefixing its byte-order mark if it has one."""
    try:
        body = text.encode(target.codec)
        missing = 0
    except UnicodeEncodeError:
        body, missing = _encode_substituting(text, target.codec)
    return ConvertedBytes(target.bom + body, missing)


def convert_bytes(data: bytes, source: EncodingCandidate, target: TargetEncoding) -> ConvertedBytes:
    """Re-encode ``data`` from ``source`` into ``target``; line endings pass through."""
    text = decode_source(data, source)
    encoded = encode_text(text, target)
    # undecodable input bytes only count here when the target kept the marker
    undecodable = text.count(REPLACEMENT) if target.codec.startswith("utf") else 0
    return ConvertedBytes(encoded.data, encoded.substitutions + undecodable)


def _same_file(a: Path, b: Path) -> bool:
    try:
        if a.exists() and b.exists():
            return os.path.samefile(a, b)
    except OSError:
        pass
    return a.resolve() == b.resolve()


def write_output(output_path: Path, data: bytes, original_path: Optional[Path] = None) -> Path:
    """Write converted bytes to a fresh location, never over the original."""
    if original_path is not None and _same_file(Path(output_path), Path(original_path)):
        raise UnwritableOutput(
            f"Refusing to overwrite the original file {original_path}",
            {"path": str(original_path)},
        )
    try:
        Path(output_path).write_bytes(data)
    except OSError as exc:
        raise UnwritableOutput(f"Cannot write {output_path}: {exc}", {"path": str(output_path)}) from exc
    return Path(output_path)


def log_lossy(path, converted: ConvertedBytes, target: TargetEncoding) -> None:
    if converted.lossy:
        logger.warning(
            "Lossy conversion of %s to %s: %d character(s) substituted",
            path, target.name, converted.substitutions,
        )


def convert_file(
    original_path: Path,
    data: bytes,
    source: EncodingCandidate,
    target: TargetEncoding,
    output_path: Path,
) -> ConversionOutcome:
    """Convert ``data`` read from ``original_path`` and write it to ``output_path``.

    Nothing is written when the converted bytes equal the input.
    """
    converted = convert_bytes(data, source, target)
    if converted.data == data:
        return ConversionOutcome(source=source.name, target=target.name, output_path=None, changed=False)
    write_output(output_path, converted.data, original_path)
    log_lossy(original_path, converted, target)
    return ConversionOutcome(
        source=source.name,
        target=target.name,
        output_path=Path(output_path),
        changed=True,
        lossy=converted.lossy,
        substitutions=converted.substitutions,
    )
