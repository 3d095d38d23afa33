# encodingman/config.py

"""Persisted settings and the immutable per-run snapshot handed to the pipeline."""
from __future__ import annotations
import json
import logging
import os
import sys
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .convert import TargetEncoding, resolve_target
from .errors import EncodingmanError
from .launcher import SYSTEM_DEFAULT
from .selector import MODE_SMART, MODES

logger = logging.getLogger(__name__)

APP_DIR_NAME = "encodingman"
CONFIG_FILE_NAME = "config.json"


@dataclass(frozen=True)
class PipelineConfig:
    """Read-only settings for one pipeline invocation."""
    target: TargetEncoding
    confidence_threshold: float = 0.75
    preview_lines: int = 10
    mode: str = MODE_SMART

    @classmethod
    def create(
        cls,
        target_encoding: str = "utf-8-bom",
        confidence_threshold: float = 0.75,
        preview_lines: int = 10,
        mode: str = MODE_SMART,
    ) -> "PipelineConfig":
        """Validate raw values; an unsupported target raises UnsupportedTarget."""
        target = resolve_target(target_encoding)
        if mode not in MODES:
            raise EncodingmanError(f"Unknown mode: {mode!r} (expected one of {', '.join(MODES)})")
        return cls(
            target=target,
            confidence_threshold=max(0.0, min(1.0, float(confidence_threshold))),
            preview_lines=max(0, int(preview_lines)),
            mode=mode,
        )


@dataclass
class AppConfig:
    """User settings as stored on disk."""
    default_app: str = SYSTEM_DEFAULT
    target_encoding: str = "utf-8-bom"
    confidence_threshold: float = 0.75
    preview_lines: int = 10
    keep_temp_file: bool = False
    mode: str = MODE_SMART
    workers: int = 0  # 0 = one per core

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Build from a mapping; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                continue
            default = getattr(cls, key)
            if isinstance(default, bool):
                values[key] = bool(value)
            elif isinstance(default, int):
                values[key] = int(value)
            elif isinstance(default, float):
                values[key] = float(value)
            else:
                values[key] = str(value)
        return cls(**values)

    def snapshot(self) -> PipelineConfig:
        return PipelineConfig.create(
            target_encoding=self.target_encoding,
            confidence_threshold=self.confidence_threshold,
            preview_lines=self.preview_lines,
            mode=self.mode,
        )


def default_config_path() -> Path:
    """``%APPDATA%/encodingman/config.json`` on Windows, XDG config dir elsewhere."""
    if sys.platform.startswith("win"):
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
    else:
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
    return root / APP_DIR_NAME / CONFIG_FILE_NAME


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load settings from a JSON file.

    Args:
        path (Path | None): Config file; the platform default when omitted.

    Returns:
        AppConfig: Loaded settings, or defaults if the file is missing or unreadable.
    """
    path = Path(path) if path else default_config_path()
    if not path.exists():
        return AppConfig()
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("top-level JSON value is not an object")
        return AppConfig.from_dict(data)
    except (OSError, ValueError, TypeError) as exc:
        logger.warning("Failed to read config %s: %s", path, exc)
        return AppConfig()


def save_config(config: AppConfig, path: Optional[Path] = None) -> Path:
    """Write settings as indented JSON, creating the parent directory."""
    path = Path(path) if path else default_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    except OSError as exc:
        raise EncodingmanError(f"Failed to write config file {path}: {exc}", {"path": str(path)}) from exc
    return path
