# encodingman/errors.py

"""Exception hierarchy for the detection and conversion engine."""
from __future__ import annotations
from typing import Any, Dict, Optional


class EncodingmanError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class UnreadableSource(EncodingmanError):
    """The source file is missing or cannot be opened for reading."""


class DecodeFailure(EncodingmanError):
    """No candidate (or the chosen one) produced a structurally valid decode."""


class UnwritableOutput(EncodingmanError):
    """The converted output could not be written."""


class UnsupportedTarget(EncodingmanError):
    """The requested target encoding is outside the supported set."""


class LaunchError(EncodingmanError):
    """The companion application could not be started."""
