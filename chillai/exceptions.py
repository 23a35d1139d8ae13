"""
Centralised exception hierarchy for ChillAI.

The engine raises typed exceptions instead of generic ``ValueError`` or
``RuntimeError`` instances so the CLI and SDK layers can tell fatal
configuration problems apart from recoverable load conditions.  Every error
carries an optional ``context`` dictionary that is included in log records.
"""

from __future__ import annotations

from typing import Any


class ChillAIError(Exception):
    """Base class for all ChillAI specific exceptions."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class ChillAIConfigError(ChillAIError):
    """Raised for invalid topologies or training settings. Always fatal."""


class ChillAIRuntimeError(ChillAIError):
    """Raised when the engine API is driven out of order."""


class ShapeMismatchError(ChillAIError):
    """Raised when a genome or persisted record does not fit a topology."""


class InputSizeMismatchError(ChillAIError):
    """Raised when an agent hands the evaluator an input of the wrong length."""


class RecordFormatError(ChillAIError):
    """Raised when a persisted network record cannot be decoded."""


class MissingSaveFileError(ChillAIError, FileNotFoundError):
    """Raised when a named save slot has not been written yet."""


__all__ = [
    "ChillAIError",
    "ChillAIConfigError",
    "ChillAIRuntimeError",
    "ShapeMismatchError",
    "InputSizeMismatchError",
    "RecordFormatError",
    "MissingSaveFileError",
]
