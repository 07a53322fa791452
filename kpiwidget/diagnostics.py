"""
Diagnostics for non-fatal fallbacks.

Every place where the pipeline degrades instead of failing (unknown KPI name,
undecodable payload field, skipped selection index, ...) records a Diagnostic.
Diagnostics travel on the returned result objects so that callers and tests can
inspect them without capturing log output. The producing module logs them too.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass


@dataclass(frozen=True)
class Diagnostic:
    """
    A single non-fatal event raised while computing or decoding.

    Attributes:
        level: logging level (logging.WARNING, logging.ERROR, ...)
        code: stable machine-readable identifier, e.g. 'unknown_kpi'
        message: human-readable explanation
    """
    level: int
    code: str
    message: str

    @classmethod
    def warning(cls, code: str, message: str) -> Diagnostic:
        return cls(logging.WARNING, code, message)

    @classmethod
    def error(cls, code: str, message: str) -> Diagnostic:
        return cls(logging.ERROR, code, message)

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)

    def __str__(self):
        return f'{self.level_name} [{self.code}] {self.message}'
