"""Concrete implementations of the core's ports."""

from __future__ import annotations

from .csv_diagnostics import CsvDiagnosticWriter
from .memory import (
    CachingLinkResolver,
    FormLink,
    MemoryEnvironment,
    MemoryRecord,
    PropertyEntry,
    Unreadable,
)

__all__ = [
    "CachingLinkResolver",
    "CsvDiagnosticWriter",
    "FormLink",
    "MemoryEnvironment",
    "MemoryRecord",
    "PropertyEntry",
    "Unreadable",
]
