"""Ports the discovery core depends on."""

from __future__ import annotations

from .detection import NO_CHANGE, AmmunitionChangeDetector, DetectionResult
from .diagnostics import DiagnosticWriter, NullDiagnosticWriter
from .environment import LinkResolver, RecordEnvironment

__all__ = [
    "NO_CHANGE",
    "AmmunitionChangeDetector",
    "DetectionResult",
    "DiagnosticWriter",
    "LinkResolver",
    "NullDiagnosticWriter",
    "RecordEnvironment",
]
