"""Multi-pass candidate confirmation."""

from __future__ import annotations

from .attach_point import AttachPointConfirmer, AttachPointDiagnostics, build_slot_map
from .context import CandidateConfirmer, ConfirmationContext, ConfirmationReport
from .reverse_map import PROPERTY_SCAN_REASON, ReverseMapConfirmer
from .unconfirmed import annotate_unconfirmed, unconfirmed_reason

__all__ = [
    "PROPERTY_SCAN_REASON",
    "AttachPointConfirmer",
    "AttachPointDiagnostics",
    "CandidateConfirmer",
    "ConfirmationContext",
    "ConfirmationReport",
    "ReverseMapConfirmer",
    "annotate_unconfirmed",
    "build_slot_map",
    "unconfirmed_reason",
]
