"""Domain model for ammo-change discovery."""

from __future__ import annotations

from .candidate import Candidate
from .enums import CandidateKind, RecordKind, ReferenceKind
from .identity import FormKey, IdentityKey, PluginSet, valid_or_none

__all__ = [
    "Candidate",
    "CandidateKind",
    "FormKey",
    "IdentityKey",
    "PluginSet",
    "RecordKind",
    "ReferenceKind",
    "valid_or_none",
]
