"""Candidate discovery: providers and their shared extraction context."""

from __future__ import annotations

from .constructed import ConstructedObjectCandidateProvider
from .context import ExtractionContext, ProgressSink, build_extraction_context
from .provider import CandidateProvider
from .reference_scan import ReferenceScanCandidateProvider

__all__ = [
    "CandidateProvider",
    "ConstructedObjectCandidateProvider",
    "ExtractionContext",
    "ProgressSink",
    "ReferenceScanCandidateProvider",
    "build_extraction_context",
]
