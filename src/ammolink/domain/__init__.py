"""Domain core: discovery, reverse indexing and confirmation."""

from __future__ import annotations

from .cancellation import CancellationToken
from .errors import AccessFailure, AmmolinkError, OperationCancelledError, ResolutionFailure
from .pipeline import CandidatePipeline, PipelineResult

__all__ = [
    "AccessFailure",
    "AmmolinkError",
    "CancellationToken",
    "CandidatePipeline",
    "OperationCancelledError",
    "PipelineResult",
    "ResolutionFailure",
]
