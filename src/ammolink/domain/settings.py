"""Tuning knobs for discovery and confirmation passes."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SEQUENCE_INSPECTION_CAP = 16
DEFAULT_LOG_SUPPRESSION_THRESHOLD = 5
DEFAULT_INDEX_CHECKPOINT_INTERVAL = 512
DEFAULT_GROUP_CHECKPOINT_INTERVAL = 64
DEFAULT_DETECTOR_SCHEMA_VERSION = 1


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    sequence_inspection_cap: int = DEFAULT_SEQUENCE_INSPECTION_CAP
    log_suppression_threshold: int = DEFAULT_LOG_SUPPRESSION_THRESHOLD
    index_checkpoint_interval: int = DEFAULT_INDEX_CHECKPOINT_INTERVAL
    group_checkpoint_interval: int = DEFAULT_GROUP_CHECKPOINT_INTERVAL
    detector_schema_version: int = DEFAULT_DETECTOR_SCHEMA_VERSION
