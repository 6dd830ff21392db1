"""Environment overrides for the pipeline tuning knobs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ammolink.domain.settings import (
    DEFAULT_DETECTOR_SCHEMA_VERSION,
    DEFAULT_GROUP_CHECKPOINT_INTERVAL,
    DEFAULT_INDEX_CHECKPOINT_INTERVAL,
    DEFAULT_LOG_SUPPRESSION_THRESHOLD,
    DEFAULT_SEQUENCE_INSPECTION_CAP,
    PipelineConfig,
)

from .env import env_int

if TYPE_CHECKING:
    from collections.abc import Mapping


def get_pipeline_config(*, environ: Mapping[str, str] | None = None) -> PipelineConfig:
    return PipelineConfig(
        sequence_inspection_cap=env_int(
            "AMMOLINK_SEQUENCE_INSPECTION_CAP",
            default=DEFAULT_SEQUENCE_INSPECTION_CAP,
            environ=environ,
        ),
        log_suppression_threshold=env_int(
            "AMMOLINK_LOG_SUPPRESSION_THRESHOLD",
            default=DEFAULT_LOG_SUPPRESSION_THRESHOLD,
            environ=environ,
        ),
        index_checkpoint_interval=env_int(
            "AMMOLINK_INDEX_CHECKPOINT_INTERVAL",
            default=DEFAULT_INDEX_CHECKPOINT_INTERVAL,
            environ=environ,
        ),
        group_checkpoint_interval=env_int(
            "AMMOLINK_GROUP_CHECKPOINT_INTERVAL",
            default=DEFAULT_GROUP_CHECKPOINT_INTERVAL,
            environ=environ,
        ),
        detector_schema_version=env_int(
            "AMMOLINK_DETECTOR_SCHEMA_VERSION",
            default=DEFAULT_DETECTOR_SCHEMA_VERSION,
            environ=environ,
        ),
    )
