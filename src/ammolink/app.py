"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ammolink.adapters.csv_diagnostics import CsvDiagnosticWriter
from ammolink.config import get_artifacts_config, get_exclusion_config, get_pipeline_config
from ammolink.domain.pipeline import CandidatePipeline
from ammolink.domain.ports import NullDiagnosticWriter

if TYPE_CHECKING:
    from pathlib import Path

    from ammolink.config import ExclusionConfig, PipelineConfig
    from ammolink.domain.cancellation import CancellationToken
    from ammolink.domain.discovery import ProgressSink
    from ammolink.domain.pipeline import PipelineResult
    from ammolink.domain.ports import (
        AmmunitionChangeDetector,
        DiagnosticWriter,
        LinkResolver,
        RecordEnvironment,
    )

log = getLogger(__name__)


def find_ammo_changes(
    environment: RecordEnvironment,
    *,
    resolver: LinkResolver | None = None,
    detector: AmmunitionChangeDetector | None = None,
    exclusions: ExclusionConfig | None = None,
    config: PipelineConfig | None = None,
    artifacts_dir: Path | None = None,
    write_diagnostics: bool = True,
    cancellation: CancellationToken | None = None,
    progress: ProgressSink | None = None,
) -> PipelineResult:
    """Discover and confirm ammunition-changing records using configured settings.

    Exclusions and tuning default to the environment-variable configuration;
    diagnostics go to the configured artifacts directory unless disabled.
    """

    effective_exclusions = exclusions or get_exclusion_config()
    effective_config = config or get_pipeline_config()
    diagnostics: DiagnosticWriter = NullDiagnosticWriter()
    if write_diagnostics:
        directory = artifacts_dir or get_artifacts_config().resolve_directory()
        diagnostics = CsvDiagnosticWriter(directory)

    excluded = effective_exclusions.excluded_plugin_set()
    log.info(
        "Starting ammo change discovery: excluded_plugins=%d, detector_schema=%d, diagnostics=%s",
        len(excluded),
        effective_config.detector_schema_version,
        write_diagnostics,
    )
    return CandidatePipeline(diagnostics=diagnostics).run(
        environment,
        excluded_plugins=excluded,
        resolver=resolver,
        detector=detector,
        cancellation=cancellation,
        progress=progress,
        config=effective_config,
    )
