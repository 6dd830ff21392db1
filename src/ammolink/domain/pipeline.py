"""End-to-end discovery and confirmation pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ammolink.domain.confirmation import (
    AttachPointConfirmer,
    ConfirmationContext,
    ReverseMapConfirmer,
    annotate_unconfirmed,
)
from ammolink.domain.detectors import select_detector
from ammolink.domain.discovery import (
    ConstructedObjectCandidateProvider,
    ReferenceScanCandidateProvider,
    build_extraction_context,
)
from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.ports import NullDiagnosticWriter
from ammolink.domain.reverse_index import build_reverse_index

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from ammolink.domain.cancellation import CancellationToken
    from ammolink.domain.confirmation import CandidateConfirmer, ConfirmationReport
    from ammolink.domain.discovery import CandidateProvider, ExtractionContext, ProgressSink
    from ammolink.domain.model import Candidate, PluginSet
    from ammolink.domain.ports import (
        AmmunitionChangeDetector,
        DiagnosticWriter,
        LinkResolver,
        RecordEnvironment,
    )
    from ammolink.domain.reverse_index import ReverseReferenceIndex
    from ammolink.domain.settings import PipelineConfig

log = logging.getLogger(__name__)


def default_providers() -> tuple[CandidateProvider, ...]:
    return (ConstructedObjectCandidateProvider(), ReferenceScanCandidateProvider())


def default_confirmers() -> tuple[CandidateConfirmer, ...]:
    return (ReverseMapConfirmer(), AttachPointConfirmer())


@dataclass(slots=True)
class PipelineResult:
    candidates: list[Candidate]
    reverse_index: ReverseReferenceIndex
    reports: tuple[ConfirmationReport, ...]
    detector_name: str

    @property
    def confirmed(self) -> list[Candidate]:
        return [candidate for candidate in self.candidates if candidate.confirmed]


@dataclass(slots=True)
class CandidatePipeline:
    """Providers, then the reverse index, then the confirmers in order.

    Diagnostics calls never influence the outcome: a failing writer is logged
    and ignored. Cancellation always propagates.
    """

    providers: Sequence[CandidateProvider] = field(default_factory=default_providers)
    confirmers: Sequence[CandidateConfirmer] = field(default_factory=default_confirmers)
    diagnostics: DiagnosticWriter = field(default_factory=NullDiagnosticWriter)

    def run(
        self,
        environment: RecordEnvironment,
        *,
        excluded_plugins: Iterable[str] | PluginSet = (),
        resolver: LinkResolver | None = None,
        detector: AmmunitionChangeDetector | None = None,
        cancellation: CancellationToken | None = None,
        progress: ProgressSink | None = None,
        config: PipelineConfig | None = None,
    ) -> PipelineResult:
        self._diagnostic("start", lambda: self.diagnostics.write_marker("start"))
        try:
            result = self._run(
                environment,
                excluded_plugins=excluded_plugins,
                resolver=resolver,
                detector=detector,
                cancellation=cancellation,
                progress=progress,
                config=config,
            )
        except OperationCancelledError as exc:
            log.info("Pipeline cancelled at %s", exc.boundary)
            self._diagnostic("cancelled", lambda: self.diagnostics.write_marker("cancelled", exc.boundary))
            raise

        self._diagnostic("results", lambda: self.diagnostics.write_results(result.candidates))
        self._diagnostic(
            "zero-reference", lambda: self.diagnostics.write_zero_reference_report(result.candidates)
        )
        self._diagnostic(
            "complete",
            lambda: self.diagnostics.write_marker(
                "complete", f"candidates={len(result.candidates)} confirmed={len(result.confirmed)}"
            ),
        )
        return result

    def _run(
        self,
        environment: RecordEnvironment,
        *,
        excluded_plugins: Iterable[str] | PluginSet,
        resolver: LinkResolver | None,
        detector: AmmunitionChangeDetector | None,
        cancellation: CancellationToken | None,
        progress: ProgressSink | None,
        config: PipelineConfig | None,
    ) -> PipelineResult:
        extraction = build_extraction_context(
            environment,
            excluded_plugins=excluded_plugins,
            cancellation=cancellation,
            progress=progress,
            config=config,
        )
        candidates = self._discover(extraction)
        self._diagnostic(
            "discovery", lambda: self.diagnostics.write_marker("discovery", f"candidates={len(candidates)}")
        )

        extraction.report("Building reverse-reference index")
        reverse_index = build_reverse_index(
            environment,
            extraction.excluded_plugins,
            cancellation=extraction.cancellation,
            log_dedup=extraction.log_dedup,
            checkpoint_interval=extraction.config.index_checkpoint_interval,
        )
        self._diagnostic(
            "reverse-index", lambda: self.diagnostics.write_marker("reverse-index", repr(reverse_index))
        )

        active_detector = detector or select_detector(
            extraction.config.detector_schema_version, environment, resolver=resolver
        )
        context = ConfirmationContext.from_extraction(
            extraction, reverse_index, detector=active_detector, resolver=resolver
        )
        reports: list[ConfirmationReport] = []
        for confirmer in self.confirmers:
            extraction.report(f"Running {confirmer.name} confirmation")
            reports.append(confirmer.confirm(candidates, context))

        annotate_unconfirmed(candidates, reverse_index, context.detector_name)
        extraction.log_dedup.summary()
        result = PipelineResult(
            candidates=candidates,
            reverse_index=reverse_index,
            reports=tuple(reports),
            detector_name=context.detector_name,
        )
        log.info(
            "Pipeline finished: %d candidates, %d confirmed",
            len(result.candidates),
            len(result.confirmed),
        )
        return result

    def _discover(self, extraction: ExtractionContext) -> list[Candidate]:
        candidates: list[Candidate] = []
        for provider in self.providers:
            extraction.cancellation.checkpoint(f"provider:{provider.name}")
            try:
                found = provider.provide(extraction)
            except OperationCancelledError:
                raise
            except Exception:
                log.exception("Candidate provider %s failed; continuing without it", provider.name)
                continue
            log.info("Provider %s produced %d candidates", provider.name, len(found))
            candidates.extend(found)
        return candidates

    @staticmethod
    def _diagnostic(stage: str, write: Callable[[], None]) -> None:
        try:
            write()
        except OperationCancelledError:
            raise
        except Exception:
            log.warning("Diagnostic output for %s failed", stage, exc_info=True)
