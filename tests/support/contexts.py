"""Context factories shared by discovery and confirmation tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ammolink.domain.confirmation import ConfirmationContext
from ammolink.domain.discovery import build_extraction_context
from ammolink.domain.reverse_index import build_reverse_index

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ammolink.domain.cancellation import CancellationToken
    from ammolink.domain.discovery import ExtractionContext
    from ammolink.domain.ports import AmmunitionChangeDetector, LinkResolver, RecordEnvironment
    from ammolink.domain.settings import PipelineConfig


def extraction_for(
    environment: RecordEnvironment,
    *,
    excluded: Iterable[str] = (),
    cancellation: CancellationToken | None = None,
    config: PipelineConfig | None = None,
) -> ExtractionContext:
    return build_extraction_context(
        environment, excluded_plugins=excluded, cancellation=cancellation, config=config
    )


def confirmation_for(
    environment: RecordEnvironment,
    *,
    detector: AmmunitionChangeDetector | None = None,
    resolver: LinkResolver | None = None,
    excluded: Iterable[str] = (),
    cancellation: CancellationToken | None = None,
    config: PipelineConfig | None = None,
) -> ConfirmationContext:
    extraction = extraction_for(
        environment, excluded=excluded, cancellation=cancellation, config=config
    )
    index = build_reverse_index(
        environment,
        extraction.excluded_plugins,
        cancellation=extraction.cancellation,
        log_dedup=extraction.log_dedup,
    )
    return ConfirmationContext.from_extraction(
        extraction, index, detector=detector, resolver=resolver
    )
