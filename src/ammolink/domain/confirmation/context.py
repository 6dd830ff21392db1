"""Read-only inputs and per-pass reports for the confirmers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from ammolink.domain.references import ReferenceReader
from ammolink.domain.settings import PipelineConfig

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ammolink.domain.cancellation import CancellationToken
    from ammolink.domain.discovery import ExtractionContext
    from ammolink.domain.log_dedup import LogDeduplicator
    from ammolink.domain.model import Candidate, FormKey, PluginSet
    from ammolink.domain.ports import AmmunitionChangeDetector, LinkResolver, RecordEnvironment
    from ammolink.domain.reverse_index import ReverseReferenceIndex


@dataclass(slots=True)
class ConfirmationContext:
    """Shared, read-only state for one confirmation run."""

    environment: RecordEnvironment
    reverse_index: ReverseReferenceIndex
    excluded_plugins: PluginSet
    weapons: tuple[object, ...]
    weapons_by_key: Mapping[FormKey, object]
    ammo_by_key: Mapping[FormKey, object]
    cancellation: CancellationToken
    log_dedup: LogDeduplicator
    detector: AmmunitionChangeDetector | None = None
    resolver: LinkResolver | None = None
    config: PipelineConfig = field(default_factory=PipelineConfig)
    reader: ReferenceReader = field(init=False)

    def __post_init__(self) -> None:
        self.reader = ReferenceReader(
            self.environment,
            log_dedup=self.log_dedup,
            sequence_cap=self.config.sequence_inspection_cap,
        )

    @classmethod
    def from_extraction(
        cls,
        extraction: ExtractionContext,
        reverse_index: ReverseReferenceIndex,
        *,
        detector: AmmunitionChangeDetector | None = None,
        resolver: LinkResolver | None = None,
    ) -> ConfirmationContext:
        return cls(
            environment=extraction.environment,
            reverse_index=reverse_index,
            excluded_plugins=extraction.excluded_plugins,
            weapons=extraction.weapons,
            weapons_by_key=extraction.weapons_by_key,
            ammo_by_key=extraction.ammo_by_key,
            cancellation=extraction.cancellation,
            log_dedup=extraction.log_dedup,
            detector=detector,
            resolver=resolver,
            config=extraction.config,
        )

    @property
    def detector_name(self) -> str:
        return self.detector.name if self.detector is not None else "None"

    def ammo_name(self, ammo: FormKey) -> str:
        return self.reader.editor_id_of(self.ammo_by_key.get(ammo))


@dataclass(slots=True)
class ConfirmationReport:
    """What one confirmer did to a candidate list."""

    confirmer: str
    examined: int = 0
    skipped: int = 0
    confirmed: list[Candidate] = field(default_factory=list)

    @property
    def confirmed_count(self) -> int:
        return len(self.confirmed)


class CandidateConfirmer(Protocol):
    """Upgrade unconfirmed candidates in place; confirmed ones are never touched."""

    name: str

    def confirm(
        self, candidates: Sequence[Candidate], context: ConfirmationContext
    ) -> ConfirmationReport: ...
