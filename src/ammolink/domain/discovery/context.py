"""Run-scoped state shared by the candidate providers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from ammolink.domain.cancellation import CancellationToken
from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.log_dedup import LogDeduplicator
from ammolink.domain.model import PluginSet, RecordKind
from ammolink.domain.references import ReferenceReader
from ammolink.domain.settings import PipelineConfig

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ammolink.domain.model import FormKey
    from ammolink.domain.ports import RecordEnvironment

log = logging.getLogger(__name__)

type ProgressSink = Callable[[str], None]


def _ignore_progress(message: str) -> None:
    _ = message


@dataclass(slots=True)
class ExtractionContext:
    """Everything a provider needs for one discovery run.

    The environment is borrowed; weapons and ammunition are read once and
    cached here so providers and confirmers never re-scan those collections.
    """

    environment: RecordEnvironment
    excluded_plugins: PluginSet
    cancellation: CancellationToken
    log_dedup: LogDeduplicator
    weapons: tuple[object, ...]
    weapons_by_key: Mapping[FormKey, object]
    ammo_by_key: Mapping[FormKey, object]
    config: PipelineConfig = field(default_factory=PipelineConfig)
    progress: ProgressSink = _ignore_progress
    reader: ReferenceReader = field(init=False)
    weapon_keys: frozenset[FormKey] = field(init=False)

    def __post_init__(self) -> None:
        self.reader = ReferenceReader(
            self.environment,
            log_dedup=self.log_dedup,
            sequence_cap=self.config.sequence_inspection_cap,
        )
        self.weapon_keys = frozenset(self.weapons_by_key)

    def is_excluded(self, plugin: str) -> bool:
        return plugin in self.excluded_plugins

    def report(self, message: str) -> None:
        try:
            self.progress(message)
        except OperationCancelledError:
            raise
        except Exception:
            log.exception("Progress sink failed for %r", message)


def build_extraction_context(
    environment: RecordEnvironment,
    *,
    excluded_plugins: Iterable[str] | PluginSet = (),
    cancellation: CancellationToken | None = None,
    progress: ProgressSink | None = None,
    config: PipelineConfig | None = None,
    log_dedup: LogDeduplicator | None = None,
) -> ExtractionContext:
    """Read and cache weapons and ammunition, then assemble the context."""

    active_config = config or PipelineConfig()
    dedup = log_dedup or LogDeduplicator(log, threshold=active_config.log_suppression_threshold)
    reader = ReferenceReader(
        environment, log_dedup=dedup, sequence_cap=active_config.sequence_inspection_cap
    )
    token = cancellation or CancellationToken()

    weapons = tuple(reader.records(RecordKind.WEAPON))
    token.checkpoint("cache-weapons")
    weapons_by_key = _index_by_identity(weapons, reader)

    ammo = tuple(reader.records(RecordKind.AMMO))
    token.checkpoint("cache-ammo")
    ammo_by_key = _index_by_identity(ammo, reader)

    log.info("Cached %d weapons and %d ammunition records", len(weapons_by_key), len(ammo_by_key))
    return ExtractionContext(
        environment=environment,
        excluded_plugins=PluginSet.of(excluded_plugins),
        cancellation=token,
        log_dedup=dedup,
        weapons=weapons,
        weapons_by_key=MappingProxyType(weapons_by_key),
        ammo_by_key=MappingProxyType(ammo_by_key),
        config=active_config,
        progress=progress or _ignore_progress,
    )


def _index_by_identity(records: Iterable[object], reader: ReferenceReader) -> dict[FormKey, object]:
    indexed: dict[FormKey, object] = {}
    for record in records:
        form_key = reader.identity_of(record)
        if form_key is not None:
            indexed.setdefault(form_key, record)
    return indexed
