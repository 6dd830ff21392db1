"""Reverse-reference index: identity -> records that link to it.

Built once per run from the winning overrides of every collection and then
shared read-only by the confirmers. Only direct links are indexed; sequence
properties are left to the confirmers' own property scans.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from ammolink.domain.cancellation import CancellationToken
from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.log_dedup import LogDeduplicator
from ammolink.domain.model import FormKey, PluginSet
from ammolink.domain.references import ReferenceReader
from ammolink.domain.settings import DEFAULT_INDEX_CHECKPOINT_INTERVAL

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from ammolink.domain.model import IdentityKey
    from ammolink.domain.ports import RecordEnvironment

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReferenceEntry:
    """One ``record.property_name == value`` link that points at an identity."""

    record: object
    property_name: str
    value: object
    source: FormKey


class ReverseReferenceIndex:
    """Immutable mapping from identity to the ordered entries that reference it.

    Entry order is encounter order: collections as the environment lists them,
    then records, then properties in declaration order.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[IdentityKey, tuple[ReferenceEntry, ...]]) -> None:
        self._entries: Mapping[IdentityKey, tuple[ReferenceEntry, ...]] = MappingProxyType(
            dict(entries)
        )

    def lookup(self, form_key: FormKey) -> tuple[ReferenceEntry, ...]:
        return self._entries.get(form_key.index_key, ())

    def __contains__(self, form_key: object) -> bool:
        return isinstance(form_key, FormKey) and form_key.index_key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[IdentityKey]:
        return iter(self._entries)

    def keys(self) -> Iterable[IdentityKey]:
        return self._entries.keys()

    def items(self) -> Iterable[tuple[IdentityKey, tuple[ReferenceEntry, ...]]]:
        return self._entries.items()

    @property
    def entry_count(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __repr__(self) -> str:
        return f"ReverseReferenceIndex(keys={len(self)}, entries={self.entry_count})"


def build_reverse_index(
    environment: RecordEnvironment,
    excluded_plugins: Iterable[str] | PluginSet = (),
    *,
    cancellation: CancellationToken | None = None,
    log_dedup: LogDeduplicator | None = None,
    checkpoint_interval: int = DEFAULT_INDEX_CHECKPOINT_INTERVAL,
) -> ReverseReferenceIndex:
    """Scan every collection and index each record under the identities it links to.

    Records from excluded plugins are skipped entirely, and links into
    excluded plugins are not indexed. A property that cannot be read is
    logged and skipped without affecting the rest of the record.
    """

    excluded = PluginSet.of(excluded_plugins)
    token = cancellation or CancellationToken()
    dedup = log_dedup or LogDeduplicator(log)
    reader = ReferenceReader(environment, log_dedup=dedup)
    grouped: dict[IdentityKey, list[ReferenceEntry]] = {}

    try:
        collections = tuple(environment.collection_names())
    except OperationCancelledError:
        raise
    except Exception as exc:  # noqa: BLE001
        dedup.log("collection-list", "Could not list collections", exc=exc)
        collections = ()

    scanned = 0
    for collection in collections:
        token.checkpoint(f"reverse-index:{collection}")
        for record in reader.records(collection):
            scanned += 1
            if scanned % checkpoint_interval == 0:
                token.checkpoint(f"reverse-index:{collection}")
            source = reader.identity_of(record)
            if source is None or source.plugin in excluded:
                continue
            for reference in reader.references(record):
                if reference.form_key.plugin in excluded:
                    continue
                grouped.setdefault(reference.form_key.index_key, []).append(
                    ReferenceEntry(
                        record=record,
                        property_name=reference.property_name,
                        value=reference.value,
                        source=source,
                    )
                )

    index = ReverseReferenceIndex({key: tuple(entries) for key, entries in grouped.items()})
    log.info(
        "Built reverse index: %d identities, %d entries from %d records",
        len(index),
        index.entry_count,
        scanned,
    )
    return index
