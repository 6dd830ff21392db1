"""In-memory record environment.

Holds already-decoded records as plain Python objects. Used by tests and by
callers that decode plugins elsewhere and only need the discovery core.
Collections keep insertion order; adding a record whose identity is already
present in the collection overrides it in place, like a later plugin in a
load order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ammolink.domain.errors import AccessFailure, ResolutionFailure
from ammolink.domain.model import FormKey

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FormLink:
    """A typed link to another record; ``form_key=None`` is a null link."""

    form_key: FormKey | None

    @classmethod
    def to(cls, value: str | FormKey) -> FormLink:
        return cls(value if isinstance(value, FormKey) else FormKey.parse(value))

    @property
    def is_null(self) -> bool:
        return self.form_key is None or not self.form_key.is_valid


@dataclass(frozen=True, slots=True)
class PropertyEntry:
    """One ``property -> value`` change carried by a modification record."""

    property: str
    value: object


@dataclass(frozen=True, slots=True)
class Unreadable:
    """Property placeholder whose read always fails."""

    reason: str = "unreadable"


@dataclass(slots=True, eq=False)
class MemoryRecord:
    form_key: FormKey
    kind: str
    editor_id: str = ""
    properties: dict[str, object] = field(default_factory=dict[str, object])
    signature: str = ""

    @property
    def plugin(self) -> str:
        return self.form_key.plugin

    def __repr__(self) -> str:
        return f"MemoryRecord({self.kind} {self.form_key} {self.editor_id!r})"


class MemoryEnvironment:
    """Record environment backed by dictionaries."""

    def __init__(self, records: Iterable[MemoryRecord] = ()) -> None:
        self._collections: dict[str, dict[FormKey, MemoryRecord]] = {}
        self._by_key: dict[FormKey, MemoryRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: MemoryRecord) -> MemoryRecord:
        collection = self._collections.setdefault(record.kind, {})
        collection[record.form_key] = record
        self._by_key[record.form_key] = record
        return record

    def extend(self, records: Iterable[MemoryRecord]) -> None:
        for record in records:
            self.add(record)

    def get(self, form_key: FormKey) -> MemoryRecord:
        try:
            return self._by_key[form_key]
        except KeyError:
            raise ResolutionFailure(form_key, "no such record") from None

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, form_key: object) -> bool:
        return form_key in self._by_key

    # RecordEnvironment

    def collection_names(self) -> Sequence[str]:
        return tuple(self._collections)

    def winning_overrides(self, collection: str) -> Sequence[MemoryRecord]:
        return tuple(self._collections.get(collection, {}).values())

    def record_kind(self, record: object) -> str:
        return self._record(record).kind

    def property_names(self, record: object) -> Sequence[str]:
        return tuple(self._record(record).properties)

    def read_property(self, record: object, name: str) -> object:
        memory_record = self._record(record)
        try:
            value = memory_record.properties[name]
        except KeyError:
            raise AccessFailure(str(memory_record.form_key), property_name=name) from None
        if isinstance(value, Unreadable):
            raise AccessFailure(str(memory_record.form_key), property_name=name)
        return value

    def identity_of(self, value: object) -> FormKey | None:
        if isinstance(value, FormKey):
            return value
        if isinstance(value, FormLink):
            return value.form_key
        if isinstance(value, MemoryRecord):
            return value.form_key
        return None

    def editor_id_of(self, record: object) -> str:
        return self._record(record).editor_id

    @staticmethod
    def _record(record: object) -> MemoryRecord:
        if not isinstance(record, MemoryRecord):
            raise AccessFailure(type(record).__name__)
        return record


@dataclass(slots=True)
class CachingLinkResolver:
    """Per-run resolver that remembers every answer, misses included."""

    environment: MemoryEnvironment
    hits: int = 0
    misses: int = 0
    _cache: dict[tuple[FormKey, tuple[str, ...] | None], MemoryRecord | None] = field(
        default_factory=dict[tuple[FormKey, tuple[str, ...] | None], MemoryRecord | None],
        repr=False,
    )

    def resolve(self, form_key: FormKey, *, kinds: Sequence[str] | None = None) -> object | None:
        key = (form_key, tuple(kinds) if kinds else None)
        if key in self._cache:
            self.hits += 1
            return self._cache[key]
        self.misses += 1
        resolved = self._lookup(form_key, key[1])
        self._cache[key] = resolved
        return resolved

    def _lookup(self, form_key: FormKey, kinds: tuple[str, ...] | None) -> MemoryRecord | None:
        try:
            record = self.environment.get(form_key)
        except ResolutionFailure as exc:
            log.debug("%s", exc)
            return None
        if kinds is not None and record.kind.casefold() not in {kind.casefold() for kind in kinds}:
            return None
        return record
