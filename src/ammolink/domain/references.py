"""Tagged reference extraction.

Record shapes vary by kind and by data-source version, so the core never
hard-codes where a link lives. Instead every property is read generically
through the accessor and each link it exposes is tagged with a
:class:`ReferenceKind` taken from a per-record-kind classifier table. Kinds
that are not in the table fall back to the generic classifier, so new or
unknown record shapes are still scanned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.model import RecordKind, ReferenceKind, valid_or_none

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator

    from ammolink.domain.log_dedup import LogDeduplicator
    from ammolink.domain.model import FormKey
    from ammolink.domain.ports import RecordEnvironment

log = logging.getLogger(__name__)

type PropertyClassifier = Mapping[str, ReferenceKind]

DEFAULT_SEQUENCE_CAP: Final[int] = 16

_GENERIC_CLASSIFIER: Final[PropertyClassifier] = {
    "ammo": ReferenceKind.AMMO,
    "attachpoint": ReferenceKind.ATTACH_POINT,
}

REFERENCE_CLASSIFIERS: Final[Mapping[str, PropertyClassifier]] = {
    RecordKind.WEAPON.casefold(): {
        "ammo": ReferenceKind.AMMO,
        "attachparentslots": ReferenceKind.ATTACH_POINT,
    },
    RecordKind.OBJECT_MODIFICATION.casefold(): {
        "attachpoint": ReferenceKind.ATTACH_POINT,
        "attachparentslots": ReferenceKind.ATTACH_POINT,
    },
    RecordKind.CONSTRUCTIBLE_OBJECT.casefold(): {
        "createdobject": ReferenceKind.OTHER,
    },
    RecordKind.AMMO.casefold(): {
        "projectile": ReferenceKind.OTHER,
    },
}


def classify(record_kind: str, property_name: str) -> ReferenceKind:
    classifier = REFERENCE_CLASSIFIERS.get(record_kind.casefold(), _GENERIC_CLASSIFIER)
    return classifier.get(property_name.casefold(), ReferenceKind.OTHER)


@dataclass(frozen=True, slots=True)
class PropertyReference:
    """One link exposed by a record property."""

    property_name: str
    value: object
    form_key: FormKey
    kind: ReferenceKind
    element_index: int | None = None

    @property
    def from_sequence(self) -> bool:
        return self.element_index is not None


def _is_sequence_value(value: object) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


@dataclass(slots=True)
class ReferenceReader:
    """Best-effort reader of identities and references through the accessor.

    Every failure is reported to ``log_dedup`` (keyed by failure class) and
    turned into "no reference". Only cancellation raised by the accessor
    escapes.
    """

    environment: RecordEnvironment
    log_dedup: LogDeduplicator | None = None
    sequence_cap: int = DEFAULT_SEQUENCE_CAP

    def records(self, collection: str) -> Iterator[object]:
        """Winning overrides of ``collection``.

        A failure part-way through ends the collection early; records already
        yielded stand.
        """

        try:
            iterator = iter(self.environment.winning_overrides(collection))
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            self._report("collection-read", "Could not enumerate %s records", collection, exc=exc)
            return

        read = 0
        while True:
            try:
                record = next(iterator)
            except StopIteration:
                return
            except OperationCancelledError:
                raise
            except Exception as exc:  # noqa: BLE001
                self._report(
                    "collection-read",
                    "Enumeration of %s stopped after %d records",
                    collection,
                    read,
                    exc=exc,
                )
                return
            read += 1
            yield record

    def identity_of(self, value: object) -> FormKey | None:
        try:
            return valid_or_none(self.environment.identity_of(value))
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            self._report("identity", "Could not extract identity from %r", value, exc=exc)
            return None

    def editor_id_of(self, record: object | None) -> str:
        if record is None:
            return ""
        try:
            return self.environment.editor_id_of(record) or ""
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            self._report("editor-id", "Could not read editor id of %r", record, exc=exc)
            return ""

    def record_kind_of(self, record: object) -> str:
        try:
            return self.environment.record_kind(record)
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            self._report("record-kind", "Could not read record kind of %r", record, exc=exc)
            return ""

    def references(
        self,
        record: object,
        *,
        expand_sequences: bool = False,
        weapon_keys: Collection[FormKey] | None = None,
        skip_properties: Collection[str] = (),
    ) -> Iterator[PropertyReference]:
        """Yield the links ``record`` exposes, in property declaration order.

        With ``expand_sequences`` the first ``sequence_cap`` elements of
        sequence-valued properties are inspected too. Links into
        ``weapon_keys`` are tagged ``WEAPON`` unless the table says otherwise.
        """

        record_kind = self.record_kind_of(record)
        try:
            names = tuple(self.environment.property_names(record))
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            self._report("property-list", "Could not list properties of %r", record, exc=exc)
            return

        for name in names:
            if name in skip_properties:
                continue
            try:
                value = self.environment.read_property(record, name)
            except OperationCancelledError:
                raise
            except Exception as exc:  # noqa: BLE001
                self._report("property-read", "Could not read property %s of %r", name, record, exc=exc)
                continue
            if value is None:
                continue

            kind = classify(record_kind, name)
            form_key = self.identity_of(value)
            if form_key is not None:
                yield PropertyReference(
                    property_name=name,
                    value=value,
                    form_key=form_key,
                    kind=_tag(kind, form_key, weapon_keys),
                )
                continue

            if expand_sequences and _is_sequence_value(value):
                yield from self._sequence_references(name, value, kind, weapon_keys)

    def read_link(self, record: object | None, name: str) -> PropertyReference | None:
        """Direct link held by property ``name``, or ``None``."""

        if record is None:
            return None
        try:
            value = self.environment.read_property(record, name)
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            self._report("property-read", "Could not read property %s of %r", name, record, exc=exc)
            return None
        if value is None:
            return None
        form_key = self.identity_of(value)
        if form_key is None:
            return None
        kind = classify(self.record_kind_of(record), name)
        return PropertyReference(property_name=name, value=value, form_key=form_key, kind=kind)

    def first_reference(self, record: object, kind: ReferenceKind) -> PropertyReference | None:
        for reference in self.references(record):
            if reference.kind is kind:
                return reference
        return None

    def _sequence_references(
        self,
        name: str,
        value: object,
        kind: ReferenceKind,
        weapon_keys: Collection[FormKey] | None,
    ) -> Iterator[PropertyReference]:
        inspected = 0
        try:
            for index, element in enumerate(value):  # type: ignore[arg-type]
                if element is None:
                    continue
                inspected += 1
                if inspected > self.sequence_cap:
                    break
                form_key = self.identity_of(element)
                if form_key is None:
                    continue
                yield PropertyReference(
                    property_name=name,
                    value=element,
                    form_key=form_key,
                    kind=_tag(kind, form_key, weapon_keys),
                    element_index=index,
                )
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            self._report("sequence-read", "Could not iterate property %s", name, exc=exc)

    def _report(self, message_class: str, msg: str, *args: object, exc: BaseException) -> None:
        if self.log_dedup is not None:
            self.log_dedup.log(message_class, msg, *args, exc=exc)
        else:
            log.debug(msg, *args, exc_info=exc)


def _tag(
    kind: ReferenceKind,
    form_key: FormKey,
    weapon_keys: Collection[FormKey] | None,
) -> ReferenceKind:
    if kind is ReferenceKind.OTHER and weapon_keys is not None and form_key in weapon_keys:
        return ReferenceKind.WEAPON
    return kind
