"""Concrete ammunition change detectors.

``TypedPropertyDetector`` understands the modification schema where changes
are listed as ``Properties`` entries (``property``/``value`` pairs). For
anything else, ``FallbackLinkDetector`` treats any link that differs from the
original ammunition as the replacement.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.model import RecordKind, valid_or_none
from ammolink.domain.ports import NO_CHANGE, DetectionResult

if TYPE_CHECKING:
    from ammolink.domain.model import FormKey
    from ammolink.domain.ports import AmmunitionChangeDetector, LinkResolver, RecordEnvironment

log = logging.getLogger(__name__)

PROPERTIES_PROPERTY = "Properties"
AMMO_PROPERTY_NAME = "Ammo"
SUPPORTED_SCHEMA_VERSIONS: Final[frozenset[int]] = frozenset({1})


def _identity(environment: RecordEnvironment, value: object | None) -> FormKey | None:
    if value is None:
        return None
    return valid_or_none(environment.identity_of(value))


@dataclass(slots=True)
class FallbackLinkDetector:
    environment: RecordEnvironment
    name: str = "FallbackLinkDetector"

    def detect(self, record: object, original_ammo: object | None) -> DetectionResult:
        original = _identity(self.environment, original_ammo)
        for property_name in self.environment.property_names(record):
            try:
                value = self.environment.read_property(record, property_name)
                form_key = _identity(self.environment, value)
            except OperationCancelledError:
                raise
            except Exception:  # noqa: BLE001
                log.debug("Property inspection failed for %s", property_name, exc_info=True)
                continue
            if form_key is None or form_key == original:
                continue
            return DetectionResult(changes_ammo=True, new_ammo=value)
        return NO_CHANGE


def _entry_field(entry: object, name: str) -> object | None:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


@dataclass(slots=True)
class TypedPropertyDetector:
    """Detector for schema version 1 modification records.

    Only ``ObjectModification`` records are inspected. When a resolver is
    available the new value must resolve to an ``Ammo`` record. Unexpected
    failures are handed to the fallback detector.
    """

    environment: RecordEnvironment
    resolver: LinkResolver | None = None
    fallback: AmmunitionChangeDetector | None = None
    name: str = "TypedPropertyDetector"

    def detect(self, record: object, original_ammo: object | None) -> DetectionResult:
        try:
            return self._detect(record, original_ammo)
        except OperationCancelledError:
            raise
        except Exception:
            if self.fallback is None:
                raise
            log.warning("%s failed, falling back to %s", self.name, self.fallback.name, exc_info=True)
            return self.fallback.detect(record, original_ammo)

    def _detect(self, record: object, original_ammo: object | None) -> DetectionResult:
        kind = self.environment.record_kind(record)
        if kind.casefold() != RecordKind.OBJECT_MODIFICATION.casefold():
            log.debug("%s ignores %s records", self.name, kind)
            return NO_CHANGE
        if PROPERTIES_PROPERTY not in self.environment.property_names(record):
            return NO_CHANGE
        entries = self.environment.read_property(record, PROPERTIES_PROPERTY)
        if not entries:
            return NO_CHANGE

        original = _identity(self.environment, original_ammo)
        for entry in entries:  # type: ignore[attr-defined]
            if str(_entry_field(entry, "property") or "") != AMMO_PROPERTY_NAME:
                continue
            value = _entry_field(entry, "value")
            form_key = _identity(self.environment, value)
            if form_key is None or form_key == original:
                continue
            if self.resolver is not None and self.resolver.resolve(form_key, kinds=(RecordKind.AMMO,)) is None:
                log.debug("%s could not resolve ammo %s", self.name, form_key)
                continue
            return DetectionResult(changes_ammo=True, new_ammo=value)
        return NO_CHANGE


def select_detector(
    schema_version: int,
    environment: RecordEnvironment,
    *,
    resolver: LinkResolver | None = None,
) -> AmmunitionChangeDetector:
    """Best-fit detector for the record schema version in use."""

    fallback = FallbackLinkDetector(environment)
    if schema_version not in SUPPORTED_SCHEMA_VERSIONS:
        log.info("No typed detector for schema version %d; using %s", schema_version, fallback.name)
        return fallback
    try:
        detector = TypedPropertyDetector(environment, resolver, fallback=fallback)
    except OperationCancelledError:
        raise
    except Exception:
        log.warning("Could not construct typed detector, falling back", exc_info=True)
        return fallback
    log.info("Selected %s for schema version %d", detector.name, schema_version)
    return detector
