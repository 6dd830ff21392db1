"""Accessor boundary: how the core reads records it cannot decode itself.

Implementations wrap whatever actually parses plugin files. Every read is
fallible; implementations raise :class:`~ammolink.domain.errors.AccessFailure`
(or any other exception) and the core treats that as one skipped item.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ammolink.domain.model import FormKey


@runtime_checkable
class RecordEnvironment(Protocol):
    """Read-only view over the winning overrides of a load order."""

    def collection_names(self) -> Sequence[str]:
        """Names of every exposed record collection, in a stable order."""
        ...

    def winning_overrides(self, collection: str) -> Iterable[object]:
        """Effective version of each record in ``collection``."""
        ...

    def record_kind(self, record: object) -> str: ...

    def property_names(self, record: object) -> Sequence[str]:
        """Introspectable property names in declaration order."""
        ...

    def read_property(self, record: object, name: str) -> object: ...

    def identity_of(self, value: object) -> FormKey | None:
        """Identity of a record or link-like value; ``None`` when it has none."""
        ...

    def editor_id_of(self, record: object) -> str: ...


@runtime_checkable
class LinkResolver(Protocol):
    """Resolve identities to records through the load order's link cache."""

    def resolve(self, form_key: FormKey, *, kinds: Sequence[str] | None = None) -> object | None:
        """Return the winning record for ``form_key``.

        ``kinds`` lists record shapes to try in order; ``None`` accepts any.
        """
        ...
