"""Record identity value object.

A ``FormKey`` names one record across the whole load order: the plugin file
that introduced it plus a 32-bit id. Plugin names compare case-insensitively,
matching how the game resolves file names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

_MAX_FORM_ID: Final[int] = 0xFFFFFFFF

type IdentityKey = str


@dataclass(frozen=True, slots=True, eq=False)
class FormKey:
    plugin: str
    form_id: int

    def __post_init__(self) -> None:
        if not 0 <= self.form_id <= _MAX_FORM_ID:
            raise ValueError(f"form_id out of 32-bit range: {self.form_id!r}")

    @classmethod
    def parse(cls, value: str) -> FormKey:
        """Parse the canonical ``Plugin.esp:000ABCDE`` form."""

        plugin, sep, raw_id = value.strip().rpartition(":")
        if not sep or not plugin:
            raise ValueError(f"Invalid FormKey {value!r}: expected 'Plugin:FormID'")
        try:
            form_id = int(raw_id, 16)
        except ValueError as exc:
            raise ValueError(f"Invalid FormKey {value!r}: form id is not hex") from exc
        return cls(plugin=plugin, form_id=form_id)

    @property
    def is_valid(self) -> bool:
        return bool(self.plugin.strip()) and self.form_id != 0

    @property
    def index_key(self) -> IdentityKey:
        """Case-folded canonical string used as a dictionary key."""

        return f"{self.plugin.casefold()}:{self.form_id:08X}"

    def __str__(self) -> str:
        return f"{self.plugin}:{self.form_id:08X}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormKey):
            return NotImplemented
        return self.form_id == other.form_id and self.plugin.casefold() == other.plugin.casefold()

    def __hash__(self) -> int:
        return hash((self.plugin.casefold(), self.form_id))


def valid_or_none(form_key: FormKey | None) -> FormKey | None:
    """Malformed identities are treated as no reference at all."""

    if form_key is None or not form_key.is_valid:
        return None
    return form_key


@dataclass(frozen=True, slots=True)
class PluginSet:
    """Case-insensitive set of plugin file names."""

    _folded: frozenset[str]

    @classmethod
    def of(cls, names: Iterable[str] | PluginSet = ()) -> PluginSet:
        if isinstance(names, PluginSet):
            return names
        return cls(frozenset(name.strip().casefold() for name in names if name.strip()))

    def __contains__(self, plugin: object) -> bool:
        if not isinstance(plugin, str):
            return False
        return plugin.strip().casefold() in self._folded

    def __len__(self) -> int:
        return len(self._folded)

    def __bool__(self) -> bool:
        return bool(self._folded)
