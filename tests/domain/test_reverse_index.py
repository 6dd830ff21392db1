from __future__ import annotations

import pytest

from ammolink.adapters.memory import Unreadable
from ammolink.domain.cancellation import CancellationToken
from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.reverse_index import build_reverse_index
from tests.support.records import (
    MOD,
    FailingEnumerationEnvironment,
    environment_of,
    fk,
    link,
    make_record,
    make_weapon,
)


def _load_order():
    return environment_of(
        make_weapon(0x100),
        make_record(0x10, "Misc", Target=link(0x100), Other=link(0x5)),
        make_record(0x11, "Misc", Target=link(0x100)),
        make_record(0x20, "Leveled", plugin=MOD, Entry=link(0x100)),
        make_record(0x21, "Leveled", Items=[link(0x100)]),
    )


def test_records_are_indexed_under_each_direct_link() -> None:
    index = build_reverse_index(_load_order())

    entries = index.lookup(fk(0x100))
    assert [(entry.source, entry.property_name) for entry in entries] == [
        (fk(0x10), "Target"),
        (fk(0x11), "Target"),
        (fk(0x20, MOD), "Entry"),
    ]
    assert fk(0x5) in index
    assert len(index) == 2
    assert index.entry_count == 4


def test_sequence_elements_are_not_indexed() -> None:
    index = build_reverse_index(_load_order())

    assert all(entry.source != fk(0x21) for entry in index.lookup(fk(0x100)))


def test_lookup_is_case_insensitive_on_plugin() -> None:
    index = build_reverse_index(_load_order())

    assert index.lookup(fk(0x100, "PLUGIN.ESP")) == index.lookup(fk(0x100))


def test_excluded_source_plugins_never_appear() -> None:
    index = build_reverse_index(_load_order(), ["mod.esp"])

    sources = {entry.source.plugin for _, entries in index.items() for entry in entries}
    assert MOD not in sources


def test_links_into_excluded_plugins_are_not_indexed() -> None:
    environment = environment_of(
        make_record(0x10, "Misc", Base=link(0x1, "Fallout4.esm"), Local=link(0x2)),
    )

    index = build_reverse_index(environment, ["Fallout4.esm"])

    assert fk(0x1, "Fallout4.esm") not in index
    assert fk(0x2) in index


def test_rebuilding_yields_identical_ordering() -> None:
    environment = _load_order()

    first = build_reverse_index(environment)
    second = build_reverse_index(environment)

    assert list(first.items()) == list(second.items())


def test_unreadable_property_does_not_affect_siblings() -> None:
    environment = environment_of(
        make_record(0x10, "Misc", Broken=Unreadable(), Target=link(0x100)),
    )

    index = build_reverse_index(environment)

    assert [entry.property_name for entry in index.lookup(fk(0x100))] == ["Target"]


def test_lookup_of_unknown_identity_is_empty() -> None:
    index = build_reverse_index(_load_order())

    assert index.lookup(fk(0x999)) == ()
    assert "Plugin.esp:00000100" not in index


def test_cancelled_token_stops_the_build() -> None:
    with pytest.raises(OperationCancelledError, match="reverse-index"):
        build_reverse_index(_load_order(), cancellation=CancellationToken.cancelled())


def test_enumeration_failure_keeps_read_records_and_later_collections(
    debug_logs: pytest.LogCaptureFixture,
) -> None:
    environment = FailingEnumerationEnvironment(
        [
            make_record(0x10, "Misc", Target=link(0x100)),
            make_record(0x11, "Misc", Target=link(0x100)),
            make_record(0x30, "Other", Target=link(0x100)),
        ],
        fail_after={"Misc": 1},
    )

    index = build_reverse_index(environment)

    assert [entry.source for entry in index.lookup(fk(0x100))] == [fk(0x10), fk(0x30)]
    assert "Enumeration of Misc stopped after 1 records" in debug_logs.text


def test_cancellation_raised_by_enumeration_propagates() -> None:
    environment = FailingEnumerationEnvironment(
        [make_record(0x10, "Misc", Target=link(0x100)), make_record(0x30, "Other", Target=link(0x100))],
        fail_after={"Misc": 0},
        error=OperationCancelledError("enumeration"),
    )

    with pytest.raises(OperationCancelledError, match="enumeration"):
        build_reverse_index(environment)
