from __future__ import annotations

import pytest

from ammolink.adapters.memory import CachingLinkResolver, FormLink, MemoryRecord, Unreadable
from ammolink.domain.errors import AccessFailure, ResolutionFailure
from ammolink.domain.model import FormKey
from ammolink.domain.ports import LinkResolver, RecordEnvironment
from tests.support.records import environment_of, fk, link, make_ammo, make_record, make_weapon


def test_environment_satisfies_the_ports() -> None:
    environment = environment_of()

    assert isinstance(environment, RecordEnvironment)
    assert isinstance(CachingLinkResolver(environment), LinkResolver)


def test_later_record_overrides_earlier_one_in_place() -> None:
    environment = environment_of(
        make_weapon(0x100, editor_id="Original"),
        make_weapon(0x101),
        make_weapon(0x100, plugin="plugin.esp", editor_id="Override"),
    )

    weapons = environment.winning_overrides("Weapon")

    assert [environment.editor_id_of(w) for w in weapons] == ["Override", "Weapon101"]
    assert len(environment) == 2


def test_collections_keep_insertion_order() -> None:
    environment = environment_of(make_ammo(0x1), make_weapon(0x2), make_record(0x3, "Misc"))

    assert environment.collection_names() == ("Ammo", "Weapon", "Misc")
    assert environment.winning_overrides("Absent") == ()


def test_property_reads() -> None:
    record = make_record(0x3, "Misc", Target=link(0x100), Broken=Unreadable())
    environment = environment_of(record)

    assert environment.property_names(record) == ("Target", "Broken")
    assert environment.read_property(record, "Target") == link(0x100)
    with pytest.raises(AccessFailure):
        environment.read_property(record, "Broken")
    with pytest.raises(AccessFailure, match="Missing"):
        environment.read_property(record, "Missing")
    with pytest.raises(AccessFailure):
        environment.record_kind(object())


def test_identity_of_supported_values() -> None:
    record = make_ammo(0x200)
    environment = environment_of(record)

    assert environment.identity_of(record) == fk(0x200)
    assert environment.identity_of(link(0x200)) == fk(0x200)
    assert environment.identity_of(fk(0x200)) == fk(0x200)
    assert environment.identity_of(FormLink(None)) is None
    assert environment.identity_of("Plugin.esp:00000200") is None


def test_form_link_helpers() -> None:
    assert FormLink.to("Plugin.esp:00000200").form_key == fk(0x200)
    assert FormLink.to(fk(0x200)) == link(0x200)
    assert FormLink(None).is_null
    assert FormLink(FormKey("Plugin.esp", 0)).is_null


def test_get_unknown_identity_raises() -> None:
    with pytest.raises(ResolutionFailure):
        environment_of().get(fk(0x999))


def test_resolver_filters_by_kind_and_caches_misses() -> None:
    environment = environment_of(make_ammo(0x200))
    resolver = CachingLinkResolver(environment)

    found = resolver.resolve(fk(0x200), kinds=("ammo",))
    wrong_kind = resolver.resolve(fk(0x200), kinds=("Weapon",))
    missing = resolver.resolve(fk(0x999))
    missing_again = resolver.resolve(fk(0x999))

    assert isinstance(found, MemoryRecord)
    assert wrong_kind is None
    assert missing is None
    assert missing_again is None
    assert (resolver.hits, resolver.misses) == (1, 3)
