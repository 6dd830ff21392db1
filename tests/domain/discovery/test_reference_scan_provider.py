from __future__ import annotations

import pytest

from ammolink.adapters.memory import Unreadable
from ammolink.domain.cancellation import CancellationToken
from ammolink.domain.discovery import ReferenceScanCandidateProvider
from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.model import CandidateKind
from tests.support.contexts import extraction_for
from tests.support.records import (
    MOD,
    FailingEnumerationEnvironment,
    environment_of,
    fk,
    link,
    make_record,
    make_weapon,
)


def test_direct_weapon_link_becomes_reference_candidate() -> None:
    environment = environment_of(
        make_weapon(0x100, editor_id="Rifle"),
        make_record(0x10, "ObjectModification", editor_id="mod_x", Target=link(0x100)),
    )

    [candidate] = ReferenceScanCandidateProvider().provide(extraction_for(environment))

    assert candidate.kind is CandidateKind.REFERENCE
    assert candidate.form_key == fk(0x10)
    assert candidate.record_kind == "ObjectModification"
    assert candidate.editor_id == "mod_x"
    assert candidate.base_weapon == fk(0x100)
    assert candidate.base_weapon_editor_id == "Rifle"
    assert candidate.suggested_target == "Reference"
    assert candidate.notes == "Reference found in ObjectModification.Target -> Plugin.esp:00000100"
    assert candidate.candidate_ammo is None


def test_first_other_link_is_recorded_as_detected_ammo() -> None:
    environment = environment_of(
        make_weapon(0x100),
        make_record(0x10, "Misc", Target=link(0x100), First=link(0x201), Second=link(0x202)),
    )

    [candidate] = ReferenceScanCandidateProvider().provide(extraction_for(environment))

    assert candidate.candidate_ammo == fk(0x201)
    assert candidate.notes.endswith(";DetectedAmmo=Plugin.esp:00000201")


def test_sequence_hit_is_marked_enumerable_once_per_property() -> None:
    environment = environment_of(
        make_weapon(0x100),
        make_weapon(0x101),
        make_record(0x10, "Leveled", Items=[link(0x5), link(0x100), link(0x101)]),
    )

    [candidate] = ReferenceScanCandidateProvider().provide(extraction_for(environment))

    assert candidate.base_weapon == fk(0x100)
    assert "Leveled.Items (enumerable)" in candidate.notes


def test_sequence_inspection_stops_after_sixteen_elements() -> None:
    filler = [link(0x500 + offset) for offset in range(16)]
    environment = environment_of(
        make_weapon(0x100),
        make_record(0x10, "Leveled", Items=[*filler, link(0x100)]),
    )

    assert ReferenceScanCandidateProvider().provide(extraction_for(environment)) == []


def test_each_weapon_property_yields_its_own_candidate() -> None:
    environment = environment_of(
        make_weapon(0x100),
        make_weapon(0x101),
        make_record(0x10, "Misc", A=link(0x100), B=link(0x101)),
    )

    candidates = ReferenceScanCandidateProvider().provide(extraction_for(environment))

    assert [candidate.base_weapon for candidate in candidates] == [fk(0x100), fk(0x101)]
    assert candidates[0].candidate_ammo == fk(0x101)


def test_excluded_sources_and_unreadable_properties_are_skipped() -> None:
    environment = environment_of(
        make_weapon(0x100),
        make_record(0x10, "Misc", plugin=MOD, Target=link(0x100)),
        make_record(0x11, "Misc", Broken=Unreadable(), Target=link(0x100)),
    )

    candidates = ReferenceScanCandidateProvider().provide(extraction_for(environment, excluded=[MOD]))

    assert [candidate.form_key for candidate in candidates] == [fk(0x11)]


def test_cancellation_propagates_from_scan() -> None:
    token = CancellationToken()
    context = extraction_for(environment_of(make_weapon(0x100)), cancellation=token)
    token.cancel()

    with pytest.raises(OperationCancelledError, match="reference-scan"):
        ReferenceScanCandidateProvider().provide(context)


def test_enumeration_failure_keeps_earlier_hits_and_scans_later_collections() -> None:
    environment = FailingEnumerationEnvironment(
        [
            make_weapon(0x100),
            make_record(0x10, "Misc", Target=link(0x100)),
            make_record(0x11, "Misc", Target=link(0x100)),
            make_record(0x30, "Other", Target=link(0x100)),
        ],
        fail_after={"Misc": 1},
    )

    candidates = ReferenceScanCandidateProvider().provide(extraction_for(environment))

    assert [candidate.form_key for candidate in candidates] == [fk(0x10), fk(0x30)]
