from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from ammolink.domain.model import Candidate, CandidateKind
from tests.support.records import (
    environment_of,
    fk,
    link,
    make_ammo,
    make_modification,
    make_weapon,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ammolink.adapters.memory import MemoryEnvironment


@pytest.fixture(autouse=True)
def _clean_ammolink_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "AMMOLINK_EXCLUDED_PLUGINS",
        "AMMOLINK_EXCLUDE_BASE_MASTER",
        "AMMOLINK_EXCLUDE_DLC_MASTERS",
        "AMMOLINK_ARTIFACTS_DIR",
        "AMMOLINK_SEQUENCE_INSPECTION_CAP",
        "AMMOLINK_LOG_SUPPRESSION_THRESHOLD",
        "AMMOLINK_INDEX_CHECKPOINT_INTERVAL",
        "AMMOLINK_GROUP_CHECKPOINT_INTERVAL",
        "AMMOLINK_DETECTOR_SCHEMA_VERSION",
        "AMMOLINK_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def debug_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    caplog.set_level(logging.DEBUG, logger="ammolink")
    return caplog


@pytest.fixture
def referencing_load_order() -> MemoryEnvironment:
    """Weapon ``Plugin.esp:100`` referenced by record ``R`` whose ``Ammo`` is ``Plugin.esp:200``.

    ``Plugin.esp:200`` is deliberately not an ammunition record, so only a
    detector can confirm through ``R``.
    """

    return environment_of(
        make_weapon(0x100, ammo=link(0x300)),
        make_ammo(0x300),
        make_modification(0x400, editor_id="R", Target=link(0x100), Ammo=link(0x200)),
    )


@pytest.fixture
def reference_candidate() -> Candidate:
    return Candidate(
        kind=CandidateKind.REFERENCE,
        form_key=fk(0x400),
        record_kind="ObjectModification",
        base_weapon=fk(0x100),
        source_plugin="Plugin.esp",
    )
