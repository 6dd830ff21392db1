from __future__ import annotations

import pytest

from ammolink.domain.model import FormKey, PluginSet, valid_or_none


def test_canonical_string_pads_id_to_eight_hex_digits() -> None:
    assert str(FormKey("Plugin.esp", 0x100)) == "Plugin.esp:00000100"


def test_parse_round_trips_canonical_form() -> None:
    key = FormKey.parse("DLCCoast.esm:0001ABCD")

    assert key.plugin == "DLCCoast.esm"
    assert key.form_id == 0x1ABCD


@pytest.mark.parametrize("raw", ["Plugin.esp", ":00000100", "Plugin.esp:xyz"])
def test_parse_rejects_malformed_input(raw: str) -> None:
    with pytest.raises(ValueError, match="Invalid FormKey"):
        FormKey.parse(raw)


def test_form_id_must_fit_in_32_bits() -> None:
    with pytest.raises(ValueError, match="32-bit"):
        FormKey("Plugin.esp", 0x1_0000_0000)


def test_equality_and_hash_ignore_plugin_case() -> None:
    lower = FormKey("plugin.esp", 0x100)
    upper = FormKey("PLUGIN.ESP", 0x100)

    assert lower == upper
    assert hash(lower) == hash(upper)
    assert {lower: "x"}[upper] == "x"
    assert lower.index_key == upper.index_key == "plugin.esp:00000100"


def test_different_ids_are_not_equal() -> None:
    assert FormKey("Plugin.esp", 0x100) != FormKey("Plugin.esp", 0x101)


def test_empty_plugin_or_zero_id_is_invalid() -> None:
    assert not FormKey("", 0x100).is_valid
    assert not FormKey("Plugin.esp", 0).is_valid
    assert valid_or_none(FormKey("Plugin.esp", 0)) is None
    assert valid_or_none(None) is None
    assert valid_or_none(FormKey("Plugin.esp", 1)) == FormKey("Plugin.esp", 1)


def test_plugin_set_is_case_insensitive_and_ignores_blanks() -> None:
    plugins = PluginSet.of(["Fallout4.esm", "  ", "Mod.ESP "])

    assert "fallout4.ESM" in plugins
    assert "mod.esp" in plugins
    assert "Other.esp" not in plugins
    assert 42 not in plugins
    assert len(plugins) == 2


def test_plugin_set_of_existing_set_is_identity() -> None:
    plugins = PluginSet.of(["A.esp"])

    assert PluginSet.of(plugins) is plugins
    assert not PluginSet.of()
