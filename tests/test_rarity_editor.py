import dataclasses

import pytest

from pack_engine.rarity_config import (
    AdvancedRarity,
    AdvancedRarityTier as Adv,
    Pack,
    RarityTier,
    SimpleRarity,
)
from pack_engine.rarity_editor import RarityEditor, TierDraft


def make_editor(**kwargs):
    kwargs.setdefault("simple_tiers", [TierDraft("Common", 0.8), TierDraft("Rare", 0.2)])
    kwargs.setdefault("slots_per_pack", 5)
    return RarityEditor(**kwargs)


def test_empty_editor_falls_back_to_common():
    editor = RarityEditor()
    assert editor.tiers == [TierDraft("Common", 1.0)]
    assert editor.validation.is_savable


def test_simple_to_advanced_and_back_restores_simple_tiers():
    original = SimpleRarity([RarityTier("Common", 0.8), RarityTier("Rare", 0.2)])
    pack = Pack("p", original, slots_per_pack=5)
    editor = RarityEditor.from_pack(pack)

    editor.toggle_advanced(True)
    editor.toggle_advanced(False)

    assert editor.build(pack).rarity == original


def test_advanced_edits_do_not_touch_simple_tiers():
    editor = make_editor()
    before = [dataclasses.replace(t) for t in editor.simple_tiers]

    editor.toggle_advanced(True)
    assert [t.label for t in editor.tiers] == ["Common", "Rare"]
    editor.set_fixed_count(1, 1)
    editor.set_probability(0, 1.0)
    editor.set_probability(1, 0.0)
    editor.add_tier()
    editor.toggle_advanced(False)

    assert editor.simple_tiers == before
    assert editor.simple_rarity() == SimpleRarity([RarityTier("Common", 0.8), RarityTier("Rare", 0.2)])


def test_advanced_list_survives_toggle():
    editor = make_editor()
    editor.toggle_advanced(True)
    editor.set_fixed_count(1, 2)
    editor.toggle_advanced(False)
    editor.toggle_advanced(True)

    assert editor.tiers[1].fixed_count == 2


def test_special_slots_only_apply_in_advanced_mode():
    editor = make_editor()
    editor.toggle_advanced(True)
    editor.set_special_slot_count(2)
    assert editor.special_slot_count == 2

    editor.toggle_advanced(False)
    assert editor.special_slot_count == 0
    assert editor.validation.special_slot_count == 0
    assert editor.inactive_rarity().special_slot_count == 2

    editor.toggle_advanced(True)
    assert editor.special_slot_count == 2


def test_duplicate_label_blocks_saving():
    editor = make_editor()
    editor.set_label(1, "Common")

    validation = editor.validation
    assert validation.duplicate_labels == ("Common",)
    assert not validation.is_savable
    assert any("Common" in message for message in validation.messages())

    editor.set_label(1, "Rare")
    assert editor.validation.is_savable


def test_add_tier_uses_defaults():
    editor = make_editor()
    tier = editor.add_tier()

    assert tier == TierDraft("NewRarity_3", 0.0001, 0.0, 0)
    assert editor.validation.base_mismatch
    assert editor.validation.total_probability == pytest.approx(1.0001)


def test_last_tier_cannot_be_removed():
    editor = RarityEditor(simple_tiers=[TierDraft("Common", 1.0)])

    assert editor.remove_tier(0) is False
    assert len(editor.tiers) == 1

    editor.add_tier()
    assert editor.remove_tier(0) is True
    assert editor.tiers[0].label == "NewRarity_2"


@pytest.mark.parametrize("value, expected", [
    ("0.25", 0.25),
    (0.5, 0.5),
    ("1.5", 1.0),
    (-3, 0.0),
    ("abc", 0.0),
    (None, 0.0),
    (float("nan"), 0.0),
])
def test_probability_input_is_clamped(value, expected):
    editor = make_editor()
    editor.set_probability(0, value)
    editor.set_special_probability(1, value)

    assert editor.tiers[0].probability == expected
    assert editor.tiers[1].special_probability == expected


@pytest.mark.parametrize("value, expected", [
    ("2", 2),
    ("2.7", 2),
    (3, 3),
    (-1, 0),
    ("x", 0),
    (float("inf"), 0),
])
def test_fixed_count_input_is_integer(value, expected):
    editor = make_editor()
    editor.toggle_advanced(True)
    editor.set_fixed_count(0, value)
    assert editor.tiers[0].fixed_count == expected


def test_special_slot_count_is_clamped_to_pack_size():
    editor = make_editor(slots_per_pack=5)
    editor.toggle_advanced(True)

    editor.set_special_slot_count(9)
    assert editor.special_slot_count == 5

    editor.set_special_slot_count("-2")
    assert editor.special_slot_count == 0


def test_live_validation_flags_slot_overflow():
    editor = make_editor(slots_per_pack=5)
    editor.toggle_advanced(True)
    editor.set_fixed_count(0, 3)
    editor.set_special_slot_count(3)

    validation = editor.validation
    assert validation.slots_negative
    assert validation.special_mismatch
    assert not validation.is_savable


def test_build_drops_empty_tiers():
    pack = Pack("p", SimpleRarity([RarityTier("Common", 1.0)]), slots_per_pack=5, price=10.0)
    editor = RarityEditor.from_pack(pack)
    editor.toggle_advanced(True)
    editor.add_tier()
    editor.set_label(1, "Foil")
    editor.set_probability(1, 0)
    editor.set_fixed_count(1, 1)
    editor.add_tier()
    editor.set_probability(2, 0)

    built = editor.build(pack)

    assert built.rarity == AdvancedRarity([Adv("Common", 1.0, 0.0, 0), Adv("Foil", 0.0, 0.0, 1)])
    assert built.price == 10.0
    assert pack.rarity == SimpleRarity([RarityTier("Common", 1.0)])


def test_from_advanced_pack_keeps_inactive_simple_list():
    advanced = AdvancedRarity([Adv("Common", 1.0, 0.0, 0), Adv("Foil", 0.0, 0.0, 1)])
    inactive = SimpleRarity([RarityTier("Common", 0.9), RarityTier("Rare", 0.1)])
    pack = Pack("p", advanced, slots_per_pack=5)

    editor = RarityEditor.from_pack(pack, inactive=inactive)

    assert editor.is_advanced
    assert editor.special_slot_count == 0
    assert editor.inactive_rarity() == inactive
    editor.toggle_advanced(False)
    assert editor.active_rarity() == inactive


def test_from_simple_pack_restores_special_slots_of_inactive_list():
    pack = Pack("p", SimpleRarity([RarityTier("Common", 1.0)]), slots_per_pack=5)
    inactive = AdvancedRarity([Adv("Common", 1.0, 1.0, 0)], special_slot_count=2)

    editor = RarityEditor.from_pack(pack, inactive=inactive)

    assert editor.special_slot_count == 0
    editor.toggle_advanced(True)
    assert editor.special_slot_count == 2
    assert editor.active_rarity() == inactive
