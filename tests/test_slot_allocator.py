import pytest

from pack_engine.rarity_config import AdvancedRarity, AdvancedRarityTier as Adv, Pack, default_rarity
from pack_engine.slot_allocator import SlotBreakdown, allocate


def test_simple_pack_is_all_basic():
    pack = Pack("p", default_rarity(), slots_per_pack=7)
    assert allocate(pack) == SlotBreakdown(fixed_slots=0, special_slots=0, basic_slots=7)


@pytest.mark.parametrize("fixed_counts, special, slots", [
    ((0, 0), 0, 5),
    ((1, 0), 0, 5),
    ((1, 1), 2, 5),
    ((3, 2), 0, 5),
    ((0, 0), 5, 5),
    ((2, 1), 3, 10),
    ((0, 4), 1, 15),
])
def test_breakdown_covers_every_slot(fixed_counts, special, slots):
    tiers = [Adv(f"T{i}", 0.5, 0.5, count) for i, count in enumerate(fixed_counts)]
    pack = Pack("p", AdvancedRarity(tiers, special), slots_per_pack=slots)

    breakdown = allocate(pack)

    assert breakdown.fixed_slots == sum(fixed_counts)
    assert breakdown.special_slots == special
    assert breakdown.basic_slots >= 0
    assert breakdown.total == slots


def test_overflow_is_clamped_to_zero_basic_slots():
    tiers = [Adv("C", 1.0, 1.0, 4)]
    pack = Pack("p", AdvancedRarity(tiers, 3), slots_per_pack=5)
    assert allocate(pack) == SlotBreakdown(fixed_slots=4, special_slots=3, basic_slots=0)
