# pack_engine/slot_allocator.py
from dataclasses import dataclass

from pack_engine.rarity_config import Pack, compute_basic_slots, total_fixed_count


@dataclass(frozen=True)
class SlotBreakdown:
    """Разбиение слотов пачки: фиксированные / особые / базовые"""
    fixed_slots: int
    special_slots: int
    basic_slots: int

    @property
    def total(self) -> int:
        return self.fixed_slots + self.special_slots + self.basic_slots


def allocate(pack: Pack) -> SlotBreakdown:
    """Разбить слоты пачки на пулы"""
    if not pack.is_advanced:
        return SlotBreakdown(fixed_slots=0, special_slots=0, basic_slots=pack.slots_per_pack)

    fixed_slots = total_fixed_count(pack.tiers)
    special_slots = pack.special_slot_count
    # Переполнение ловит validate_configuration, здесь только зажимаем в 0
    basic = compute_basic_slots(fixed_slots, special_slots, pack.slots_per_pack)

    return SlotBreakdown(
        fixed_slots=fixed_slots,
        special_slots=special_slots,
        basic_slots=basic.basic_slots,
    )
