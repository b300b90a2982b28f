# pack_engine/pricing.py
"""
Стоимость одной карты каждой редкости исходя из цены пачки.

Для бустеров: пусть X - цена пачки, Y - слотов в пачке, n - число редкостей,
E_i - ожидаемое количество карт редкости i в пачке, P_i = E_i / Y.
Принимаем, что каждая редкость в среднем даёт одинаковый вклад в цену пачки:
E_i * V_i = X / n, откуда V_i = K / P_i, где K = X / (n * Y).
Это правило экономики, а не закон, поэтому оно передаётся как policy.

Для готовых колод (ConstructedDeck): цена / количество карт, без редкостей.
Расчёт только для отображения и на симуляцию не влияет.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List

from pack_engine.constants import PackType
from pack_engine.rarity_config import Pack, total_fixed_count
from pack_engine.slot_allocator import allocate


@dataclass
class RarityValue:
    rarity: str
    probability: float  # смешанная вероятность по всем пулам
    expected_count: float
    value_per_card: float = 0.0


PricingPolicy = Callable[[List[RarityValue], Pack], None]


def equal_contribution(values: List[RarityValue], pack: Pack) -> None:
    """Каждая редкость даёт X / n к ожидаемой стоимости пачки"""
    k = pack.price / (len(values) * pack.slots_per_pack)
    for value in values:
        value.value_per_card = k / value.probability if value.probability > 0 else 0.0


def expected_counts(pack: Pack) -> Dict[str, float]:
    """Ожидаемое количество карт каждой редкости в одной пачке"""
    if not pack.is_advanced:
        return {tier.label: pack.slots_per_pack * tier.probability for tier in pack.tiers}

    breakdown = allocate(pack)
    fixed_total = total_fixed_count(pack.tiers)

    counts = {}
    for tier in pack.tiers:
        fixed_part = breakdown.fixed_slots * (tier.fixed_count / fixed_total) if fixed_total > 0 else 0.0
        special_part = breakdown.special_slots * tier.special_probability
        basic_part = breakdown.basic_slots * tier.probability
        counts[tier.label] = fixed_part + special_part + basic_part
    return counts


def rarity_values(pack: Pack, policy: PricingPolicy = equal_contribution) -> List[RarityValue]:
    """Ожидаемые количества и стоимость карты по каждой редкости бустера"""
    values = [
        RarityValue(
            rarity=rarity,
            probability=count / pack.slots_per_pack,
            expected_count=count,
        )
        for rarity, count in expected_counts(pack).items()
    ]
    if values:
        policy(values, pack)
    return values


def constructed_deck_price(pack: Pack) -> float:
    if pack.total_cards <= 0:
        return 0.0
    return pack.price / pack.total_cards


def price_per_card(pack: Pack, policy: PricingPolicy = equal_contribution) -> Dict[str, float]:
    """Стоимость одной карты каждой редкости"""
    if pack.pack_type == PackType.CONSTRUCTED_DECK:
        uniform = constructed_deck_price(pack)
        return {tier.label: uniform for tier in pack.tiers}

    return {value.rarity: value.value_per_card for value in rarity_values(pack, policy)}


def card_price(pack: Pack, rarity: str, policy: PricingPolicy = equal_contribution) -> float:
    """Стоимость карты конкретной редкости (0, если такой редкости нет)"""
    if pack.pack_type == PackType.CONSTRUCTED_DECK:
        return constructed_deck_price(pack)
    return price_per_card(pack, policy).get(rarity, 0.0)
