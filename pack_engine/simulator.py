# pack_engine/simulator.py
import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from pack_engine.rarity_config import (
    Pack,
    has_mismatch,
    total_probability,
    total_special_probability,
)
from pack_engine.sampler import RandomSource, WeightedItem, pick_uniform, sample
from pack_engine.slot_allocator import allocate

logger = logging.getLogger(__name__)

# (pack_id, rarity) -> id карт этой редкости в пачке
CardPoolLookup = Callable[[str, str], Awaitable[Sequence[str]]]


@dataclass(frozen=True)
class DrawFailure:
    """Сколько слотов не удалось заполнить картой этой редкости"""
    rarity: str
    count: int


@dataclass
class OpeningResult:
    """Результат одного открытия пачки"""
    results: Dict[str, int] = field(default_factory=dict)
    failures: List[DrawFailure] = field(default_factory=list)
    drawn_rarities: Tuple[str, ...] = ()
    warnings: List[str] = field(default_factory=list)

    @property
    def cards_drawn(self) -> int:
        return sum(self.results.values())

    @property
    def failed_draws(self) -> int:
        return sum(f.count for f in self.failures)

    @property
    def warning_message(self) -> Optional[str]:
        """Предупреждения по конфигурации + сводка по неудачным слотам"""
        messages = list(self.warnings)
        if self.failures:
            messages.append(_failure_warning(self.failures))
        return "\n".join(messages) if messages else None


@dataclass
class BatchResult:
    """Сводка по серии открытий"""
    packs_opened: int = 0
    card_counts: Counter = field(default_factory=Counter)
    rarity_counts: Counter = field(default_factory=Counter)
    failure_counts: Counter = field(default_factory=Counter)
    warnings: List[str] = field(default_factory=list)

    @property
    def failures(self) -> List[DrawFailure]:
        return [DrawFailure(rarity, count) for rarity, count in self.failure_counts.items()]

    @property
    def warning_message(self) -> Optional[str]:
        messages = list(self.warnings)
        if self.failure_counts:
            messages.append(_failure_warning(self.failures))
        return "\n".join(messages) if messages else None

    def rarity_share(self, rarity: str) -> float:
        total = sum(self.rarity_counts.values())
        return self.rarity_counts[rarity] / total if total else 0.0


def _failure_warning(failures: List[DrawFailure]) -> str:
    details = ", ".join(f"{f.rarity} ({f.count})" for f in failures)
    total = sum(f.count for f in failures)
    return (
        f"⚠️ Не удалось вытянуть {total} карт: для редкостей нет карт в пачке: {details}. "
        f"Проверьте, что карты привязаны к пачке и редкости."
    )


class PackOpeningSimulator:
    """
    Открытие пачки: сначала фиксированные слоты, затем особые, затем базовые.

    Для каждого слота спрашиваем у card_pool_lookup карты нужной редкости и
    берём одну равновероятно. Если карт нет - слот пропускается и попадает
    в failures, другой редкостью не подменяем.
    """

    def __init__(self, card_pool_lookup: CardPoolLookup, rng: Optional[RandomSource] = None):
        self.card_pool_lookup = card_pool_lookup
        self.rng = rng if rng is not None else random.Random()

    async def open_pack(self, pack: Pack) -> OpeningResult:
        breakdown = allocate(pack)
        remaining = pack.slots_per_pack

        results: Counter = Counter()
        failed: Dict[str, int] = {}
        drawn: List[str] = []
        warnings: List[str] = []

        async def draw(rarity: str):
            drawn.append(rarity)
            card_ids = await self.card_pool_lookup(pack.pack_id, rarity)
            if not card_ids:
                logger.warning(f"⚠️ Draw #{len(drawn)}: no cards of rarity {rarity} in pack {pack.pack_id}, skipping")
                failed[rarity] = failed.get(rarity, 0) + 1
                return
            results[pick_uniform(card_ids, self.rng)] += 1

        # 1. Фиксированные слоты
        if pack.is_advanced:
            for tier in pack.tiers:
                for _ in range(tier.fixed_count):
                    if remaining == 0:
                        break
                    await draw(tier.label)
                    remaining -= 1

        if breakdown.fixed_slots + breakdown.special_slots > pack.slots_per_pack:
            warnings.append(
                f"⚠️ Фиксированные ({breakdown.fixed_slots}) и особые ({breakdown.special_slots}) слоты "
                f"превышают размер пачки ({pack.slots_per_pack}), лишние слоты пропущены"
            )

        # 2. Особые слоты
        special_draws = min(breakdown.special_slots, remaining)
        if special_draws > 0:
            special_total = total_special_probability(pack.tiers)
            if has_mismatch(special_total):
                warnings.append(
                    f"⚠️ Сумма особых вероятностей не равна 100% ({special_total * 100:.2f}%), "
                    f"распределение может быть искажено"
                )
            items = [WeightedItem(t.label, t.special_probability) for t in pack.tiers]
            for _ in range(special_draws):
                await draw(sample(items, self.rng))
            remaining -= special_draws

        # 3. Базовые слоты (всё, что осталось)
        if remaining > 0:
            base_total = total_probability(pack.tiers)
            if has_mismatch(base_total):
                warnings.append(
                    f"⚠️ Сумма базовых вероятностей не равна 100% ({base_total * 100:.2f}%), "
                    f"распределение может быть искажено"
                )
            items = [WeightedItem(t.label, t.probability) for t in pack.tiers]
            for _ in range(remaining):
                await draw(sample(items, self.rng))

        failures = [DrawFailure(rarity, count) for rarity, count in failed.items()]

        logger.debug(
            f"✅ Pack {pack.pack_id} opened: {sum(results.values())} cards, "
            f"{sum(failed.values())} failed draws"
        )
        return OpeningResult(
            results=dict(results),
            failures=failures,
            drawn_rarities=tuple(drawn),
            warnings=warnings,
        )

    async def open_packs(self, pack: Pack, count: int) -> BatchResult:
        """Открыть count пачек подряд и собрать статистику"""
        if count < 0:
            raise ValueError("Количество пачек не может быть отрицательным")

        batch = BatchResult()
        for _ in range(count):
            opening = await self.open_pack(pack)
            batch.packs_opened += 1
            batch.card_counts.update(opening.results)
            batch.rarity_counts.update(opening.drawn_rarities)
            for failure in opening.failures:
                batch.failure_counts[failure.rarity] += failure.count
            for warning in opening.warnings:
                if warning not in batch.warnings:
                    batch.warnings.append(warning)
        logger.info(
            f"✅ Opened {batch.packs_opened} packs of {pack.pack_id}: "
            f"{sum(batch.card_counts.values())} cards, {sum(batch.failure_counts.values())} failed draws"
        )
        return batch


async def open_pack(
    pack: Pack,
    card_pool_lookup: CardPoolLookup,
    rng: Optional[RandomSource] = None,
) -> OpeningResult:
    """Открыть одну пачку"""
    return await PackOpeningSimulator(card_pool_lookup, rng).open_pack(pack)


async def open_packs(
    pack: Pack,
    card_pool_lookup: CardPoolLookup,
    count: int,
    rng: Optional[RandomSource] = None,
) -> BatchResult:
    """Открыть серию пачек"""
    return await PackOpeningSimulator(card_pool_lookup, rng).open_packs(pack, count)
