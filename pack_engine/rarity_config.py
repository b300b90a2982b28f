# pack_engine/rarity_config.py
"""
Модель правил редкости пачки и их проверка.

Правила задаются одним из двух вариантов:
  SimpleRarity   - метка + вероятность
  AdvancedRarity - метка + базовая вероятность + особая вероятность
                   + фиксированное количество, плюс число особых слотов

Pack - неизменяемый снимок пачки, который получают симулятор и расчёт цен.
Структурные ошибки поднимаются сразу (MalformedPackError), а несовпадение
сумм вероятностей и переполнение слотов - это вычисляемый результат
(ValidationResult), который решает, можно ли сохранять.
"""
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple, Union

from pack_engine.constants import (
    DEFAULT_RARITY_NAME,
    DEFAULT_RARITY_PROBABILITY,
    EPSILON,
    PackType,
)
from pack_engine.exceptions import InvalidRarityConfigError, MalformedPackError


@dataclass(frozen=True)
class RarityTier:
    """Редкость в простом режиме"""
    label: str
    probability: float


@dataclass(frozen=True)
class AdvancedRarityTier:
    """Редкость в расширенном режиме"""
    label: str
    probability: float
    special_probability: float = 0.0
    fixed_count: int = 0


@dataclass(frozen=True)
class SimpleRarity:
    tiers: Tuple[RarityTier, ...]

    def __post_init__(self):
        object.__setattr__(self, "tiers", tuple(self.tiers))

    @property
    def is_advanced(self) -> bool:
        return False


@dataclass(frozen=True)
class AdvancedRarity:
    tiers: Tuple[AdvancedRarityTier, ...]
    special_slot_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, "tiers", tuple(self.tiers))

    @property
    def is_advanced(self) -> bool:
        return True


RarityRules = Union[SimpleRarity, AdvancedRarity]


def default_rarity() -> SimpleRarity:
    """Правила новой пачки: одна редкость Common со 100%"""
    return SimpleRarity(tiers=(RarityTier(DEFAULT_RARITY_NAME, DEFAULT_RARITY_PROBABILITY),))


@dataclass(frozen=True)
class Pack:
    """Снимок пачки для симуляции и расчёта цен"""
    pack_id: str
    rarity: RarityRules
    slots_per_pack: int
    price: float = 0.0
    pack_type: PackType = PackType.BOOSTER
    total_cards: int = 0
    name: str = ""

    def __post_init__(self):
        problems = _structural_problems(self)
        if problems:
            raise MalformedPackError("; ".join(problems))

    @property
    def tiers(self) -> tuple:
        return self.rarity.tiers

    @property
    def is_advanced(self) -> bool:
        return self.rarity.is_advanced

    @property
    def special_slot_count(self) -> int:
        if isinstance(self.rarity, AdvancedRarity):
            return self.rarity.special_slot_count
        return 0


def _is_probability(value: Any) -> bool:
    return _is_number(value) and 0.0 <= value <= 1.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _structural_problems(pack: Pack) -> List[str]:
    problems = []
    rules = pack.rarity

    if not isinstance(rules, (SimpleRarity, AdvancedRarity)):
        return [f"Неизвестный тип правил редкости: {type(rules).__name__}"]

    if not isinstance(pack.slots_per_pack, int) or pack.slots_per_pack < 1:
        problems.append(f"Слотов в пачке должно быть не меньше 1 (получено {pack.slots_per_pack})")

    if not _is_number(pack.price) or pack.price < 0:
        problems.append(f"Цена не может быть отрицательной (получено {pack.price})")

    if not rules.tiers:
        problems.append("Нужна хотя бы одна редкость")

    duplicates = duplicate_labels(rules.tiers)
    if duplicates:
        problems.append(f"Повторяющиеся редкости: {', '.join(duplicates)}")

    expected_tier = AdvancedRarityTier if rules.is_advanced else RarityTier
    for tier in rules.tiers:
        if not isinstance(tier, expected_tier):
            problems.append(f"{tier!r} не подходит для режима {type(rules).__name__}")
            continue
        if not _is_probability(tier.probability):
            problems.append(f"{tier.label}: вероятность вне диапазона [0, 1]")
        if isinstance(tier, AdvancedRarityTier):
            if not _is_probability(tier.special_probability):
                problems.append(f"{tier.label}: особая вероятность вне диапазона [0, 1]")
            if not isinstance(tier.fixed_count, int) or isinstance(tier.fixed_count, bool) or tier.fixed_count < 0:
                problems.append(f"{tier.label}: фиксированное количество должно быть целым >= 0")

    if isinstance(rules, AdvancedRarity):
        count = rules.special_slot_count
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            problems.append(f"Число особых слотов должно быть целым >= 0 (получено {count})")

    return problems


# ===== СУММЫ И ПРОВЕРКИ =====

def duplicate_labels(tiers: Iterable[Any]) -> Tuple[str, ...]:
    """Метки, встречающиеся больше одного раза"""
    labels = [getattr(tier, "label", None) for tier in tiers]
    return tuple(sorted({str(label) for label in labels if labels.count(label) > 1}))


def _number_or_zero(value: Any) -> float:
    return value if _is_number(value) else 0


def total_probability(tiers: Iterable[Any]) -> float:
    """Сумма базовых вероятностей (нечисловые значения считаются 0)"""
    return sum(_number_or_zero(getattr(tier, "probability", 0)) for tier in tiers)


def total_special_probability(tiers: Iterable[Any]) -> float:
    """Сумма особых вероятностей"""
    return sum(_number_or_zero(getattr(tier, "special_probability", 0)) for tier in tiers)


def total_fixed_count(tiers: Iterable[Any]) -> int:
    """Сумма фиксированных количеств"""
    return int(sum(_number_or_zero(getattr(tier, "fixed_count", 0)) for tier in tiers))


def has_mismatch(total: float, expected: float = 1.0) -> bool:
    return abs(total - expected) > EPSILON


@dataclass(frozen=True)
class BasicSlots:
    basic_slots: int
    is_negative: bool


def compute_basic_slots(fixed_total: int, special_slot_count: int, slots_per_pack: int) -> BasicSlots:
    """Оставшиеся слоты под базовые вероятности (для показа не меньше 0)"""
    basic_slots = slots_per_pack - fixed_total - special_slot_count
    if basic_slots < 0:
        return BasicSlots(basic_slots=0, is_negative=True)
    return BasicSlots(basic_slots=basic_slots, is_negative=False)


@dataclass(frozen=True)
class ValidationResult:
    base_mismatch: bool
    special_mismatch: bool
    slots_negative: bool
    duplicate_labels: Tuple[str, ...] = ()
    total_probability: float = 1.0
    total_special_probability: float = 0.0
    total_fixed_count: int = 0
    special_slot_count: int = 0
    slots_per_pack: int = 0
    basic_slots: int = 0

    @property
    def is_savable(self) -> bool:
        return not (
            self.base_mismatch or self.special_mismatch or self.slots_negative or self.duplicate_labels
        )

    def messages(self) -> List[str]:
        """Тексты предупреждений для редактора"""
        messages = []
        if self.duplicate_labels:
            messages.append(f"❌ Повторяющиеся редкости: {', '.join(self.duplicate_labels)}")
        if self.base_mismatch:
            messages.append(
                f"⚠️ Сумма базовых вероятностей {self.total_probability * 100:.4f}% "
                f"(отклонение {(self.total_probability - 1.0) * 100:+.4f}%)"
            )
        if self.special_mismatch:
            messages.append(
                f"⚠️ Сумма особых вероятностей {self.total_special_probability * 100:.4f}% "
                f"(отклонение {(self.total_special_probability - 1.0) * 100:+.4f}%)"
            )
        if self.slots_negative:
            messages.append(
                f"❌ Фиксированные ({self.total_fixed_count}) и особые ({self.special_slot_count}) "
                f"слоты превышают размер пачки ({self.slots_per_pack})"
            )
        return messages


def validate_rules(
    tiers: Iterable[Any],
    is_advanced: bool,
    special_slot_count: int,
    slots_per_pack: int,
) -> ValidationResult:
    """Проверка по отдельным полям (используется и редактором, и перед сохранением)"""
    tiers = list(tiers)
    base_total = total_probability(tiers)
    duplicates = duplicate_labels(tiers)

    if not is_advanced:
        return ValidationResult(
            base_mismatch=has_mismatch(base_total),
            special_mismatch=False,
            slots_negative=False,
            duplicate_labels=duplicates,
            total_probability=base_total,
            slots_per_pack=slots_per_pack,
            basic_slots=slots_per_pack,
        )

    special_total = total_special_probability(tiers)
    fixed_total = total_fixed_count(tiers)
    basic = compute_basic_slots(fixed_total, special_slot_count, slots_per_pack)

    return ValidationResult(
        base_mismatch=has_mismatch(base_total),
        special_mismatch=special_slot_count > 0 and has_mismatch(special_total),
        slots_negative=basic.is_negative,
        duplicate_labels=duplicates,
        total_probability=base_total,
        total_special_probability=special_total,
        total_fixed_count=fixed_total,
        special_slot_count=special_slot_count,
        slots_per_pack=slots_per_pack,
        basic_slots=basic.basic_slots,
    )


def validate_configuration(pack: Pack) -> ValidationResult:
    return validate_rules(
        pack.tiers,
        pack.is_advanced,
        pack.special_slot_count,
        pack.slots_per_pack,
    )


def ensure_savable(pack: Pack) -> ValidationResult:
    """Проверка перед сохранением: невалидную конфигурацию сохранять нельзя"""
    result = validate_configuration(pack)
    if not result.is_savable:
        raise InvalidRarityConfigError(result.messages())
    return result
