# pack_engine/rarity_editor.py
import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from pack_engine.constants import (
    DEFAULT_RARITY_NAME,
    DEFAULT_RARITY_PROBABILITY,
    DEFAULT_SPECIAL_SLOT_COUNT,
    NEW_RARITY_FIXED_COUNT,
    NEW_RARITY_NAME,
    NEW_RARITY_PROBABILITY,
    NEW_RARITY_SPECIAL_PROBABILITY,
)
from pack_engine.rarity_config import (
    AdvancedRarity,
    AdvancedRarityTier,
    Pack,
    RarityRules,
    RarityTier,
    SimpleRarity,
    ValidationResult,
    validate_rules,
)

logger = logging.getLogger(__name__)


@dataclass
class TierDraft:
    """Редактируемая строка редкости"""
    label: str
    probability: float = 0.0
    special_probability: float = 0.0
    fixed_count: int = 0

    def is_empty(self) -> bool:
        return self.probability <= 0 and self.special_probability <= 0 and self.fixed_count <= 0


def _to_probability(value: Any) -> float:
    """Число в [0, 1]; всё нечисловое превращается в 0"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return min(1.0, max(0.0, number))


def _to_count(value: Any) -> int:
    """Целое >= 0; всё нечисловое превращается в 0"""
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, number)


def _fallback_drafts() -> List[TierDraft]:
    return [TierDraft(DEFAULT_RARITY_NAME, DEFAULT_RARITY_PROBABILITY)]


def drafts_from_rules(rules: Optional[RarityRules]) -> List[TierDraft]:
    if rules is None:
        return []
    return [
        TierDraft(
            label=tier.label,
            probability=tier.probability,
            special_probability=getattr(tier, "special_probability", 0.0),
            fixed_count=getattr(tier, "fixed_count", 0),
        )
        for tier in rules.tiers
    ]


class RarityEditor:
    """
    Состояние редактора редкостей пачки.

    Простой и расширенный списки хранятся раздельно: переключение режима
    меняет только активный список, неактивный остаётся как был.
    """

    def __init__(
        self,
        simple_tiers: Sequence[TierDraft] = (),
        advanced_tiers: Sequence[TierDraft] = (),
        is_advanced: bool = False,
        special_slot_count: int = DEFAULT_SPECIAL_SLOT_COUNT,
        slots_per_pack: int = 1,
    ):
        self.simple_tiers = [dataclasses.replace(t) for t in simple_tiers] or _fallback_drafts()
        self.advanced_tiers = [
            dataclasses.replace(t, fixed_count=_to_count(t.fixed_count)) for t in advanced_tiers
        ]
        self.is_advanced = is_advanced
        self.slots_per_pack = slots_per_pack
        # Число особых слотов принадлежит расширенному списку и хранится вместе с ним
        self.advanced_special_slot_count = min(_to_count(special_slot_count), slots_per_pack)

        if self.is_advanced and not self.advanced_tiers:
            self.advanced_tiers = self._seed_advanced()

    @classmethod
    def from_pack(cls, pack: Pack, inactive: Optional[RarityRules] = None) -> "RarityEditor":
        """Редактор для снимка пачки; inactive - сохранённый список другого режима"""
        simple_rules, advanced_rules = (inactive, pack.rarity) if pack.is_advanced else (pack.rarity, inactive)
        return cls(
            simple_tiers=drafts_from_rules(simple_rules),
            advanced_tiers=drafts_from_rules(advanced_rules),
            is_advanced=pack.is_advanced,
            special_slot_count=getattr(advanced_rules, "special_slot_count", DEFAULT_SPECIAL_SLOT_COUNT),
            slots_per_pack=pack.slots_per_pack,
        )

    def _seed_advanced(self) -> List[TierDraft]:
        return [TierDraft(t.label, t.probability) for t in self.simple_tiers]

    @property
    def special_slot_count(self) -> int:
        """Особые слоты действуют только в расширенном режиме"""
        return self.advanced_special_slot_count if self.is_advanced else DEFAULT_SPECIAL_SLOT_COUNT

    @property
    def tiers(self) -> List[TierDraft]:
        return self.advanced_tiers if self.is_advanced else self.simple_tiers

    # ===== РЕЖИМ =====

    def toggle_advanced(self, enabled: bool):
        if enabled and not self.advanced_tiers:
            self.advanced_tiers = self._seed_advanced()
        self.is_advanced = enabled

    def set_special_slot_count(self, value: Any):
        self.advanced_special_slot_count = min(_to_count(value), self.slots_per_pack)

    # ===== СТРОКИ =====

    def add_tier(self) -> TierDraft:
        tier = TierDraft(
            label=f"{NEW_RARITY_NAME}_{len(self.tiers) + 1}",
            probability=NEW_RARITY_PROBABILITY,
            special_probability=NEW_RARITY_SPECIAL_PROBABILITY,
            fixed_count=NEW_RARITY_FIXED_COUNT,
        )
        self.tiers.append(tier)
        return tier

    def remove_tier(self, index: int) -> bool:
        if len(self.tiers) <= 1:
            logger.warning("⚠️ At least one rarity is required, removal ignored")
            return False
        del self.tiers[index]
        return True

    def set_label(self, index: int, label: Any):
        self.tiers[index].label = str(label)

    def set_probability(self, index: int, value: Any):
        self.tiers[index].probability = _to_probability(value)

    def set_special_probability(self, index: int, value: Any):
        self.tiers[index].special_probability = _to_probability(value)

    def set_fixed_count(self, index: int, value: Any):
        self.tiers[index].fixed_count = _to_count(value)

    # ===== ПРОВЕРКА И СБОРКА =====

    @property
    def validation(self) -> ValidationResult:
        return validate_rules(
            self.tiers,
            self.is_advanced,
            self.special_slot_count,
            self.slots_per_pack,
        )

    def simple_rarity(self) -> SimpleRarity:
        return SimpleRarity(
            tiers=tuple(
                RarityTier(t.label, t.probability)
                for t in self.simple_tiers
                if t.probability > 0
            )
        )

    def advanced_rarity(self) -> AdvancedRarity:
        return AdvancedRarity(
            tiers=tuple(
                AdvancedRarityTier(t.label, t.probability, t.special_probability, t.fixed_count)
                for t in self.advanced_tiers
                if not t.is_empty()
            ),
            special_slot_count=self.advanced_special_slot_count,
        )

    def active_rarity(self) -> RarityRules:
        return self.advanced_rarity() if self.is_advanced else self.simple_rarity()

    def inactive_rarity(self) -> RarityRules:
        return self.simple_rarity() if self.is_advanced else self.advanced_rarity()

    def build(self, pack: Pack) -> Pack:
        """Новый снимок пачки с правилами из редактора (строки с одними нулями отбрасываются)"""
        return dataclasses.replace(pack, rarity=self.active_rarity(), slots_per_pack=self.slots_per_pack)
