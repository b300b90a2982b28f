# database/crud_packs.py
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional, Tuple
import logging

from database.models.pack import Pack as PackRow
from pack_engine.constants import PackType
from pack_engine.exceptions import InvalidRarityConfigError, PackNotFoundError
from pack_engine.rarity_config import (
    AdvancedRarity,
    AdvancedRarityTier,
    Pack,
    RarityRules,
    RarityTier,
    SimpleRarity,
    default_rarity,
    ensure_savable,
)
from pack_engine.rarity_editor import RarityEditor

logger = logging.getLogger(__name__)


# ===== МАППИНГ JSON <-> ПРАВИЛА =====

def simple_to_json(rules: SimpleRarity) -> List[Dict[str, Any]]:
    return [{"label": t.label, "probability": t.probability} for t in rules.tiers]


def advanced_to_json(rules: AdvancedRarity) -> List[Dict[str, Any]]:
    return [
        {
            "label": t.label,
            "probability": t.probability,
            "special_probability": t.special_probability,
            "fixed_count": t.fixed_count,
        }
        for t in rules.tiers
    ]


def simple_from_json(data: Optional[List[Dict[str, Any]]]) -> SimpleRarity:
    return SimpleRarity(
        tiers=tuple(
            RarityTier(label=item["label"], probability=float(item.get("probability") or 0))
            for item in data or []
        )
    )


def advanced_from_json(data: Optional[List[Dict[str, Any]]], special_slot_count: int) -> AdvancedRarity:
    return AdvancedRarity(
        tiers=tuple(
            AdvancedRarityTier(
                label=item["label"],
                probability=float(item.get("probability") or 0),
                special_probability=float(item.get("special_probability") or 0),
                fixed_count=int(item.get("fixed_count") or 0),
            )
            for item in data or []
        ),
        special_slot_count=special_slot_count or 0,
    )


def row_to_rules(row: PackRow) -> Tuple[RarityRules, RarityRules]:
    """Активные и неактивные правила строки пачки"""
    simple = simple_from_json(row.rarity_config)
    advanced = advanced_from_json(row.advanced_rarity_config, row.special_probability_slots)

    # Расширенный режим без расширенного списка работает по простым правилам
    if row.is_advanced_rules_enabled and advanced.tiers:
        return advanced, simple
    return simple, advanced


def row_to_pack(row: PackRow) -> Pack:
    """Неизменяемый снимок пачки для движка"""
    active, _ = row_to_rules(row)
    return Pack(
        pack_id=row.id,
        rarity=active,
        slots_per_pack=row.cards_per_pack,
        price=row.price or 0,
        pack_type=PackType(row.pack_type or PackType.BOOSTER.value),
        total_cards=row.total_cards or 0,
        name=row.name,
    )


# ===== ПАЧКИ =====

async def create_pack(
    session: AsyncSession,
    name: str,
    price: float = 0,
    cards_per_pack: int = 5,
    pack_type: PackType = PackType.BOOSTER,
    total_cards: int = 0
) -> PackRow:
    """Создать пачку с правилами по умолчанию (Common 100%)"""
    row = PackRow(
        name=name,
        price=price,
        cards_per_pack=cards_per_pack,
        pack_type=PackType(pack_type).value,
        total_cards=total_cards,
        rarity_config=simple_to_json(default_rarity()),
        advanced_rarity_config=None,
        special_probability_slots=0,
        is_advanced_rules_enabled=False
    )
    session.add(row)
    await session.commit()
    await session.refresh(row)

    logger.info(f"✅ Created pack {row.id} ({name})")
    return row


async def get_pack_row(session: AsyncSession, pack_id: str) -> PackRow:
    row = await session.get(PackRow, pack_id)
    if not row:
        raise PackNotFoundError(pack_id)
    return row


async def load_pack(session: AsyncSession, pack_id: str) -> Pack:
    """Загрузить снимок пачки"""
    return row_to_pack(await get_pack_row(session, pack_id))


async def load_rarity_editor(session: AsyncSession, pack_id: str) -> RarityEditor:
    """Редактор с обоими списками редкостей пачки"""
    row = await get_pack_row(session, pack_id)
    _, inactive = row_to_rules(row)
    return RarityEditor.from_pack(row_to_pack(row), inactive=inactive)


async def save_pack_rarity(
    session: AsyncSession,
    pack: Pack,
    inactive: Optional[RarityRules] = None
) -> PackRow:
    """
    Сохранить правила редкости пачки.
    Невалидная конфигурация не сохраняется (InvalidRarityConfigError).
    """
    ensure_savable(pack)

    row = await get_pack_row(session, pack.pack_id)
    row.cards_per_pack = pack.slots_per_pack
    row.is_advanced_rules_enabled = pack.is_advanced

    for rules in (pack.rarity, inactive):
        if isinstance(rules, SimpleRarity):
            row.rarity_config = simple_to_json(rules)
        elif isinstance(rules, AdvancedRarity):
            row.advanced_rarity_config = advanced_to_json(rules)
            row.special_probability_slots = rules.special_slot_count

    await session.commit()
    await session.refresh(row)

    logger.info(
        f"✅ Saved rarity rules for pack {pack.pack_id} "
        f"({'advanced' if pack.is_advanced else 'simple'}, {len(pack.tiers)} tiers)"
    )
    return row


async def save_rarity_editor(session: AsyncSession, pack_id: str, editor: RarityEditor) -> Pack:
    """Собрать снимок из редактора и сохранить оба списка"""
    validation = editor.validation
    if not validation.is_savable:
        raise InvalidRarityConfigError(validation.messages())

    pack = editor.build(await load_pack(session, pack_id))
    await save_pack_rarity(session, pack, inactive=editor.inactive_rarity())
    return pack
