from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from typing import List, Optional
import logging

from database.models.card import Card
from database.base import AsyncSessionLocal
from pack_engine.simulator import CardPoolLookup

logger = logging.getLogger(__name__)


async def add_card(
    session: AsyncSession,
    pack_id: str,
    card_name: str,
    rarity: str,
    number: Optional[int] = None
) -> Card:
    """Зарегистрировать карту в пачке"""
    card = Card(pack_id=pack_id, card_name=card_name, rarity=rarity, number=number)
    session.add(card)
    await session.commit()
    await session.refresh(card)

    logger.info(f"✅ Card {card_name} ({rarity}) added to pack {pack_id}")
    return card


async def get_card_ids_by_pack_and_rarity(
    session: AsyncSession,
    pack_id: str,
    rarity: str
) -> List[str]:
    """ID всех карт пачки с указанной редкостью (порядок стабильный)"""
    result = await session.execute(
        select(Card.id)
        .where(and_(Card.pack_id == pack_id, Card.rarity == rarity))
        .order_by(Card.number, Card.id)
    )
    return list(result.scalars().all())


def make_card_pool_lookup(session_factory: async_sessionmaker = AsyncSessionLocal) -> CardPoolLookup:
    """Функция поиска карт для симулятора (каталог только читается)"""

    async def lookup(pack_id: str, rarity: str) -> List[str]:
        async with session_factory() as session:
            return await get_card_ids_by_pack_and_rarity(session, pack_id, rarity)

    return lookup
