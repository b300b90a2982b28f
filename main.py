import asyncio
import logging
import random

from config import settings, setup_logging
from database.base import AsyncSessionLocal, engine, init_models
from database.crud_cards import make_card_pool_lookup
from database.crud_packs import load_pack
from pack_engine.pricing import expected_counts, price_per_card
from pack_engine.rarity_config import validate_configuration
from pack_engine.simulator import PackOpeningSimulator

# ===== НАСТРОЙКА ЛОГГИРОВАНИЯ =====
setup_logging()
logger = logging.getLogger(__name__)


async def run_simulation(pack_id: str, packs: int, seed=None):
    """Проверка конфигурации, таблица цен и серия открытий одной пачки"""
    async with AsyncSessionLocal() as session:
        pack = await load_pack(session, pack_id)

    validation = validate_configuration(pack)
    if validation.is_savable:
        logger.info(f"✅ Pack {pack.name or pack.pack_id}: rarity configuration is valid")
    for message in validation.messages():
        logger.warning(message)

    counts = expected_counts(pack)
    for rarity, value in price_per_card(pack).items():
        logger.info(f"💰 {rarity}: {value:.2f} per card, {counts.get(rarity, 0):.2f} expected per pack")

    simulator = PackOpeningSimulator(make_card_pool_lookup(AsyncSessionLocal), random.Random(seed))
    batch = await simulator.open_packs(pack, packs)

    for rarity, count in batch.rarity_counts.most_common():
        logger.info(f"🃏 {rarity}: {count} ({batch.rarity_share(rarity) * 100:.2f}%)")
    if batch.warning_message:
        logger.warning(batch.warning_message)

    return batch


async def main():
    if not settings.SIMULATION_PACK_ID:
        logger.error("❌ SIMULATION_PACK_ID is not set")
        return

    await init_models()
    try:
        await run_simulation(settings.SIMULATION_PACK_ID, settings.SIMULATION_PACKS, settings.SIMULATION_SEED)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
