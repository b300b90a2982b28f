import pytest

from database.base import init_models, make_engine, make_session_factory


class SequenceRandom:
    """Детерминированный источник: отдаёт значения по кругу"""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def fixed_random():
    return SequenceRandom


@pytest.fixture
def card_pool():
    """Фабрика поиска карт по словарю {rarity: [card_id, ...]} с журналом вызовов"""

    def factory(pool):
        calls = []

        async def lookup(pack_id, rarity):
            calls.append((pack_id, rarity))
            return list(pool.get(rarity, []))

        lookup.calls = calls
        return lookup

    return factory


@pytest.fixture
async def session_factory(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'packs.db'}")
    await init_models(engine)
    yield make_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session
