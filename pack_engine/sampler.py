# pack_engine/sampler.py
from dataclasses import dataclass
from typing import Protocol, Sequence


class RandomSource(Protocol):
    """Источник случайности: random.Random или любой объект с random() -> [0, 1)"""

    def random(self) -> float:
        ...


@dataclass(frozen=True)
class WeightedItem:
    label: str
    weight: float


def sample(items: Sequence[WeightedItem], rng: RandomSource) -> str:
    """
    Выбрать одну метку методом накопленной вероятности.

    Берём r из [0, 1) и идём по списку, пока r < накопленного веса.
    Если из-за погрешности float сумма весов чуть меньше 1 и совпадения нет,
    возвращаем последнюю метку.
    """
    if not items:
        raise ValueError("Нельзя выбрать из пустого списка")

    r = rng.random()
    cumulative = 0.0
    for item in items:
        cumulative += item.weight
        if r < cumulative:
            return item.label

    return items[-1].label


def pick_uniform(candidates: Sequence[str], rng: RandomSource) -> str:
    """Равновероятно выбрать один элемент"""
    if not candidates:
        raise ValueError("Нельзя выбрать из пустого списка")
    index = min(int(rng.random() * len(candidates)), len(candidates) - 1)
    return candidates[index]
