# pack_engine/exceptions.py
from typing import List


class MalformedPackError(ValueError):
    """Структурно некорректная пачка (пустой список редкостей, 0 слотов и т.п.)"""


class InvalidRarityConfigError(ValueError):
    """Конфигурация редкостей не прошла проверку перед сохранением"""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class PackNotFoundError(LookupError):
    """Пачка не найдена в каталоге"""

    def __init__(self, pack_id: str):
        self.pack_id = pack_id
        super().__init__(f"Пачка {pack_id} не найдена")
