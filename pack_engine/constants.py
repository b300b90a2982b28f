# pack_engine/constants.py
import enum

# Допуск при сравнении суммы вероятностей с 1.0 (единственный на весь проект)
EPSILON = 1e-6

# Настройки пачки по умолчанию
DEFAULT_RARITY_NAME = "Common"
DEFAULT_RARITY_PROBABILITY = 1.0

# Значения для новой редкости в редакторе
NEW_RARITY_NAME = "NewRarity"
NEW_RARITY_PROBABILITY = 0.0001
NEW_RARITY_SPECIAL_PROBABILITY = 0.0
NEW_RARITY_FIXED_COUNT = 0
DEFAULT_SPECIAL_SLOT_COUNT = 0


class PackType(str, enum.Enum):
    """Тип продукта"""
    BOOSTER = "Booster"
    CONSTRUCTED_DECK = "ConstructedDeck"
    OTHER = "Other"
