#database/models/pack.py
import uuid

from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database.base import Base


class Pack(Base):
    """Пачка и её правила редкости"""

    __tablename__ = "packs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(Text, nullable=False)
    price = Column(Float, default=0)  # Цена во внутриигровой валюте
    pack_type = Column(String, default="Booster")  # Booster, ConstructedDeck, Other
    cards_per_pack = Column(Integer, default=5)
    total_cards = Column(Integer, default=0)  # Карт в готовой колоде

    # Правила редкости: оба списка хранятся, активный выбирает флаг
    rarity_config = Column(JSON, default=list)  # [{"label": ..., "probability": ...}]
    advanced_rarity_config = Column(JSON, nullable=True)  # + special_probability, fixed_count
    special_probability_slots = Column(Integer, default=0)
    is_advanced_rules_enabled = Column(Boolean, default=False)

    # Время
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Отношения
    cards = relationship("Card", back_populates="pack", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Pack {self.name} ({self.cards_per_pack} cards)>"
