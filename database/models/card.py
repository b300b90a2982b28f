#database/models/card.py
import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database.base import Base


class Card(Base):
    """Карта, зарегистрированная в пачке"""

    __tablename__ = "cards"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    pack_id = Column(String(36), ForeignKey("packs.id", ondelete="CASCADE"), index=True, nullable=False)
    card_name = Column(Text, nullable=False)
    rarity = Column(Text, index=True)  # Метка редкости из настроек пачки
    number = Column(Integer, nullable=True)  # Номер в сете

    # Время
    created_at = Column(DateTime(timezone=False), server_default=func.now())

    # Отношения
    pack = relationship("Pack", back_populates="cards")

    def __repr__(self):
        return f"<Card {self.card_name} ({self.rarity})>"
