# database/models/__init__.py
from database.models.pack import Pack
from database.models.card import Card

__all__ = [
    'Pack',
    'Card',
]
