# lending/sa/models/__init__.py
from .base import Base, TimestampMixin
from .title import Title
from .loan import Loan

__all__ = [
    'Base',
    'TimestampMixin',
    'Title',
    'Loan'
]
