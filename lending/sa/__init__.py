# lending/sa/__init__.py
from .database import Database
from .locking import RowLockRegistry
from .models import Base, Title, Loan

__all__ = [
    'Database',
    'RowLockRegistry',
    'Base',
    'Title',
    'Loan'
]
