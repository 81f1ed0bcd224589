# lending/sa/repositories/__init__.py
from .title import TitleRepository
from .loan import LoanRepository

__all__ = ['TitleRepository', 'LoanRepository']
