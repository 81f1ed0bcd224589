# lending/sa/models/title.py
from typing import List
from sqlalchemy import Integer, String, CheckConstraint, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin


class Title(Base, TimestampMixin):
    """A catalog entry for a book and its physical copy counters."""
    __tablename__ = 'title'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    isbn: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    publication_year: Mapped[int] = mapped_column(Integer, nullable=False)
    total_copies: Mapped[int] = mapped_column(Integer, nullable=False)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False)
    cover_image: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    loans: Mapped[List["Loan"]] = relationship('Loan', back_populates='title', order_by='Loan.id')

    __table_args__ = (
        CheckConstraint('total_copies >= 1', name='ck_title_total_positive'),
        CheckConstraint('available_copies >= 0', name='ck_title_available_non_negative'),
        CheckConstraint('available_copies <= total_copies', name='ck_title_available_within_total'),

        # Search indexes
        Index('idx_title_title', 'title'),
        Index('idx_title_author', 'author'),
    )

    @property
    def outstanding_copies(self) -> int:
        """Copies currently lent out"""
        return self.total_copies - self.available_copies

    def __repr__(self) -> str:
        return f"<Title id={self.id} isbn={self.isbn!r} available={self.available_copies}/{self.total_copies}>"
