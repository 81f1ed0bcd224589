# lending/sa/models/loan.py
from datetime import datetime
from sqlalchemy import Integer, ForeignKey, DateTime, Index, text
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, utcnow


class Loan(Base):
    """One borrower holding one copy of one title.

    A loan is open while ``returned_at`` is NULL. Closed loans form the
    lending history and are never reopened.
    """
    __tablename__ = 'loan'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title_id: Mapped[int] = mapped_column(ForeignKey('title.id'), nullable=False)
    borrower_id: Mapped[int] = mapped_column(Integer, nullable=False)
    borrowed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    returned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    title = relationship('Title', back_populates='loans')

    __table_args__ = (
        Index('idx_loan_title_id', 'title_id'),
        Index('idx_loan_borrower_id', 'borrower_id'),

        # At most one open loan per (title, borrower)
        Index(
            'uix_loan_open_title_borrower', 'title_id', 'borrower_id',
            unique=True,
            sqlite_where=text("returned_at IS NULL"),
            postgresql_where=text("returned_at IS NULL"),
        ),
    )

    @property
    def is_open(self) -> bool:
        return self.returned_at is None

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<Loan id={self.id} title_id={self.title_id} borrower_id={self.borrower_id} {state}>"
