# lending/sa/repositories/loan.py
from datetime import datetime
from typing import List, Optional
from sqlalchemy import desc, func
from sqlalchemy.orm import Session, joinedload
from lending.sa.models import Loan, Title
from lending.sa.models.base import utcnow


class LoanRepository:
    """Repository for Loan rows. Like TitleRepository it flushes but never commits."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, loan_id: int) -> Optional[Loan]:
        return self.session.query(Loan).filter(Loan.id == loan_id).first()

    def get_open_loan(self, title_id: int, borrower_id: int) -> Optional[Loan]:
        """Get the open loan for a (title, borrower) pair.

        Args:
            title_id: The ID of the borrowed title
            borrower_id: The borrower holding the copy

        Returns:
            The open Loan if one exists, None otherwise
        """
        return (
            self.session.query(Loan)
            .options(joinedload(Loan.title))
            .filter(
                Loan.title_id == title_id,
                Loan.borrower_id == borrower_id,
                Loan.returned_at.is_(None)
            )
            .first()
        )

    def open_loan(self, title: Title, borrower_id: int) -> Loan:
        """Stage a new open loan on a title and flush so it gets an ID"""
        loan = Loan(title=title, borrower_id=borrower_id, borrowed_at=utcnow())
        self.session.add(loan)
        self.session.flush()
        return loan

    def close_loan(self, loan: Loan, returned_at: Optional[datetime] = None) -> Loan:
        loan.returned_at = returned_at or utcnow()
        self.session.flush()
        return loan

    def count_open_for_title(self, title_id: int) -> int:
        return (
            self.session.query(func.count(Loan.id))
            .filter(Loan.title_id == title_id, Loan.returned_at.is_(None))
            .scalar()
        )

    def list_history(self) -> List[Loan]:
        """All loans, newest first, with their title loaded"""
        return (
            self.session.query(Loan)
            .options(joinedload(Loan.title))
            .order_by(desc(Loan.borrowed_at), desc(Loan.id))
            .all()
        )

    def list_open(self, borrower_id: Optional[int] = None) -> List[Loan]:
        """Open loans, optionally restricted to one borrower"""
        query = (
            self.session.query(Loan)
            .options(joinedload(Loan.title))
            .filter(Loan.returned_at.is_(None))
        )
        if borrower_id is not None:
            query = query.filter(Loan.borrower_id == borrower_id)
        return query.order_by(Loan.id).all()
