# api/schemas/loan.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class LoanBook(BaseModel):
    id: int
    title: str
    author: str
    isbn: str

    model_config = ConfigDict(from_attributes=True)


class Loan(BaseModel):
    id: int
    title_id: int
    borrower_id: int
    borrowed_at: datetime
    returned_at: Optional[datetime] = None
    book: Optional[LoanBook] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_loan(cls, loan) -> "Loan":
        return cls(
            id=loan.id,
            title_id=loan.title_id,
            borrower_id=loan.borrower_id,
            borrowed_at=loan.borrowed_at,
            returned_at=loan.returned_at,
            book=LoanBook.model_validate(loan.title) if loan.title is not None else None
        )
