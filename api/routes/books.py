# api/routes/books.py

import base64
import binascii
from typing import List, Optional
from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from lending.context import LendingContext
from lending.services import CoverUpload
from api.dependencies import get_context
from api.schemas.book import Book, BookCreate, BookList, BookUpdate
from api.schemas.loan import Loan

router = APIRouter(prefix="/books", tags=["books"])


@router.post("", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(payload: BookCreate, ctx: LendingContext = Depends(get_context)):
    """Add a new book to the catalog with all copies available."""
    cover = None
    if payload.cover_image is not None:
        if not payload.cover_filename:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="cover_filename is required with cover_image")
        try:
            data = base64.b64decode(payload.cover_image, validate=True)
        except (binascii.Error, ValueError):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="cover_image is not valid base64")
        cover = CoverUpload(data=data, filename=payload.cover_filename)

    entry = ctx.inventory.create_title(
        isbn=payload.isbn,
        author=payload.author,
        title=payload.title,
        publication_year=payload.publication_year,
        total_copies=payload.quantity,
        cover=cover
    )
    return Book.model_validate(entry)


@router.get("", response_model=BookList)
def list_books(
    title: Optional[str] = Query(None, description="Search by book title"),
    author: Optional[str] = Query(None, description="Search by author name"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    ctx: LendingContext = Depends(get_context)
):
    """
    Search and list books.

    Args:
        title: Optional case-insensitive substring of the title
        author: Optional case-insensitive substring of the author
        page: Page number (1-based)
        limit: Number of items per page

    Returns:
        BookList with the page items, total matches and page count
    """
    result = ctx.catalog.list_titles(title=title, author=author, page=page, limit=limit)
    return BookList(
        items=[Book.model_validate(entry) for entry in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages
    )


@router.get("/borrowed/history", response_model=List[Loan])
def borrow_history(ctx: LendingContext = Depends(get_context)):
    """View the full borrowing history, newest first."""
    return [Loan.from_loan(loan) for loan in ctx.catalog.list_loan_history()]


@router.get("/{book_id}", response_model=Book)
def get_book(book_id: int, ctx: LendingContext = Depends(get_context)):
    return Book.model_validate(ctx.catalog.get_title(book_id))


@router.patch("/{book_id}", response_model=Book)
def update_book(book_id: int, payload: BookUpdate, ctx: LendingContext = Depends(get_context)):
    """Update a book. A new quantity keeps borrowed copies borrowed."""
    entry = ctx.inventory.update_title(
        book_id,
        quantity=payload.quantity,
        title=payload.title,
        author=payload.author,
        publication_year=payload.publication_year,
        isbn=payload.isbn
    )
    return Book.model_validate(entry)


@router.post("/{book_id}/borrow", response_model=Loan, status_code=status.HTTP_201_CREATED)
def borrow_book(
    book_id: int,
    borrower_id: int = Header(..., alias="X-Borrower-Id"),
    ctx: LendingContext = Depends(get_context)
):
    return Loan.from_loan(ctx.lending.borrow(book_id, borrower_id))


@router.post("/{book_id}/return", response_model=Loan)
def return_book(
    book_id: int,
    borrower_id: int = Header(..., alias="X-Borrower-Id"),
    ctx: LendingContext = Depends(get_context)
):
    return Loan.from_loan(ctx.lending.return_title(book_id, borrower_id))
