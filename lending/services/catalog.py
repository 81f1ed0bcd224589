# lending/services/catalog.py
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from lending.config import Settings
from lending.exceptions import InvalidInputError, NotFoundError
from lending.sa.database import Database
from lending.sa.models import Loan, Title
from lending.sa.repositories import LoanRepository, TitleRepository


@dataclass
class TitlePage:
    items: List[Title]
    total: int
    page: int
    limit: int
    total_pages: int


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit)


class CatalogService:
    """Read-only views over the catalog and the lending history. Takes no locks."""

    def __init__(self, database: Database, default_limit: int = 10, max_limit: int = 100):
        self.database = database
        self.default_limit = default_limit
        self.max_limit = max_limit

    @classmethod
    def from_settings(cls, database: Database, settings: Settings) -> "CatalogService":
        return cls(database, settings.default_page_size, settings.max_page_size)

    def list_titles(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None
    ) -> TitlePage:
        """List titles filtered by case-insensitive title/author substrings.

        Args:
            title: Substring of the book title
            author: Substring of the author name
            page: Page number (1-based)
            limit: Items per page

        Returns:
            TitlePage with the items of the page, the total match count and
            total_pages = ceil(total / limit)
        """
        limit = self.default_limit if limit is None else limit
        if page < 1:
            raise InvalidInputError("Page must be at least 1.")
        if limit < 1 or limit > self.max_limit:
            raise InvalidInputError(f"Limit must be between 1 and {self.max_limit}.")

        with self.database.get_db() as session:
            repo = TitleRepository(session)
            items = repo.search(title=title, author=author, limit=limit, offset=(page - 1) * limit)
            total = repo.count(title=title, author=author)

        return TitlePage(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=page_count(total, limit)
        )

    def get_title(self, title_id: int) -> Title:
        with self.database.get_db() as session:
            entry = TitleRepository(session).get_by_id(title_id)
        if entry is None:
            raise NotFoundError(f"Book with ID {title_id} not found.")
        return entry

    def list_loan_history(self) -> List[Loan]:
        with self.database.get_db() as session:
            return LoanRepository(session).list_history()

    def list_open_loans(self, borrower_id: Optional[int] = None) -> List[Loan]:
        with self.database.get_db() as session:
            return LoanRepository(session).list_open(borrower_id)

    def find_inconsistent_titles(self) -> List[Tuple[Title, int]]:
        """Titles whose counters disagree with their open loans.

        Returns:
            (title, open_loan_count) for every title where
            total_copies - available_copies != open_loan_count or the
            available count is outside [0, total_copies]
        """
        broken = []
        with self.database.get_db() as session:
            loans = LoanRepository(session)
            for entry in session.query(Title).order_by(Title.id).all():
                open_count = loans.count_open_for_title(entry.id)
                in_range = 0 <= entry.available_copies <= entry.total_copies
                if not in_range or entry.outstanding_copies != open_count:
                    broken.append((entry, open_count))
        return broken
