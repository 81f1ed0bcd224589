# lending/services/lending.py
import logging
from typing import Callable

from sqlalchemy.orm import Session

from lending.exceptions import ConflictError, InternalError, InvalidStateError, NotFoundError
from lending.sa.database import Database
from lending.sa.models import Loan, Title
from lending.sa.repositories import LoanRepository, TitleRepository

logger = logging.getLogger(__name__)


class LendingService:
    """Borrow and return copies of a title.

    This is the only code that changes ``available_copies`` for lending or
    opens and closes loans. Each operation runs as one unit of work with the
    title row locked exclusively, so after every commit

        total_copies - available_copies == number of open loans

    and no (title, borrower) pair has more than one open loan. Operations on
    the same title queue up behind the lock; different titles do not block
    each other.
    """

    def __init__(
        self,
        database: Database,
        titles: Callable[[Session], TitleRepository] = TitleRepository,
        loans: Callable[[Session], LoanRepository] = LoanRepository
    ):
        """
        Args:
            database: Provides locked units of work
            titles: Builds the title store for a unit of work's session
            loans: Builds the loan store for a unit of work's session
        """
        self.database = database
        self._titles = titles
        self._loans = loans

    def borrow(self, title_id: int, borrower_id: int) -> Loan:
        """Lend one copy of a title to a borrower.

        Raises:
            NotFoundError: The title does not exist
            InvalidStateError: No copies are available
            ConflictError: The borrower already holds a copy of this title
        """
        with self.database.locked(Title.__tablename__, title_id) as session:
            titles = self._titles(session)
            loans = self._loans(session)

            title = titles.get_for_update(title_id)
            if title is None:
                raise NotFoundError(f"Book with ID {title_id} not found.")

            if title.available_copies <= 0:
                logger.info("Borrow of title %s by %s rejected: no copies available", title_id, borrower_id)
                raise InvalidStateError("No copies of this book are available.")

            if loans.get_open_loan(title_id, borrower_id) is not None:
                logger.info("Borrow of title %s by %s rejected: already borrowed", title_id, borrower_id)
                raise ConflictError("You have already borrowed this book.")

            title.available_copies -= 1
            loan = loans.open_loan(title, borrower_id)

        logger.info(
            "Borrower %s borrowed title %s (loan %s, %d/%d available)",
            borrower_id, title_id, loan.id, title.available_copies, title.total_copies
        )
        return loan

    def return_title(self, title_id: int, borrower_id: int) -> Loan:
        """Close the borrower's open loan and put the copy back.

        Raises:
            NotFoundError: The title or the borrower's open loan does not exist
            InternalError: Every copy is already on the shelf, so the stored
                counters disagree with the open loan. Nothing is changed.
        """
        with self.database.locked(Title.__tablename__, title_id) as session:
            titles = self._titles(session)
            loans = self._loans(session)

            title = titles.get_for_update(title_id)
            if title is None:
                raise NotFoundError(f"Book with ID {title_id} not found.")

            loan = loans.get_open_loan(title_id, borrower_id)
            if loan is None:
                raise NotFoundError("No active loan found for this user and book.")

            if title.available_copies >= title.total_copies:
                logger.error(
                    "Data inconsistency on title %s: return of loan %s with %d/%d copies already available",
                    title_id, loan.id, title.available_copies, title.total_copies
                )
                raise InternalError(
                    "Data inconsistency detected: Cannot return a book when all copies are already available."
                )

            title.available_copies += 1
            loans.close_loan(loan)

        logger.info(
            "Borrower %s returned title %s (loan %s, %d/%d available)",
            borrower_id, title_id, loan.id, title.available_copies, title.total_copies
        )
        return loan
