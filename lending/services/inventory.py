# lending/services/inventory.py
import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Callable, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lending.exceptions import ConflictError, InternalError, InvalidInputError, NotFoundError
from lending.sa.database import Database
from lending.sa.models import Title
from lending.sa.repositories import TitleRepository
from lending.utils.covers import BlobStore, validate_cover, ALLOWED_EXTENSIONS, MAX_COVER_BYTES

logger = logging.getLogger(__name__)


@dataclass
class CoverUpload:
    """An uploaded cover image as received from the caller"""
    data: bytes
    filename: str


def reconcile_quantity(total_copies: int, available_copies: int, new_total: int) -> Tuple[int, int]:
    """Compute the counters for a new total while keeping lent copies lent.

    Args:
        total_copies: Currently stored total
        available_copies: Currently stored available count
        new_total: Requested total

    Returns:
        (total_copies, available_copies) to store

    Raises:
        InvalidInputError: If the new total is below one or below the
            number of copies currently lent out
    """
    if not isinstance(new_total, int) or isinstance(new_total, bool) or new_total < 1:
        raise InvalidInputError("Quantity must be a positive number.")

    outstanding = total_copies - available_copies
    if new_total < outstanding:
        raise InvalidInputError("New quantity cannot be less than the number of borrowed books.")

    return new_total, new_total - outstanding


def _clean_text(value: Optional[str], field: str, min_length: int) -> str:
    if value is None or not str(value).strip():
        raise InvalidInputError(f"{field} should not be empty.")
    value = str(value).strip()
    if len(value) < min_length:
        raise InvalidInputError(f"{field} is too short.")
    return value


def _check_year(year) -> int:
    if not isinstance(year, int) or isinstance(year, bool):
        raise InvalidInputError("Publication year must be an integer.")
    if year < 0:
        raise InvalidInputError("Publication year cannot be negative.")
    if year > datetime.now(UTC).year + 5:
        raise InvalidInputError("Publication year seems too far in the future.")
    return year


def _integrity_error(error: IntegrityError) -> Exception:
    """Map a failed flush to a Conflict only when the ISBN key tripped"""
    message = str(error.orig).lower()
    if "isbn" in message and ("unique" in message or "duplicate" in message):
        return ConflictError("A book with this ISBN already exists.")
    logger.error("Constraint violation while writing a title: %s", error.orig)
    return InternalError("Data inconsistency detected while saving the book.")


class InventoryService:
    """Create catalog entries and edit them without breaking the copy counters."""

    def __init__(
        self,
        database: Database,
        blob_store: Optional[BlobStore] = None,
        titles: Callable[[Session], TitleRepository] = TitleRepository,
        allowed_extensions: Tuple[str, ...] = ALLOWED_EXTENSIONS,
        max_cover_bytes: int = MAX_COVER_BYTES
    ):
        self.database = database
        self.blob_store = blob_store
        self._titles = titles
        self.allowed_extensions = allowed_extensions
        self.max_cover_bytes = max_cover_bytes

    def create_title(
        self,
        isbn: str,
        author: str,
        title: str,
        publication_year: int,
        total_copies: int,
        cover: Optional[CoverUpload] = None
    ) -> Title:
        """Add a title to the catalog with every copy available.

        Raises:
            InvalidInputError: A field or the cover image fails validation
            ConflictError: A title with this ISBN already exists
            CoverStorageError: The cover could not be stored
        """
        isbn = _clean_text(isbn, "ISBN", 1)
        title = _clean_text(title, "Title", 1)
        author = _clean_text(author, "Author", 2)
        publication_year = _check_year(publication_year)
        if not isinstance(total_copies, int) or isinstance(total_copies, bool) or total_copies < 1:
            raise InvalidInputError("Quantity must be a positive number.")

        with self.database.get_db() as session:
            titles = self._titles(session)

            if titles.get_by_isbn(isbn) is not None:
                raise ConflictError("A book with this ISBN already exists.")

            cover_image = None
            if cover is not None:
                cover_image = self._store_cover(cover)

            entry = Title(
                isbn=isbn,
                title=title,
                author=author,
                publication_year=publication_year,
                total_copies=total_copies,
                available_copies=total_copies,
                cover_image=cover_image
            )
            try:
                titles.add(entry)
            except IntegrityError as e:
                raise _integrity_error(e) from e

        logger.info("Created title %s (isbn %s) with %d copies", entry.id, isbn, total_copies)
        return entry

    def _store_cover(self, cover: CoverUpload) -> str:
        if self.blob_store is None:
            raise InvalidInputError("Cover images are not accepted by this catalog.")
        ext = validate_cover(cover.data, cover.filename, self.allowed_extensions, self.max_cover_bytes)
        return self.blob_store.save(cover.data, ext)

    def update_title(
        self,
        title_id: int,
        quantity: Optional[int] = None,
        title: Optional[str] = None,
        author: Optional[str] = None,
        publication_year: Optional[int] = None,
        isbn: Optional[str] = None
    ) -> Title:
        """Apply a partial update, field by field.

        Counters are never copied from input: a new quantity goes through
        reconcile_quantity under the title's exclusive lock, so an in-flight
        borrow or return cannot be lost.

        Raises:
            NotFoundError: The title does not exist
            InvalidInputError: A value fails validation
            ConflictError: The new ISBN belongs to another title
        """
        # Validate before taking the lock
        if title is not None:
            title = _clean_text(title, "Title", 1)
        if author is not None:
            author = _clean_text(author, "Author", 2)
        if publication_year is not None:
            publication_year = _check_year(publication_year)
        if isbn is not None:
            isbn = _clean_text(isbn, "ISBN", 1)

        with self.database.locked(Title.__tablename__, title_id) as session:
            titles = self._titles(session)

            entry = titles.get_for_update(title_id)
            if entry is None:
                raise NotFoundError(f"Book with ID {title_id} not found.")

            if quantity is not None:
                entry.total_copies, entry.available_copies = reconcile_quantity(
                    entry.total_copies, entry.available_copies, quantity
                )

            if title is not None:
                entry.title = title
            if author is not None:
                entry.author = author
            if publication_year is not None:
                entry.publication_year = publication_year
            if isbn is not None and isbn != entry.isbn:
                other = titles.get_by_isbn(isbn)
                if other is not None:
                    raise ConflictError("A book with this ISBN already exists.")
                entry.isbn = isbn

            try:
                session.flush()
            except IntegrityError as e:
                raise _integrity_error(e) from e

        logger.info(
            "Updated title %s (%d/%d available)",
            title_id, entry.available_copies, entry.total_copies
        )
        return entry

    def update_quantity(self, title_id: int, new_total: int) -> Title:
        """Change the number of owned copies, keeping lent copies lent"""
        if new_total is None:
            raise InvalidInputError("Quantity must be a positive number.")
        return self.update_title(title_id, quantity=new_total)

    def update_details(
        self,
        title_id: int,
        title: Optional[str] = None,
        author: Optional[str] = None,
        publication_year: Optional[int] = None,
        isbn: Optional[str] = None
    ) -> Title:
        return self.update_title(
            title_id,
            title=title,
            author=author,
            publication_year=publication_year,
            isbn=isbn
        )
