# lending/sa/repositories/title.py
from typing import List, Optional
from sqlalchemy.orm import Session
from lending.sa.models import Title


class TitleRepository:
    """Repository for Title rows.

    Methods never commit; the caller's unit of work decides when the
    changes become visible.
    """

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, title_id: int) -> Optional[Title]:
        """Get a title by its ID without locking"""
        return self.session.query(Title).filter(Title.id == title_id).first()

    def get_for_update(self, title_id: int) -> Optional[Title]:
        """Get a title and take an exclusive row lock on it.

        The lock is held until the surrounding transaction ends. Backends
        without row locks (SQLite) ignore FOR UPDATE; there the caller must
        already hold the in-process lock for this row.

        Args:
            title_id: The ID of the title to lock

        Returns:
            The locked Title if found, None otherwise
        """
        return (
            self.session.query(Title)
            .filter(Title.id == title_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def get_by_isbn(self, isbn: str) -> Optional[Title]:
        return self.session.query(Title).filter(Title.isbn == isbn).first()

    def add(self, title: Title) -> Title:
        """Stage a new title and flush so it gets an ID"""
        self.session.add(title)
        self.session.flush()
        return title

    def _filtered(self, title: Optional[str] = None, author: Optional[str] = None):
        query = self.session.query(Title)

        if title and title.strip():
            query = query.filter(Title.title.icontains(title.strip(), autoescape=True))

        if author and author.strip():
            query = query.filter(Title.author.icontains(author.strip(), autoescape=True))

        return query

    def search(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
        limit: int = 10,
        offset: int = 0
    ) -> List[Title]:
        """Search titles by case-insensitive title and author substrings.

        Args:
            title: Substring of the book title
            author: Substring of the author name
            limit: Maximum number of results to return
            offset: Number of records to skip

        Returns:
            Matching titles ordered by ID
        """
        return (
            self._filtered(title, author)
            .order_by(Title.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count(self, title: Optional[str] = None, author: Optional[str] = None) -> int:
        """Count titles matching the same filters as search"""
        return self._filtered(title, author).count()
