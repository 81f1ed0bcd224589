# tests/conftest.py
import sys
import itertools
import pytest
from io import BytesIO
from pathlib import Path

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from PIL import Image
from sqlalchemy import func
from sqlalchemy.orm import Session

from lending.config import Settings
from lending.context import LendingContext
from lending.sa.database import Database
from lending.sa.models import Title, Loan
from lending.services import LendingService, InventoryService, CatalogService
from lending.utils.covers import LocalBlobStore


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a per-test SQLite file and cover directory"""
    settings = Settings()
    settings.database_url = f"sqlite:///{tmp_path / 'test_lending.db'}"
    settings.cover_storage_dir = str(tmp_path / "covers")
    settings.cover_url_prefix = "/storage/covers"
    settings.log_level = "DEBUG"
    return settings


@pytest.fixture
def database(settings):
    """Create a test database with a fresh schema"""
    db = Database(settings=settings)
    db.init_db()
    yield db
    db.drop_db()
    db.dispose()


@pytest.fixture
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def blob_store(settings):
    return LocalBlobStore(settings.cover_storage_dir, settings.cover_url_prefix)


@pytest.fixture
def lending_service(database):
    return LendingService(database)


@pytest.fixture
def inventory_service(database, blob_store):
    return InventoryService(database, blob_store=blob_store)


@pytest.fixture
def catalog_service(database):
    return CatalogService(database)


@pytest.fixture
def context(settings, database, blob_store):
    return LendingContext.from_settings(settings, database, blob_store)


@pytest.fixture
def make_title(inventory_service):
    """Factory creating titles with unique ISBNs"""
    counter = itertools.count(1)

    def _make(total_copies: int = 5, title: str = None, author: str = "Test Author", year: int = 2024) -> Title:
        n = next(counter)
        return inventory_service.create_title(
            isbn=f"isbn-{n:04d}",
            author=author,
            title=title or f"Test Book {n}",
            publication_year=year,
            total_copies=total_copies
        )
    return _make


@pytest.fixture
def sample_title(make_title):
    """A title with five copies, all available"""
    return make_title(total_copies=5, title="Test Book")


@pytest.fixture
def reload_title(database):
    """Read a title's current stored state"""
    def _reload(title_id: int) -> Title:
        with database.get_db() as session:
            return session.get(Title, title_id)
    return _reload


@pytest.fixture
def open_loan_count(database):
    def _count(title_id: int, borrower_id: int = None) -> int:
        with database.get_db() as session:
            query = session.query(func.count(Loan.id)).filter(
                Loan.title_id == title_id,
                Loan.returned_at.is_(None)
            )
            if borrower_id is not None:
                query = query.filter(Loan.borrower_id == borrower_id)
            return query.scalar()
    return _count


@pytest.fixture
def assert_consistent(database):
    """Assert the copy counters of every title match its open loans"""
    def _check():
        with database.get_db() as session:
            for entry in session.query(Title).all():
                open_count = (
                    session.query(func.count(Loan.id))
                    .filter(Loan.title_id == entry.id, Loan.returned_at.is_(None))
                    .scalar()
                )
                assert 0 <= entry.available_copies <= entry.total_copies, entry
                assert entry.total_copies - entry.available_copies == open_count, entry

            duplicates = (
                session.query(Loan.title_id, Loan.borrower_id, func.count(Loan.id))
                .filter(Loan.returned_at.is_(None))
                .group_by(Loan.title_id, Loan.borrower_id)
                .having(func.count(Loan.id) > 1)
                .all()
            )
            assert duplicates == []
    return _check


def make_image_bytes(fmt: str = "PNG", size=(12, 18)) -> bytes:
    output = BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(output, format=fmt)
    return output.getvalue()


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes("JPEG")
