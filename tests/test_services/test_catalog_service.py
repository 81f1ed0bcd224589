# tests/test_services/test_catalog_service.py

import pytest
from lending.exceptions import InvalidInputError, NotFoundError
from lending.services.catalog import page_count


@pytest.fixture
def shelf(make_title):
    titles = [make_title(title=f"Dune {i}", author="Frank Herbert") for i in range(1, 4)]
    titles += [make_title(title=f"Foundation {i}", author="Isaac Asimov") for i in range(1, 9)]
    return titles


def test_page_count():
    assert page_count(0, 10) == 0
    assert page_count(10, 10) == 1
    assert page_count(11, 10) == 2
    assert page_count(1, 3) == 1


def test_list_titles_defaults(catalog_service, shelf):
    page = catalog_service.list_titles()
    assert page.total == 11
    assert page.page == 1
    assert page.limit == 10
    assert page.total_pages == 2
    assert len(page.items) == 10
    assert [t.id for t in page.items] == sorted(t.id for t in page.items)


def test_list_titles_last_page(catalog_service, shelf):
    page = catalog_service.list_titles(page=2, limit=10)
    assert len(page.items) == 1
    assert page.items[0].title == "Foundation 8"


def test_list_titles_past_the_end(catalog_service, shelf):
    page = catalog_service.list_titles(page=5, limit=10)
    assert page.items == []
    assert page.total == 11


def test_list_titles_filters(catalog_service, shelf):
    page = catalog_service.list_titles(author="herbert")
    assert page.total == 3
    assert page.total_pages == 1

    page = catalog_service.list_titles(title="FOUNDATION", limit=3)
    assert page.total == 8
    assert page.total_pages == 3

    page = catalog_service.list_titles(title="dune", author="asimov")
    assert page.total == 0
    assert page.total_pages == 0


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 101)])
def test_list_titles_invalid_paging(catalog_service, page, limit):
    with pytest.raises(InvalidInputError):
        catalog_service.list_titles(page=page, limit=limit)


def test_get_title(catalog_service, sample_title):
    assert catalog_service.get_title(sample_title.id).isbn == sample_title.isbn
    with pytest.raises(NotFoundError):
        catalog_service.get_title(12345)


def test_loan_history(catalog_service, lending_service, make_title):
    first = make_title()
    second = make_title()
    lending_service.borrow(first.id, 1)
    lending_service.borrow(second.id, 1)
    lending_service.return_title(first.id, 1)

    history = catalog_service.list_loan_history()
    assert len(history) == 2
    assert history[0].title_id == second.id
    assert history[0].title.title == second.title
    assert history[1].returned_at is not None


def test_open_loans(catalog_service, lending_service, sample_title):
    lending_service.borrow(sample_title.id, 1)
    lending_service.borrow(sample_title.id, 2)
    lending_service.return_title(sample_title.id, 1)

    assert [loan.borrower_id for loan in catalog_service.list_open_loans()] == [2]
    assert catalog_service.list_open_loans(borrower_id=1) == []


def test_find_inconsistent_titles(catalog_service, lending_service, database, make_title):
    from sqlalchemy import update
    from lending.sa.models import Title

    healthy = make_title()
    broken = make_title()
    lending_service.borrow(healthy.id, 1)
    lending_service.borrow(broken.id, 1)
    assert catalog_service.find_inconsistent_titles() == []

    with database.get_db() as session:
        session.execute(update(Title).where(Title.id == broken.id).values(available_copies=5))

    result = catalog_service.find_inconsistent_titles()
    assert [(t.id, count) for t, count in result] == [(broken.id, 1)]
