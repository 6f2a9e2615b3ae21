from datetime import date, datetime

import pytest

from shelfdesk import LibrarySystem, MembershipType, Settings

NOW = datetime(2026, 3, 2, 10, 30)
TODAY = NOW.date()


@pytest.fixture
def settings():
    return Settings(fine_per_day=10, max_issue_days=15, recent_books_limit=5, log_level="DEBUG")


@pytest.fixture
def lib(settings):
    return LibrarySystem(settings=settings)


@pytest.fixture
def book(lib):
    return lib.add_book("book", "To Kill a Mockingbird", "Harper Lee", "BK001", "Fiction", now=NOW).value


@pytest.fixture
def member(lib):
    return lib.add_member(
        "John Doe",
        "john@example.com",
        "123-456-7890",
        "123 Main St, Anytown",
        "MEM001",
        MembershipType.SIX_MONTHS,
        start_date=date(2026, 1, 1),
    ).value
