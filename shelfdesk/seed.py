from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Optional
import logging

from .api import LibrarySystem
from .domain import ItemType, MembershipType, Role

logger = logging.getLogger(__name__)


def seed_demo_data(sys: LibrarySystem, now: Optional[datetime] = None) -> None:
    now = now or datetime.now()
    today = now.date()

    # users
    sys.create_user("Admin User", "admin@library.com", role=Role.ADMIN)
    sys.create_user("Regular User", "user@library.com")

    # catalog
    catalog = [
        (ItemType.BOOK, "To Kill a Mockingbird", "Harper Lee", "BK001", "Fiction"),
        (ItemType.BOOK, "1984", "George Orwell", "BK002", "Science Fiction"),
        (ItemType.MOVIE, "The Shawshank Redemption", "Frank Darabont", "MV001", "Drama"),
        (ItemType.BOOK, "Pride and Prejudice", "Jane Austen", "BK003", "Romance"),
        (ItemType.BOOK, "The Great Gatsby", "F. Scott Fitzgerald", "BK004", "Fiction"),
    ]
    for item_type, title, author, serial, category in catalog:
        sys.add_book(item_type, title, author, serial, category, now=now)

    # members
    john = sys.add_member(
        "John Doe",
        "john@example.com",
        "123-456-7890",
        "123 Main St, Anytown",
        "MEM001",
        MembershipType.SIX_MONTHS,
        start_date=today,
    ).value
    sys.add_member(
        "Jane Smith",
        "jane@example.com",
        "987-654-3210",
        "456 Oak St, Somewhere",
        "MEM002",
        MembershipType.ONE_YEAR,
        start_date=today,
    )

    # one open issue, which is what makes "1984" unavailable
    orwell = sys.get_book_by_title("1984")
    if orwell and john:
        sys.issue_book(
            orwell.book_id,
            john.member_id,
            today + timedelta(days=sys.settings.max_issue_days),
            remarks="First edition",
            now=now,
        )

    logger.info("[seed] users: %s", [u.name for u in sys.users.list_all()])
    logger.info("[seed] books: %s", [b.title for b in sys.books.list_all()])
    logger.info("[seed] members: %s", [m.membership_number for m in sys.members.list_all()])
