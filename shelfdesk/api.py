from __future__ import annotations
from datetime import date, datetime
from typing import Any, Optional, Union

from .config import Settings, settings as default_settings
from .domain import (
    Book,
    BookReport,
    Issue,
    ItemType,
    Member,
    MembershipType,
    Result,
    ReturnReceipt,
    Role,
    SearchParams,
    User,
)
from .repositories import BookRepo, IssueRepo, MemberRepo, UserRepo
from .services import (
    CatalogService,
    CirculationService,
    FineService,
    MembershipService,
    ReportService,
    UserService,
    calculate_membership_end_date,
)


class LibrarySystem:
    """
    A simple facade that owns the in-memory store, wires the services and
    offers a compact API to whatever front end sits on top.

    One instance is one library for the lifetime of the application run.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or default_settings

        # repos
        self.users = UserRepo()
        self.books = BookRepo()
        self.members = MemberRepo()
        self.issues = IssueRepo()

        # services
        self.user_service = UserService(self.users)
        self.catalog = CatalogService(self.books)
        self.membership = MembershipService(self.members)
        self.fine_service = FineService(self.settings)
        self.circulation = CirculationService(
            self.books, self.members, self.issues, self.fine_service, self.settings
        )
        self.reports = ReportService(self.books, self.settings)

    # ---- users
    def create_user(self, name: str, email: str, role: Role = Role.USER) -> User:
        return self.user_service.register_user(name, email, role)

    def login(self, email: str, password: str) -> Result[User]:
        return self.user_service.login(email, password)

    def is_authorized(self, user: Optional[User], required_role: Role = Role.USER) -> bool:
        return self.user_service.is_authorized(user, required_role)

    # ---- catalog
    def add_book(
        self,
        item_type: Union[ItemType, str],
        title: str,
        author: str,
        serial_number: str,
        category: str,
        now: Optional[datetime] = None,
    ) -> Result[Book]:
        return self.catalog.add_book(item_type, title, author, serial_number, category, now)

    def update_book(self, book_id: str, /, **changes: Any) -> Result[Book]:
        return self.catalog.update_book(book_id, **changes)

    def search_books(self, params: Optional[SearchParams] = None) -> list[Book]:
        return self.catalog.search(params)

    def get_book(self, book_id: str) -> Optional[Book]:
        return self.catalog.get(book_id)

    def get_book_by_title(self, title: str) -> Optional[Book]:
        return self.catalog.get_by_title(title)

    # ---- membership
    def add_member(
        self,
        name: str,
        email: str,
        phone: str,
        address: str,
        membership_number: str,
        term: Union[MembershipType, str] = MembershipType.SIX_MONTHS,
        start_date: Optional[date] = None,
    ) -> Result[Member]:
        return self.membership.add_member(
            name, email, phone, address, membership_number, term, start_date
        )

    def update_member(self, member_id: str, /, **changes: Any) -> Result[Member]:
        return self.membership.update_member(member_id, **changes)

    def extend_membership(
        self, membership_number: str, term: Union[MembershipType, str]
    ) -> Result[Member]:
        return self.membership.extend_membership(membership_number, term)

    def cancel_membership(self, membership_number: str) -> Result[Member]:
        return self.membership.cancel_membership(membership_number)

    def get_member(self, member_id: str) -> Optional[Member]:
        return self.membership.get(member_id)

    def get_member_by_number(self, membership_number: str) -> Optional[Member]:
        return self.membership.get_by_number(membership_number)

    @staticmethod
    def calculate_membership_end_date(
        start_date: Union[date, datetime], term: Union[MembershipType, str]
    ) -> date:
        return calculate_membership_end_date(start_date, term)

    # ---- circulation
    def issue_book(
        self,
        book_id: str,
        member_id: str,
        return_date: Union[date, datetime],
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Result[Issue]:
        return self.circulation.issue_book(book_id, member_id, return_date, remarks, now)

    def return_book(
        self, issue_id: str, actual_return_date: Union[date, datetime]
    ) -> Result[ReturnReceipt]:
        return self.circulation.return_book(issue_id, actual_return_date)

    def pay_fine(self, issue_id: str) -> Result[Issue]:
        return self.circulation.pay_fine(issue_id)

    def get_issue(self, issue_id: str) -> Optional[Issue]:
        return self.circulation.get_issue(issue_id)

    def get_active_issue_for_book(self, book_id: str) -> Optional[Issue]:
        return self.circulation.get_active_issue_for_book(book_id)

    # ---- reporting
    def book_report(self, recent: Optional[int] = None) -> BookReport:
        return self.reports.book_report(recent)

    def report_overdue(self, today: Optional[date] = None) -> list[Issue]:
        return self.circulation.list_overdue_issues(today)

    def report_pending_fines(self) -> list[Issue]:
        return self.circulation.list_pending_fines()
