from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Union
import logging
import re
import uuid

from .config import Settings
from .domain import (
    Book,
    BookReport,
    CategoryCount,
    ErrorKind,
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

logger = logging.getLogger(__name__)

_TERM_DAYS = {
    MembershipType.SIX_MONTHS: 180,
    MembershipType.ONE_YEAR: 365,
    MembershipType.TWO_YEARS: 730,
}

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_MIN_PHONE_LENGTH = 10


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def _as_date(value: Union[date, datetime]) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def calculate_membership_end_date(
    start_date: Union[date, datetime], term: Union[MembershipType, str]
) -> date:
    """Return the end of a membership term that begins on ``start_date``.

    Also used for extensions, in which case ``start_date`` is the member's
    current end date rather than today.
    """
    return _as_date(start_date) + timedelta(days=_TERM_DAYS[MembershipType(term)])


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _member_field_error(name: str, value: Any) -> Optional[str]:
    if name in ("name", "address", "membership_number"):
        return f"{name} is required" if _blank(value) else None
    if name == "email":
        if not isinstance(value, str) or not _EMAIL_RE.match(value.strip()):
            return "Invalid email address"
    elif name == "phone":
        if not isinstance(value, str) or len(value.strip()) < _MIN_PHONE_LENGTH:
            return f"Phone number must be at least {_MIN_PHONE_LENGTH} digits"
    elif name == "end_date":
        if not isinstance(value, date):
            return "end_date must be a date"
    elif name == "active":
        if not isinstance(value, bool):
            return "active must be True or False"
    return None


def _apply_changes(
    target: Any,
    changes: Dict[str, Any],
    editable: Iterable[str],
    required: Iterable[str] = (),
) -> Optional[str]:
    """Validate ``changes`` against ``editable`` and apply them in place.

    Returns an error message instead of applying anything when a field is
    unknown or a required text value is blank. Text values are stored stripped.
    """
    unknown = sorted(set(changes) - set(editable))
    if unknown:
        return f"Fields cannot be updated: {', '.join(unknown)}"
    for name in required:
        if name in changes and _blank(changes[name]):
            return f"{name} is required"
    for name, value in changes.items():
        setattr(target, name, value.strip() if isinstance(value, str) else value)
    return None


class UserService:
    def __init__(self, users: UserRepo) -> None:
        self.users = users

    def register_user(self, name: str, email: str, role: Role = Role.USER) -> User:
        u = User(user_id=_new_id("usr"), name=name, email=email, role=role)
        self.users.add(u)
        return u

    def login(self, email: str, password: str) -> Result[User]:
        # demo login: any password is accepted for a known email
        user = self.users.get_by_email(email)
        if user is None:
            logger.warning("[login] unknown email %s", email)
            return Result.failure(ErrorKind.NOT_FOUND, "Invalid email or password")
        return Result.success(user)

    @staticmethod
    def is_authorized(user: Optional[User], required_role: Role = Role.USER) -> bool:
        if user is None:
            return False
        return user.role is Role.ADMIN or required_role is Role.USER


class CatalogService:
    editable_fields = ("item_type", "title", "author", "serial_number", "category")
    required_fields = ("title", "author", "serial_number", "category")

    def __init__(self, books: BookRepo) -> None:
        self.books = books

    def add_book(
        self,
        item_type: Union[ItemType, str],
        title: str,
        author: str,
        serial_number: str,
        category: str,
        now: Optional[datetime] = None,
    ) -> Result[Book]:
        try:
            kind = ItemType(item_type)
        except ValueError:
            return Result.failure(ErrorKind.INVALID_INPUT, f"Unknown item type: {item_type}")
        fields = {"title": title, "author": author, "serial_number": serial_number, "category": category}
        missing = [name for name, value in fields.items() if _blank(value)]
        if missing:
            logger.warning("[catalog] add rejected, missing %s", missing)
            return Result.failure(ErrorKind.INVALID_INPUT, f"{missing[0]} is required")

        b = Book(
            book_id=_new_id("bk"),
            item_type=kind,
            title=title.strip(),
            author=author.strip(),
            serial_number=serial_number.strip(),
            category=category.strip(),
            available=True,
            added_date=now or datetime.now(),
        )
        self.books.add(b)
        logger.info("[catalog] added %s %r (%s)", kind.value, b.title, b.book_id)
        return Result.success(b)

    def update_book(self, book_id: str, /, **changes: Any) -> Result[Book]:
        book = self.books.get(book_id)
        if book is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Book not found")
        if "item_type" in changes:
            try:
                changes["item_type"] = ItemType(changes["item_type"])
            except ValueError:
                return Result.failure(
                    ErrorKind.INVALID_INPUT, f"Unknown item type: {changes['item_type']}"
                )
        error = _apply_changes(book, changes, self.editable_fields, self.required_fields)
        if error:
            logger.warning("[catalog] update of %s rejected: %s", book_id, error)
            return Result.failure(ErrorKind.INVALID_INPUT, error)
        logger.info("[catalog] updated %s: %s", book_id, sorted(changes))
        return Result.success(book)

    def get(self, book_id: str) -> Optional[Book]:
        return self.books.get(book_id)

    def get_by_title(self, title: str) -> Optional[Book]:
        return self.books.get_by_title(title)

    def search(self, params: Optional[SearchParams] = None) -> List[Book]:
        return self.books.search(params or SearchParams())


class MembershipService:
    editable_fields = (
        "name",
        "email",
        "phone",
        "address",
        "membership_number",
        "end_date",
        "membership_type",
        "active",
    )

    def __init__(self, members: MemberRepo) -> None:
        self.members = members

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
        fields = {
            "name": name,
            "email": email,
            "phone": phone,
            "address": address,
            "membership_number": membership_number,
        }
        for field_name, value in fields.items():
            error = _member_field_error(field_name, value)
            if error:
                logger.warning("[membership] add rejected: %s", error)
                return Result.failure(ErrorKind.INVALID_INPUT, error)
        try:
            kind = MembershipType(term)
        except ValueError:
            return Result.failure(ErrorKind.INVALID_INPUT, f"Unknown membership type: {term}")
        number = membership_number.strip()
        if self.members.get_by_number(number) is not None:
            logger.warning("[membership] duplicate number %s", number)
            return Result.failure(
                ErrorKind.INVALID_INPUT, f"Membership number {number} already exists"
            )

        start = _as_date(start_date or date.today())
        m = Member(
            member_id=_new_id("mem"),
            name=name.strip(),
            email=email.strip(),
            phone=phone.strip(),
            address=address.strip(),
            membership_number=number,
            start_date=start,
            end_date=calculate_membership_end_date(start, kind),
            membership_type=kind,
        )
        self.members.add(m)
        logger.info("[membership] added %s (%s) until %s", m.name, m.membership_number, m.end_date)
        return Result.success(m)

    def update_member(self, member_id: str, /, **changes: Any) -> Result[Member]:
        member = self.members.get(member_id)
        if member is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Member not found")
        error = self._check_changes(member, changes)
        if error is None:
            error = _apply_changes(member, changes, self.editable_fields)
        if error:
            logger.warning("[membership] update of %s rejected: %s", member_id, error)
            return Result.failure(ErrorKind.INVALID_INPUT, error)
        logger.info("[membership] updated %s: %s", member_id, sorted(changes))
        return Result.success(member)

    def _check_changes(self, member: Member, changes: Dict[str, Any]) -> Optional[str]:
        # normalises membership_type and end_date in place
        for field_name in self.editable_fields:
            if field_name in changes:
                error = _member_field_error(field_name, changes[field_name])
                if error:
                    return error
        if "membership_type" in changes:
            try:
                changes["membership_type"] = MembershipType(changes["membership_type"])
            except ValueError:
                return f"Unknown membership type: {changes['membership_type']}"
        if "end_date" in changes:
            changes["end_date"] = _as_date(changes["end_date"])
            if changes["end_date"] < member.start_date:
                return "end_date cannot be before start_date"
        if "membership_number" in changes:
            number = changes["membership_number"].strip()
            other = self.members.get_by_number(number)
            if other is not None and other.member_id != member.member_id:
                return f"Membership number {number} already exists"
        return None

    def extend_membership(
        self, membership_number: str, term: Union[MembershipType, str]
    ) -> Result[Member]:
        member = self.members.get_by_number(membership_number)
        if member is None:
            return Result.failure(ErrorKind.NOT_FOUND, "No member found with that membership number")
        try:
            kind = MembershipType(term)
        except ValueError:
            return Result.failure(ErrorKind.INVALID_INPUT, f"Unknown membership type: {term}")
        return self.update_member(
            member.member_id,
            membership_type=kind,
            end_date=calculate_membership_end_date(member.end_date, kind),
        )

    def cancel_membership(self, membership_number: str) -> Result[Member]:
        member = self.members.get_by_number(membership_number)
        if member is None:
            return Result.failure(ErrorKind.NOT_FOUND, "No member found with that membership number")
        return self.update_member(member.member_id, active=False)

    def get(self, member_id: str) -> Optional[Member]:
        return self.members.get(member_id)

    def get_by_number(self, membership_number: str) -> Optional[Member]:
        return self.members.get_by_number(membership_number)


class FineService:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def assess_fine(self, issue: Issue, actual_return_date: Union[date, datetime]) -> int:
        """Flat rate per whole day past the due date; zero when on time."""
        days_late = (_as_date(actual_return_date) - issue.return_date).days
        return max(0, days_late) * self.settings.fine_per_day


class CirculationService:
    def __init__(
        self,
        books: BookRepo,
        members: MemberRepo,
        issues: IssueRepo,
        fines: FineService,
        settings: Settings,
    ):
        self.books = books
        self.members = members
        self.issues = issues
        self.fines = fines
        self.settings = settings

    def issue_book(
        self,
        book_id: str,
        member_id: str,
        return_date: Union[date, datetime],
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Result[Issue]:
        now = now or datetime.now()
        today = now.date()
        due = _as_date(return_date)

        book = self.books.get(book_id)
        member = self.members.get(member_id)
        if not book or not member:
            logger.warning("[issue] book %s or member %s missing", book_id, member_id)
            return Result.failure(ErrorKind.NOT_FOUND, "Book or member not found")

        if not book.available:
            logger.warning("[issue] %r is not available", book.title)
            return Result.failure(ErrorKind.INVALID_STATE, "Book is not available for issue")

        if due < today:
            logger.warning("[issue] due date %s is in the past", due)
            return Result.failure(ErrorKind.INVALID_INPUT, "Return date cannot be before today")

        max_days = self.settings.max_issue_days
        if due > today + timedelta(days=max_days):
            logger.warning("[issue] due date %s is more than %d days out", due, max_days)
            return Result.failure(
                ErrorKind.INVALID_INPUT,
                f"Return date cannot be more than {max_days} days from today",
            )

        issue = Issue(
            issue_id=_new_id("iss"),
            book_id=book.book_id,
            book_title=book.title,
            book_author=book.author,
            member_id=member.member_id,
            member_name=member.name,
            issue_date=now,
            return_date=due,
            remarks=remarks,
        )
        self.issues.add(issue)
        book.available = False
        logger.info("[issue] %r issued to %s, due %s", book.title, member.name, due)
        return Result.success(issue)

    def return_book(
        self, issue_id: str, actual_return_date: Union[date, datetime]
    ) -> Result[ReturnReceipt]:
        issue = self.issues.get(issue_id)
        if issue is None:
            logger.warning("[return] issue %s not found", issue_id)
            return Result.failure(ErrorKind.NOT_FOUND, "Book issue record not found")
        if issue.returned:
            logger.warning("[return] issue %s is already closed", issue_id)
            return Result.failure(ErrorKind.INVALID_STATE, "Book has already been returned")

        fine_amount = self.fines.assess_fine(issue, actual_return_date)
        issue.actual_return_date = _as_date(actual_return_date)
        issue.fine_amount = fine_amount

        if fine_amount == 0:
            self._close(issue)
            logger.info("[return] %r returned on time", issue.book_title)
        else:
            issue.fine_paid = False
            logger.info(
                "[return] %r returned late, fine %d pending", issue.book_title, fine_amount
            )
        return Result.success(ReturnReceipt(issue=issue, fine_amount=fine_amount))

    def pay_fine(self, issue_id: str) -> Result[Issue]:
        issue = self.issues.get(issue_id)
        if issue is None:
            logger.debug("[fine] issue %s not found", issue_id)
            return Result.failure(ErrorKind.NOT_FOUND, "Book issue record not found")
        if issue.returned:
            # already closed; the book may be out on a newer issue
            return Result.success(issue)

        self._close(issue)
        logger.info("[fine] fine of %s settled for %r", issue.fine_amount or 0, issue.book_title)
        return Result.success(issue)

    def _close(self, issue: Issue) -> None:
        issue.returned = True
        issue.fine_paid = True
        book = self.books.get(issue.book_id)
        if book:
            book.available = True

    def get_issue(self, issue_id: str) -> Optional[Issue]:
        return self.issues.get(issue_id)

    def get_active_issue_for_book(self, book_id: str) -> Optional[Issue]:
        return self.issues.get_active_for_book(book_id)

    def list_member_issues(self, member_id: str) -> List[Issue]:
        return self.issues.list_by_member(member_id)

    def list_overdue_issues(self, today: Optional[date] = None) -> List[Issue]:
        return self.issues.list_overdue(today)

    def list_pending_fines(self) -> List[Issue]:
        return self.issues.list_pending_fines()


class ReportService:
    def __init__(self, books: BookRepo, settings: Settings) -> None:
        self.books = books
        self.settings = settings

    def book_report(self, recent: Optional[int] = None) -> BookReport:
        books = self.books.list_all()
        total = len(books)
        available = sum(1 for b in books if b.available)

        def pct(n: int) -> float:
            return round(n / total * 100, 1) if total else 0.0

        counts: Dict[str, int] = {}
        for b in books:
            counts[b.category] = counts.get(b.category, 0) + 1

        limit = self.settings.recent_books_limit if recent is None else recent
        newest = sorted(books, key=lambda b: b.added_date, reverse=True)[:limit]
        return BookReport(
            total=total,
            available=available,
            checked_out=total - available,
            available_pct=pct(available),
            checked_out_pct=pct(total - available),
            by_category=[CategoryCount(c, n, pct(n)) for c, n in counts.items()],
            recently_added=newest,
        )

