from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, auto
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Role(Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass
class User:
    user_id: str
    name: str
    email: str
    role: Role = Role.USER


class ItemType(Enum):
    BOOK = "book"
    MOVIE = "movie"


class MembershipType(Enum):
    SIX_MONTHS = "6months"
    ONE_YEAR = "1year"
    TWO_YEARS = "2years"


@dataclass
class Book:
    book_id: str
    item_type: ItemType
    title: str
    author: str
    serial_number: str
    category: str
    available: bool = True
    added_date: datetime = field(default_factory=datetime.now)


@dataclass
class Member:
    member_id: str
    name: str
    email: str
    phone: str
    address: str
    membership_number: str
    start_date: date
    end_date: date
    membership_type: MembershipType
    active: bool = True


@dataclass
class Issue:
    issue_id: str
    book_id: str
    book_title: str
    book_author: str
    member_id: str
    member_name: str
    issue_date: datetime
    return_date: date
    remarks: Optional[str] = None
    returned: bool = False
    actual_return_date: Optional[date] = None
    fine_amount: Optional[int] = None
    fine_paid: Optional[bool] = None

    def is_overdue(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        return not self.returned and today > self.return_date

    @property
    def pending_fine(self) -> bool:
        return not self.returned and bool(self.fine_amount) and not self.fine_paid


@dataclass
class SearchParams:
    title: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None


class ErrorKind(Enum):
    NOT_FOUND = auto()
    INVALID_STATE = auto()
    INVALID_INPUT = auto()


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Tagged outcome of a workflow call: either a value or a Failure.

    Business-rule violations come back as failures; the caller decides how to
    present ``error.message``.
    """

    value: Optional[T] = None
    error: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result[T]":
        return cls(error=Failure(kind, message))


@dataclass(frozen=True)
class ReturnReceipt:
    issue: Issue
    fine_amount: int


@dataclass(frozen=True)
class CategoryCount:
    category: str
    count: int
    percentage: float


@dataclass(frozen=True)
class BookReport:
    total: int
    available: int
    checked_out: int
    available_pct: float
    checked_out_pct: float
    by_category: list[CategoryCount]
    recently_added: list[Book]
