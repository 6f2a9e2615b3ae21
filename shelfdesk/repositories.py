from __future__ import annotations
from datetime import date
from typing import Dict, List, Optional

from .domain import Book, Issue, Member, SearchParams, User


class UserRepo:
    def __init__(self) -> None:
        self._users: Dict[str, User] = {}

    def add(self, user: User) -> None:
        self._users[user.user_id] = user

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        e = email.strip().lower()
        return next((u for u in self._users.values() if u.email.lower() == e), None)

    def list_all(self) -> List[User]:
        return list(self._users.values())


class BookRepo:
    def __init__(self) -> None:
        self._books: Dict[str, Book] = {}

    def add(self, book: Book) -> None:
        self._books[book.book_id] = book

    def get(self, book_id: str) -> Optional[Book]:
        return self._books.get(book_id)

    def get_by_title(self, title: str) -> Optional[Book]:
        t = title.strip().lower()
        return next((b for b in self._books.values() if b.title.lower() == t), None)

    def list_all(self) -> List[Book]:
        return list(self._books.values())

    def search(self, params: SearchParams) -> List[Book]:
        title = (params.title or "").lower()
        author = (params.author or "").lower()

        def matches(b: Book) -> bool:
            if title and title not in b.title.lower():
                return False
            if author and author not in b.author.lower():
                return False
            if params.category and b.category != params.category:
                return False
            return True

        return [b for b in self._books.values() if matches(b)]


class MemberRepo:
    def __init__(self) -> None:
        self._members: Dict[str, Member] = {}

    def add(self, member: Member) -> None:
        self._members[member.member_id] = member

    def get(self, member_id: str) -> Optional[Member]:
        return self._members.get(member_id)

    def get_by_number(self, membership_number: str) -> Optional[Member]:
        return next(
            (m for m in self._members.values() if m.membership_number == membership_number),
            None,
        )

    def list_all(self) -> List[Member]:
        return list(self._members.values())


class IssueRepo:
    def __init__(self) -> None:
        self._issues: Dict[str, Issue] = {}

    def add(self, issue: Issue) -> None:
        self._issues[issue.issue_id] = issue

    def get(self, issue_id: str) -> Optional[Issue]:
        return self._issues.get(issue_id)

    def list_all(self) -> List[Issue]:
        return list(self._issues.values())

    def get_active_for_book(self, book_id: str) -> Optional[Issue]:
        return next(
            (i for i in self._issues.values() if i.book_id == book_id and not i.returned),
            None,
        )

    def list_by_member(self, member_id: str) -> List[Issue]:
        return [i for i in self._issues.values() if i.member_id == member_id]

    def list_overdue(self, today: Optional[date] = None) -> List[Issue]:
        return [i for i in self._issues.values() if i.is_overdue(today)]

    def list_pending_fines(self) -> List[Issue]:
        return [i for i in self._issues.values() if i.pending_fine]
