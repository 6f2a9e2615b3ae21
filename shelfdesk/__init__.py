"""
ShelfDesk library desk package.

Exports key modules for convenient imports.
"""

from .domain import (
    Role,
    User,
    ItemType,
    MembershipType,
    Book,
    Member,
    Issue,
    SearchParams,
    ErrorKind,
    Failure,
    Result,
    ReturnReceipt,
    BookReport,
    CategoryCount,
)

from .repositories import (
    UserRepo,
    BookRepo,
    MemberRepo,
    IssueRepo,
)

from .services import (
    UserService,
    CatalogService,
    MembershipService,
    FineService,
    CirculationService,
    ReportService,
    calculate_membership_end_date,
)

from .config import Settings, settings, configure_logging
from .api import LibrarySystem
from .seed import seed_demo_data

__all__ = [
    # domain
    "Role",
    "User",
    "ItemType",
    "MembershipType",
    "Book",
    "Member",
    "Issue",
    "SearchParams",
    "ErrorKind",
    "Failure",
    "Result",
    "ReturnReceipt",
    "BookReport",
    "CategoryCount",
    # repos
    "UserRepo",
    "BookRepo",
    "MemberRepo",
    "IssueRepo",
    # services
    "UserService",
    "CatalogService",
    "MembershipService",
    "FineService",
    "CirculationService",
    "ReportService",
    "calculate_membership_end_date",
    # config
    "Settings",
    "settings",
    "configure_logging",
    # api
    "LibrarySystem",
    # seed
    "seed_demo_data",
]
