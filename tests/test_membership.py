from datetime import date, datetime

import pytest

from shelfdesk import ErrorKind, MembershipType, calculate_membership_end_date


@pytest.mark.parametrize(
    "term, days",
    [
        ("6months", 180),
        ("1year", 365),
        ("2years", 730),
        (MembershipType.ONE_YEAR, 365),
    ],
)
def test_calculate_membership_end_date(term, days):
    start = date(2026, 1, 1)
    assert (calculate_membership_end_date(start, term) - start).days == days


def test_calculate_membership_end_date_from_datetime():
    assert calculate_membership_end_date(datetime(2024, 2, 28, 18, 0), "1year") == date(2025, 2, 27)


def test_calculate_membership_end_date_unknown_term():
    with pytest.raises(ValueError):
        calculate_membership_end_date(date(2026, 1, 1), "3years")


def test_add_member(lib, member):
    assert member.start_date == date(2026, 1, 1)
    assert member.end_date == date(2026, 6, 30)
    assert member.membership_type is MembershipType.SIX_MONTHS
    assert member.active is True
    assert lib.get_member(member.member_id) is member
    assert lib.get_member_by_number("MEM001") is member
    assert lib.get_member_by_number("MEM999") is None


def test_add_member_duplicate_number(lib, member):
    result = lib.add_member("Jane Smith", "jane@example.com", "987-654-3210", "456 Oak St", "MEM001", "1year")

    assert result.error.kind is ErrorKind.INVALID_INPUT
    assert len(lib.members.list_all()) == 1


VALID_MEMBER = {
    "name": "Ann Lee",
    "email": "ann@example.com",
    "phone": "555-010-0199",
    "address": "9 Elm St",
    "membership_number": "MEM010",
}


@pytest.mark.parametrize(
    "field, value, message",
    [
        ("name", "  ", "name is required"),
        ("email", "", "Invalid email address"),
        ("email", "ann.example.com", "Invalid email address"),
        ("phone", "555-0100", "Phone number must be at least 10 digits"),
        ("address", "", "address is required"),
        ("membership_number", " ", "membership_number is required"),
    ],
)
def test_add_member_field_rules(lib, field, value, message):
    values = dict(VALID_MEMBER, **{field: value})

    result = lib.add_member(**values)

    assert result.error.kind is ErrorKind.INVALID_INPUT
    assert result.error.message == message
    assert lib.members.list_all() == []


def test_add_member_strips_membership_number(lib, member):
    dup = lib.add_member(**dict(VALID_MEMBER, membership_number=" MEM001 "))
    fresh = lib.add_member(**dict(VALID_MEMBER, membership_number=" MEM011 ", email=" ann@example.com "))

    assert dup.error.kind is ErrorKind.INVALID_INPUT
    assert fresh.value.membership_number == "MEM011"
    assert fresh.value.email == "ann@example.com"
    assert lib.get_member_by_number("MEM011") is fresh.value


def test_add_member_unknown_term(lib):
    result = lib.add_member(**VALID_MEMBER, term="forever")
    assert result.error.kind is ErrorKind.INVALID_INPUT


def test_extend_membership_builds_on_current_end_date(lib, member):
    result = lib.extend_membership("MEM001", "1year")

    assert result.ok
    assert member.end_date == date(2027, 6, 30)
    assert member.membership_type is MembershipType.ONE_YEAR
    assert member.start_date == date(2026, 1, 1)


def test_extend_unknown_membership(lib):
    assert lib.extend_membership("MEM404", "1year").error.kind is ErrorKind.NOT_FOUND


def test_extend_membership_bad_term(lib, member):
    result = lib.extend_membership("MEM001", "decade")

    assert result.error.kind is ErrorKind.INVALID_INPUT
    assert member.end_date == date(2026, 6, 30)


def test_cancel_membership(lib, member):
    result = lib.cancel_membership("MEM001")

    assert result.ok
    assert member.active is False
    assert lib.get_member_by_number("MEM001") is member


def test_cancel_unknown_membership(lib):
    assert lib.cancel_membership("MEM404").error.kind is ErrorKind.NOT_FOUND


def test_update_member_fields(lib, member):
    result = lib.update_member(member.member_id, phone=" 555-010-0100 ", address="9 Elm St")

    assert result.ok
    assert member.phone == "555-010-0100"
    assert member.address == "9 Elm St"


def test_update_member_keeps_numbers_unique(lib, member):
    other = lib.add_member("Jane Smith", "jane@example.com", "987-654-3210", "456 Oak St", "MEM002", "1year").value

    clash = lib.update_member(other.member_id, membership_number="MEM001")
    same = lib.update_member(member.member_id, membership_number="MEM001")

    assert clash.error.kind is ErrorKind.INVALID_INPUT
    assert other.membership_number == "MEM002"
    assert same.ok


def test_update_member_rejects_unknown_fields(lib, member):
    result = lib.update_member(member.member_id, member_id="x")

    assert result.error.kind is ErrorKind.INVALID_INPUT
    assert lib.get_member(member.member_id) is member


def test_update_member_not_found(lib):
    assert lib.update_member("missing", name="x").error.kind is ErrorKind.NOT_FOUND


def test_facade_exposes_calculator(lib):
    assert lib.calculate_membership_end_date(date(2026, 1, 1), "2years") == date(2028, 1, 1)


@pytest.mark.parametrize(
    "changes",
    [
        {"end_date": "2026-12-31"},
        {"end_date": date(2025, 12, 31)},
        {"active": "nope"},
        {"start_date": date(2026, 2, 1)},
        {"email": "not-an-email"},
        {"phone": "12345"},
        {"name": ""},
        {"membership_type": "forever"},
    ],
)
def test_update_member_rejects_bad_values(lib, member, changes):
    result = lib.update_member(member.member_id, **changes)

    assert result.error.kind is ErrorKind.INVALID_INPUT
    assert member.start_date == date(2026, 1, 1)
    assert member.end_date == date(2026, 6, 30)
    assert member.active is True
    assert member.name == "John Doe"


def test_rejected_end_date_keeps_extension_working(lib, member):
    lib.update_member(member.member_id, end_date="2026-12-31")

    assert lib.extend_membership("MEM001", "6months").ok
    assert member.end_date == date(2026, 12, 27)


def test_update_member_end_date_and_active(lib, member):
    result = lib.update_member(member.member_id, end_date=datetime(2026, 9, 1, 12, 0), active=False)

    assert result.ok
    assert member.end_date == date(2026, 9, 1)
    assert member.active is False


def test_update_member_number_is_stripped(lib, member):
    lib.update_member(member.member_id, membership_number=" MEM077 ")

    assert lib.get_member_by_number("MEM077") is member
