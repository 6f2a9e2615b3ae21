from __future__ import annotations
from datetime import date, timedelta

from shelfdesk import LibrarySystem, SearchParams, configure_logging, seed_demo_data


def demo_flow() -> None:
    configure_logging()
    sys = LibrarySystem()
    seed_demo_data(sys)
    today = date.today()

    # Search
    fiction = sys.search_books(SearchParams(category="Fiction"))
    print("\n[demo] fiction:", [b.title for b in fiction])

    # Report
    report = sys.book_report()
    print(
        f"\n[demo] books: total={report.total}, available={report.available}, "
        f"out={report.checked_out} ({report.checked_out_pct}%)"
    )
    for row in report.by_category:
        print(f"  - {row.category}: {row.count} ({row.percentage}%)")

    # Issue a book to Jane, due in 10 days
    gatsby = sys.get_book_by_title("The Great Gatsby")
    jane = sys.get_member_by_number("MEM002")
    issued = sys.issue_book(gatsby.book_id, jane.member_id, today + timedelta(days=10))
    print("\n[demo] issue Gatsby:", "OK" if issued.ok else issued.error.message)

    # Second issue of the same book is refused
    again = sys.issue_book(gatsby.book_id, jane.member_id, today + timedelta(days=5))
    print("[demo] issue Gatsby again:", "OK" if again.ok else again.error.message)

    # Return three days late -> fine pending, then settle it
    late = sys.return_book(issued.value.issue_id, today + timedelta(days=13))
    print(f"[demo] returned late, fine=${late.value.fine_amount}, available={gatsby.available}")
    sys.pay_fine(issued.value.issue_id)
    print(f"[demo] fine settled, available={gatsby.available}")

    # Extend John's membership by a year
    john = sys.extend_membership("MEM001", "1year").value
    print(f"\n[demo] {john.name} membership now ends {john.end_date}")

    print("\n[demo] pending fines:", [i.issue_id for i in sys.report_pending_fines()])


if __name__ == "__main__":
    demo_flow()
