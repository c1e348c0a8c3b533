from datetime import timedelta

from conftest import auth_headers, make_book
from library_portal.models import Transaction
from library_portal.utils.timezone import now_local


def test_dashboard_stats(client, librarian, student, db_session):
    dune = make_book(db_session, title="Dune", isbn="1", copies=1)
    make_book(db_session, title="Emma", isbn="2", copies=3, genre="Classic")
    client.post("/api/transactions/borrow", headers=auth_headers(student), json={"book_id": dune.book_id})

    late = Transaction(
        user_id=librarian.profile_id,
        book_id=dune.book_id,
        borrow_date=now_local() - timedelta(days=30),
        due_date=now_local() - timedelta(days=16),
        status="active",
    )
    db_session.add(late)
    db_session.flush()

    resp = client.get("/api/admin/stats", headers=auth_headers(librarian))
    assert resp.status_code == 200
    stats = resp.json()
    assert stats["totalBooks"] == 2
    assert stats["availableBooks"] == 1
    assert stats["totalCopies"] == 4
    assert stats["availableCopies"] == 3
    assert stats["totalUsers"] == 2
    assert stats["activeLoans"] == 2
    assert stats["overdueLoans"] == 1
    assert len(stats["recentTransactions"]) == 2
    assert stats["recentTransactions"][0]["book"]["title"] == "Dune"


def test_dashboard_is_librarian_only(client, student):
    assert client.get("/api/admin/stats", headers=auth_headers(student)).status_code == 403


def test_health(client):
    assert client.get("/api/health").json() == {"status": "healthy"}
