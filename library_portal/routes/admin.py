from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from library_portal.database import get_db
from library_portal.models.book import Book
from library_portal.models.profile import Profile
from library_portal.models.transaction import Transaction
from library_portal.services.auth import require_librarian
from library_portal.utils.timezone import now_local

router = APIRouter(prefix="/api/admin", tags=["Librarian Dashboard"])

RECENT_TRANSACTIONS = 5

@router.get("/stats")
async def get_dashboard_stats(
    current_user: Profile = Depends(require_librarian),
    db: Session = Depends(get_db)
):
    """Catalog, member and circulation counts for the librarian dashboard."""
    open_loans = db.query(Transaction).filter(Transaction.status.in_(['active', 'overdue']))
    overdue = [
        t for t in open_loans.filter(Transaction.due_date < now_local()).all()
        if t.is_overdue
    ]
    recent = db.query(Transaction).order_by(
        Transaction.borrow_date.desc()
    ).limit(RECENT_TRANSACTIONS).all()

    return {
        "totalBooks": db.query(Book).count(),
        "availableBooks": db.query(Book).filter(Book.status == 'available').count(),
        "totalCopies": db.query(func.coalesce(func.sum(Book.total_copies), 0)).scalar(),
        "availableCopies": db.query(func.coalesce(func.sum(Book.available_copies), 0)).scalar(),
        "totalUsers": db.query(Profile).count(),
        "activeLoans": open_loans.count(),
        "overdueLoans": len(overdue),
        "recentTransactions": [t.to_dict(include_user=True) for t in recent],
    }
