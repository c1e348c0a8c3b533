import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from library_portal.database import get_db
from library_portal.models.profile import Profile
from library_portal.models.transaction import Transaction
from library_portal.services.auth import get_current_user, require_librarian
from library_portal.services import circulation
from library_portal.schemas.transaction import BorrowRequest, ReturnRequest, TransactionResponse
from library_portal.utils.timezone import now_local

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])

def to_response(transaction: Transaction, include_user: bool = False) -> TransactionResponse:
    return TransactionResponse.model_validate(transaction.to_dict(include_user=include_user))

@router.post("/borrow", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def borrow_book(
    request: BorrowRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Borrow a book for the current user, or for another user when called by a librarian."""
    user_id = request.user_id or current_user.profile_id
    if user_id != current_user.profile_id:
        if not current_user.is_librarian:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only librarians can borrow books for other users"
            )
        if not db.query(Profile).filter(Profile.profile_id == user_id).first():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

    transaction = circulation.borrow_book(db, request.book_id, user_id)
    return to_response(transaction)

@router.post("/return", response_model=TransactionResponse)
async def return_book(
    request: ReturnRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Return a borrowed book. Borrowers return their own loans; librarians return any."""
    transaction = db.query(Transaction).filter(
        Transaction.transaction_id == request.transaction_id
    ).first()
    if transaction and transaction.user_id != current_user.profile_id and not current_user.is_librarian:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only librarians can return books borrowed by other users"
        )

    transaction = circulation.return_book(db, request.transaction_id)
    return to_response(transaction)

@router.get("/mine", response_model=List[TransactionResponse])
async def get_my_transactions(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get loan history for the current user, newest first."""
    transactions = db.query(Transaction).filter(
        Transaction.user_id == current_user.profile_id
    ).order_by(Transaction.borrow_date.desc()).all()
    return [to_response(t) for t in transactions]

@router.get("", response_model=List[TransactionResponse])
async def get_transactions(
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by transaction status"),
    current_user: Profile = Depends(require_librarian),
    db: Session = Depends(get_db)
):
    """Get every transaction with borrower and book details."""
    query = db.query(Transaction)
    if status_filter:
        query = query.filter(Transaction.status == status_filter)

    transactions = query.order_by(Transaction.borrow_date.desc()).all()
    return [to_response(t, include_user=True) for t in transactions]

@router.get("/active", response_model=List[TransactionResponse])
async def get_active_transactions(
    current_user: Profile = Depends(require_librarian),
    db: Session = Depends(get_db)
):
    """Get loans that have not been returned yet."""
    transactions = db.query(Transaction).filter(
        Transaction.status.in_(['active', 'overdue'])
    ).order_by(Transaction.due_date.asc()).all()
    return [to_response(t, include_user=True) for t in transactions]

@router.get("/overdue", response_model=List[TransactionResponse])
async def get_overdue_transactions(
    current_user: Profile = Depends(require_librarian),
    db: Session = Depends(get_db)
):
    """Get open loans past their due date. Status is left untouched."""
    transactions = db.query(Transaction).filter(
        Transaction.status.in_(['active', 'overdue']),
        Transaction.due_date < now_local()
    ).order_by(Transaction.due_date.asc()).all()
    return [to_response(t, include_user=True) for t in transactions if t.is_overdue]

@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a single transaction owned by the current user (any transaction for librarians)."""
    query = db.query(Transaction).filter(Transaction.transaction_id == transaction_id)
    if not current_user.is_librarian:
        query = query.filter(Transaction.user_id == current_user.profile_id)

    transaction = query.first()
    if not transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found"
        )
    return to_response(transaction, include_user=current_user.is_librarian)
