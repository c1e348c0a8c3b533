"""Borrow and return workflow.

Each operation reads the book and loan rows, checks the circulation rules,
then writes the loan record and the book's copy counter in a single commit.
"""
import logging
from datetime import timedelta
from sqlalchemy.orm import Session
from library_portal.config import settings
from library_portal.models.book import Book
from library_portal.models.transaction import Transaction
from library_portal.utils.timezone import now_local

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """Base exception for circulation rule failures."""
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BookNotFoundError(LibraryError):
    """Requested book does not exist in the catalog."""
    status_code = 404


class TransactionNotFoundError(LibraryError):
    """Requested loan transaction does not exist."""
    status_code = 404


class BookUnavailableError(LibraryError):
    """No copies of the book are left to lend."""


class LoanLimitError(LibraryError):
    """Borrower already holds the maximum number of active loans."""


class DuplicateLoanError(LibraryError):
    """Borrower already has an active loan for this book."""


class AlreadyReturnedError(LibraryError):
    """Loan was closed by an earlier return."""


def count_active_loans(db: Session, user_id: int) -> int:
    return db.query(Transaction).filter(
        Transaction.user_id == user_id,
        Transaction.status == 'active'
    ).count()


def borrow_book(db: Session, book_id: int, user_id: int) -> Transaction:
    """Lend one copy of a book to a user for the configured loan period."""
    book = db.query(Book).filter(Book.book_id == book_id).first()
    if not book:
        raise BookNotFoundError("Book not found")

    if book.available_copies <= 0:
        raise BookUnavailableError("Book is not available")

    if count_active_loans(db, user_id) >= settings.max_active_loans:
        raise LoanLimitError(
            f"You cannot borrow more than {settings.max_active_loans} books at a time"
        )

    existing_loan = db.query(Transaction).filter(
        Transaction.user_id == user_id,
        Transaction.book_id == book_id,
        Transaction.status == 'active'
    ).first()
    if existing_loan:
        raise DuplicateLoanError("You have already borrowed this book")

    borrow_date = now_local()
    transaction = Transaction(
        user_id=user_id,
        book_id=book_id,
        borrow_date=borrow_date,
        due_date=borrow_date + timedelta(days=settings.loan_period_days),
        status='active'
    )
    db.add(transaction)

    book.available_copies -= 1
    book.sync_status()

    db.commit()
    db.refresh(transaction)

    logger.info(
        f"Transaction {transaction.transaction_id} created - user {user_id} borrowed book {book_id} "
        f"({book.available_copies}/{book.total_copies} copies left)"
    )
    return transaction


def return_book(db: Session, transaction_id: int) -> Transaction:
    """Close a loan and put the copy back on the shelf."""
    transaction = db.query(Transaction).filter(
        Transaction.transaction_id == transaction_id
    ).first()
    if not transaction:
        raise TransactionNotFoundError("Transaction not found")

    if transaction.status == 'returned':
        raise AlreadyReturnedError("Book has already been returned")

    transaction.return_date = now_local()
    transaction.status = 'returned'

    book = transaction.book
    if book:
        book.available_copies = min(book.available_copies + 1, book.total_copies)
        book.sync_status()
    else:
        logger.warning(f"Transaction {transaction_id} references missing book {transaction.book_id}")

    db.commit()
    db.refresh(transaction)

    logger.info(f"Transaction {transaction_id} returned - book {transaction.book_id}")
    return transaction
