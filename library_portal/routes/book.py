import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from sqlalchemy import or_
from library_portal.database import get_db
from library_portal.models.book import Book
from library_portal.models.profile import Profile
from library_portal.models.transaction import Transaction
from library_portal.services.auth import require_librarian
from library_portal.schemas.book import BookResponse, BookCreate, BookUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/books", tags=["Books"])

# Optional catalog fields a librarian may clear by sending null
NULLABLE_FIELDS = {"publisher", "publication_year", "description", "cover_url"}

def get_book_or_404(db: Session, book_id: int) -> Book:
    book = db.query(Book).filter(Book.book_id == book_id).first()
    if not book:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )
    return book

def count_open_loans(db: Session, book_id: int) -> int:
    return db.query(Transaction).filter(
        Transaction.book_id == book_id,
        Transaction.status.in_(['active', 'overdue'])
    ).count()

def check_isbn_free(db: Session, isbn: str, book_id: Optional[int] = None):
    query = db.query(Book).filter(Book.isbn == isbn)
    if book_id is not None:
        query = query.filter(Book.book_id != book_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A book with ISBN {isbn} already exists"
        )

@router.get("", response_model=List[BookResponse])
async def get_books(
    search: Optional[str] = Query(None, description="Search by title, author, or ISBN"),
    genre: Optional[str] = Query(None, description="Filter by genre"),
    db: Session = Depends(get_db)
):
    """Get list of books with optional search and filter."""
    query = db.query(Book)

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                Book.title.ilike(search_term),
                Book.author.ilike(search_term),
                Book.isbn.ilike(search_term)
            )
        )

    if genre:
        query = query.filter(Book.genre == genre)

    books = query.order_by(Book.title).all()
    return [BookResponse.model_validate(book.to_dict()) for book in books]

@router.get("/genres", response_model=List[str])
async def get_genres(db: Session = Depends(get_db)):
    """Get the distinct genres present in the catalog."""
    rows = db.query(Book.genre).distinct().order_by(Book.genre).all()
    return [genre for (genre,) in rows]

@router.get("/{book_id}", response_model=BookResponse)
async def get_book(book_id: int, db: Session = Depends(get_db)):
    """Get book details by ID."""
    return BookResponse.model_validate(get_book_or_404(db, book_id).to_dict())

@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    book_data: BookCreate,
    current_user: Profile = Depends(require_librarian),
    db: Session = Depends(get_db)
):
    """Add a book to the catalog."""
    check_isbn_free(db, book_data.isbn)

    available = book_data.available_copies
    if available is None:
        available = book_data.total_copies
    if available > book_data.total_copies:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Available copies cannot exceed total copies"
        )

    book = Book(**book_data.model_dump(exclude={"available_copies", "status"}))
    book.available_copies = available
    if book_data.status:
        book.status = book_data.status
    else:
        book.sync_status()

    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Book {book.book_id} created by librarian {current_user.profile_id}")
    return BookResponse.model_validate(book.to_dict())

@router.patch("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: int,
    updates: BookUpdate,
    current_user: Profile = Depends(require_librarian),
    db: Session = Depends(get_db)
):
    """Edit catalog fields, copy counts, or the status flag of a book."""
    book = get_book_or_404(db, book_id)
    changes = {
        field: value for field, value in updates.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }

    if changes.get("isbn"):
        check_isbn_free(db, changes["isbn"], book_id=book_id)

    total = changes.get("total_copies", book.total_copies)
    available = changes.get("available_copies", book.available_copies)
    if available > total:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Available copies must be between 0 and total copies"
        )

    on_loan = count_open_loans(db, book_id)
    if available + on_loan > total:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{on_loan} copy(ies) are on loan; available plus loaned copies cannot exceed total copies"
        )

    for field, value in changes.items():
        setattr(book, field, value)
    if "status" not in changes:
        book.sync_status()

    db.commit()
    db.refresh(book)

    logger.info(f"Book {book_id} updated by librarian {current_user.profile_id}: {sorted(changes)}")
    return BookResponse.model_validate(book.to_dict())

@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: int,
    current_user: Profile = Depends(require_librarian),
    db: Session = Depends(get_db)
):
    """Remove a book and its closed loan history."""
    book = get_book_or_404(db, book_id)

    active_loans = count_open_loans(db, book_id)
    if active_loans:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Book has {active_loans} active loan(s) and cannot be deleted"
        )

    db.delete(book)
    db.commit()
    logger.info(f"Book {book_id} deleted by librarian {current_user.profile_id}")
