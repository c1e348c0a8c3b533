from sqlalchemy import Column, String, DateTime, Integer, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from library_portal.database import Base

BOOK_STATUSES = ("available", "borrowed", "reserved", "maintenance")

class Book(Base):
    __tablename__ = "books"

    book_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    author = Column(String(255), nullable=False)
    isbn = Column(String(20), unique=True, nullable=False)
    genre = Column(String(100), nullable=False, index=True)
    publisher = Column(String(255), nullable=True)
    publication_year = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    cover_url = Column(String(500), nullable=True)
    status = Column(String(50), default='available', nullable=False, index=True)
    total_copies = Column(Integer, default=1, nullable=False)
    available_copies = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    transactions = relationship("Transaction", back_populates="book", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("status IN ('available', 'borrowed', 'reserved', 'maintenance')", name="chk_book_status"),
        CheckConstraint("available_copies >= 0 AND available_copies <= total_copies", name="chk_book_copies"),
    )

    def sync_status(self):
        """Set status from the copy count: borrowed when none are left, otherwise available."""
        self.status = 'borrowed' if self.available_copies <= 0 else 'available'

    def to_dict(self):
        return {
            "id": str(self.book_id),
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "genre": self.genre,
            "publisher": self.publisher,
            "publicationYear": self.publication_year,
            "description": self.description,
            "coverUrl": self.cover_url,
            "status": self.status,
            "totalCopies": self.total_copies,
            "availableCopies": self.available_copies,
        }
