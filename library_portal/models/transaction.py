from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from library_portal.database import Base
from library_portal.utils.timezone import now_local, ensure_aware

TRANSACTION_STATUSES = ("active", "returned", "overdue", "lost")

class Transaction(Base):
    __tablename__ = "transactions"

    transaction_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.book_id", ondelete="CASCADE"), nullable=False, index=True)
    borrow_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)
    return_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(50), default='active', nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("Profile", back_populates="transactions")
    book = relationship("Book", back_populates="transactions")

    __table_args__ = (
        CheckConstraint("status IN ('active', 'returned', 'overdue', 'lost')", name="chk_transaction_status"),
    )

    @property
    def is_overdue(self) -> bool:
        """Computed on read; overdue is never written back to the row."""
        if self.status not in ('active', 'overdue'):
            return False
        return ensure_aware(self.due_date) < now_local()

    def to_dict(self, include_user: bool = False):
        data = {
            "id": str(self.transaction_id),
            "userId": str(self.user_id),
            "bookId": str(self.book_id),
            "borrowDate": ensure_aware(self.borrow_date).isoformat() if self.borrow_date else None,
            "dueDate": ensure_aware(self.due_date).isoformat() if self.due_date else None,
            "returnDate": ensure_aware(self.return_date).isoformat() if self.return_date else None,
            "status": self.status,
            "isOverdue": self.is_overdue,
            "book": self.book.to_dict() if self.book else None,
        }
        if include_user and self.user:
            data["user"] = {"name": self.user.name, "email": self.user.email}
        return data
