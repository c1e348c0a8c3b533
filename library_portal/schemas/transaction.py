from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class BorrowRequest(BaseModel):
    book_id: int
    user_id: Optional[int] = None  # Defaults to the authenticated user

class ReturnRequest(BaseModel):
    transaction_id: int

class TransactionUser(BaseModel):
    name: str
    email: str

class TransactionResponse(BaseModel):
    id: str
    userId: str
    bookId: str
    borrowDate: datetime
    dueDate: datetime
    returnDate: Optional[datetime] = None
    status: str
    isOverdue: bool
    book: Optional[dict] = None
    user: Optional[TransactionUser] = None
