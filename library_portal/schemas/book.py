from pydantic import BaseModel, Field
from typing import Optional

BOOK_STATUS_PATTERN = "^(available|borrowed|reserved|maintenance)$"

class BookBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    isbn: str = Field(..., min_length=1, max_length=20)
    genre: str = Field(..., min_length=1, max_length=100)
    publisher: Optional[str] = None
    publication_year: Optional[int] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None

class BookCreate(BookBase):
    total_copies: int = Field(1, ge=0)
    available_copies: Optional[int] = Field(None, ge=0)  # Defaults to total_copies
    status: Optional[str] = Field(None, pattern=BOOK_STATUS_PATTERN)

class BookUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    isbn: Optional[str] = Field(None, min_length=1, max_length=20)
    genre: Optional[str] = Field(None, min_length=1, max_length=100)
    publisher: Optional[str] = None
    publication_year: Optional[int] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    status: Optional[str] = Field(None, pattern=BOOK_STATUS_PATTERN)
    total_copies: Optional[int] = Field(None, ge=0)
    available_copies: Optional[int] = Field(None, ge=0)

class BookResponse(BaseModel):
    id: str
    title: str
    author: str
    isbn: str
    genre: str
    publisher: Optional[str] = None
    publicationYear: Optional[int] = None
    description: Optional[str] = None
    coverUrl: Optional[str] = None
    status: str
    totalCopies: int
    availableCopies: int
