from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from library_portal.database import get_db
from library_portal.models.book import Book
from library_portal.services.assistant import LibraryAssistant, get_assistant
from library_portal.schemas.chat import BookChatRequest, RecommendRequest, ChatReply

router = APIRouter(prefix="/api/chat", tags=["Chat Assistant"])

@router.post("/book", response_model=ChatReply)
async def chat_about_book(
    request: BookChatRequest,
    assistant: LibraryAssistant = Depends(get_assistant),
    db: Session = Depends(get_db)
):
    """Answer questions about one book from the catalog."""
    book = db.query(Book).filter(Book.book_id == request.book_id).first()
    if not book:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )

    messages = [m.model_dump() for m in request.messages]
    reply = await assistant.discuss_book(book, messages)
    return ChatReply(reply=reply)

@router.post("/recommend", response_model=ChatReply)
async def recommend_books(
    request: RecommendRequest,
    assistant: LibraryAssistant = Depends(get_assistant),
    db: Session = Depends(get_db)
):
    """Suggest books from the catalog based on the conversation."""
    query = db.query(Book)
    if request.genre:
        query = query.filter(Book.genre == request.genre)
    books = query.order_by(Book.title).all()

    messages = [m.model_dump() for m in request.messages]
    reply = await assistant.recommend(books, messages)
    return ChatReply(reply=reply)
