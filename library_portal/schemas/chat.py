from pydantic import BaseModel, Field
from typing import List, Optional

class ChatMessage(BaseModel):
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str = Field(..., min_length=1)

class BookChatRequest(BaseModel):
    """Conversation about a single catalog book"""
    book_id: int
    messages: List[ChatMessage] = Field(..., min_length=1)

class RecommendRequest(BaseModel):
    """Conversation asking for reading suggestions from the catalog"""
    messages: List[ChatMessage] = Field(..., min_length=1)
    genre: Optional[str] = None

class ChatReply(BaseModel):
    reply: str
