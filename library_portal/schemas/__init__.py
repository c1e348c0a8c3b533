from .auth import ProfileCreate, ProfileLogin, ProfileUpdate, ProfileResponse, Token
from .book import BookBase, BookCreate, BookUpdate, BookResponse
from .transaction import BorrowRequest, ReturnRequest, TransactionResponse
from .chat import ChatMessage, BookChatRequest, RecommendRequest, ChatReply

__all__ = [
    "ProfileCreate", "ProfileLogin", "ProfileUpdate", "ProfileResponse", "Token",
    "BookBase", "BookCreate", "BookUpdate", "BookResponse",
    "BorrowRequest", "ReturnRequest", "TransactionResponse",
    "ChatMessage", "BookChatRequest", "RecommendRequest", "ChatReply",
]
