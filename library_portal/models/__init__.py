from .profile import Profile
from .book import Book
from .transaction import Transaction

__all__ = [
    "Profile",
    "Book",
    "Transaction",
]
