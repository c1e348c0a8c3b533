import json
import logging
from typing import Dict, List, Optional
from openai import AsyncOpenAI, OpenAIError
from library_portal.config import settings
from library_portal.models.book import Book
from library_portal.services.circulation import LibraryError

logger = logging.getLogger(__name__)

DESCRIPTION_PREVIEW_CHARS = 100


class AssistantUnavailableError(LibraryError):
    """Chat assistant has no API key configured."""
    status_code = 503


class AssistantError(LibraryError):
    """Chat completion call failed or returned nothing usable."""
    status_code = 502


def book_chat_prompt(book: Book) -> str:
    return f"""You are a knowledgeable library assistant.
You are currently discussing the book: "{book.title}" by {book.author}.

Book Details:
- Title: {book.title}
- Author: {book.author}
- Genre: {book.genre or 'N/A'}
- Description: {book.description or 'N/A'}
- Publisher: {book.publisher or 'N/A'}
- Year: {book.publication_year or 'N/A'}

Your INSTRUCTIONS:
1. Answer questions ONLY related to this specific book.
2. If the user asks about other books, general topics, or anything unrelated, politely refuse and steer the conversation back to "{book.title}".
3. Use the provided book details to answer specific questions.
4. You can use your general knowledge about this book (plot, characters, themes) if it is a real, well-known book, but prioritize the provided context.
5. Keep responses concise, friendly, and encouraging.

Remember: You are an expert on "{book.title}" and nothing else for this conversation."""


def catalog_summary(books: List[Book]) -> List[Dict]:
    """Compact catalog listing embedded in the recommendation prompt."""
    summary = []
    for book in books:
        description = "N/A"
        if book.description:
            description = book.description[:DESCRIPTION_PREVIEW_CHARS] + "..."
        summary.append({
            "id": str(book.book_id),
            "title": book.title,
            "author": book.author,
            "genre": book.genre,
            "description": description,
        })
    return summary


def recommendation_prompt(books: List[Book]) -> str:
    catalog = json.dumps(catalog_summary(books), indent=2)
    return f"""You are a knowledgeable library assistant helping a user find a book to read.

You have access to the following books in our library:
{catalog}

Your INSTRUCTIONS:
1. Recommend books from the provided list based on the user's interests, mood, or preferred plot/scenarios.
2. If a user asks for a recommendation, suggest 1-3 relevant books from the list.
3. Briefly explain WHY you are recommending each book based on their input.
4. If the user's request doesn't match any specific book well, suggest the closest matches or ask for more preferences.
5. Be friendly, helpful, and encouraging.
6. Format your response nicely (e.g., use bullet points for book titles).

Remember: You can ONLY recommend books that are in the provided list."""


class LibraryAssistant:
    """Chat assistant backed by an OpenAI-compatible chat completion API."""

    def __init__(self, api_key: str, model: str, max_tokens: int, base_url: Optional[str] = None):
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, system_prompt: str, messages: List[Dict[str, str]]) -> str:
        """Send the system prompt plus conversation and return the reply text."""
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": system_prompt}, *messages],
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API error: {e}", exc_info=True)
            raise AssistantError("Failed to generate response")

        if not response.choices:
            logger.error("Model returned no choices")
            raise AssistantError("Failed to generate response")

        content = response.choices[0].message.content
        if not isinstance(content, str):
            logger.error("Model response content was not a string")
            raise AssistantError("Failed to generate response")
        return content

    async def discuss_book(self, book: Book, messages: List[Dict[str, str]]) -> str:
        return await self.complete(book_chat_prompt(book), messages)

    async def recommend(self, books: List[Book], messages: List[Dict[str, str]]) -> str:
        return await self.complete(recommendation_prompt(books), messages)


_assistant: Optional[LibraryAssistant] = None


def get_assistant() -> LibraryAssistant:
    """FastAPI dependency returning the shared assistant, built on first use."""
    global _assistant
    if not settings.openai_api_key:
        raise AssistantUnavailableError("Chat assistant is not configured")
    if _assistant is None:
        _assistant = LibraryAssistant(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            max_tokens=settings.openai_max_tokens,
            base_url=settings.openai_base_url,
        )
    return _assistant
