from datetime import datetime
from typing import Optional
import pytz
from library_portal.config import settings

LIBRARY_TZ = pytz.timezone(settings.timezone)

def now_local() -> datetime:
    """Get current datetime in the library's configured timezone."""
    return datetime.now(LIBRARY_TZ)

def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Attach the library timezone to naive datetimes (SQLite drops tzinfo)."""
    if value is None or value.tzinfo is not None:
        return value
    return LIBRARY_TZ.localize(value)
