from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path

# Get the project directory (parent of the library_portal package)
PROJECT_DIR = Path(__file__).parent.parent
ENV_FILE = PROJECT_DIR / ".env"

class Settings(BaseSettings):
    # Server settings
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # Database settings - either a full URL or the PostgreSQL parts below
    database_url: Optional[str] = None  # e.g. sqlite+pysqlite:///./library.db for local runs
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "library"
    db_user: str = "postgres"
    db_password: str = ""  # Confidential, from .env
    db_ssl_mode: str = "prefer"  # Options: disable, allow, prefer, require, verify-ca, verify-full

    # JWT settings - confidential values from .env
    jwt_secret_key: str  # Required from .env (confidential - no default)
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 1440

    # OpenAI settings for the chat assistant
    openai_api_key: Optional[str] = None  # Chat endpoints answer 503 when unset
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = 500

    # Circulation policy
    loan_period_days: int = 14
    max_active_loans: int = 3

    # Timezone used for borrow/due/return timestamps
    timezone: str = "UTC"

    class Config:
        env_file = str(ENV_FILE) if ENV_FILE.exists() else ".env"
        case_sensitive = False
        extra = "ignore"

settings = Settings()
