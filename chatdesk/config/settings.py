"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Supabase
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str

    # JWT
    JWT_SECRET: str
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Passwords
    BCRYPT_ROUNDS: int = 12

    # LLM (the llm_api_key runtime setting takes precedence over GROQ_API_KEY)
    GROQ_API_KEY: str = ""
    GOOGLE_AI_API_KEY: str = ""
    DEFAULT_MODEL: str = "llama-3.1-8b-instant"
    TITLE_MODEL: str = "llama-3.1-8b-instant"
    FALLBACK_MODEL: str = "gemini-1.5-flash"

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Rate limiting
    RATE_LIMIT_STANDARD: int = 60
    RATE_LIMIT_AI: int = 10

    LOG_LEVEL: str = "INFO"

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
