"""Configuration settings for Supacheck."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase project (auth admin + PostgREST)
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Supabase Management API
    supabase_management_api_key: str = ""
    management_api_url: str = "https://api.supabase.com/v1"
    request_timeout: float = 30.0

    # Database function returning RLS flags for every table
    rls_status_function: str = "get_rls_status"

    # Logging Configuration
    log_level: str = "INFO"
    log_file: str = "logs/evidence.log"

    # API Configuration
    cors_origins: list[str] = ["http://localhost:3000"]
    port: int = 5001

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
