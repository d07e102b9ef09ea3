"""
Listing Shield Application Configuration
Pydantic Settings for environment variable management
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Listing Shield"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database (Supabase PostgreSQL)
    DATABASE_URL: str = Field(..., description="PostgreSQL connection string")
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Supabase API
    # Left optional so the functions can report missing configuration per request
    SUPABASE_URL: str = Field("", description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field("", description="Supabase anonymous key")
    SUPABASE_SERVICE_ROLE_KEY: str = Field("", description="Supabase service role key")
    FUNCTIONS_TIMEOUT_SECONDS: float = 30.0

    # Compliance cache
    CACHE_TTL_HOURS: int = 24

    # Policy analysis
    POLICIES_SOURCE_URL: str = (
        "https://raw.githubusercontent.com/youngamerican68/etsy-listing-guardian-shield/main/policies.json"
    )
    JOB_RETENTION_DAYS: int = 30

    # Compliance proofs
    PROOF_TTL_DAYS: int = 365

    # Celery (maintenance worker)
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    # CORS (comma-separated string, parsed in main.py)
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    @property
    def functions_base_url(self) -> str:
        """Base URL of the Supabase edge functions"""
        return f"{self.SUPABASE_URL.rstrip('/')}/functions/v1"


# Global settings instance
settings = Settings()
