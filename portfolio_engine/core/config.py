"""
Portfolio Engine Configuration
Loads settings from .env file using Pydantic v2 with BaseSettings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ==================== Project Info ====================
    PROJECT_NAME: str = "Portfolio Risk & Grouping Engine"
    PROJECT_DESCRIPTION: str = "Risk scoring, inspection grouping and route planning for roof portfolios"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # ==================== Features ====================
    DEBUG: bool = False
    TESTING: bool = False
    LOG_LEVEL: str = "INFO"

    # ==================== Store Backend ====================
    # auto: Supabase when SUPABASE_URL is set, SQL otherwise
    STORE_BACKEND: str = "auto"
    DATABASE_URL: str = "sqlite:///portfolio_engine_local.db"

    # ==================== Supabase Configuration ====================
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # ==================== Risk Analysis ====================
    # 1 = one store round-trip at a time
    PORTFOLIO_CONCURRENCY: int = 1

    # ==================== Grouping ====================
    DEFAULT_MAX_GROUP_SIZE: int = 8
    DEFAULT_MAX_DISTANCE_MILES: float = 25.0

    # ==================== Routing ====================
    AVERAGE_TRAVEL_SPEED_MPH: float = 30.0
    ON_SITE_MINUTES: float = 45.0
    WORKDAY_MINUTES: float = 480.0

    # ==================== Configuration Loading ====================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",
        validate_default=True,
    )

    # ==================== Properties ====================
    @property
    def supabase_configured(self) -> bool:
        """Check if the Supabase store can be used"""
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)

    @property
    def store_backend(self) -> str:
        """Resolve STORE_BACKEND=auto to a concrete backend name"""
        backend = self.STORE_BACKEND.lower()
        if backend == "auto":
            return "supabase" if self.supabase_configured else "sql"
        return backend


# ==================== Settings Singleton ====================
@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
