"""
Configuration Management
Environment-based settings for Supabase, caching, logging and SEO controls
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App config
    app_name: str = "SaaS Starter"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = "console"
    logging_config_path: Optional[str] = None

    # Supabase (auth + PostgREST with row-level security)
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # Public site
    app_url: str = "https://example.com"
    robots: str = "index"

    # Task list cache (disabled when no Redis URL is configured)
    redis_url: Optional[str] = None
    task_list_cache_ttl: int = 300

    # Session cookies
    access_token_cookie: str = "sb-access-token"
    refresh_token_cookie: str = "sb-refresh-token"
    session_cookie_secure: bool = True
    session_cookie_max_age: int = 60 * 60 * 24 * 7

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('robots')
    @classmethod
    def validate_robots(cls, v):
        v = (v or "index").strip().lower()
        if v not in ("index", "noindex"):
            raise ValueError("ROBOTS must be 'index' or 'noindex'")
        return v

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("console", "json"):
            raise ValueError("LOG_FORMAT must be 'console' or 'json'")
        return v

    @field_validator('task_list_cache_ttl')
    @classmethod
    def validate_cache_ttl(cls, v):
        if v < 1:
            raise ValueError("TASK_LIST_CACHE_TTL must be at least 1 second")
        return v

    @property
    def allow_indexing(self) -> bool:
        """Search engines may index the site unless ROBOTS=noindex"""
        return self.robots != "noindex"

    @property
    def sitemap_url(self) -> str:
        return f"{self.app_url.rstrip('/')}/sitemap.xml"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def cache_enabled(self) -> bool:
        return bool(self.redis_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
