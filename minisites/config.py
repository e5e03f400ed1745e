"""
Minisites Configuration
"""
from __future__ import annotations
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_name: str = "Minisites"
    debug: bool = False
    environment: str = "development"  # "production" turns on secure cookies

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS Configuration
    cors_origins: List[str] = ["*"]

    # Host Routing
    # Domains operated by the platform. Tenants live at <subdomain>.<root>.
    root_domains: List[str] = [
        "autobloggingsites.io",
        "minisite-nextjs.vercel.app",
    ]

    # Custom domain lookups (both hits and misses share one TTL)
    lookup_cache_ttl_seconds: float = 60.0
    lookup_cache_max_entries: int = 10000
    lookup_timeout_seconds: float = 3.0

    # Content Store
    # - "yaml": read tenants, pages and articles from sites_path/minisites.yaml
    # - "supabase": query the hosted Postgres REST API
    store_backend: str = "yaml"
    sites_path: Optional[str] = None
    supabase_url: str = ""
    supabase_key: str = ""

    # Custom domain ownership check
    verification_path: str = "/.well-known/minisite-verification"
    verification_token: str = "minisites"

    # Rendering
    homepage_articles_count: int = 6

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("root_domains")
    @classmethod
    def normalize_root_domains(cls, value: List[str]) -> List[str]:
        """Strip blanks and duplicates while keeping configuration order."""
        seen = []
        for domain in value:
            domain = domain.strip()
            if domain and domain not in seen:
                seen.append(domain)
        return seen

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
