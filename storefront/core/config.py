"""Storefront Service Configuration"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from .cache import Cache, FileCache, MemoryCache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "RC Hobby Storefront"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Cart cache. Leave the path empty to keep carts in memory only.
    cart_cache_path: Optional[str] = None
    cart_cache_key: str = "cart"

    # Order intake. Leave the URL empty to use the bundled /api/orders endpoint in-process.
    order_intake_url: Optional[str] = None
    order_intake_timeout: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def build_cart_cache(self) -> Cache:
        """Get the durable cart cache configured for this environment"""
        if self.cart_cache_path:
            return FileCache(self.cart_cache_path)
        return MemoryCache()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
