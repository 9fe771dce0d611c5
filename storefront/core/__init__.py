# Core modules

from .cache import Cache, FileCache, MemoryCache
from .config import Settings, get_settings

__all__ = ["Cache", "FileCache", "MemoryCache", "Settings", "get_settings"]
