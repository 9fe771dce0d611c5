"""Tests for the cart snapshot caches."""

from storefront.core.cache import FileCache, MemoryCache
from storefront.core.config import Settings
from storefront.database.carts import CartStore


class TestMemoryCache:
    def test_get_missing_key(self):
        assert MemoryCache().get("cart") is None

    def test_set_and_get(self):
        cache = MemoryCache()
        cache.set("cart", "[]")
        assert cache.get("cart") == "[]"

    def test_delete(self):
        cache = MemoryCache()
        cache.set("cart", "[]")
        cache.delete("cart")
        cache.delete("cart")
        assert cache.get("cart") is None


class TestFileCache:
    def test_missing_file_reads_as_empty(self, tmp_path):
        assert FileCache(tmp_path / "cache.json").get("cart") is None

    def test_values_survive_new_instance(self, tmp_path):
        path = tmp_path / "nested" / "cache.json"
        FileCache(path).set("cart:a", '[{"x": 1}]')
        FileCache(path).set("cart:b", "[]")

        cache = FileCache(path)
        assert cache.get("cart:a") == '[{"x": 1}]'
        assert cache.get("cart:b") == "[]"

    def test_delete_survives_new_instance(self, tmp_path):
        path = tmp_path / "cache.json"
        cache = FileCache(path)
        cache.set("cart:a", "[]")
        cache.set("cart:b", "[]")
        cache.delete("cart:a")
        cache.delete("cart:missing")

        reopened = FileCache(path)
        assert reopened.get("cart:a") is None
        assert reopened.get("cart:b") == "[]"

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text("{oops", encoding="utf-8")

        cache = FileCache(path)
        assert cache.get("cart") is None

        cache.set("cart", "[]")
        assert cache.get("cart") == "[]"

    def test_cart_survives_restart(self, tmp_path):
        path = tmp_path / "cache.json"
        store = CartStore(FileCache(path))
        store.add_item("p1", "Buggy", 2500, stock_ceiling=4, quantity=2)

        restored = CartStore.restore(FileCache(path))
        assert restored.quantity_of("p1") == 2
        assert restored.totals().total_price == 5000


class TestCacheSettings:
    def test_memory_cache_by_default(self):
        settings = Settings(cart_cache_path=None, _env_file=None)
        assert isinstance(settings.build_cart_cache(), MemoryCache)

    def test_file_cache_when_path_set(self, tmp_path):
        settings = Settings(cart_cache_path=str(tmp_path / "cache.json"), _env_file=None)
        cache = settings.build_cart_cache()
        assert isinstance(cache, FileCache)
        assert cache.path == tmp_path / "cache.json"
