"""Cart storage for the storefront"""

import json
import logging
import math
import uuid
from typing import Any, Optional

from ..core.cache import Cache, MemoryCache
from ..models.cart import DEFAULT_STOCK_CEILING, Cart, CartLine, CartTotals

logger = logging.getLogger(__name__)


def _coerce_price(value: Any) -> float:
    """Non-numeric, NaN, infinite and negative prices all become 0"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    price = float(value)
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def _coerce_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def _coerce_ceiling(value: Any) -> Optional[int]:
    """Stock ceiling from catalog data, or None when the catalog gave none"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return max(int(value), 0)


def sanitize_line(
    product_id: str,
    name: Any,
    unit_price: Any,
    image: Any = None,
    stock_ceiling: Any = None,
) -> CartLine:
    """
    Build a cart line from untrusted catalog data.

    The returned line has quantity 1; callers set the real quantity once they
    have clamped it against ``stock_ceiling``.
    """
    ceiling = _coerce_ceiling(stock_ceiling)
    if ceiling is None:
        ceiling = DEFAULT_STOCK_CEILING

    return CartLine(
        product_id=product_id,
        name=name if isinstance(name, str) else "",
        unit_price=_coerce_price(unit_price),
        quantity=1,
        stock_ceiling=ceiling,
        image=image if isinstance(image, str) else None,
    )


def calculate_totals(lines: list[CartLine]) -> CartTotals:
    """Fold the lines into item count and price"""
    return CartTotals(
        total_items=sum(line.quantity for line in lines),
        total_price=sum(line.unit_price * line.quantity for line in lines),
    )


def _is_valid_entry(entry: Any) -> bool:
    """Shape check for one persisted line"""
    if not isinstance(entry, dict):
        return False
    if not isinstance(entry.get("productId"), str) or not isinstance(entry.get("name"), str):
        return False
    for key in ("unitPrice", "quantity"):
        value = entry.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
    return True


class CartStore:
    """
    A single cart held in memory and mirrored to a durable cache.

    The in-memory lines are authoritative. Every mutation is applied first and
    then written to the cache as one JSON array under ``key``; a failed write
    is logged and the mutation stands.
    """

    def __init__(self, cache: Optional[Cache] = None, key: str = "cart"):
        self.cache = cache if cache is not None else MemoryCache()
        self.key = key
        self._lines: dict[str, CartLine] = {}

    @classmethod
    def restore(cls, cache: Cache, key: str = "cart") -> "CartStore":
        """Create a store and rehydrate it from the cache"""
        store = cls(cache, key)
        store.load()
        return store

    # ==================== Transitions ====================

    def add_item(
        self,
        product_id: str,
        name: str,
        unit_price: Any,
        image: Optional[str] = None,
        stock_ceiling: Any = None,
        quantity: Any = 1,
    ) -> None:
        """
        Add ``quantity`` of a product, clamped to ``stock_ceiling``.

        An existing line keeps its name, price, image and stock ceiling from the
        first add; a ceiling passed with a later add can only lower it.
        A ceiling of 0 means out of stock: the line is dropped.
        """
        if not isinstance(product_id, str) or not product_id:
            return

        quantity_to_add = _coerce_int(quantity, 1)
        if quantity_to_add < 1:
            quantity_to_add = 1

        incoming = sanitize_line(product_id, name, unit_price, image, stock_ceiling)
        existing = self._lines.get(product_id)

        if existing:
            supplied = _coerce_ceiling(stock_ceiling)
            if supplied is not None:
                existing.stock_ceiling = min(existing.stock_ceiling, supplied)
            new_quantity = min(existing.quantity + quantity_to_add, existing.stock_ceiling)
            if new_quantity < 1:
                del self._lines[product_id]
            else:
                existing.quantity = new_quantity
        else:
            new_quantity = min(quantity_to_add, incoming.stock_ceiling)
            if new_quantity >= 1:
                incoming.quantity = new_quantity
                self._lines[product_id] = incoming

        self._persist()

    def remove_item(self, product_id: str) -> None:
        """Remove a line. Removing an absent product is a no-op."""
        self._lines.pop(product_id, None)
        self._persist()

    def remove_items(self, product_ids: list[str]) -> None:
        """Remove several lines with a single cache write"""
        for product_id in product_ids:
            self._lines.pop(product_id, None)
        self._persist()

    def update_quantity(self, product_id: str, quantity: Any) -> None:
        """Set a line's quantity; below 1 removes the line"""
        line = self._lines.get(product_id)
        if not line:
            return

        new_quantity = _coerce_int(quantity, line.quantity)
        if new_quantity < 1:
            del self._lines[product_id]
        else:
            clamped = min(new_quantity, line.stock_ceiling)
            if clamped < 1:
                del self._lines[product_id]
            else:
                line.quantity = clamped

        self._persist()

    def clear_cart(self) -> None:
        self._lines.clear()
        self._persist()

    # ==================== Queries ====================

    def is_in_cart(self, product_id: str) -> bool:
        return product_id in self._lines

    def quantity_of(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def totals(self) -> CartTotals:
        return calculate_totals(list(self._lines.values()))

    def lines(self) -> list[CartLine]:
        """Copies of the lines in insertion order"""
        return [line.model_copy() for line in self._lines.values()]

    def snapshot(self, cart_id: Optional[str] = None) -> Cart:
        """Value copy of the cart; later mutations do not reach it"""
        lines = self.lines()
        totals = calculate_totals(lines)
        return Cart(
            cart_id=cart_id,
            items=lines,
            total_items=totals.total_items,
            total_price=totals.total_price,
        )

    # ==================== Persistence ====================

    def _persist(self) -> None:
        payload = json.dumps([line.model_dump(by_alias=True) for line in self._lines.values()])
        try:
            self.cache.set(self.key, payload)
        except OSError as e:
            logger.warning(f"Could not persist cart '{self.key}', keeping it in memory: {e}")

    def load(self) -> None:
        """
        Replace the in-memory lines with the cached snapshot.

        Malformed entries are skipped; an unreadable or undecodable snapshot
        leaves the cart empty.
        """
        self._lines = {}

        try:
            raw = self.cache.get(self.key)
        except OSError as e:
            logger.warning(f"Could not read cart '{self.key}', starting empty: {e}")
            return

        if not raw:
            return

        try:
            entries = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding undecodable cart snapshot '{self.key}'")
            return

        if not isinstance(entries, list):
            logger.warning(f"Discarding cart snapshot '{self.key}': not a list")
            return

        skipped = 0
        for entry in entries:
            if not _is_valid_entry(entry):
                skipped += 1
                continue

            product_id = entry["productId"]
            if product_id in self._lines:
                continue

            line = sanitize_line(
                product_id,
                entry["name"],
                entry["unitPrice"],
                entry.get("image"),
                entry.get("stockCeiling"),
            )
            quantity = min(_coerce_int(entry["quantity"], 0), line.stock_ceiling)
            if quantity < 1:
                skipped += 1
                continue

            line.quantity = quantity
            self._lines[product_id] = line

        if skipped:
            logger.warning(f"Skipped {skipped} malformed line(s) in cart '{self.key}'")
        logger.debug(f"Rehydrated cart '{self.key}' with {len(self._lines)} line(s)")


class CartDatabase:
    """One cart store per session, sharing a durable cache"""

    def __init__(self, cache: Optional[Cache] = None, key_prefix: str = "cart"):
        self.cache = cache if cache is not None else MemoryCache()
        self.key_prefix = key_prefix
        self.carts: dict[str, CartStore] = {}

    def _cache_key(self, cart_id: str) -> str:
        return f"{self.key_prefix}:{cart_id}"

    def create_cart(self) -> tuple[str, CartStore]:
        """Create a new empty cart"""
        cart_id = str(uuid.uuid4())
        store = CartStore(self.cache, self._cache_key(cart_id))
        store.clear_cart()
        self.carts[cart_id] = store
        return cart_id, store

    def get_cart(self, cart_id: str) -> Optional[CartStore]:
        """Get a cart by ID, rehydrating it from the cache if needed"""
        store = self.carts.get(cart_id)
        if store is not None:
            return store

        key = self._cache_key(cart_id)
        try:
            cached = self.cache.get(key)
        except OSError as e:
            logger.warning(f"Could not look up cart {cart_id} in cache: {e}")
            return None

        if cached is None:
            return None

        store = CartStore.restore(self.cache, key)
        self.carts[cart_id] = store
        return store

    def get_or_create_cart(self, cart_id: Optional[str] = None) -> tuple[str, CartStore]:
        """Get existing cart or create new one"""
        if cart_id:
            store = self.get_cart(cart_id)
            if store is not None:
                return cart_id, store
        return self.create_cart()

    def delete_cart(self, cart_id: str) -> bool:
        """Delete a cart and its cached snapshot"""
        store = self.carts.pop(cart_id, None)
        key = self._cache_key(cart_id)
        try:
            if store is None and self.cache.get(key) is None:
                return False
            self.cache.delete(key)
        except OSError as e:
            logger.warning(f"Could not drop cached cart {cart_id}: {e}")
            return store is not None
        return True
