# Database modules

from .carts import CartDatabase, CartStore, calculate_totals, sanitize_line
from .orders import OrderDatabase

__all__ = [
    "CartDatabase",
    "CartStore",
    "calculate_totals",
    "sanitize_line",
    "OrderDatabase",
]
