"""RC hobby storefront: cart store and checkout service"""

__version__ = "1.0.0"
