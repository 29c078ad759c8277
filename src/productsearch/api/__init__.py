"""Search and operations API package."""

from productsearch.api.errors import add_exception_handlers
from productsearch.api.routes import operations_router, search_router

__all__ = ["add_exception_handlers", "operations_router", "search_router"]
