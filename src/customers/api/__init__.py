from customers.api.errors import register_exception_handlers
from customers.api.routes import router

__all__ = ["register_exception_handlers", "router"]
