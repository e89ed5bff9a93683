from cli_adapter.handlers.interface import Handler
from cli_adapter.handlers.asgi import AsgiHandler, as_handler, dispatch

__all__ = ["AsgiHandler", "Handler", "as_handler", "dispatch"]
