"""
Handler registry for routing messages to sender templates.

Handlers are tried in registration order and the first match wins, so the
order in which template modules register is the priority order.
"""

from typing import Iterator, Type, TypeVar

from mailtender.core.logging import get_logger
from mailtender.handlers.base import BaseHandler

log = get_logger(__name__)

H = TypeVar("H", BaseHandler, Type[BaseHandler])


class HandlerRegistry:
    """Ordered collection of handlers with unique names."""

    def __init__(self, handlers: list[BaseHandler] | None = None):
        self._handlers: list[BaseHandler] = []
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: BaseHandler) -> BaseHandler:
        name = handler.name or type(handler).__name__
        if name in self.names():
            raise ValueError(f"Handler already registered: {name}")
        self._handlers.append(handler)
        log.debug("handler_registered", handler=name, position=len(self._handlers))
        return handler

    def unregister(self, name: str) -> None:
        """Remove a handler by name (for testing)."""
        self._handlers = [h for h in self._handlers if (h.name or type(h).__name__) != name]

    def names(self) -> list[str]:
        return [h.name or type(h).__name__ for h in self._handlers]

    def clear(self) -> None:
        self._handlers.clear()

    def __iter__(self) -> Iterator[BaseHandler]:
        return iter(list(self._handlers))

    def __len__(self) -> int:
        return len(self._handlers)


# Global handler registry
registry = HandlerRegistry()


def register_handler(handler: H) -> H:
    """
    Register a handler instance, or decorate a handler class to register it.

    Usage:
        @register_handler
        class PayrollHandler(BaseHandler):
            ...

        register_handler(TemplateHandler(...))
    """
    if isinstance(handler, type):
        registry.register(handler())
    else:
        registry.register(handler)
    return handler


def get_handlers() -> list[BaseHandler]:
    """Get all registered handlers, in priority order."""
    return list(registry)


def clear_handlers() -> None:
    """Clear all registered handlers (for testing)."""
    registry.clear()
