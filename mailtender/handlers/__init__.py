"""Message handlers."""

from .base import BaseHandler, FilingContext
from .registry import HandlerRegistry, register_handler, get_handlers
from .template import TaskSpec, TemplateHandler

# Import template modules to trigger registration; import order is match priority
from . import financial
from . import amazon
from . import work

__all__ = [
    "BaseHandler",
    "FilingContext",
    "HandlerRegistry",
    "TaskSpec",
    "TemplateHandler",
    "register_handler",
    "get_handlers",
]
