"""Filing pipelines."""

from .base import BaseProcessor, TaskFiler
from .dispatcher import Dispatcher
from .refiler import ContextRefiler, friendly_name
from .scan import ScanProcessor

__all__ = [
    "BaseProcessor",
    "TaskFiler",
    "Dispatcher",
    "ContextRefiler",
    "friendly_name",
    "ScanProcessor",
]
