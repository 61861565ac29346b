"""
事件處理器模組
"""

from .base import EventHandler
from .logging_handler import LoggingHandler

__all__ = ['EventHandler', 'LoggingHandler']
