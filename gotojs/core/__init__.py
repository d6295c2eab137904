"""Core utilities package"""

from .config import Settings, get_settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    Diagnostic,
    GotoJSError,
    GotoTranslationError,
    RewriteError,
    ScriptHookError,
)

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "Diagnostic",
    "GotoJSError",
    "GotoTranslationError",
    "RewriteError",
    "ScriptHookError",
]
