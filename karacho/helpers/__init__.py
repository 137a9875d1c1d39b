"""
Хелперы шаблонизатора.
"""

from __future__ import annotations

from .arguments import EachArguments, parse_each_arguments
from .base import Helper, InternalHelper, TemplateHandlers
from .builtin import BuiltinHelpers

__all__ = [
    "BuiltinHelpers",
    "EachArguments",
    "parse_each_arguments",
    "Helper",
    "InternalHelper",
    "TemplateHandlers",
]
