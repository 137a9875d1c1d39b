"""
Base exceptions for user-facing errors.

All expected errors that should be reported to the caller as clean
messages (template syntax, helper arguments, strict lookups, options)
inherit from KarachoError.

Programming errors and bugs should NOT inherit from KarachoError;
they propagate with full tracebacks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .nodes import TemplateNode


class KarachoError(Exception):
    """
    Base class for all user-facing errors in Karacho.

    These errors indicate problems the template author can fix:
    broken block structure, malformed helper arguments, invalid options.
    """
    pass


class TemplateSyntaxError(KarachoError):
    """Ошибка разбора шаблона (фатальна для всего вызова parse)."""

    def __init__(self, message: str, position: int, line: int, column: int):
        super().__init__(f"{message} at {line}:{column}")
        self.message = message
        self.position = position
        self.line = line
        self.column = column


class HelperError(KarachoError):
    """
    Ошибка выполнения встроенного хелпера.

    Прерывает весь вызов рендера. Несёт узел, на котором произошла ошибка,
    для диагностики.
    """

    def __init__(self, message: str, node: Optional[TemplateNode] = None):
        super().__init__(message)
        self.node = node

    def __str__(self) -> str:
        parts = [super().__str__()]
        tag = getattr(self.node, "tag", None)
        if tag:
            parts.append(f"Tag: {tag}")
            parts.append(f"Offset: {self.node.start}")
        return " | ".join(parts)


class UndefinedValueError(KarachoError):
    """Значение не найдено в контексте данных при включённом strict-режиме."""

    def __init__(self, key: str, node: Optional[TemplateNode] = None):
        super().__init__(f"Undefined value '{key}'")
        self.key = key
        self.node = node


class ConfigError(KarachoError):
    """Некорректные опции движка."""
    pass


__all__ = [
    "KarachoError",
    "TemplateSyntaxError",
    "HelperError",
    "UndefinedValueError",
    "ConfigError",
]
