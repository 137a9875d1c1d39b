"""
Базовые типы для хелперов шаблонизатора.

Хелпер получает текущий контекст данных, узел вызова и под-AST блока
(узлы строго между открывающим и закрывающим тегами) и возвращает строку.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, MutableMapping, Optional, Protocol, runtime_checkable

from ..config import KarachoOptions
from ..nodes import HelperNode, TemplateAST

# Низкоуровневый хелпер: (data, node, sub_ast) -> str
InternalHelper = Callable[[MutableMapping[str, Any], HelperNode, TemplateAST], str]

# Высокоуровневый хелпер: позиционные значения аргументов и, последним, контент блока
Helper = Callable[..., Any]


@runtime_checkable
class TemplateHandlers(Protocol):
    """
    Протокол ядра шаблонизатора для использования в хелперах.

    Позволяет встроенным хелперам рекурсивно исполнять под-AST,
    не завися от конкретного класса движка.
    """

    options: KarachoOptions

    def execute(self, ast: TemplateAST, data: Optional[Mapping[str, Any]] = None) -> str:
        """
        Исполняет AST в контексте данных.

        Args:
            ast: Последовательность узлов для исполнения
            data: Контекст данных

        Returns:
            Отрендеренный текст
        """
        ...


__all__ = ["InternalHelper", "Helper", "TemplateHandlers"]
