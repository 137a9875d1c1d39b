"""
Встроенные хелперы: if, each/for, with, set, default.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Dict, List, MutableMapping, Optional, Tuple

from .arguments import parse_each_arguments
from .base import InternalHelper, TemplateHandlers
from ..conditions import ConditionSyntaxError, evaluate_condition_string
from ..errors import HelperError
from ..nodes import HelperNode, TemplateAST
from ..values import assign, get_value, is_truthy, parse_assignments, reserved_word

# Значения, которые each не перебирает (bool входит через int)
_SCALARS = (int, float, bytes)


class BuiltinHelpers:
    """
    Набор встроенных хелперов, привязанных к движку.

    Хелперы рекурсивно исполняют свои под-AST через handlers.execute.
    """

    def __init__(self, handlers: TemplateHandlers):
        self.handlers = handlers

    def registry(self) -> Dict[str, InternalHelper]:
        """Отображение имён на хелперы; for является синонимом each."""
        return {
            "if": self.if_helper,
            "each": self.each_helper,
            "for": self.each_helper,
            "with": self.with_helper,
            "set": self.set_helper,
            "default": self.default_helper,
        }

    # ---- if ---------------------------------------------------------------

    def if_helper(self, data: MutableMapping[str, Any], node: HelperNode, sub_ast: TemplateAST) -> str:
        if not node.addition:
            return ""

        try:
            condition = evaluate_condition_string(node.addition, data)
        except ConditionSyntaxError as e:
            raise HelperError(f"Invalid condition '{node.addition}': {e.message}", node) from e

        body, otherwise = self._split_else(sub_ast)
        if condition:
            return self.handlers.execute(body, data)
        if otherwise is not None:
            return self.handlers.execute(otherwise, data)
        return ""

    # ---- each / for -------------------------------------------------------

    def each_helper(self, data: MutableMapping[str, Any], node: HelperNode, sub_ast: TemplateAST) -> str:
        """
        Цикл по коллекции.

        Словари перебираются парами (ключ, значение), последовательности
        парами (str(индекс), элемент). Пустая или отсутствующая коллекция
        рендерит ветку else, если она есть.
        """
        arguments = parse_each_arguments(node.addition)
        if arguments is None:
            raise HelperError(f"Invalid each arguments '{node.addition or ''}'", node)

        collection = get_value(arguments.list_path, data)
        body, otherwise = self._split_else(sub_ast)

        pairs = self._iteration_pairs(collection)
        if not pairs:
            return self.handlers.execute(otherwise, data) if otherwise is not None else ""

        parts: List[str] = []
        for index, (key, value) in enumerate(pairs):
            scope = {**data, arguments.item: value}
            if arguments.key != arguments.index:
                scope[arguments.key] = key
            scope[arguments.index] = index
            parts.append(self.handlers.execute(body, scope))
        return "".join(parts)

    @staticmethod
    def _iteration_pairs(collection: Any) -> List[Tuple[Any, Any]]:
        """
        Пары (ключ, значение) для перебора.

        Строка перебирается посимвольно, объект по своим атрибутам,
        скаляры (числа, bool) считаются пустой коллекцией.
        """
        if not is_truthy(collection) or isinstance(collection, _SCALARS):
            return []
        if isinstance(collection, Mapping):
            return list(collection.items())
        if isinstance(collection, Iterable):
            return [(str(i), item) for i, item in enumerate(collection)]
        if hasattr(collection, "__dict__"):
            return [(key, value) for key, value in vars(collection).items() if not key.startswith("_")]
        return []

    # ---- with -------------------------------------------------------------

    def with_helper(self, data: MutableMapping[str, Any], node: HelperNode, sub_ast: TemplateAST) -> str:
        value = get_value(node.addition or "", data)
        body, otherwise = self._split_else(sub_ast)

        if not is_truthy(value):
            if otherwise is not None:
                return self.handlers.execute(otherwise, data)
            return self.handlers.execute(body, {**data})

        if isinstance(value, Mapping):
            scope = {**data, **value}
        else:
            scope = {**data, "this": value}
        return self.handlers.execute(body, scope)

    # ---- set / default ----------------------------------------------------

    def set_helper(self, data: MutableMapping[str, Any], node: HelperNode, sub_ast: TemplateAST) -> str:
        return self._assign(data, node, sub_ast, overwrite=True)

    def default_helper(self, data: MutableMapping[str, Any], node: HelperNode, sub_ast: TemplateAST) -> str:
        return self._assign(data, node, sub_ast, overwrite=False)

    def _assign(
            self,
            data: MutableMapping[str, Any],
            node: HelperNode,
            sub_ast: TemplateAST,
            overwrite: bool,
    ) -> str:
        """
        Блочная форма рендерит тело в производном контексте, не трогая data.
        Одиночный тег изменяет data на месте для всех последующих узлов.
        """
        try:
            assignments = parse_assignments(node.addition)
        except ValueError as e:
            raise HelperError(str(e), node) from e

        if sub_ast:
            scope = assign(dict(data), assignments, overwrite=overwrite, source=data)
            return self.handlers.execute(sub_ast, scope)

        assign(data, assignments, overwrite=overwrite)
        return ""

    # ---- общие ------------------------------------------------------------

    def _split_else(self, sub_ast: TemplateAST) -> Tuple[TemplateAST, Optional[TemplateAST]]:
        """Делит под-AST по {{else}} своего уровня вложенности."""
        index = reserved_word(sub_ast, self.handlers.options.else_keyword)
        if index is None:
            return sub_ast, None
        return sub_ast[:index], sub_ast[index + 1:]


__all__ = ["BuiltinHelpers"]
