"""
Движок шаблонизатора Karacho.

Связывает парсер, реестры партиалов и хелперов и исполнитель AST.
Реестры принадлежат экземпляру движка; несколько движков с разными
опциями не разделяют состояние.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional, Union

from .config import DEFAULT_OPTIONS, KarachoOptions
from .errors import HelperError, UndefinedValueError
from .helpers import BuiltinHelpers, Helper, InternalHelper
from .nodes import (
    BlockNode,
    HelperNode,
    PartialNode,
    RawNode,
    TagNode,
    TemplateAST,
    TextNode,
    VariableNode,
    find_close_index,
)
from .parser import TemplateParser
from .values import (
    MISSING,
    bind_values,
    escape_html,
    format_value,
    get_value,
    reserved_word,
    split_arguments,
)

logger = logging.getLogger(__name__)

# Партиал хранится строкой до первого использования, затем как AST
PartialSource = Union[str, TemplateAST]

Renderer = Callable[[Optional[Mapping[str, Any]]], str]


class Karacho:
    """
    Шаблонизатор: разбор один раз, исполнение много раз.

    Исполнение никогда не изменяет AST; подстановка {{$block}}
    в партиал выполняется над копией.
    """

    def __init__(
            self,
            options: Optional[KarachoOptions] = None,
            *,
            partials: Optional[Mapping[str, PartialSource]] = None,
    ):
        self.options = options or DEFAULT_OPTIONS
        self.parser = TemplateParser(self.options)

        self.partials: Dict[str, PartialSource] = {}
        self.helpers: Dict[str, InternalHelper] = dict(BuiltinHelpers(self).registry())

        if partials:
            self.register_partials(partials)

    # ---- разбор -----------------------------------------------------------

    def parse(self, template: str) -> TemplateAST:
        """
        Разбирает шаблон в AST.

        Raises:
            TemplateSyntaxError: При закрывающем теге без открытого блока
        """
        return self.parser.parse(template)

    # ---- регистрация ------------------------------------------------------

    def register_partials(self, partials: Mapping[str, PartialSource]) -> None:
        """
        Регистрирует партиалы по именам.

        Строки разбираются лениво при первом включении.
        """
        for name, partial in partials.items():
            self.partials[name] = partial if isinstance(partial, str) else list(partial)
        logger.debug(f"Registered partials: {', '.join(partials)}")

    def set_helper(self, name: str, helper: InternalHelper) -> None:
        """Регистрирует низкоуровневый хелпер (data, node, sub_ast) -> str."""
        self.helpers[name] = helper

    def register_helper(self, name: str, helper: Helper) -> None:
        """
        Регистрирует высокоуровневый хелпер с позиционными аргументами.

        Строка аргументов тега делится с учётом кавычек, каждый аргумент
        разрешается как литерал или путь в данных (отсутствующий путь даёт
        None). Отрендеренный контент блока, если он не пуст, передаётся
        последним аргументом. Результат приводится к строке.
        """

        def internal(data: MutableMapping[str, Any], node: HelperNode, sub_ast: TemplateAST) -> str:
            args: List[Any] = []
            for argument in split_arguments(node.addition):
                value = get_value(argument, data)
                args.append(None if value is MISSING else value)

            content = self.execute(sub_ast, data)
            if content:
                args.append(content)
            return format_value(helper(*args))

        self.set_helper(name, internal)

    # ---- исполнение -------------------------------------------------------

    def execute(self, ast: TemplateAST, data: Optional[Mapping[str, Any]] = None) -> str:
        """
        Исполняет AST в контексте данных.

        Одиночные теги set/default изменяют переданный data на месте.

        Raises:
            HelperError: При ошибке аргументов встроенного хелпера
            UndefinedValueError: В строгом режиме при отсутствующем значении
        """
        if data is None:
            data = {}

        parts: List[str] = []
        i = 0
        while i < len(ast):
            node = ast[i]

            if isinstance(node, TextNode):
                parts.append(node.text)
            elif isinstance(node, VariableNode):
                parts.append(escape_html(self._interpolate(node, data)))
            elif isinstance(node, RawNode):
                parts.append(self._interpolate(node, data))
            elif isinstance(node, BlockNode):
                close = find_close_index(ast, i)
                sub_ast = ast[i + 1:close] if close is not None else []

                if isinstance(node, HelperNode):
                    parts.append(self._render_helper(node, data, sub_ast))
                elif isinstance(node, PartialNode):
                    parts.append(self._render_partial(node, data, sub_ast))

                if close is not None:
                    i = close + 1
                    continue
            # CloseNode и CommentNode ничего не выводят

            i += 1

        return "".join(parts)

    def compile(
            self,
            template: str,
            partials: Optional[Mapping[str, PartialSource]] = None,
    ) -> Renderer:
        """
        Разбирает шаблон один раз и возвращает функцию рендеринга.

        Функция исполняет AST над поверхностной копией данных, поэтому
        словарь вызывающего не изменяется одиночными set/default.
        """
        if partials:
            self.register_partials(partials)

        ast = self.parse(template)
        logger.debug(f"Compiled template: {len(ast)} nodes")

        def render(data: Optional[Mapping[str, Any]] = None) -> str:
            return self.execute(ast, dict(data or {}))

        return render

    def render(self, template: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """Разбор и исполнение за один вызов."""
        return self.compile(template)(data)

    # ---- внутренние методы ------------------------------------------------

    def _interpolate(self, node: TagNode, data: Mapping[str, Any]) -> str:
        value = get_value(node.key, data)
        if value is MISSING and self.options.strict:
            raise UndefinedValueError(node.key, node)
        return format_value(value)

    def _render_helper(self, node: HelperNode, data: MutableMapping[str, Any], sub_ast: TemplateAST) -> str:
        helper = self.helpers.get(node.key)
        if helper is None:
            logger.warning(f"Helper '{node.key}' not found")
            return ""
        return helper(data, node, sub_ast)

    def _render_partial(self, node: PartialNode, data: Mapping[str, Any], sub_ast: TemplateAST) -> str:
        try:
            scope = bind_values(data, node.addition)
        except ValueError as e:
            raise HelperError(str(e), node) from e

        partial_ast = self._partial_ast(node.key)
        if partial_ast is None:
            logger.info(f"Partial '{node.key}' not defined")
            return self.execute(sub_ast, scope)

        placeholder = reserved_word(partial_ast, self.options.block_placeholder)
        if placeholder is not None:
            partial_ast = [*partial_ast[:placeholder], *sub_ast, *partial_ast[placeholder + 1:]]

        return self.execute(partial_ast, scope)

    def _partial_ast(self, name: str) -> Optional[TemplateAST]:
        partial = self.partials.get(name)
        if partial is None:
            return None
        if isinstance(partial, str):
            partial = self.parse(partial)
            self.partials[name] = partial
        return partial


__all__ = ["Karacho", "PartialSource", "Renderer"]
