"""
Парсер шаблонов.

Классифицирует токены лексера в узлы AST. Порядок правил фиксирован
и является частью контракта (см. TAG_PRIORITY):

    block comment → raw → helper → partial → close → comment → variable

Переменная является правилом по умолчанию и принимает любой тег.

Глубина одноимённых блоков считается счётчиком на имя: открытие
хелпера или партиала увеличивает его, закрывающий тег уменьшает.
Счётчики живут только в пределах одного вызова parse, поэтому
повторный разбор того же текста даёт идентичный AST.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Dict, List, Optional, Tuple

from .config import DEFAULT_OPTIONS, KarachoOptions
from .errors import TemplateSyntaxError
from .lexer import TemplateLexer, Token, TokenType
from .nodes import (
    CloseNode,
    CommentNode,
    HelperNode,
    PartialNode,
    RawNode,
    TemplateAST,
    TemplateNode,
    TextNode,
    VariableNode,
)

logger = logging.getLogger(__name__)


class TagType(enum.Enum):
    """Виды тегов в порядке распознавания."""
    BLOCK_COMMENT = "block_comment"
    RAW = "raw"
    HELPER = "helper"
    PARTIAL = "partial"
    CLOSE = "close"
    COMMENT = "comment"
    VARIABLE = "variable"


# Порядок проверки правил классификации: первое совпадение побеждает
TAG_PRIORITY: Tuple[TagType, ...] = (
    TagType.BLOCK_COMMENT,
    TagType.RAW,
    TagType.HELPER,
    TagType.PARTIAL,
    TagType.CLOSE,
    TagType.COMMENT,
    TagType.VARIABLE,
)

_VARIABLE_KEY_RE = re.compile(r"^\$?\w[\w.\[\]]*")
_BLOCK_KEY_RE = re.compile(r"^\s*(\w[\w/\-]*)")

# Счётчики открытых блоков по имени (локальны для одного разбора)
DepthMap = Dict[str, int]


class TemplateParser:
    """
    Парсер токенов шаблона в плоский AST.
    """

    def __init__(self, options: Optional[KarachoOptions] = None):
        self.options = options or DEFAULT_OPTIONS
        self.lexer = TemplateLexer(self.options)

        opts = self.options
        self._wrapped: Dict[TagType, Tuple[str, str]] = {
            TagType.BLOCK_COMMENT: opts.wrap(opts.block_comment_delimiters),
            TagType.RAW: opts.wrap(opts.raw_delimiters),
            TagType.HELPER: opts.wrap(opts.helper_delimiters),
            TagType.PARTIAL: opts.wrap(opts.partial_delimiters),
            TagType.CLOSE: opts.wrap(opts.close_delimiters),
            TagType.COMMENT: opts.wrap(opts.comment_delimiters),
            TagType.VARIABLE: opts.delimiters,
        }

    def parse(self, template: str) -> TemplateAST:
        """
        Разбирает текст шаблона в AST.

        Raises:
            TemplateSyntaxError: При закрывающем теге без открытого блока
        """
        ast = self.parse_tokens(self.lexer.tokenize(template))
        logger.debug(f"Parsed template ({len(template)} chars) -> {len(ast)} nodes")
        return ast

    def parse_tokens(self, tokens: List[Token]) -> TemplateAST:
        """Преобразует последовательность токенов лексера в AST."""
        ast: TemplateAST = []
        depths: DepthMap = {}

        for token in tokens:
            if token.type == TokenType.EOF:
                break
            if token.type == TokenType.TEXT:
                ast.append(TextNode(token.value))
                continue
            ast.append(self._parse_tag(token, depths))

        return ast

    def classify(self, token: Token) -> TagType:
        """Возвращает вид тега по правилам TAG_PRIORITY."""
        for tag_type in TAG_PRIORITY:
            if tag_type == TagType.BLOCK_COMMENT:
                if token.type == TokenType.BLOCK_COMMENT:
                    return tag_type
                continue
            if self._matches(tag_type, token.value):
                return tag_type
        return TagType.VARIABLE

    # Внутренние методы

    def _matches(self, tag_type: TagType, tag: str) -> bool:
        start, end = self._wrapped[tag_type]
        return (
            len(tag) >= len(start) + len(end)
            and tag.startswith(start)
            and tag.endswith(end)
        )

    def _content(self, tag_type: TagType, tag: str) -> str:
        start, end = self._wrapped[tag_type]
        return tag[len(start):len(tag) - len(end)]

    def _parse_tag(self, token: Token, depths: DepthMap) -> TemplateNode:
        tag_type = self.classify(token)
        tag = token.value
        content = self._content(tag_type, tag)
        span = {"tag": tag, "start": token.position, "end": token.end}

        if tag_type in (TagType.BLOCK_COMMENT, TagType.COMMENT):
            return CommentNode(key=content.strip(), **span)

        if tag_type == TagType.RAW:
            return RawNode(key=content.strip(), **span)

        if tag_type in (TagType.HELPER, TagType.PARTIAL):
            key, addition = _split_key(_BLOCK_KEY_RE, content)
            depth = depths.get(key, 0)
            depths[key] = depth + 1
            node_cls = HelperNode if tag_type == TagType.HELPER else PartialNode
            return node_cls(key=key, depth=depth, addition=addition, **span)

        if tag_type == TagType.CLOSE:
            key = content.strip()
            opened = depths.get(key, 0)
            if opened <= 0:
                raise TemplateSyntaxError(
                    f"Unexpected close tag: {tag}", token.position, token.line, token.column
                )
            depths[key] = opened - 1
            return CloseNode(key=key, depth=opened - 1, **span)

        key, addition = _split_key(_VARIABLE_KEY_RE, content.lstrip())
        return VariableNode(key=key, addition=addition, **span)


def _split_key(pattern: re.Pattern, content: str) -> Tuple[str, Optional[str]]:
    """Отделяет ключ от дополнения; пустое дополнение становится None."""
    match = pattern.match(content)
    if not match:
        return "", content.strip() or None
    key = match.group(match.lastindex or 0)
    addition = content[match.end():].strip()
    return key, addition or None


def parse_template(text: str, options: Optional[KarachoOptions] = None) -> TemplateAST:
    """
    Удобная функция для разбора шаблона.

    Args:
        text: Исходный текст шаблона
        options: Опции с разделителями

    Returns:
        AST шаблона

    Raises:
        TemplateSyntaxError: При ошибке структуры блоков
    """
    return TemplateParser(options).parse(text)


__all__ = ["TagType", "TAG_PRIORITY", "TemplateParser", "parse_template"]
