"""
Узлы AST шаблона.

AST это плоская последовательность узлов: текстовые фрагменты чередуются
с классифицированными тегами. Блоки (хелперы и партиалы) не вложены
структурно: открывающий узел находит свой CloseNode по паре (key, depth)
во время выполнения.

Все узлы неизменяемы.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Обычный текстовый контент в шаблоне.

    Выводится в результат как есть.
    """
    text: str


@dataclass(frozen=True)
class TagNode(TemplateNode):
    """
    Тег, ограниченный разделителями.

    Attributes:
        key: Имя переменной, хелпера или партиала
        tag: Исходный текст тега вместе с разделителями
        start: Смещение начала тега в исходном шаблоне
        end: Смещение сразу после конца тега
    """
    key: str
    tag: str
    start: int
    end: int


@dataclass(frozen=True)
class VariableNode(TagNode):
    """Интерполяция с HTML-экранированием: {{name}}"""
    addition: Optional[str] = None


@dataclass(frozen=True)
class RawNode(TagNode):
    """Интерполяция без экранирования: {{{name}}}"""


@dataclass(frozen=True)
class BlockNode(TagNode):
    """Открывающий тег блока. depth отличает одноимённые вложенные блоки."""
    depth: int = 0
    addition: Optional[str] = None


@dataclass(frozen=True)
class PartialNode(BlockNode):
    """Включение именованного партиала: {{>name a = b}}...{{/name}}"""


@dataclass(frozen=True)
class HelperNode(BlockNode):
    """Вызов хелпера: {{#name args}}...{{/name}}"""


@dataclass(frozen=True)
class CloseNode(TagNode):
    """Закрывающий тег блока: {{/name}}"""
    depth: int = 0


@dataclass(frozen=True)
class CommentNode(TagNode):
    """Комментарий: {{! text }} или {{!-- text --}}. Не выводится."""


# Алиас для списка узлов (AST)
TemplateAST = List[TemplateNode]


def is_block_boundary(node: TemplateNode) -> bool:
    """Открывает или закрывает ли узел вложенный блок."""
    return isinstance(node, (BlockNode, CloseNode))


def find_close_index(ast: Sequence[TemplateNode], open_index: int) -> Optional[int]:
    """
    Находит CloseNode, парный к открывающему узлу блока.

    Просматривает AST вперёд от open_index и возвращает индекс первого
    CloseNode с теми же key и depth, либо None.
    """
    node = ast[open_index]
    for index in range(open_index + 1, len(ast)):
        other = ast[index]
        if isinstance(other, CloseNode) and other.key == node.key and other.depth == node.depth:
            return index
    return None


__all__ = [
    "TemplateNode",
    "TextNode",
    "TagNode",
    "VariableNode",
    "RawNode",
    "BlockNode",
    "PartialNode",
    "HelperNode",
    "CloseNode",
    "CommentNode",
    "TemplateAST",
    "is_block_boundary",
    "find_close_index",
]
