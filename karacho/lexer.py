"""
Лексический анализатор шаблонов.

Разбивает исходный текст на текстовые фрагменты и кандидаты в теги,
ограниченные разделителями. Классификацией тегов занимается парсер;
лексер знает только о формах, влияющих на границы тега:

- обычный тег {{ ... }}
- raw-тег {{{ ... }}}, собственный суффикс которого совпадает с концом разделителя
- блочный комментарий {{!-- ... --}}, внутри которого может встречаться }}

Незавершённый тег не является ошибкой: остаток шаблона становится текстом.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional

from .config import DEFAULT_OPTIONS, KarachoOptions


class TokenType(enum.Enum):
    """Типы токенов шаблона."""
    TEXT = "TEXT"
    TAG = "TAG"
    BLOCK_COMMENT = "BLOCK_COMMENT"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.
    """
    type: TokenType
    value: str
    position: int        # Позиция начала в исходном тексте
    end: int             # Позиция сразу после токена
    line: int            # Номер строки (начиная с 1)
    column: int          # Номер колонки (начиная с 1)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


def line_column(text: str, position: int) -> tuple[int, int]:
    """Вычисляет строку и колонку (с 1) для смещения в тексте."""
    line = text.count("\n", 0, position) + 1
    line_start = text.rfind("\n", 0, position) + 1
    return line, position - line_start + 1


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Ищет ближайший начальный разделитель, затем ближайший конечный
    разделитель после него. Разделитель, перед которым стоит символ
    экранирования, пропускается, и поиск продолжается дальше.
    """

    def __init__(self, options: Optional[KarachoOptions] = None):
        self.options = options or DEFAULT_OPTIONS

        self._start, self._end = self.options.delimiters
        self._raw_start, self._raw_end = self.options.wrap(self.options.raw_delimiters)
        self._comment_start, self._comment_end = self.options.wrap(
            self.options.block_comment_delimiters
        )

    def tokenize(self, template: str) -> List[Token]:
        """
        Токенизирует весь шаблон и возвращает список токенов с EOF в конце.

        Пустые текстовые фрагменты не создаются.
        """
        tokens: List[Token] = []
        current = 0
        length = len(template)

        while current < length:
            tag = self.next_tag(template, current)
            if tag is None:
                break

            if tag.position > current:
                tokens.append(self._make_token(template, TokenType.TEXT, current, tag.position))
            tokens.append(tag)
            current = tag.end

        if current < length:
            tokens.append(self._make_token(template, TokenType.TEXT, current, length))

        line, column = line_column(template, length)
        tokens.append(Token(TokenType.EOF, "", length, length, line, column))
        return tokens

    def next_tag(self, template: str, position: int) -> Optional[Token]:
        """
        Находит следующий тег, начиная с position.

        Returns:
            Токен TAG или BLOCK_COMMENT, либо None, если полного тега нет
        """
        start = self._find_unescaped(template, self._start, position)
        if start == -1:
            return None

        # Блочный комментарий ищет собственное окончание
        if template.startswith(self._comment_start, start):
            close = template.find(self._comment_end, start + len(self._comment_start))
            if close == -1:
                return None
            return self._make_token(
                template, TokenType.BLOCK_COMMENT, start, close + len(self._comment_end)
            )

        close = self._find_unescaped(template, self._end, start + len(self._start))
        if close == -1:
            return None

        end = close + len(self._end)

        # {{{name}}}: первое найденное }} принадлежит суффиксу raw-тега
        if (
            template.startswith(self._raw_start, start)
            and not template.startswith(self._raw_end, end - len(self._raw_end))
            and template.startswith(self._raw_end, close)
        ):
            end = close + len(self._raw_end)

        return self._make_token(template, TokenType.TAG, start, end)

    def _find_unescaped(self, template: str, needle: str, position: int) -> int:
        """Ищет needle, пропуская вхождения с символом экранирования перед ними."""
        escape = self.options.escape
        index = template.find(needle, position)
        while escape and index > 0 and template[index - 1] == escape:
            index = template.find(needle, index + len(needle))
        return index

    @staticmethod
    def _make_token(template: str, token_type: TokenType, start: int, end: int) -> Token:
        line, column = line_column(template, start)
        return Token(token_type, template[start:end], start, end, line, column)


def tokenize_template(text: str, options: Optional[KarachoOptions] = None) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона
        options: Опции с разделителями (по умолчанию стандартные)

    Returns:
        Список токенов
    """
    return TemplateLexer(options).tokenize(text)


__all__ = ["TokenType", "Token", "TemplateLexer", "tokenize_template", "line_column"]
