"""
Лексер условных выражений хелпера if.

Строка условия разбирается одним общим регулярным выражением
с именованными группами. Порядок групп задаёт приоритет:
строки и числа распознаются раньше путей, двухсимвольные операторы
раньше односимвольных. Ключевые слова and, or, xor, not выделяются
из идентификаторов после захвата, поэтому android или order
остаются путями.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Token:
    """Токен условия: тип (KEYWORD, OPERATOR, STRING, NUMBER, IDENTIFIER, EOF), текст и смещение."""
    type: str
    value: str
    position: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, @{self.position})"


_GROUPS = (
    ("SPACE", r"\s+"),
    ("STRING", r"'[^']*'|\"[^\"]*\""),
    ("NUMBER", r"-?\d+(?:\.\d+)?(?![\w.])"),
    ("OPERATOR", r"==|!=|<=|>=|<|>"),
    ("IDENTIFIER", r"\$?\w[\w.\[\]]*"),
    ("UNKNOWN", r"."),
)

_MASTER_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _GROUPS), re.DOTALL)


class ConditionLexer:
    """Разбивает строку условия на токены."""

    KEYWORDS = frozenset({"and", "or", "xor", "not"})

    def tokenize(self, text: str) -> List[Token]:
        """
        Returns:
            Токены без пробелов, последним идёт EOF

        Raises:
            ValueError: Символ не входит ни в один вид токенов
        """
        tokens: List[Token] = []

        for match in _MASTER_RE.finditer(text):
            kind = match.lastgroup
            value = match.group()
            if kind == "SPACE":
                continue
            if kind == "UNKNOWN":
                raise ValueError(f"Unexpected character '{value}' at position {match.start()}")
            if kind == "IDENTIFIER" and value in self.KEYWORDS:
                kind = "KEYWORD"
            tokens.append(Token(kind, value, match.start()))

        tokens.append(Token("EOF", "", len(text)))
        return tokens
