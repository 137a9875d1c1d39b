"""
Парсер условных выражений хелпера if.

    expression := clause (("and" | "or" | "xor") clause)*
    clause     := "not" clause | operand (OPERATOR operand)?
    operand    := STRING | NUMBER | IDENTIFIER

Приоритетов нет: связки применяются строго в порядке записи.
"""

from __future__ import annotations

from typing import List

from .lexer import ConditionLexer, Token
from .model import (
    BinaryCondition,
    ComparisonCondition,
    Condition,
    ConditionType,
    NotCondition,
    ValueCondition,
)
from ..errors import KarachoError

_CONNECTIVES = {
    "and": ConditionType.AND,
    "or": ConditionType.OR,
    "xor": ConditionType.XOR,
}

_OPERAND_TYPES = frozenset({"STRING", "NUMBER", "IDENTIFIER"})


class ConditionSyntaxError(KarachoError):
    """Синтаксическая ошибка в выражении if."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} (position {position})")
        self.message = message
        self.position = position


class ConditionParser:

    def __init__(self):
        self.lexer = ConditionLexer()

    def parse(self, condition_str: str) -> Condition:
        """
        Raises:
            ConditionSyntaxError: Пустое выражение, лишний токен, неизвестный символ
        """
        try:
            tokens = self.lexer.tokenize(condition_str)
        except ValueError as e:
            raise ConditionSyntaxError(str(e), 0) from e

        cursor = _Cursor(tokens)
        if cursor.peek().type == "EOF":
            raise ConditionSyntaxError("Empty condition", 0)

        result = self._expression(cursor)

        trailing = cursor.peek()
        if trailing.type != "EOF":
            raise ConditionSyntaxError(f"Unexpected token '{trailing.value}'", trailing.position)
        return result

    def _expression(self, cursor: _Cursor) -> Condition:
        result = self._clause(cursor)
        while cursor.peek().type == "KEYWORD" and cursor.peek().value in _CONNECTIVES:
            operator = _CONNECTIVES[cursor.take().value]
            result = BinaryCondition(left=result, right=self._clause(cursor), operator=operator)
        return result

    def _clause(self, cursor: _Cursor) -> Condition:
        head = cursor.peek()
        if head.type == "KEYWORD" and head.value == "not":
            cursor.take()
            return NotCondition(self._clause(cursor))

        left = self._operand(cursor, "Expected value")
        if cursor.peek().type != "OPERATOR":
            return ValueCondition(left.value)

        operator = cursor.take().value
        right = self._operand(cursor, f"Expected value after '{operator}'")
        return ComparisonCondition(left.value, operator, right.value)

    @staticmethod
    def _operand(cursor: _Cursor, message: str) -> Token:
        token = cursor.peek()
        if token.type in _OPERAND_TYPES:
            return cursor.take()
        if token.type == "EOF":
            raise ConditionSyntaxError("Unexpected end of expression", token.position)
        raise ConditionSyntaxError(f"{message}, got '{token.value}'", token.position)


class _Cursor:
    """Позиция в списке токенов; последний токен всегда EOF."""

    def __init__(self, tokens: List[Token]):
        self._tokens = tokens
        self._index = 0

    def peek(self) -> Token:
        return self._tokens[self._index]

    def take(self) -> Token:
        token = self._tokens[self._index]
        if token.type != "EOF":
            self._index += 1
        return token
