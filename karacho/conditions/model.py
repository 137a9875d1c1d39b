"""
AST условий хелпера if.

Узлы неизменяемы. Строковое представление узла воспроизводит выражение
в нормализованном виде (одиночные пробелы между частями).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Union


class ConditionType(Enum):
    VALUE = "value"
    COMPARE = "compare"
    NOT = "not"
    AND = "and"
    OR = "or"
    XOR = "xor"


class Condition(ABC):
    """Узел условия."""

    @property
    @abstractmethod
    def kind(self) -> ConditionType:
        ...


@dataclass(frozen=True)
class ValueCondition(Condition):
    """Истинность значения; operand это путь в данных или литерал."""
    operand: str

    @property
    def kind(self) -> ConditionType:
        return ConditionType.VALUE

    def __str__(self) -> str:
        return self.operand


@dataclass(frozen=True)
class ComparisonCondition(Condition):
    """left op right, где op один из ==, !=, <, <=, >, >="""
    left: str
    operator: str
    right: str

    @property
    def kind(self) -> ConditionType:
        return ConditionType.COMPARE

    def __str__(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass(frozen=True)
class NotCondition(Condition):
    condition: Condition

    @property
    def kind(self) -> ConditionType:
        return ConditionType.NOT

    def __str__(self) -> str:
        return f"not {self.condition}"


@dataclass(frozen=True)
class BinaryCondition(Condition):
    """
    Логическая связка двух условий.

    Цепочки сворачиваются слева направо без приоритетов,
    так что a or b and c означает (a or b) and c.
    """
    left: Condition
    right: Condition
    operator: ConditionType

    @property
    def kind(self) -> ConditionType:
        return self.operator

    def __str__(self) -> str:
        return f"{self.left} {self.operator.value} {self.right}"


AnyCondition = Union[ValueCondition, ComparisonCondition, NotCondition, BinaryCondition]

__all__ = [
    "Condition",
    "ConditionType",
    "ValueCondition",
    "ComparisonCondition",
    "NotCondition",
    "BinaryCondition",
    "AnyCondition",
]
