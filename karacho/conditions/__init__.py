"""
Язык условий хелпера if: and/or/xor, not, сравнения и пути к значениям.
"""

from __future__ import annotations

from .evaluator import ConditionEvaluator, EvaluationError, evaluate_condition_string
from .lexer import ConditionLexer
from .model import (
    BinaryCondition,
    ComparisonCondition,
    Condition,
    ConditionType,
    NotCondition,
    ValueCondition,
)
from .parser import ConditionParser, ConditionSyntaxError

__all__ = [
    "ConditionLexer",
    "ConditionParser",
    "ConditionSyntaxError",
    "ConditionEvaluator",
    "EvaluationError",
    "evaluate_condition_string",
    "Condition",
    "ConditionType",
    "ValueCondition",
    "ComparisonCondition",
    "NotCondition",
    "BinaryCondition",
]
