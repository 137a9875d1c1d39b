"""
Вычисление условий хелпера if в контексте данных шаблона.

Операнды разрешаются так же, как переменные шаблона: литералы в кавычках
и числа дают свои значения, остальное ищется по пути в данных.
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Dict, Mapping, Tuple

from .model import (
    BinaryCondition,
    ComparisonCondition,
    Condition,
    ConditionType,
    NotCondition,
    ValueCondition,
)
from ..errors import KarachoError
from ..values import MISSING, get_value, is_truthy

_COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class EvaluationError(KarachoError):
    """Условие не может быть вычислено (неизвестный узел или оператор)."""
    pass


class ConditionEvaluator:

    def __init__(self, data: Mapping[str, Any]):
        self.data = data
        self._handlers: Dict[ConditionType, Callable[[Any], bool]] = {
            ConditionType.VALUE: self._value,
            ConditionType.COMPARE: self._compare,
            ConditionType.NOT: self._negate,
            ConditionType.AND: self._all,
            ConditionType.OR: self._any,
            ConditionType.XOR: self._exclusive,
        }

    def evaluate(self, condition: Condition) -> bool:
        handler = self._handlers.get(condition.kind)
        if handler is None:
            raise EvaluationError(f"Unsupported condition: {condition.kind}")
        return handler(condition)

    def _value(self, condition: ValueCondition) -> bool:
        return is_truthy(get_value(condition.operand, self.data))

    def _compare(self, condition: ComparisonCondition) -> bool:
        """
        Отсутствующее значение участвует в сравнении как None.
        Строка с числом приводится к числу, если другая сторона число.
        Несравнимые значения дают False.
        """
        compare = _COMPARATORS.get(condition.operator)
        if compare is None:
            raise EvaluationError(f"Unknown comparison operator: {condition.operator}")

        left, right = _coerce_pair(
            get_value(condition.left, self.data),
            get_value(condition.right, self.data),
        )
        try:
            return bool(compare(left, right))
        except TypeError:
            return False

    def _negate(self, condition: NotCondition) -> bool:
        return not self.evaluate(condition.condition)

    def _all(self, condition: BinaryCondition) -> bool:
        return self.evaluate(condition.left) and self.evaluate(condition.right)

    def _any(self, condition: BinaryCondition) -> bool:
        return self.evaluate(condition.left) or self.evaluate(condition.right)

    def _exclusive(self, condition: BinaryCondition) -> bool:
        return self.evaluate(condition.left) != self.evaluate(condition.right)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(text: str) -> Any:
    try:
        return float(text) if "." in text else int(text)
    except ValueError:
        return text


def _coerce_pair(left: Any, right: Any) -> Tuple[Any, Any]:
    left = None if left is MISSING else left
    right = None if right is MISSING else right
    if _is_number(left) and isinstance(right, str):
        right = _to_number(right.strip())
    elif _is_number(right) and isinstance(left, str):
        left = _to_number(left.strip())
    return left, right


def evaluate_condition_string(condition_str: str, data: Mapping[str, Any]) -> bool:
    """
    Разбирает и вычисляет условие за один вызов.

    Raises:
        ConditionSyntaxError: Выражение не разбирается
    """
    from .parser import ConditionParser

    return ConditionEvaluator(data).evaluate(ConditionParser().parse(condition_str))
