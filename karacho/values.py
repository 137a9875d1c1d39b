"""
Разрешение значений в контексте данных.

Функции этого модуля не зависят от движка: они принимают путь или строку
аргументов и контекст данных и возвращают значения Python.
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, MutableMapping, Optional, Sequence, Tuple

from .nodes import TemplateNode, VariableNode, is_block_boundary


class _Missing:
    """Маркер отсутствующего значения (отличается от None в данных)."""

    _instance: Optional[_Missing] = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

_QUOTED_RE = re.compile(r"""^(?:'([^']*)'|"([^"]*)")$""")
_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_SEGMENT_RE = re.compile(r"\$?\w+")
_ARGUMENT_RE = re.compile(r"""(?:[^\s,"']+|"[^"]*"|'[^']*')+""")
_ASSIGNMENT_RE = re.compile(r"^\s*(\$?\w+)\s*=\s*(.*?)\s*$", re.DOTALL)

# Порядок важен: & экранируется первым, чтобы не задеть уже вставленные сущности
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)

# Скаляры, у которых не ищем атрибуты по пути
_SCALARS = (str, bytes, int, float, bool)


def parse_literal(text: str) -> Any:
    """
    Распознаёт литерал: строку в кавычках или число.

    Returns:
        Значение литерала или MISSING, если text не литерал
    """
    quoted = _QUOTED_RE.match(text)
    if quoted:
        return quoted.group(1) if quoted.group(1) is not None else quoted.group(2)
    if _NUMBER_RE.match(text):
        return float(text) if "." in text else int(text)
    return MISSING


def path_segments(path: str) -> List[str]:
    """Разбивает путь вида a.b[0].c на сегменты ['a', 'b', '0', 'c']."""
    return _SEGMENT_RE.findall(path)


def resolve_path(path: str, data: Any) -> Any:
    """
    Проходит по контексту данных по сегментам пути.

    Поддерживаются словари, последовательности (целочисленный индекс)
    и атрибуты объектов. Любой отсутствующий промежуточный шаг даёт MISSING.
    """
    segments = path_segments(path)
    if not segments:
        return MISSING

    value = data
    for segment in segments:
        value = _step(value, segment)
        if value is MISSING:
            return MISSING
    return value


def _step(value: Any, segment: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(segment, MISSING)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        if not segment.isdigit():
            return MISSING
        index = int(segment)
        return value[index] if index < len(value) else MISSING
    if value is None or isinstance(value, _SCALARS):
        return MISSING
    if segment.startswith("_"):
        return MISSING
    return getattr(value, segment, MISSING)


def get_value(path: str, data: Any) -> Any:
    """
    Возвращает значение для пути или литерала.

    - '...' / "...": строка без кавычек
    - число: int или float
    - иначе: поиск по пути в data (MISSING, если не найдено)
    """
    path = path.strip()
    literal = parse_literal(path)
    if literal is not MISSING:
        return literal
    return resolve_path(path, data)


def format_value(value: Any) -> str:
    """
    Строковое представление значения для вывода в шаблон.

    bool выводится как true/false, целый float без дробной части (1.0 -> 1).
    """
    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def escape_html(text: str) -> str:
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def is_truthy(value: Any) -> bool:
    """Истинность значения по правилам Python; MISSING ложно."""
    if value is MISSING:
        return False
    return bool(value)


def split_arguments(text: Optional[str]) -> List[str]:
    """
    Разбивает строку аргументов хелпера с учётом кавычек.

    Разделители: запятые и пробельные символы вне кавычек:
    'foo "a b", 2' -> ['foo', '"a b"', '2']
    """
    if not text:
        return []
    return _ARGUMENT_RE.findall(text)


def split_outside_quotes(text: str, separator: str) -> List[str]:
    """Делит строку по separator, не заглядывая внутрь кавычек."""
    parts: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    for char in text:
        if quote:
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == separator:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def parse_assignments(text: Optional[str]) -> List[Tuple[str, str]]:
    """
    Разбирает список присваиваний 'a = 1, b = "x", c = user.name'.

    Returns:
        Пары (ключ, исходный текст значения)

    Raises:
        ValueError: Если фрагмент не является присваиванием
    """
    if not text or not text.strip():
        return []

    result: List[Tuple[str, str]] = []
    for part in split_outside_quotes(text, ","):
        match = _ASSIGNMENT_RE.match(part)
        if not match:
            raise ValueError(f"Invalid assignment '{part.strip()}'")
        result.append((match.group(1), match.group(2)))
    return result


def resolve_assignment_value(raw: str, data: Any) -> Any:
    """
    Значение правой части присваивания.

    Литералы и найденные пути дают соответствующие значения; ненайденный
    путь трактуется как строка в исходном виде (set name = World).
    """
    value = get_value(raw, data)
    if value is MISSING:
        return raw
    return value


def assign(
        data: MutableMapping[str, Any],
        assignments: Sequence[Tuple[str, str]],
        overwrite: bool = True,
        source: Optional[Mapping[str, Any]] = None,
) -> MutableMapping[str, Any]:
    """
    Применяет присваивания к data на месте.

    Args:
        data: Изменяемый контекст
        assignments: Результат parse_assignments
        overwrite: при False присваивать только отсутствующие ключи
        source: Контекст для вычисления правых частей (по умолчанию data)
    """
    source = data if source is None else source
    for key, raw in assignments:
        if not overwrite and key in data:
            continue
        data[key] = resolve_assignment_value(raw, source)
    return data


def bind_values(data: Mapping[str, Any], text: Optional[str]) -> dict:
    """Производный контекст: копия data с присваиваниями из text."""
    return assign(dict(data), parse_assignments(text), source=data)


def reserved_word(ast: Sequence[TemplateNode], word: str) -> Optional[int]:
    """
    Ищет зарезервированное слово ({{else}}, {{$block}}) на уровне блока.

    Слово распознаётся только вне вложенных блоков: сначала просматривается
    участок слева до первого открывающего/закрывающего тега блока, затем,
    если слово не найдено, участок справа до первого такого тега.

    Returns:
        Индекс узла со словом или None
    """
    left_end = len(ast)
    for index, node in enumerate(ast):
        if is_block_boundary(node):
            left_end = index
            break
        if _is_word(node, word):
            return index

    for index in range(len(ast) - 1, left_end - 1, -1):
        node = ast[index]
        if is_block_boundary(node):
            break
        if _is_word(node, word):
            return index

    return None


def _is_word(node: TemplateNode, word: str) -> bool:
    return isinstance(node, VariableNode) and node.key == word and not node.addition


__all__ = [
    "MISSING",
    "parse_literal",
    "path_segments",
    "resolve_path",
    "get_value",
    "format_value",
    "escape_html",
    "is_truthy",
    "split_arguments",
    "split_outside_quotes",
    "parse_assignments",
    "resolve_assignment_value",
    "assign",
    "bind_values",
    "reserved_word",
]
