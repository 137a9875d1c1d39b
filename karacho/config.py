"""
Опции движка шаблонизации.

Все разделители переопределяются для отдельного экземпляра движка.
Опции можно собрать из словаря или загрузить из YAML-файла.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from ruamel.yaml import YAML

from .errors import ConfigError

_yaml = YAML(typ="safe")

# Пара (префикс, суффикс) или (начало, конец)
DelimiterPair = Tuple[str, str]


@dataclass(frozen=True)
class KarachoOptions:
    """
    Настройки лексера и интерпретатора.

    Пары *_delimiters для тегов задаются относительно основных разделителей:
    например, helper_delimiters=("#", "") означает тег вида {{#name}}.
    """
    escape: str = "\\"

    delimiters: DelimiterPair = ("{{", "}}")
    raw_delimiters: DelimiterPair = ("{", "}")
    helper_delimiters: DelimiterPair = ("#", "")
    partial_delimiters: DelimiterPair = (">", "")
    close_delimiters: DelimiterPair = ("/", "")
    comment_delimiters: DelimiterPair = ("!", "")
    block_comment_delimiters: DelimiterPair = ("!--", "--")

    # Отсутствующие значения в {{var}} / {{{var}}} вызывают UndefinedValueError
    strict: bool = False

    # Зарезервированные слова внутри блоков
    block_placeholder: str = "$block"
    else_keyword: str = "else"

    def __post_init__(self):
        start, end = self.delimiters
        if not start or not end:
            raise ConfigError("Main delimiters must not be empty")
        if not self.else_keyword:
            raise ConfigError("else_keyword must not be empty")
        if len(self.escape) > 1:
            raise ConfigError(f"Escape must be a single character, got {self.escape!r}")

    def wrap(self, pair: DelimiterPair) -> DelimiterPair:
        """Возвращает полные разделители тега: основной + префикс, суффикс + основной."""
        start, end = self.delimiters
        prefix, suffix = pair
        return start + prefix, suffix + end

    def with_overrides(self, **overrides: Any) -> KarachoOptions:
        """Копия опций с переопределёнными полями."""
        return KarachoOptions.from_dict({**self.to_dict(), **overrides})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> KarachoOptions:
        """
        Создаёт опции из словаря (например, из YAML).

        Пары разделителей допускаются списками. Неизвестные ключи считаются ошибкой.

        Raises:
            ConfigError: При неизвестном ключе или неверной форме значения
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for name, value in raw.items():
            if name.endswith("delimiters"):
                values[name] = _as_pair(name, value)
            elif name == "strict":
                if not isinstance(value, bool):
                    raise ConfigError(f"Option '{name}' must be true or false")
                values[name] = value
            else:
                if not isinstance(value, str):
                    raise ConfigError(f"Option '{name}' must be a string")
                values[name] = value
        return replace(cls(), **values)


def _as_pair(name: str, value: Any) -> DelimiterPair:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigError(f"Option '{name}' must be a pair of strings")
    first, second = value
    if not isinstance(first, str) or not isinstance(second, str):
        raise ConfigError(f"Option '{name}' must be a pair of strings")
    return first, second


DEFAULT_OPTIONS = KarachoOptions()


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        raise ConfigError(f"Options file not found: {path}")
    raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_options(path: Path) -> KarachoOptions:
    """
    Загружает опции движка из YAML файла.

    Пример файла:

        delimiters: ["<%", "%>"]
        strict: true

    Args:
        path: Путь к YAML файлу

    Returns:
        Опции с переопределёнными значениями

    Raises:
        ConfigError: Если файл отсутствует или содержит неверные опции
    """
    return KarachoOptions.from_dict(_read_yaml_map(Path(path)))


__all__ = ["KarachoOptions", "DelimiterPair", "DEFAULT_OPTIONS", "load_options"]
