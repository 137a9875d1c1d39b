"""
Karacho: шаблонизатор с блочными хелперами, партиалами и условиями.

Функции уровня модуля создают новый движок на каждый вызов и не хранят
глобального состояния. Для регистрации собственных хелперов и партиалов
используйте экземпляр Karacho.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .config import DEFAULT_OPTIONS, KarachoOptions, load_options
from .errors import (
    ConfigError,
    HelperError,
    KarachoError,
    TemplateSyntaxError,
    UndefinedValueError,
)
from .interpreter import Karacho, PartialSource, Renderer
from .nodes import TemplateAST
from .version import tool_version

__version__ = tool_version()


def parse(template: str, options: Optional[KarachoOptions] = None) -> TemplateAST:
    return Karacho(options).parse(template)


def compile(
        template: str,
        partials: Optional[Mapping[str, PartialSource]] = None,
        options: Optional[KarachoOptions] = None,
) -> Renderer:
    return Karacho(options).compile(template, partials)


def render(
        template: str,
        data: Optional[Mapping[str, Any]] = None,
        partials: Optional[Mapping[str, PartialSource]] = None,
        options: Optional[KarachoOptions] = None,
) -> str:
    """Разбирает и исполняет шаблон отдельным движком."""
    return Karacho(options, partials=partials).render(template, data)


__all__ = [
    "Karacho",
    "KarachoOptions",
    "DEFAULT_OPTIONS",
    "load_options",
    "KarachoError",
    "TemplateSyntaxError",
    "HelperError",
    "UndefinedValueError",
    "ConfigError",
    "TemplateAST",
    "parse",
    "compile",
    "render",
    "__version__",
]
