"""
Грамматика аргументов цикла each/for.

Поддерживаются формы:
    items
    items as item[, key[, index]]
    item[, key[, index]] in items
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_NAME = r"\$?\w+"
_LIST = r"[^\s,]+"

EACH_AS_RE = re.compile(
    rf"^\s*(?P<list>{_LIST})\s+as\s+(?P<item>{_NAME})"
    rf"(?:\s*,\s*(?P<key>{_NAME}))?(?:\s*,\s*(?P<index>{_NAME}))?\s*$"
)
EACH_IN_RE = re.compile(
    rf"^\s*(?P<item>{_NAME})(?:\s*,\s*(?P<key>{_NAME}))?(?:\s*,\s*(?P<index>{_NAME}))?"
    rf"\s+in\s+(?P<list>{_LIST})\s*$"
)
EACH_BARE_RE = re.compile(rf"^\s*(?P<list>{_LIST})\s*$")

DEFAULT_ITEM = "this"
DEFAULT_KEY = "key"
DEFAULT_INDEX = "index"


@dataclass(frozen=True)
class EachArguments:
    """Разобранные аргументы цикла."""
    list_path: str
    item: str = DEFAULT_ITEM
    key: str = DEFAULT_KEY
    index: str = DEFAULT_INDEX


def parse_each_arguments(text: Optional[str]) -> Optional[EachArguments]:
    """
    Разбирает строку аргументов each.

    Returns:
        EachArguments или None, если строка не соответствует ни одной форме
    """
    if not text or not text.strip():
        return None

    for pattern in (EACH_AS_RE, EACH_IN_RE):
        match = pattern.match(text)
        if match:
            return EachArguments(
                list_path=match.group("list"),
                item=match.group("item"),
                key=match.group("key") or DEFAULT_KEY,
                index=match.group("index") or DEFAULT_INDEX,
            )

    match = EACH_BARE_RE.match(text)
    if match:
        return EachArguments(list_path=match.group("list"))

    return None


__all__ = ["EachArguments", "parse_each_arguments", "EACH_AS_RE", "EACH_IN_RE"]
