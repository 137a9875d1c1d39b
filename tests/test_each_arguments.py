"""
Тесты грамматики аргументов each/for.
"""

import pytest

from karacho.helpers.arguments import EachArguments, parse_each_arguments


@pytest.mark.parametrize("text,expected", [
    ("val, key, index in list", ("val", "key", "index", "list")),
    ("value, name, idx in entries", ("value", "name", "idx", "entries")),
    ("val, key in list", ("val", "key", "index", "list")),
    ("val in list", ("val", "key", "index", "list")),
    ("val_, key123 in list", ("val_", "key123", "index", "list")),
    ("val in content.list", ("val", "key", "index", "content.list")),
])
def test_in_form(text, expected):
    args = parse_each_arguments(text)
    assert (args.item, args.key, args.index, args.list_path) == expected


@pytest.mark.parametrize("text,expected", [
    ("items as item", ("item", "key", "index", "items")),
    ("items as item, k", ("item", "k", "index", "items")),
    ("items as item, k, i", ("item", "k", "i", "items")),
    ("user.items[0] as x", ("x", "key", "index", "user.items[0]")),
])
def test_as_form(text, expected):
    args = parse_each_arguments(text)
    assert (args.item, args.key, args.index, args.list_path) == expected


def test_bare_list():
    assert parse_each_arguments("items") == EachArguments(list_path="items")
    assert parse_each_arguments("items").item == "this"


@pytest.mark.parametrize("text", [None, "", "   ", "a b c", "as x", "x in", "a, in list"])
def test_invalid(text):
    assert parse_each_arguments(text) is None
