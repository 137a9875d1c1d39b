"""
Тесты встроенных хелперов if, each/for, with, set, default.
"""

from types import SimpleNamespace

import pytest

from karacho import Karacho
from karacho.errors import HelperError
from karacho.nodes import HelperNode


class TestIfHelper:

    def setup_method(self):
        self.engine = Karacho()

    def render(self, template, **data):
        return self.engine.compile(template)(data)

    def test_if(self):
        template = "{{#if name}}Hello {{name}}{{/if}}"
        assert self.render(template, name="World") == "Hello World"
        assert self.render(template, name="") == ""

    def test_and(self):
        template = "{{#if name and age}}Hello {{name}}{{/if}}"
        assert self.render(template, name="World", age=20) == "Hello World"
        assert self.render(template, name="World", age=0) == ""

    def test_or(self):
        template = "{{#if name or age}}Hello {{name}}{{/if}}"
        assert self.render(template, name="World", age=0) == "Hello World"
        assert self.render(template, name="", age=0) == ""

    def test_xor(self):
        template = "{{#if a xor b}}Y{{else}}N{{/if}}"
        assert self.render(template, a=1, b=0) == "Y"
        assert self.render(template, a=1, b=1) == "N"

    def test_not(self):
        template = "{{#if not name}}Hello {{name}}{{/if}}"
        assert self.render(template, name="") == "Hello "
        assert self.render(template, name="World") == ""

    def test_else_both_branches(self):
        template = "{{#if name}}Hi {{name}}{{else}}Stranger{{/if}}"
        assert self.render(template, name="Al") == "Hi Al"
        assert self.render(template, name="") == "Stranger"

    def test_equals(self):
        template = "{{#if name == 'World'}}Hello {{name}}{{else}}I don't talk to strangers!{{/if}}"
        assert self.render(template, name="World") == "Hello World"
        assert self.render(template, name="Stranger") == "I don't talk to strangers!"

    def test_not_equals(self):
        template = "{{#if name != 'World'}}Hello {{name}}{{else}}I don't talk to strangers!{{/if}}"
        assert self.render(template, name="Stranger") == "Hello Stranger"
        assert self.render(template, name="World") == "I don't talk to strangers!"

    def test_comparison_with_logic(self):
        template = "{{#if name == 'World' and age > 18}}Hello {{name}}{{else}}No{{/if}}"
        assert self.render(template, name="World", age=20) == "Hello World"
        assert self.render(template, name="World", age=16) == "No"

    def test_strict_left_to_right_fold(self):
        """a or b and c вычисляется как (a or b) and c"""
        template = "{{#if a or b and c}}Y{{else}}N{{/if}}"
        assert self.render(template, a=1, b=0, c=0) == "N"
        assert self.render(template, a=1, b=0, c=1) == "Y"

    def test_numeric_string_coercion(self):
        assert self.render("{{#if age >= 18}}adult{{/if}}", age="20") == "adult"

    def test_incomparable_values(self):
        assert self.render("{{#if count > 1}}many{{else}}few{{/if}}") == "few"

    def test_empty_condition(self):
        assert self.render("{{#if}}x{{/if}}") == ""

    def test_nested_else(self):
        template = "{{#if a}}{{#if b}}AB{{else}}A{{/if}}{{else}}none{{/if}}"
        assert self.render(template, a=1, b=1) == "AB"
        assert self.render(template, a=1, b=0) == "A"
        assert self.render(template, a=0, b=1) == "none"

    def test_invalid_condition(self):
        with pytest.raises(HelperError, match="Invalid condition") as exc_info:
            self.render("{{#if a ==}}x{{/if}}", a=1)
        assert isinstance(exc_info.value.node, HelperNode)


class TestEachHelper:

    def setup_method(self):
        self.engine = Karacho()

    def render(self, template, **data):
        return self.engine.compile(template)(data)

    def test_each(self):
        template = "{{#each items as item}}{{item}}{{/each}}"
        assert self.render(template, items=["a", "b", "c"]) == "abc"
        assert self.render(template, items=[]) == ""

    def test_index(self):
        template = "{{#each items as item, index}}{{index}}{{/each}}"
        assert self.render(template, items=["a", "b", "c"]) == "012"

    def test_key(self):
        template = "{{#each items as item, key}}{{key}}{{/each}}"
        assert self.render(template, items={"a": "a", "b": "b", "c": "c"}) == "abc"

    def test_value_and_key(self):
        template = "{{#each items as value, key}}{{key}}{{value}}{{/each}}"
        assert self.render(template, items={"a": 1, "b": 2, "c": 3}) == "a1b2c3"

    def test_value_key_index(self):
        template = "{{#each items as value, key, index}}{{key}}{{index}}{{/each}}"
        assert self.render(template, items={"a": 1, "b": 2, "c": 3}) == "a0b1c2"

    def test_sequence_keys_are_strings(self):
        template = "{{#each items as v, k}}{{#if k == '1'}}{{v}}{{/if}}{{/each}}"
        assert self.render(template, items=["x", "y"]) == "y"

    def test_else(self):
        template = "{{#each items as item}}{{item}}{{else}}No items{{/each}}"
        assert self.render(template, items=["a", "b", "c"]) == "abc"
        assert self.render(template, items=[]) == "No items"
        assert self.render(template) == "No items"

    def test_in_form(self):
        template = "{{#each item in items}}{{item}}{{else}}none{{/each}}"
        assert self.render(template, items=[]) == "none"
        assert self.render(template, items=["a", "b"]) == "ab"

    def test_in_form_with_key_and_index(self):
        template = "{{#each v, k, i in data.map}}{{k}}={{v}}@{{i}};{{/each}}"
        assert self.render(template, data={"map": {"x": 1, "y": 2}}) == "x=1@0;y=2@1;"

    def test_bare_list(self):
        assert self.render("{{#each items}}{{this}}{{index}}{{/each}}", items=["a", "b"]) == "a0b1"

    def test_for_alias(self):
        assert self.render("{{#for x in items}}{{x}}{{/for}}", items=[1, 2, 3]) == "123"

    def test_outer_data_visible(self):
        template = "{{#each users as u}}{{greeting}} {{u.name}};{{/each}}"
        result = self.render(template, greeting="Hi", users=[{"name": "A"}, {"name": "B"}])
        assert result == "Hi A;Hi B;"

    def test_nested_each(self):
        template = "{{#each rows as row}}[{{#each row as cell}}{{cell}}{{/each}}]{{/each}}"
        assert self.render(template, rows=[[1, 2], [3]]) == "[12][3]"

    def test_string_iterated_by_character(self):
        template = "{{#each s as c, k}}{{k}}={{c}};{{/each}}"
        assert self.render(template, s="ab") == "0=a;1=b;"

    def test_scalar_renders_else(self):
        template = "{{#each n as c}}{{c}}{{else}}none{{/each}}"
        assert self.render(template, n=5) == "none"
        assert self.render(template, n=True) == "none"
        assert self.render("{{#each n as c}}{{c}}{{/each}}", n=2.5) == ""

    def test_object_attributes(self):
        item = SimpleNamespace(color="red", _hidden="x")
        template = "{{#each item as value, name}}{{name}}:{{value}}{{/each}}"
        assert self.render(template, item=item) == "color:red"

    def test_invalid_arguments(self):
        with pytest.raises(HelperError, match="Invalid each arguments"):
            self.render("{{#each a b c}}{{/each}}")
        with pytest.raises(HelperError, match="Invalid each arguments"):
            self.render("{{#each}}{{/each}}")


class TestWithHelper:

    def setup_method(self):
        self.engine = Karacho()

    def render(self, template, **data):
        return self.engine.compile(template)(data)

    def test_with_context(self):
        template = "{{#with person}}Hello {{firstname}} {{lastname}}{{/with}}"
        result = self.render(template, person={"firstname": "John", "lastname": "Doe"})
        assert result == "Hello John Doe"

    def test_outer_data_visible(self):
        template = "{{#with person}}{{greeting}} {{name}}{{/with}}"
        assert self.render(template, greeting="Hi", person={"name": "Al"}) == "Hi Al"

    def test_else(self):
        template = "{{#with person}}{{name}}{{else}}nobody{{/with}}"
        assert self.render(template, person=None) == "nobody"
        assert self.render(template) == "nobody"
        assert self.render(template, person={"name": "Al"}) == "Al"

    def test_falsy_without_else_renders_body(self):
        template = "{{#with person}}Hi {{greeting}}{{/with}}"
        assert self.render(template, greeting="there") == "Hi there"
        assert self.render(template, greeting="there", person={}) == "Hi there"

    def test_scalar_binds_this(self):
        assert self.render("{{#with title}}<{{this}}>{{/with}}", title="T") == "<T>"


class TestSetAndDefault:

    def setup_method(self):
        self.engine = Karacho()

    def render(self, template, **data):
        return self.engine.compile(template)(data)

    def test_set(self):
        assert self.render("{{#set name = World}}Hello {{name}}") == "Hello World"

    def test_set_block_is_scoped(self):
        template = "{{#set name = 'Bob'}}{{name}}{{/set}} {{name}}"
        assert self.render(template, name="Al") == "Bob Al"

    def test_set_several(self):
        assert self.render("{{#set a = 1, b = 'x, y'}}{{a}}|{{b}}") == "1|x, y"

    def test_set_from_path(self):
        assert self.render("{{#set who = user.name}}{{who}}", user={"name": "Al"}) == "Al"

    def test_set_overwrites(self):
        assert self.render("{{#set name = 'Bob'}}{{name}}", name="Al") == "Bob"

    def test_default(self):
        template = "{{#default name = 'Guest'}}{{name}}"
        assert self.render(template) == "Guest"
        assert self.render(template, name="Al") == "Al"

    def test_default_block(self):
        template = "{{#default title = 'Untitled'}}[{{title}}]{{/default}}{{title}}"
        assert self.render(template) == "[Untitled]"
        assert self.render(template, title="T") == "[T]T"

    def test_invalid_assignment(self):
        with pytest.raises(HelperError, match="Invalid assignment"):
            self.render("{{#set oops}}")
