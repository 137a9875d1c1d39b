"""
Тесты лексера шаблонов.
"""

from karacho.config import KarachoOptions
from karacho.lexer import TemplateLexer, TokenType, line_column, tokenize_template


def _types(tokens):
    return [t.type for t in tokens]


def _values(tokens):
    return [t.value for t in tokens if t.type != TokenType.EOF]


class TestTemplateLexer:

    def setup_method(self):
        self.lexer = TemplateLexer()

    def test_text_and_tags(self):
        """Текст и теги с позициями"""
        tokens = self.lexer.tokenize("Hello {{name}}!")

        assert _types(tokens) == [TokenType.TEXT, TokenType.TAG, TokenType.TEXT, TokenType.EOF]
        assert _values(tokens) == ["Hello ", "{{name}}", "!"]

        tag = tokens[1]
        assert tag.position == 6
        assert tag.end == 14

    def test_plain_text(self):
        tokens = self.lexer.tokenize("no tags here")
        assert _values(tokens) == ["no tags here"]

    def test_empty_template(self):
        tokens = self.lexer.tokenize("")
        assert _types(tokens) == [TokenType.EOF]

    def test_no_empty_text_between_tags(self):
        """Между соседними тегами пустой текст не создаётся"""
        tokens = self.lexer.tokenize("{{a}}{{b}}")
        assert _values(tokens) == ["{{a}}", "{{b}}"]

    def test_unterminated_tag_is_text(self):
        """Незавершённый тег становится текстом"""
        tokens = self.lexer.tokenize("a {{b")
        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]
        assert _values(tokens) == ["a {{b"]

    def test_unterminated_after_tag(self):
        tokens = self.lexer.tokenize("{{a}} and {{b")
        assert _values(tokens) == ["{{a}}", " and {{b"]

    def test_raw_tag(self):
        """Суффикс raw-тега входит в тег"""
        tokens = self.lexer.tokenize("{{{x}}}!")
        assert _values(tokens) == ["{{{x}}}", "!"]
        assert tokens[0].end == 7

    def test_block_comment_with_end_delimiter_inside(self):
        """Окончание блочного комментария ищется отдельно"""
        tokens = self.lexer.tokenize("{{!-- a }} b --}}x")

        assert tokens[0].type == TokenType.BLOCK_COMMENT
        assert _values(tokens) == ["{{!-- a }} b --}}", "x"]

    def test_unterminated_block_comment_is_text(self):
        tokens = self.lexer.tokenize("{{!-- a }}")
        assert _values(tokens) == ["{{!-- a }}"]
        assert tokens[0].type == TokenType.TEXT


class TestEscaping:

    def setup_method(self):
        self.lexer = TemplateLexer()

    def test_escaped_start_delimiter(self):
        """Экранированный разделитель остаётся текстом вместе с символом экранирования"""
        tokens = self.lexer.tokenize("a \\{{b}} c")
        assert _values(tokens) == ["a \\{{b}} c"]

    def test_escaped_then_real_tag(self):
        tokens = self.lexer.tokenize("\\{{a}} {{b}}")
        assert _values(tokens) == ["\\{{a}} ", "{{b}}"]
        assert tokens[1].position == 7

    def test_several_escapes_in_a_row(self):
        tokens = self.lexer.tokenize("\\{{a}}\\{{b}}{{c}}")
        assert _values(tokens) == ["\\{{a}}\\{{b}}", "{{c}}"]
        assert tokens[1].position == 12

    def test_escaped_end_delimiter(self):
        """Экранированный конец тега пропускается"""
        tokens = self.lexer.tokenize("{{a\\}}b}}")
        assert _values(tokens) == ["{{a\\}}b}}"]
        assert tokens[0].type == TokenType.TAG

    def test_escape_disabled(self):
        lexer = TemplateLexer(KarachoOptions(escape=""))
        tokens = lexer.tokenize("\\{{a}}")
        assert _values(tokens) == ["\\", "{{a}}"]


class TestPositions:

    def test_line_and_column(self):
        tokens = tokenize_template("line1\n  {{x}}")
        tag = tokens[1]

        assert tag.line == 2
        assert tag.column == 3

    def test_line_column_helper(self):
        assert line_column("abc", 0) == (1, 1)
        assert line_column("a\nbc", 3) == (2, 2)

    def test_custom_delimiters(self):
        tokens = tokenize_template("a <%x%> b", KarachoOptions(delimiters=("<%", "%>")))
        assert _values(tokens) == ["a ", "<%x%>", " b"]
