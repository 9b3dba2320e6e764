"""Tests for the scanner (source -> instructions)."""

from etpl.config import EngineConfig
from etpl.scanner import scan
from etpl.ir import Expression, Literal, Statement


def test_literal_only():
    assert scan("Hello, world!") == [Literal("Hello, world!", 0)]


def test_empty_source():
    assert scan("") == []


def test_echo_directive():
    assert scan("Hello, <%= name %>!") == [
        Literal("Hello, ", 0),
        Expression("name", 7),
        Literal("!", 18),
    ]


def test_statement_body_is_trimmed():
    assert scan("<%   for x in xs   %>") == [Statement("for x in xs", 0)]


def test_echo_without_spaces():
    assert scan("<%=a.b%>") == [Expression("a.b", 0)]


def test_empty_directive():
    assert scan("<%%>") == [Statement("", 0)]


def test_first_close_delimiter_ends_directive():
    assert scan("<%= a %> %>") == [Expression("a", 0), Literal(" %>", 8)]


def test_unterminated_open_delimiter_is_literal():
    assert scan("a <% b") == [Literal("a <% b", 0)]


def test_body_cannot_span_lines():
    source = "<% a\nb %>"
    assert scan(source) == [Literal(source, 0)]


def test_whitespace_around_body_may_span_lines():
    assert scan("<%=\n  name\n%>") == [Expression("name", 0)]


def test_quotes_and_line_breaks_stay_in_literals():
    source = 'say "hi"\r\n<%= x %>\n\'done\''
    instructions = scan(source)
    assert instructions[0] == Literal('say "hi"\r\n', 0)
    assert isinstance(instructions[1], Expression)
    assert instructions[2].text == "\n'done'"


def test_custom_delimiters():
    config = EngineConfig(open_delimiter="{{", close_delimiter="}}", echo_marker="$")
    assert scan("a {{$ x }} {{ end }} <%= y %>", config) == [
        Literal("a ", 0),
        Expression("x", 2),
        Literal(" ", 10),
        Statement("end", 11),
        Literal(" <%= y %>", 20),
    ]
