from htmlcode.cells import (
    Cell,
    Layout,
    detect_layout,
    has_unquoted_delimiter,
    parse_cells,
    parse_line,
    split_whitespace_run,
)
from htmlcode.shapes import get_shape


def test_plain_and_quoted_fields():
    assert parse_line("a,b,c") == ["a", "b", "c"]
    assert parse_line('"x, y",z') == ["x, y", "z"]


def test_escaped_quotes_are_unescaped():
    assert parse_line('"Normal ""quoted"" text",x') == ['Normal "quoted" text', "x"]


def test_triple_quotes_preserve_the_literal():
    assert parse_cells('"""Exact Literal""",x') == [
        Cell('"Exact Literal"', True),
        Cell("x", False),
    ]


def test_end_of_line_emits_last_field():
    assert parse_line("a,") == ["a", ""]
    assert parse_line(",") == ["", ""]
    assert parse_line("") == []


def test_values_are_not_trimmed():
    assert parse_line(" a , b") == [" a ", " b"]


def test_unterminated_quote_keeps_remainder():
    assert parse_line('"abc,def') == ["abc,def"]


def test_custom_delimiter():
    assert parse_line("a;b", ";") == ["a", "b"]


def test_unquoted_delimiter_detection():
    assert not has_unquoted_delimiter('"a,b"')
    assert has_unquoted_delimiter('"a",b')


def test_whitespace_run_split_drops_outer_quotes():
    assert split_whitespace_run('"Name   Link"', 3) == ["Name", "Link"]


def test_detect_layout():
    page20000 = get_shape("page20000")
    adpage = get_shape("adpage")

    assert detect_layout("a,b,c", page20000) is Layout.CSV
    assert detect_layout("Details    Link    Address", page20000) is Layout.WHITESPACE
    assert detect_layout("Details  Link", page20000) is Layout.CSV
    assert detect_layout("Name   Link", adpage) is Layout.CSV
    assert detect_layout('"Name' + " " * 12 + 'Link"', adpage) is Layout.WHITESPACE
    assert detect_layout("ACME LTD", get_shape("aformat")) is Layout.LINES
    assert detect_layout("a    b", get_shape("page40000")) is Layout.CSV
    assert detect_layout(None, page20000) is Layout.CSV


def test_quadruple_quote_is_an_escaped_quote():
    assert parse_cells('""""x,y') == [Cell('"x', False), Cell("y", False)]
    assert parse_line('""""') == ['"']


def test_bare_triple_quote_keeps_the_delimiter():
    assert parse_cells('""",x') == [Cell('"', False), Cell("x", False)]


def test_shape_labels_and_roles_line_up():
    adpage = get_shape("adpage")

    assert adpage.labels == ("Company Name", "Company Address", "Link")
    assert [role.value for role in adpage.roles] == ["combined", "combined", "link-or-code"]
