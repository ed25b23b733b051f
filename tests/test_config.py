import io

import pytest

from femmesh.config import ConfigParser, parse_key_value


def test_parse_key_value_strips():
    assert parse_key_value("  alpha =  beta  ") == ("alpha", "beta")


@pytest.mark.parametrize("line", ["noequals", "a=b=c", "= value", "key =   ", "   =   "])
def test_parse_key_value_rejects(line):
    assert parse_key_value(line) is None


CONFIG = """# comment line
mesh = square.msh
steps = 250
dt = 0.005
broken line
a = b = c
steps = 300
ratio = 12abc
name = hello world
"""


def _parser() -> ConfigParser:
    parser = ConfigParser()
    parser.populate(io.StringIO(CONFIG))
    return parser


def test_string_values():
    parser = _parser()
    assert parser.parse("mesh") == "square.msh"
    assert parser.parse("name", str) == "hello world"


def test_later_key_overrides():
    assert _parser().parse("steps", int) == 300


def test_float_value():
    assert _parser().parse("dt", float) == pytest.approx(0.005)


def test_leading_number_is_used():
    assert _parser().parse("ratio", int) == 12


def test_non_numeric_value_gives_none():
    assert _parser().parse("mesh", int) is None
    assert _parser().parse("name", float) is None


def test_missing_key_gives_none():
    parser = _parser()
    assert parser.parse("missing") is None
    assert "missing" not in parser
    assert "# comment line" not in parser


def test_malformed_lines_ignored():
    parser = _parser()
    assert "a" not in parser
    assert "broken line" not in parser


def test_populate_from_string_and_merge():
    parser = ConfigParser()
    parser.populate("x = 1\n")
    parser.populate(["y = 2\n"])
    assert parser.parse("x", int) == 1
    assert parser.parse("y", int) == 2