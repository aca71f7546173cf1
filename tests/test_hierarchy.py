"""Tests for the document symbol builder."""

from dataclasses import replace

import pytest
from rubyoutline_mcp.parser import (
    SYMBOL_KIND,
    DocumentSymbolBuilder,
    EventEmitter,
    build_document_symbols,
    flatten_symbols,
    parse_source,
)
from rubyoutline_mcp.parser.languages import RUBY_SPEC


RUBY_SOURCE = '''module Outer
  class Inner < Base
    attr_reader :name
    VERSION = "1"

    def initialize
      @name = "x"
    end

    def self.build
    end
  end
end
'''


def _symbols(source):
    return build_document_symbols(parse_source(source))


def _line_span(symbol):
    return (symbol.range.start_line, symbol.range.end_line)


def test_class_containing_method():
    """Test the basic class/method nesting and ranges."""
    symbols = _symbols("class Foo\n  def bar\n  end\nend\n")

    assert len(symbols) == 1
    foo = symbols[0]
    assert foo.name == "Foo"
    assert foo.kind == SYMBOL_KIND["class"]
    assert _line_span(foo) == (0, 3)

    assert len(foo.children) == 1
    bar = foo.children[0]
    assert bar.name == "bar"
    assert bar.kind == SYMBOL_KIND["method"]
    assert _line_span(bar) == (1, 2)
    assert bar.children == []


def test_initialize_is_a_constructor():
    """Test that `initialize` gets the constructor kind."""
    symbols = _symbols("class Foo\n  def initialize\n  end\nend\n")

    assert symbols[0].children[0].name == "initialize"
    assert symbols[0].children[0].kind == SYMBOL_KIND["constructor"]


def test_selection_range_is_the_name():
    """Test that the selection range covers only the name token."""
    foo = _symbols("class Foo\nend\n")[0]

    assert foo.selection_range.start_line == 0
    assert foo.selection_range.start_column == 6
    assert foo.selection_range.end_column == 9


def test_attr_accessor_emits_fields():
    """Test one field per symbol argument of an accessor call."""
    symbols = _symbols("attr_accessor :x, :y\n")

    assert [s.name for s in symbols] == ["x", "y"]
    assert all(s.kind == SYMBOL_KIND["field"] for s in symbols)

    x, y = symbols
    assert (x.range.start_column, x.range.end_column) == (14, 16)
    assert (y.range.start_column, y.range.end_column) == (18, 20)
    assert x.range == x.selection_range
    assert y.range == y.selection_range


def test_accessor_ignores_non_symbol_arguments():
    """Test that only symbol literals become fields."""
    symbols = _symbols('attr_reader :a, "b", c\n')

    assert [s.name for s in symbols] == ["a"]


def test_accessor_with_quoted_symbol():
    """Test that quoted symbols are unquoted."""
    symbols = _symbols('attr_writer :"odd name"\n')

    assert [s.name for s in symbols] == ["odd name"]


def test_accessor_with_receiver_is_ignored():
    """Test that only zero-receiver accessor calls declare fields."""
    assert _symbols("klass.attr_reader :a\n") == []


def test_constant_and_variable_writes():
    """Test leaf symbols from assignments."""
    source = "FOO = 1\nFoo::BAR = 2\n@x = 3\n@@y = 4\nlocal = 5\n"
    symbols = _symbols(source)

    assert [(s.name, s.kind) for s in symbols] == [
        ("FOO", SYMBOL_KIND["constant"]),
        ("Foo::BAR", SYMBOL_KIND["constant"]),
        ("@x", SYMBOL_KIND["variable"]),
        ("@@y", SYMBOL_KIND["variable"]),
    ]
    assert all(s.children == [] for s in symbols)


def test_module_uses_full_constant_path():
    """Test that namespaced modules keep their whole path."""
    symbols = _symbols("module A::B\nend\n")

    assert symbols[0].name == "A::B"
    assert symbols[0].kind == SYMBOL_KIND["module"]


def test_nested_outline():
    """Test a realistic nested outline."""
    symbols = _symbols(RUBY_SOURCE)

    assert len(symbols) == 1
    outer = symbols[0]
    assert (outer.name, outer.kind) == ("Outer", SYMBOL_KIND["module"])
    assert _line_span(outer) == (0, 12)

    inner = outer.children[0]
    assert (inner.name, inner.kind) == ("Inner", SYMBOL_KIND["class"])
    assert _line_span(inner) == (1, 11)

    assert [(c.name, c.kind) for c in inner.children] == [
        ("name", SYMBOL_KIND["field"]),
        ("VERSION", SYMBOL_KIND["constant"]),
        ("initialize", SYMBOL_KIND["constructor"]),
        ("self.build", SYMBOL_KIND["method"]),
    ]

    constructor = inner.children[2]
    assert [(c.name, c.kind) for c in constructor.children] == [
        ("@name", SYMBOL_KIND["variable"]),
    ]


def test_selection_ranges_are_contained():
    """Test that every selection range lies inside its range."""
    for symbol, _depth in flatten_symbols(_symbols(RUBY_SOURCE)):
        assert symbol.range.contains(symbol.selection_range), symbol.name


def test_stack_returns_to_root():
    """Test that a balanced traversal leaves no scope open."""
    emitter = EventEmitter()
    builder = DocumentSymbolBuilder(emitter)

    emitter.emit_for_target(parse_source(RUBY_SOURCE))

    assert builder.depth == 0


def test_exit_without_enter_is_a_noop():
    """Test that stack underflow never raises."""
    builder = DocumentSymbolBuilder(EventEmitter())

    builder.after_class(None)
    builder.after_module(None)
    builder.after_method(None)
    builder.after_singleton_method(None)

    assert builder.depth == 0
    assert builder.response == []


def test_siblings_after_nested_scope():
    """Test that symbols after a closed scope attach to the outer one."""
    source = "class A\n  def x\n  end\n  Y = 1\nend\nZ = 2\n"
    symbols = _symbols(source)

    assert [s.name for s in symbols] == ["A", "Z"]
    assert [c.name for c in symbols[0].children] == ["x", "Y"]


def test_flatten_symbols_depths():
    """Test depth annotation of the flattened outline."""
    flat = [(s.name, depth) for s, depth in flatten_symbols(_symbols(RUBY_SOURCE))]

    assert flat == [
        ("Outer", 0),
        ("Inner", 1),
        ("name", 2),
        ("VERSION", 2),
        ("initialize", 2),
        ("@name", 3),
        ("self.build", 2),
    ]


def test_to_dict_shape():
    """Test the JSON shape of a symbol."""
    data = _symbols("class Foo\n  def bar\n  end\nend\n")[0].to_dict()

    assert data["name"] == "Foo"
    assert data["kind"] == 5
    assert data["range"] == {"startLine": 0, "startColumn": 0, "endLine": 3, "endColumn": 3}
    assert data["selectionRange"] == {"startLine": 0, "startColumn": 6, "endLine": 0, "endColumn": 9}
    assert data["children"][0]["name"] == "bar"
    assert data["children"][0]["children"] == []


@pytest.mark.parametrize("name, value", [
    ("file", 1),
    ("module", 2),
    ("class", 5),
    ("method", 6),
    ("field", 8),
    ("constructor", 9),
    ("variable", 13),
    ("constant", 14),
    ("typeparameter", 26),
])
def test_symbol_kind_values(name, value):
    """Test that kind numbers match what editors expect."""
    assert SYMBOL_KIND[name] == value


def test_symbol_kind_table_is_complete():
    """Test that the kind table covers 1..26 exactly once."""
    assert sorted(SYMBOL_KIND.values()) == list(range(1, 27))


class StubNode:
    """Minimal stand-in for a tree-sitter node."""

    def __init__(self, node_type, text="", fields=None, start=(0, 0), end=(0, 0), is_missing=False):
        self.type = node_type
        self.text = text.encode("utf-8")
        self.fields = fields or {}
        self.start_point = start
        self.end_point = end
        self.is_missing = is_missing

    def child_by_field_name(self, name):
        return self.fields.get(name)


def _constant_write(name, line):
    target = StubNode("constant", name, start=(line, 2), end=(line, 2 + len(name)))
    return StubNode("assignment", fields={"left": target}, start=(line, 2), end=(line, 10))


def test_unnamed_scope_repeats_enclosing_scope():
    """Test that a container with no name keeps enter/exit balanced."""
    builder = DocumentSymbolBuilder(EventEmitter())
    name = StubNode("constant", "Foo", start=(0, 6), end=(0, 9))

    builder.on_class(StubNode("class", fields={"name": name}, end=(5, 3)))
    builder.on_method(StubNode("method", start=(1, 2), end=(3, 5)))
    assert builder.depth == 2

    builder.on_assignment(_constant_write("X", 2))
    builder.after_method(None)
    builder.on_assignment(_constant_write("Y", 4))
    builder.after_class(None)

    assert builder.depth == 0
    assert [s.name for s in builder.response] == ["Foo"]
    assert [c.name for c in builder.response[0].children] == ["X", "Y"]


def test_unnamed_singleton_method_and_module():
    """Test the unnamed path of every scope kind."""
    builder = DocumentSymbolBuilder(EventEmitter())

    builder.on_module(StubNode("module", end=(4, 3)))
    builder.on_singleton_method(StubNode("singleton_method", start=(1, 2), end=(2, 5)))
    builder.on_assignment(_constant_write("Z", 1))
    builder.after_singleton_method(None)
    builder.after_module(None)

    assert builder.depth == 0
    assert [s.name for s in builder.response] == ["Z"]


def test_symbols_without_location_are_skipped():
    """Test that nodes inserted by error recovery produce no symbol."""
    builder = DocumentSymbolBuilder(EventEmitter())
    missing = StubNode("constant", is_missing=True)

    builder.on_class(StubNode("class", fields={"name": missing}, end=(3, 3)))
    assert builder.depth == 1
    builder.on_assignment(_constant_write("X", 1))
    builder.after_class(None)
    builder.on_assignment(StubNode("assignment", fields={"left": missing}, end=(4, 5)))

    assert builder.depth == 0
    assert [s.name for s in builder.response] == ["X"]


@pytest.mark.parametrize("source", [
    "class Foo\n  def (\nend\n",
    "def\n  @x = 1\nend\nY = 2\n",
    "module\n  class\nend\n",
])
def test_broken_input_leaves_no_scope_open(source):
    """Test that error-recovered trees still close every scope."""
    emitter = EventEmitter()
    builder = DocumentSymbolBuilder(emitter)

    emitter.emit_for_target(parse_source(source))

    assert builder.depth == 0


def test_method_name_field_comes_from_language_table():
    """Test that method names are read through the language's name fields."""
    spec = replace(RUBY_SPEC, name_fields={**RUBY_SPEC.name_fields, "method": "label"})
    builder = DocumentSymbolBuilder(EventEmitter(spec))
    label = StubNode("identifier", "run", start=(0, 4), end=(0, 7))

    builder.on_method(StubNode("method", fields={"label": label}, end=(1, 3)))

    assert [s.name for s in builder.response] == ["run"]
