"""Ruby grammar tables driving the outline and folding listeners."""

from dataclasses import dataclass


@dataclass
class LanguageSpec:
    """Node-type tables for one tree-sitter grammar."""
    # tree-sitter language name (for tree-sitter-language-pack)
    ts_language: str

    # Container node types that open a nested scope
    # Maps node_type -> symbol kind
    container_node_types: dict[str, str]

    # How to extract the symbol name from a container node
    # Maps node_type -> child field name containing the name
    name_fields: dict[str, str]

    # Assignment targets that produce leaf symbols
    # Maps left-hand node_type -> symbol kind
    assignment_targets: dict[str, str]

    # Zero-receiver calls declaring fields, one per symbol argument
    accessor_calls: frozenset[str]

    # Symbol literal node types accepted as accessor arguments
    symbol_literal_types: frozenset[str]

    # Folded from the node's first line to the line before its closing keyword
    whole_node_foldables: frozenset[str]

    # Folded from the node's first line to the end of its last body statement
    statement_foldables: frozenset[str]

    # Child node type holding the statements of a statement foldable
    statement_body_type: str

    # Method definitions (folded after a multi-line parameter list)
    def_node_types: frozenset[str]

    # Merge-kind classification: zero-receiver call name -> range kind
    partial_range_calls: dict[str, str]

    # Adjacent string literal concatenation
    string_concat_type: str

    # Node types never visited by either walk
    comment_types: frozenset[str]


# File extension to language mapping
LANGUAGE_EXTENSIONS = {
    ".rb": "ruby",
    ".rake": "ruby",
    ".ru": "ruby",
    ".gemspec": "ruby",
}

# Extensionless file names that hold Ruby source
RUBY_FILENAMES = {"Gemfile", "Rakefile", "Guardfile", "Capfile"}


RUBY_SPEC = LanguageSpec(
    ts_language="ruby",
    container_node_types={
        "class": "class",
        "module": "module",
        "method": "method",
        "singleton_method": "method",
    },
    name_fields={
        "class": "name",
        "module": "name",
        "method": "name",
        "singleton_method": "name",
    },
    assignment_targets={
        "constant": "constant",
        "scope_resolution": "constant",
        "instance_variable": "variable",
        "class_variable": "variable",
    },
    accessor_calls=frozenset({"attr_reader", "attr_writer", "attr_accessor"}),
    symbol_literal_types=frozenset({"simple_symbol", "delimited_symbol"}),
    whole_node_foldables=frozenset({
        "case",
        "case_match",
        "class",
        "for",
        "hash",
        "module",
        "singleton_class",
        "unless",
        "until",
        "while",
        "else",
        "begin",
    }),
    statement_foldables=frozenset({"if", "elsif", "in_clause", "rescue", "when"}),
    statement_body_type="then",
    def_node_types=frozenset({"method", "singleton_method"}),
    partial_range_calls={
        "require": "imports",
        "require_relative": "imports",
    },
    string_concat_type="chained_string",
    comment_types=frozenset({"comment"}),
)


# Language registry
LANGUAGE_REGISTRY = {
    "ruby": RUBY_SPEC,
}
