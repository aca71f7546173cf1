"""Symbol, folding range and location dataclasses."""

from dataclasses import dataclass, field
from typing import Optional


# Numeric symbol kinds expected by editor clients. Never renumber.
SYMBOL_KIND = {
    "file": 1,
    "module": 2,
    "namespace": 3,
    "package": 4,
    "class": 5,
    "method": 6,
    "property": 7,
    "field": 8,
    "constructor": 9,
    "enum": 10,
    "interface": 11,
    "function": 12,
    "variable": 13,
    "constant": 14,
    "string": 15,
    "number": 16,
    "boolean": 17,
    "array": 18,
    "object": 19,
    "key": 20,
    "null": 21,
    "enummember": 22,
    "struct": 23,
    "event": 24,
    "operator": 25,
    "typeparameter": 26,
}


@dataclass(frozen=True)
class Location:
    """Source span of a node. Lines are 1-indexed, columns 0-indexed."""
    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(frozen=True)
class LineRange:
    """Output span. Lines and columns are both 0-indexed."""
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def contains(self, other: "LineRange") -> bool:
        """Check whether `other` lies entirely inside this range."""
        return (
            (self.start_line, self.start_column) <= (other.start_line, other.start_column)
            and (other.end_line, other.end_column) <= (self.end_line, self.end_column)
        )

    def to_dict(self) -> dict:
        return {
            "startLine": self.start_line,
            "startColumn": self.start_column,
            "endLine": self.end_line,
            "endColumn": self.end_column,
        }


@dataclass
class DocumentSymbol:
    """A named symbol in the outline of a Ruby file."""
    name: str                       # Symbol name (e.g., "Foo::Bar", "self.call", "@x")
    kind: int                       # Value from SYMBOL_KIND
    range: LineRange                # Whole construct
    selection_range: LineRange      # Name token only
    children: list["DocumentSymbol"] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind,
            "range": self.range.to_dict(),
            "selectionRange": self.selection_range.to_dict(),
            "children": [c.to_dict() for c in self.children],
        }


class SymbolHierarchyRoot:
    """Virtual container holding top-level symbols. Never emitted itself."""

    def __init__(self):
        self.children: list[DocumentSymbol] = []


@dataclass(frozen=True)
class FoldingRange:
    """A collapsible line span. Lines are 0-indexed."""
    start_line: int
    end_line: int
    kind: str = "region"            # "region" | "imports"

    def to_dict(self) -> dict:
        return {
            "startLine": self.start_line,
            "endLine": self.end_line,
            "kind": self.kind,
        }


def location_of(node) -> Optional[Location]:
    """Build a 1-indexed Location from a tree-sitter node.

    Returns None for absent nodes and for nodes the parser inserted
    during error recovery.
    """
    if node is None or node.is_missing:
        return None
    start_row, start_col = node.start_point
    end_row, end_col = node.end_point
    return Location(start_row + 1, start_col, end_row + 1, end_col)


def range_from_location(location: Location) -> LineRange:
    """Convert a 1-indexed Location into a 0-indexed LineRange."""
    return LineRange(
        start_line=location.start_line - 1,
        start_column=location.start_column,
        end_line=location.end_line - 1,
        end_column=location.end_column,
    )


def range_from_node(node) -> Optional[LineRange]:
    location = location_of(node)
    if location is None:
        return None
    return range_from_location(location)


def node_text(node) -> str:
    """Decode the source text covered by a node."""
    return node.text.decode("utf-8")
