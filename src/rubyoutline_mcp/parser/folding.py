"""Folding range collection over a Ruby syntax tree.

Each node kind is anchored one of a few ways:

- whole-node: from the node's first line to the line before its closing
  keyword, so the `end` stays visible when folded
- statement-anchored: from the node's first line to the end of its last
  body statement (if/elsif/when/in/rescue)
- method definitions: from the end of a multi-line parameter list, or the
  header line otherwise
- call chains: one range from the innermost receiver to the outer call

Runs of single-line `require` calls are merged into one "imports" range by
a PartialRange accumulator before any of the above applies.
"""

from typing import Optional

from .languages import LanguageSpec, RUBY_SPEC
from .symbols import FoldingRange, location_of, node_text


class PartialRange:
    """Line span being grown over consecutive nodes of the same kind.

    Lines are stored 0-indexed, ready for output.
    """

    def __init__(self, start_line: int, end_line: int, kind: str):
        self.start_line = start_line
        self.end_line = end_line
        self.kind = kind

    @classmethod
    def from_node(cls, node, kind: str) -> "PartialRange":
        location = location_of(node)
        return cls(location.start_line - 1, location.end_line - 1, kind)

    def extend_to(self, node) -> "PartialRange":
        self.end_line = location_of(node).end_line - 1
        return self

    def new_section(self, node) -> bool:
        # Only comments can start a new section and comments are never
        # classified, so a run is split by a change of kind alone.
        return False

    def multiline(self) -> bool:
        return self.end_line > self.start_line

    def to_range(self) -> FoldingRange:
        return FoldingRange(self.start_line, self.end_line, self.kind)


class FoldingRanges:
    """Collect the folding ranges of one parse tree.

    Instances hold per-document state; build a new one for every tree.
    """

    def __init__(self, tree, spec: LanguageSpec = RUBY_SPEC):
        self.tree = tree
        self.spec = spec
        self._ranges: list[FoldingRange] = []
        self._partial_range: Optional[PartialRange] = None

    def run(self) -> list[FoldingRange]:
        self.visit(self.tree.root_node)
        self._emit_partial_range()
        return self._ranges

    def visit(self, node) -> None:
        """Walk `node` and everything below it in document order.

        The walk keeps its own stack of pending work so nesting depth is not
        bounded by the interpreter's recursion limit. A pending item is a
        node to dispatch (None included, which still flushes the import
        accumulator) or a FoldingRange to record once the items queued
        before it have been walked.
        """
        pending = [node]
        while pending:
            item = pending.pop()
            if isinstance(item, FoldingRange):
                self._ranges.append(item)
                continue
            pending.extend(reversed(self._dispatch(item)))

    def _dispatch(self, node) -> list:
        """Record the ranges anchored on `node`; return what to walk next."""
        if node is not None and node.type in self.spec.comment_types:
            return []
        if not self._handle_partial_range(node):
            return []
        if node is None:
            return []

        node_type = node.type
        if node_type in self.spec.whole_node_foldables:
            closing_line = _closing_line(node, self.spec.comment_types)
            self._add_lines_range(_start_line(node), closing_line - 1)
        elif node_type in self.spec.statement_foldables:
            self._add_statements_range(node)
        elif node_type == "call":
            if node.child_by_field_name("receiver") is not None:
                # Possibly a chained invocation: fold it once, as a whole.
                return self._call_chain_items(node)
            self._add_lines_range(_start_line(node), _end_line(node) - 1)
        elif node_type in self.spec.def_node_types:
            self._add_def_range(node)
            return [_def_body(node)]
        elif node_type == self.spec.string_concat_type:
            self._add_string_concat(node)
            return []

        return list(node.named_children)

    def _handle_partial_range(self, node) -> bool:
        """Feed a node to the merge accumulator.

        Returns True when the node is not mergeable and should go through
        normal dispatch, False when the accumulator consumed it.
        """
        kind = self._partial_range_kind(node)

        if kind is None:
            self._emit_partial_range()
            return True

        if self._partial_range is None:
            self._partial_range = PartialRange.from_node(node, kind)
        elif self._partial_range.kind != kind or self._partial_range.new_section(node):
            self._emit_partial_range()
            self._partial_range = PartialRange.from_node(node, kind)
        else:
            self._partial_range.extend_to(node)

        return False

    def _partial_range_kind(self, node) -> Optional[str]:
        if node is None or node.type != "call" or location_of(node) is None:
            return None
        if node.child_by_field_name("receiver") is not None:
            return None

        method = node.child_by_field_name("method")
        if method is None:
            return None
        return self.spec.partial_range_calls.get(node_text(method))

    def _emit_partial_range(self) -> None:
        if self._partial_range is None:
            return

        if self._partial_range.multiline():
            self._ranges.append(self._partial_range.to_range())
        self._partial_range = None

    def _call_chain_items(self, node) -> list:
        """Work items for a call with a receiver.

        Every link's arguments and block come first, then the range spanning
        the chain from its innermost receiver, then the outer call's own
        arguments and block.
        """
        items = []
        receiver = node.child_by_field_name("receiver")

        while receiver is not None and receiver.type == "call":
            items.append(receiver.child_by_field_name("arguments"))
            items.append(receiver.child_by_field_name("block"))
            receiver = receiver.child_by_field_name("receiver")

        if receiver is not None:
            chain_range = _lines_range(_start_line(receiver), _end_line(node) - 1)
            if chain_range is not None:
                items.append(chain_range)

        items.append(node.child_by_field_name("arguments"))
        items.append(node.child_by_field_name("block"))
        return items

    def _add_def_range(self, node) -> None:
        params = node.child_by_field_name("parameters")

        if params is not None and _start_line(params) < _end_line(params):
            self._add_lines_range(_end_line(params), _end_line(node) - 1)
        else:
            self._add_lines_range(_start_line(node), _end_line(node) - 1)

    def _add_statements_range(self, node) -> None:
        body = _child_of_type(node, self.spec.statement_body_type)
        if body is None:
            return

        statements = [
            child for child in body.named_children
            if child.type not in self.spec.comment_types
        ]
        if not statements:
            return

        self._add_lines_range(_start_line(node), _end_line(statements[-1]))

    def _add_string_concat(self, node) -> None:
        parts = node.named_children
        if not parts:
            return

        left = parts[0]
        while left.type == self.spec.string_concat_type and left.named_children:
            left = left.named_children[0]
        right = parts[-1]

        self._add_lines_range(_start_line(left), _end_line(right) - 1)

    def _add_lines_range(self, start_line: int, end_line: int) -> None:
        folding_range = _lines_range(start_line, end_line)
        if folding_range is not None:
            self._ranges.append(folding_range)


def _lines_range(start_line: int, end_line: int) -> Optional[FoldingRange]:
    """Range over 1-indexed lines; single-line spans give None."""
    if start_line >= end_line:
        return None
    return FoldingRange(start_line - 1, end_line - 1, "region")


def _def_body(node):
    body = node.child_by_field_name("body")
    if body is None:
        body = _child_of_type(node, "body_statement")
    return body


def _start_line(node) -> int:
    return node.start_point[0] + 1


def _end_line(node) -> int:
    return node.end_point[0] + 1


def _child_of_type(node, node_type: str):
    for child in node.named_children:
        if child.type == node_type:
            return child
    return None


def _closing_line(node, comment_types: frozenset[str]) -> int:
    """Line of the keyword closing a whole-node foldable (1-indexed).

    Most foldables contain their own `end`. An `else` clause stops at its
    last statement, so the closing keyword is whatever token follows it:
    the enclosing construct's `end`, or an `ensure` clause.
    """
    if node.type != "else":
        return _end_line(node)

    current = node
    while current is not None:
        sibling = current.next_sibling
        while sibling is not None and sibling.type in comment_types:
            sibling = sibling.next_sibling
        if sibling is not None:
            return _start_line(sibling)
        current = current.parent
    return _end_line(node)
