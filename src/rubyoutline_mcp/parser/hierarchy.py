"""Build the document symbol hierarchy for file outlines."""

from typing import Optional, Union

from .emitter import EventEmitter
from .languages import LanguageSpec
from .symbols import (
    SYMBOL_KIND,
    DocumentSymbol,
    SymbolHierarchyRoot,
    node_text,
    range_from_node,
)


class DocumentSymbolBuilder:
    """Listener turning definitions into a tree of DocumentSymbols.

    Classes, modules and methods open a scope: their symbol is pushed on a
    stack when entered and popped on exit. Constants, instance and class
    variables and attribute accessors are attached to whatever scope is
    open at the time.
    """

    def __init__(self, emitter: EventEmitter):
        self.spec: LanguageSpec = emitter.spec
        self._root = SymbolHierarchyRoot()
        self._stack: list[Union[SymbolHierarchyRoot, DocumentSymbol]] = [self._root]

        emitter.register(
            self,
            "on_class",
            "after_class",
            "on_module",
            "after_module",
            "on_method",
            "after_method",
            "on_singleton_method",
            "after_singleton_method",
            "on_assignment",
            "on_call",
        )

    @property
    def response(self) -> list[DocumentSymbol]:
        """Top-level symbols of the document."""
        return self._root.children

    @property
    def depth(self) -> int:
        """Number of open scopes above the root."""
        return len(self._stack) - 1

    def on_class(self, node) -> None:
        self._open_scope(node, kind="class")

    def after_class(self, node) -> None:
        self._close_scope()

    def on_module(self, node) -> None:
        self._open_scope(node, kind="module")

    def after_module(self, node) -> None:
        self._close_scope()

    def on_method(self, node) -> None:
        name_node = node.child_by_field_name(self.spec.name_fields[node.type])
        if name_node is None:
            self._push(None)
            return

        name = node_text(name_node)
        kind = "constructor" if name == "initialize" else "method"
        self._push(self._create_document_symbol(name, kind, node, name_node))

    def after_method(self, node) -> None:
        self._close_scope()

    def on_singleton_method(self, node) -> None:
        name_node = node.child_by_field_name(self.spec.name_fields[node.type])
        if name_node is None:
            self._push(None)
            return

        name = node_text(name_node)
        receiver = node.child_by_field_name("object")
        if receiver is not None and receiver.type == "self":
            name = f"self.{name}"
            kind = "method"
        else:
            kind = "constructor" if name == "initialize" else "method"
        self._push(self._create_document_symbol(name, kind, node, name_node))

    def after_singleton_method(self, node) -> None:
        self._close_scope()

    def on_assignment(self, node) -> None:
        target = node.child_by_field_name("left")
        if target is None or target.type not in self.spec.assignment_targets:
            return

        self._create_document_symbol(
            name=node_text(target),
            kind=self.spec.assignment_targets[target.type],
            range_node=node,
            selection_node=target,
        )

    def on_call(self, node) -> None:
        if node.child_by_field_name("receiver") is not None:
            return
        method = node.child_by_field_name("method")
        if method is None or node_text(method) not in self.spec.accessor_calls:
            return

        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return

        for argument in arguments.named_children:
            if argument.type not in self.spec.symbol_literal_types:
                continue
            self._create_document_symbol(
                name=symbol_value(argument),
                kind="field",
                range_node=argument,
                selection_node=argument,
            )

    def _open_scope(self, node, kind: str) -> None:
        name_node = node.child_by_field_name(self.spec.name_fields[node.type])
        symbol = None
        if name_node is not None:
            symbol = self._create_document_symbol(node_text(name_node), kind, node, name_node)

        self._push(symbol)

    def _push(self, symbol: Optional[DocumentSymbol]) -> None:
        # Unnamed scopes repeat the enclosing one so enter/exit stay balanced.
        self._stack.append(symbol if symbol is not None else self._stack[-1])

    def _close_scope(self) -> None:
        if len(self._stack) > 1:
            self._stack.pop()

    def _create_document_symbol(
        self, name: str, kind: str, range_node, selection_node
    ) -> Optional[DocumentSymbol]:
        """Create a symbol and append it to the innermost open scope.

        Returns None, appending nothing, when either node has no usable
        source location.
        """
        symbol_range = range_from_node(range_node)
        selection_range = range_from_node(selection_node)
        if symbol_range is None or selection_range is None:
            return None

        symbol = DocumentSymbol(
            name=name,
            kind=SYMBOL_KIND[kind],
            range=symbol_range,
            selection_range=selection_range,
        )
        self._stack[-1].children.append(symbol)
        return symbol


def symbol_value(node) -> str:
    """Return the value of a symbol literal (`:name` or `:"name"`)."""
    text = node_text(node)
    if text.startswith(":"):
        text = text[1:]
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("\"", "'"):
        text = text[1:-1]
    return text


def flatten_symbols(
    symbols: list[DocumentSymbol], depth: int = 0
) -> list[tuple[DocumentSymbol, int]]:
    """Flatten symbol tree with depth information.

    Returns list of (symbol, depth) tuples for indentation.
    """
    result = []
    for symbol in symbols:
        result.append((symbol, depth))
        result.extend(flatten_symbols(symbol.children, depth + 1))
    return result
