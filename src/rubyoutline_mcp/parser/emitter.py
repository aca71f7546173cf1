"""Event dispatch over a tree-sitter syntax tree."""

from collections import defaultdict
from typing import Callable

from .languages import LanguageSpec, RUBY_SPEC


class EventEmitter:
    """Walk a tree depth-first in document order, firing listener callbacks.

    Listeners register method names of the form ``on_<node type>`` (fired
    before the node's children are walked) and ``after_<node type>`` (fired
    once they have been). Only named, non-comment nodes are visited.
    """

    def __init__(self, spec: LanguageSpec = RUBY_SPEC):
        self.spec = spec
        self._listeners: dict[str, list[Callable]] = defaultdict(list)

    def register(self, listener, *events: str) -> None:
        """Subscribe `listener` to each named event.

        Args:
            listener: Object exposing one method per event name
            events: Event names, e.g. "on_class", "after_class"
        """
        for event in events:
            self._listeners[event].append(getattr(listener, event))

    def emit_for_target(self, tree) -> None:
        """Walk a whole parse tree."""
        self.visit(tree.root_node)

    def visit(self, node) -> None:
        # (node, exiting) frames: an exit frame fires after_* once every
        # child has been walked.
        pending = [(node, False)]
        while pending:
            current, exiting = pending.pop()
            if exiting:
                for callback in self._listeners.get(f"after_{current.type}", ()):
                    callback(current)
                continue

            if current is None or current.type in self.spec.comment_types:
                continue

            for callback in self._listeners.get(f"on_{current.type}", ()):
                callback(current)

            pending.append((current, True))
            pending.extend((child, False) for child in reversed(current.named_children))
