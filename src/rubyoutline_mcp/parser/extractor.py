"""Parse Ruby source with tree-sitter and run the outline/folding listeners."""

from pathlib import PurePath
from typing import Optional

from tree_sitter_language_pack import get_parser

from .emitter import EventEmitter
from .folding import FoldingRanges
from .hierarchy import DocumentSymbolBuilder
from .languages import LANGUAGE_EXTENSIONS, LANGUAGE_REGISTRY, RUBY_FILENAMES, LanguageSpec
from .symbols import DocumentSymbol, FoldingRange


def language_for_path(path: str) -> Optional[str]:
    """Return the language of a file from its name, or None if unsupported."""
    pure = PurePath(path)
    if pure.name in RUBY_FILENAMES:
        return "ruby"
    return LANGUAGE_EXTENSIONS.get(pure.suffix)


def parse_source(content: str, language: str = "ruby"):
    """Parse source code into a tree-sitter Tree.

    Args:
        content: Raw source code
        language: Language name (must be in LANGUAGE_REGISTRY)

    Returns:
        tree_sitter.Tree for the whole document
    """
    spec = LANGUAGE_REGISTRY[language]
    parser = get_parser(spec.ts_language)
    return parser.parse(content.encode("utf-8"))


def build_document_symbols(tree, spec: Optional[LanguageSpec] = None) -> list[DocumentSymbol]:
    """Run a fresh DocumentSymbolBuilder over a parsed tree."""
    emitter = EventEmitter(spec or LANGUAGE_REGISTRY["ruby"])
    builder = DocumentSymbolBuilder(emitter)
    emitter.emit_for_target(tree)
    return builder.response


def build_folding_ranges(tree, spec: Optional[LanguageSpec] = None) -> list[FoldingRange]:
    """Run a fresh FoldingRanges collector over a parsed tree."""
    return FoldingRanges(tree, spec or LANGUAGE_REGISTRY["ruby"]).run()


def document_symbols(content: str) -> list[dict]:
    """Outline of a Ruby document, as JSON-ready dicts."""
    tree = parse_source(content)
    return [s.to_dict() for s in build_document_symbols(tree)]


def folding_ranges(content: str) -> list[dict]:
    """Folding ranges of a Ruby document, as JSON-ready dicts."""
    tree = parse_source(content)
    return [r.to_dict() for r in build_folding_ranges(tree)]
