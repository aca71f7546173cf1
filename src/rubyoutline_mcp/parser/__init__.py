"""Parser package for building Ruby outlines and folding ranges."""

from .symbols import (
    SYMBOL_KIND,
    DocumentSymbol,
    FoldingRange,
    LineRange,
    Location,
    SymbolHierarchyRoot,
)
from .languages import LanguageSpec, LANGUAGE_REGISTRY, LANGUAGE_EXTENSIONS, RUBY_SPEC
from .emitter import EventEmitter
from .hierarchy import DocumentSymbolBuilder, flatten_symbols
from .folding import FoldingRanges, PartialRange
from .extractor import (
    build_document_symbols,
    build_folding_ranges,
    document_symbols,
    folding_ranges,
    language_for_path,
    parse_source,
)

__all__ = [
    "SYMBOL_KIND",
    "DocumentSymbol",
    "FoldingRange",
    "LineRange",
    "Location",
    "SymbolHierarchyRoot",
    "LanguageSpec",
    "LANGUAGE_REGISTRY",
    "LANGUAGE_EXTENSIONS",
    "RUBY_SPEC",
    "EventEmitter",
    "DocumentSymbolBuilder",
    "flatten_symbols",
    "FoldingRanges",
    "PartialRange",
    "build_document_symbols",
    "build_folding_ranges",
    "document_symbols",
    "folding_ranges",
    "language_for_path",
    "parse_source",
]
