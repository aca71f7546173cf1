"""Get document symbols - the outline of a single Ruby file."""

from pathlib import Path
from typing import Optional

import structlog

from ..parser import build_document_symbols, flatten_symbols, parse_source

logger = structlog.get_logger()


def read_source(
    file_path: Optional[str] = None,
    content: Optional[str] = None,
) -> tuple[Optional[str], Optional[str]]:
    """Resolve the text of a document from a path or inline content.

    Returns:
        (content, error) - exactly one of the two is None
    """
    if content is not None:
        return content, None

    if not file_path:
        return None, "Either file_path or content is required"

    path = Path(file_path).expanduser()
    if not path.is_file():
        return None, f"File not found: {file_path}"

    try:
        return path.read_text(encoding="utf-8"), None
    except UnicodeDecodeError as e:
        return None, f"File is not valid UTF-8: {file_path} ({e.reason})"
    except OSError as e:
        return None, f"Failed to read {file_path}: {e.strerror}"


def flat_outline(symbols) -> list[dict]:
    """Depth-annotated listing of a symbol tree, in document order."""
    return [
        {
            "name": symbol.name,
            "kind": symbol.kind,
            "line": symbol.range.start_line,
            "depth": depth,
        }
        for symbol, depth in flatten_symbols(symbols)
    ]


def parse_document(content: str, label: str):
    """Parse content, logging when the tree contains syntax errors."""
    tree = parse_source(content)
    if tree.root_node.has_error:
        logger.warning("parse_errors", file=label)
    return tree


def get_document_symbols(
    file_path: Optional[str] = None,
    content: Optional[str] = None,
    flat: bool = False,
) -> dict:
    """Get the symbol outline of a Ruby document.

    Args:
        file_path: Path to a Ruby file on disk
        content: Inline Ruby source (takes precedence over file_path)
        flat: Return a depth-annotated list instead of a nested tree

    Returns:
        Dict with symbols outline
    """
    source, error = read_source(file_path, content)
    if error:
        logger.info("document_symbols_rejected", error=error)
        return {"error": error}

    label = file_path or "<content>"
    tree = parse_document(source, label)
    symbols = build_document_symbols(tree)

    if flat:
        symbols_output = flat_outline(symbols)
    else:
        symbols_output = [s.to_dict() for s in symbols]

    logger.debug("document_symbols", file=label, count=len(symbols_output))

    return {
        "file": label,
        "symbols": symbols_output,
    }
