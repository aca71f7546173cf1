"""Get folding ranges of a single Ruby file."""

from typing import Optional

import structlog

from ..parser import build_folding_ranges
from .get_document_symbols import parse_document, read_source

logger = structlog.get_logger()


def get_folding_ranges(
    file_path: Optional[str] = None,
    content: Optional[str] = None,
) -> dict:
    """Get the collapsible line ranges of a Ruby document.

    Args:
        file_path: Path to a Ruby file on disk
        content: Inline Ruby source (takes precedence over file_path)

    Returns:
        Dict with 0-indexed folding ranges
    """
    source, error = read_source(file_path, content)
    if error:
        logger.info("folding_ranges_rejected", error=error)
        return {"error": error}

    label = file_path or "<content>"
    tree = parse_document(source, label)
    ranges = build_folding_ranges(tree)

    logger.debug("folding_ranges", file=label, count=len(ranges))

    return {
        "file": label,
        "ranges": [r.to_dict() for r in ranges],
    }
