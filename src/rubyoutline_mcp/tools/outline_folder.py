"""Outline local folder tool - walk, parse, outline every Ruby file."""

from pathlib import Path

import structlog

from ..parser import build_document_symbols, language_for_path
from .get_document_symbols import flat_outline, parse_document, read_source

logger = structlog.get_logger()


# File patterns to skip
SKIP_PATTERNS = [
    "vendor/", ".bundle/", "node_modules/",
    "tmp/", "log/", "coverage/", "pkg/",
    ".git/", ".yardoc/", "doc/",
    "test_data/", "testdata/", "fixtures/", "snapshots/",
    "db/schema.rb",
]


def should_skip_file(path: str) -> bool:
    """Check if file should be skipped based on path patterns."""
    # Normalize path separators for matching
    normalized = path.replace("\\", "/")
    for pattern in SKIP_PATTERNS:
        if pattern in normalized:
            return True
    return False


def discover_local_files(
    folder_path: Path,
    max_files: int = 500,
    max_size: int = 500 * 1024,  # 500KB
) -> list[Path]:
    """Discover Ruby source files in a local folder.

    Args:
        folder_path: Root folder to scan
        max_files: Maximum number of files to outline
        max_size: Maximum file size in bytes

    Returns:
        List of Path objects for source files
    """
    files = []

    for file_path in folder_path.rglob("*"):
        if not file_path.is_file():
            continue

        try:
            rel_path = file_path.relative_to(folder_path).as_posix()
        except ValueError:
            continue

        if should_skip_file(rel_path):
            continue

        if language_for_path(file_path.name) is None:
            continue

        try:
            if file_path.stat().st_size > max_size:
                logger.debug("file_too_large", file=rel_path)
                continue
        except OSError:
            continue

        files.append(file_path)

    # File count limit with prioritization
    if len(files) > max_files:
        # Prioritize: app/, lib/ first
        priority_dirs = ["app/", "lib/"]

        def priority_key(file_path: Path) -> tuple:
            rel_path = file_path.relative_to(folder_path).as_posix()
            for i, prefix in enumerate(priority_dirs):
                if rel_path.startswith(prefix):
                    return (i, rel_path.count("/"), rel_path)
            return (len(priority_dirs), rel_path.count("/"), rel_path)

        files.sort(key=priority_key)
        files = files[:max_files]
    else:
        files.sort()

    return files


def outline_folder(path: str, max_files: int = 500) -> dict:
    """Outline every Ruby file in a local folder.

    Each file is parsed and walked on its own, with fresh listeners.

    Args:
        path: Path to local folder (absolute or relative)
        max_files: Maximum number of files to outline

    Returns:
        Dict mapping relative file paths to their flattened outlines
    """
    folder_path = Path(path).expanduser().resolve()

    if not folder_path.exists():
        return {"error": f"Folder not found: {path}"}

    if not folder_path.is_dir():
        return {"error": f"Path is not a directory: {path}"}

    source_files = discover_local_files(folder_path, max_files=max_files)
    if not source_files:
        return {"error": "No Ruby source files found"}

    files = {}
    skipped = []
    symbol_count = 0

    for file_path in source_files:
        rel_path = file_path.relative_to(folder_path).as_posix()
        content, error = read_source(file_path=str(file_path))
        if error:
            logger.warning("file_read_failed", file=rel_path, error=error)
            skipped.append(rel_path)
            continue

        tree = parse_document(content, rel_path)
        entries = flat_outline(build_document_symbols(tree))
        files[rel_path] = entries
        symbol_count += len(entries)

    logger.info(
        "folder_outlined",
        folder=str(folder_path),
        file_count=len(files),
        symbol_count=symbol_count,
    )

    result = {
        "folder": str(folder_path),
        "file_count": len(files),
        "symbol_count": symbol_count,
        "files": files,
    }

    if skipped:
        result["skipped"] = skipped

    if len(source_files) >= max_files:
        result["note"] = f"Folder has many files; outlined first {max_files}"

    return result
