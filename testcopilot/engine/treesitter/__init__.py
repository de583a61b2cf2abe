"""Tree-sitter integration for JavaScript/TypeScript test files.

Install with: pip install tree-sitter-language-pack
"""

from __future__ import annotations

import logging
from pathlib import PurePath

logger = logging.getLogger(__name__)

_AVAILABLE = False
try:
    import tree_sitter_language_pack  # noqa: F401

    _AVAILABLE = True
except ImportError:
    logger.debug("tree-sitter-language-pack not installed; parsing disabled")


def is_available() -> bool:
    """Return True if tree-sitter-language-pack is installed."""
    return _AVAILABLE


# Common exception tuple for tree-sitter parser/query initialisation failures.
PARSE_INIT_ERRORS: tuple[type[Exception], ...] = (
    ImportError, OSError, ValueError, RuntimeError, LookupError
)

_GRAMMAR_BY_SUFFIX = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}
DEFAULT_GRAMMAR = "javascript"


def grammar_for_path(path: str) -> str:
    """Pick the grammar for a file; the JavaScript grammar also covers JSX."""
    return _GRAMMAR_BY_SUFFIX.get(PurePath(path).suffix.lower(), DEFAULT_GRAMMAR)


from testcopilot.engine.treesitter._parse import (  # noqa: E402
    ParsedTree,
    ParseError,
    ParserUnavailable,
    parse_source,
)

__all__ = [
    "DEFAULT_GRAMMAR",
    "PARSE_INIT_ERRORS",
    "ParseError",
    "ParsedTree",
    "ParserUnavailable",
    "grammar_for_path",
    "is_available",
    "parse_source",
]
