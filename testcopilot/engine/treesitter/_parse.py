"""Source -> tree parsing with per-grammar parser caching."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache

from testcopilot.engine.treesitter import (
    DEFAULT_GRAMMAR,
    PARSE_INIT_ERRORS,
    grammar_for_path,
)
from testcopilot.models import Location

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """The file could not be turned into a usable syntax tree."""

    def __init__(self, path: str, message: str, line: int | None = None) -> None:
        self.path = path
        self.line = line
        where = f"{path}:{line}" if line is not None else path
        super().__init__(f"{where}: {message}")


class ParserUnavailable(ParseError):
    """No parser could be created for the requested grammar."""


@dataclass(frozen=True)
class ParsedTree:
    """A parsed file: the tree-sitter tree plus the exact bytes it was built from."""

    tree: object
    source: bytes
    grammar: str
    byte_lines: tuple[bytes, ...] = field(default=(), repr=False, compare=False)

    @property
    def root(self):
        return self.tree.root_node

    def char_column(self, row: int, byte_column: int) -> int:
        """Convert a tree-sitter byte column into a character column."""
        if 0 <= row < len(self.byte_lines):
            prefix = self.byte_lines[row][:byte_column]
            return len(prefix.decode("utf-8", errors="replace"))
        return byte_column

    def location(self, start_node, end_node=None) -> Location:
        """Location spanning *start_node* to *end_node* (defaults to start_node)."""
        end_node = end_node if end_node is not None else start_node
        start_row, start_col = start_node.start_point[0], start_node.start_point[1]
        end_row, end_col = end_node.end_point[0], end_node.end_point[1]
        return Location(
            line=start_row + 1,
            column=self.char_column(start_row, start_col),
            end_line=end_row + 1,
            end_column=self.char_column(end_row, end_col),
        )


@lru_cache(maxsize=None)
def _get_parser(grammar: str):
    """Get a tree-sitter parser for the given grammar (cached per process)."""
    from tree_sitter_language_pack import get_parser

    return get_parser(grammar)


def _first_error_line(root) -> int | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if not node.has_error:
            continue
        stack.extend(reversed(node.children))
    return None


# Plain .js files may still carry type annotations.
_FALLBACK_GRAMMAR = {DEFAULT_GRAMMAR: "typescript"}


def _parse_with(grammar: str, source: bytes, path: str):
    try:
        parser = _get_parser(grammar)
    except PARSE_INIT_ERRORS as exc:
        logger.debug("tree-sitter init failed for %s: %s", grammar, exc)
        raise ParserUnavailable(path, f"no {grammar} parser available ({exc})") from exc
    return parser.parse(source)


def parse_source(content: str, path: str = "", *, grammar: str | None = None) -> ParsedTree:
    """Parse *content* as a module. Raises ParseError on malformed input.

    Without an explicit *grammar*, a JavaScript file that does not parse is
    retried with the TypeScript grammar before it counts as malformed.
    """
    explicit = grammar is not None
    grammar = grammar or grammar_for_path(path)
    source = content.encode("utf-8")
    tree = _parse_with(grammar, source, path)
    if tree.root_node.has_error and not explicit and grammar in _FALLBACK_GRAMMAR:
        fallback = _FALLBACK_GRAMMAR[grammar]
        retry = _parse_with(fallback, source, path)
        if not retry.root_node.has_error:
            logger.debug("%s parsed with %s grammar", path, fallback)
            tree, grammar = retry, fallback
    if tree.root_node.has_error:
        line = _first_error_line(tree.root_node)
        raise ParseError(path, f"syntax error in {grammar} source", line)
    return ParsedTree(
        tree=tree,
        source=source,
        grammar=grammar,
        byte_lines=tuple(source.split(b"\n")),
    )


__all__ = ["ParseError", "ParsedTree", "ParserUnavailable", "parse_source"]
