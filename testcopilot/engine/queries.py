"""Tree queries shared by checkers: test blocks, assertion sites, action sites."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from testcopilot.engine.treesitter import ParsedTree
from testcopilot.engine.treesitter._nodes import (
    CALL,
    CALLBACK_TYPES,
    EXPRESSION_STATEMENT,
    MEMBER,
    call_arguments,
    call_callee,
    callee_identifier,
    end_line,
    function_body,
    has_block_body,
    identifier_name,
    meaningful_children,
    member_object,
    member_property_name,
    method_name,
    start_line,
    string_value,
    walk,
)
from testcopilot.models import ActionSite, Issue, TestBlock

ROOT_IDENTIFIER = "cy"
TEST_CASE_NAMES = ("it",)

ASSERTION_METHODS = frozenset({"should", "contains", "expect", "and", "assert"})

ACTION_COMMANDS = frozenset({
    "click", "type", "clear", "check", "uncheck", "select", "dblclick",
    "rightclick", "focus", "blur", "submit", "trigger", "scrollIntoView", "scrollTo",
})


def iter_calls(root) -> Iterable:
    return (node for node in walk(root) if node.type == CALL)


def find_test_blocks(root, test_names: Sequence[str] = TEST_CASE_NAMES) -> list[TestBlock]:
    """Line spans of every ``it('name', () => { ... })`` body, in source order."""
    blocks: list[TestBlock] = []
    for call in iter_calls(root):
        if callee_identifier(call) not in test_names:
            continue
        args = call_arguments(call)
        if len(args) < 2 or args[1].type not in CALLBACK_TYPES:
            continue
        if not has_block_body(args[1]):
            continue
        body = function_body(args[1])
        blocks.append(TestBlock(
            index=len(blocks),
            start_line=start_line(body),
            end_line=end_line(body),
        ))
    return blocks


def _is_assertion_call(call) -> bool:
    return method_name(call) in ASSERTION_METHODS or callee_identifier(call) == "expect"


def find_assertion_lines(root) -> set[int]:
    """Lines holding an assertion call.

    Top-level statements of a ``.then()`` callback body are inspected too, so
    an ``expect(...)`` inside the callback counts at its own line.
    """
    lines: set[int] = set()
    for call in iter_calls(root):
        if _is_assertion_call(call):
            lines.add(start_line(call))
        if method_name(call) != "then":
            continue
        args = call_arguments(call)
        if not args or args[0].type not in CALLBACK_TYPES or not has_block_body(args[0]):
            continue
        for stmt in meaningful_children(function_body(args[0])):
            if stmt.type != EXPRESSION_STATEMENT:
                continue
            inner = meaningful_children(stmt)
            if inner and inner[0].type == CALL and _is_assertion_call(inner[0]):
                lines.add(start_line(inner[0]))
    return lines


def resolve_chain(call):
    """Walk down ``a.b().c().d()`` to its innermost call.

    Returns ``(chain_root_call, base)`` where *base* is whatever the innermost
    call's member object is (``cy`` for a Cypress chain) or None.
    """
    root_call = call
    callee = call_callee(call)
    current = member_object(callee) if callee is not None and callee.type == MEMBER else None
    while current is not None and current.type == CALL:
        root_call = current
        inner = call_callee(current)
        current = member_object(inner) if inner is not None and inner.type == MEMBER else None
    return root_call, current


def has_chained_assertion(call, methods: frozenset[str] = ASSERTION_METHODS) -> bool:
    """True when the member chain above *call* continues with an assertion."""
    node = call.parent
    while node is not None and node.type == MEMBER:
        if member_property_name(node) in methods:
            return True
        node = node.parent
    return False


def chain_selector(root_call) -> str | None:
    """Selector string of a ``.get('<selector>')`` chain root."""
    if method_name(root_call) != "get":
        return None
    args = call_arguments(root_call)
    return string_value(args[0]) if args else None


def find_action_sites(parsed: ParsedTree, root_identifier: str = ROOT_IDENTIFIER) -> list[ActionSite]:
    """Every action command whose chain bottoms out at *root_identifier*."""
    sites: list[ActionSite] = []
    for call in iter_calls(parsed.root):
        command = method_name(call)
        if command not in ACTION_COMMANDS:
            continue
        root_call, base = resolve_chain(call)
        if identifier_name(base) != root_identifier:
            continue
        sites.append(ActionSite(
            line=start_line(call),
            command=command,
            has_chained_assertion=has_chained_assertion(call),
            selector=chain_selector(root_call),
            location=parsed.location(root_call, call),
        ))
    return sites


def map_issues_to_test_blocks(
    issues: Iterable[Issue], blocks: Sequence[TestBlock]
) -> dict[int, list[Issue]]:
    """Bucket issues by the first test block whose span holds their line."""
    mapping: dict[int, list[Issue]] = {}
    for issue in issues:
        line = issue.line
        if line is None:
            continue
        for block in blocks:
            if block.contains(line):
                mapping.setdefault(block.index, []).append(issue)
                break
    return mapping


__all__ = [
    "ACTION_COMMANDS",
    "ASSERTION_METHODS",
    "ROOT_IDENTIFIER",
    "chain_selector",
    "find_action_sites",
    "find_assertion_lines",
    "find_test_blocks",
    "has_chained_assertion",
    "iter_calls",
    "map_issues_to_test_blocks",
    "resolve_chain",
]
