"""Heuristic judges used by the checkers.

Each predicate answers one narrow question and always resolves to a bool;
an unknown or unmatched shape counts as "no", which keeps the checkers on the
side of reporting rather than silently passing.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from testcopilot.engine.queries import ROOT_IDENTIFIER, has_chained_assertion, iter_calls
from testcopilot.engine.treesitter._nodes import (
    ARGUMENTS,
    CALL,
    CALLBACK_TYPES,
    FUNCTION_DECLARATION_TYPES,
    FUNCTION_TYPES,
    LOOP_TYPES,
    MEMBER,
    RETURN,
    VARIABLE_DECLARATOR,
    ancestors,
    binding_parent,
    bound_name,
    call_arguments,
    call_callee,
    callee_identifier,
    identifier_name,
    is_member_call_on,
    member_object,
    node_text,
    return_argument,
    start_line,
    string_value,
    unwrap_parens,
)

# The exact wording of these patterns is tuned against false positives.
RETRY_NAME_RE = re.compile(
    r"(?:retry|wait|poll|until|repeat|attempt|check)(?:Until|For|With|While|Loop)?",
    re.IGNORECASE,
)
RETRY_HELPER_NAME_RE = re.compile(
    r"(?:retry|wait|poll|until|repeat|attempt|check)(?:Until|For|With|While|Loop|Success)?",
    re.IGNORECASE,
)
_HELPER_VERB_RE = re.compile(
    r"(?:login|fill|check|verify|validate|wait|click|type|select|submit|navigate|setup)"
    r"(?:User|Form|Element|Page|Data|Field|Button|Modal|Correctly)?$",
    re.IGNORECASE,
)
_HELPER_PREFIX_RE = re.compile(r"^(?:cy|cypress|should|expect|assert)", re.IGNORECASE)
_HELPER_NAMESPACES = frozenset({"page", "helpers", "utils", "commands"})

_NAVIGATION_SELECTOR_RE = re.compile(
    r"(?:nav|menu|tab|link|button).*(?:close|cancel|back|next|prev|skip)",
    re.IGNORECASE,
)
_SETUP_ACTIONS = frozenset({"scrollIntoView", "scrollTo", "focus", "blur", "clear"})
_SETUP_MARKERS = ("beforeeach", "before(")
_SETUP_COMMENTS = ("// setup", "// navigate", "// preparation")

_ID_RE = re.compile(r"#([a-zA-Z0-9_-]+)")
_CLASS_RE = re.compile(r"\.([a-zA-Z0-9_-]+)")

DISABLE_COMMENT_RE = re.compile(r"//.*testcopilot-disable", re.IGNORECASE)
EXPLANATORY_COMMENT_RE = re.compile(
    r"//.*(?:animation|transition|loading|render|delay)", re.IGNORECASE
)
ANIMATION_WAIT_MAX_MS = 1000

RELATED_ASSERTION_METHODS = frozenset({"should", "contains", "and", "expect"})
RELATED_ASSERTION_WINDOW = 5
CONSECUTIVE_WAIT_GAP = 3


# ── Selectors ─────────────────────────────────────────────


def _clean_selector(selector: str) -> str:
    return selector.strip().replace("'", "").replace('"', "")


def _same_fragment(pattern: re.Pattern, a: str, b: str) -> bool:
    match_a, match_b = pattern.search(a), pattern.search(b)
    return bool(match_a and match_b and match_a.group(1) == match_b.group(1))


def selectors_related(a: str, b: str) -> bool:
    """True when two selectors plausibly target the same element family."""
    if a == b:
        return True
    clean_a, clean_b = _clean_selector(a), _clean_selector(b)
    if clean_a == clean_b:
        return True
    if clean_a in clean_b or clean_b in clean_a:
        return True
    return _same_fragment(_ID_RE, clean_a, clean_b) or _same_fragment(_CLASS_RE, clean_a, clean_b)


def has_related_assertion(
    root,
    action_selector: str,
    action_line: int,
    root_identifier: str = ROOT_IDENTIFIER,
) -> bool:
    """A ``cy.get(<related selector>).should(...)`` shortly after *action_line*.

    Covers assertions split off the action chain (Cypress warns against
    chaining after some actions).
    """
    for call in iter_calls(root):
        line = start_line(call)
        if line <= action_line or line > action_line + RELATED_ASSERTION_WINDOW:
            continue
        if not is_member_call_on(call, root_identifier, "get"):
            continue
        args = call_arguments(call)
        selector = string_value(args[0]) if args else None
        if selector is None or not selectors_related(action_selector, selector):
            continue
        if has_chained_assertion(call, RELATED_ASSERTION_METHODS):
            return True
    return False


# ── Waits ─────────────────────────────────────────────────


def alias_wait_value(call, root_identifier: str = ROOT_IDENTIFIER) -> str | None:
    """``cy.wait('@alias')`` -> ``"@alias"``; anything else -> None."""
    if not is_member_call_on(call, root_identifier, "wait"):
        return None
    args = call_arguments(call)
    if len(args) != 1:
        return None
    value = string_value(args[0])
    if value is None or not value.startswith("@"):
        return None
    return value


def has_explanatory_comment(line_text: str) -> bool:
    return bool(EXPLANATORY_COMMENT_RE.search(line_text))


def is_exempt_hard_wait(line_text: str, delay: float) -> bool:
    """Disable marker on the line, or a short wait explained as animation/render time."""
    if DISABLE_COMMENT_RE.search(line_text):
        return True
    return delay <= ANIMATION_WAIT_MAX_MS and has_explanatory_comment(line_text)


def has_consecutive_waits(root, line: int, root_identifier: str = ROOT_IDENTIFIER) -> bool:
    """True if the alias wait at *line* sits in a run of 2+ waits spaced <= 3 lines apart."""
    wait_lines = sorted(
        start_line(call)
        for call in iter_calls(root)
        if alias_wait_value(call, root_identifier) is not None
    )
    run = 1
    for previous, current in zip(wait_lines, wait_lines[1:]):
        run = run + 1 if current - previous <= CONSECUTIVE_WAIT_GAP else 1
        if run >= 2 and line in (previous, current):
            return True
    return False


def _is_recursive_call(call) -> bool:
    name = callee_identifier(call)
    if not name:
        return False
    for ancestor in ancestors(call):
        if ancestor.type in FUNCTION_DECLARATION_TYPES:
            declared = ancestor.child_by_field_name("name")
            if declared is not None and node_text(declared) == name:
                return True
        elif ancestor.type == VARIABLE_DECLARATOR:
            if identifier_name(ancestor.child_by_field_name("name")) == name:
                return True
    return False


def _passed_to_retry_call(fn) -> bool:
    parent = binding_parent(fn)
    if parent is None or parent.type != ARGUMENTS:
        return False
    call = parent.parent
    if call is None or call.type != CALL:
        return False
    name = callee_identifier(call)
    return bool(name and RETRY_NAME_RE.search(name))


def is_part_of_retry_mechanism(node, root_identifier: str = ROOT_IDENTIFIER) -> bool:
    """True if *node* sits inside polling, looping or retry-named code."""
    for current in (node, *ancestors(node)):
        if is_member_call_on(current, root_identifier, "waitUntil"):
            return True
        if current.type in FUNCTION_TYPES:
            name = bound_name(current)
            if name and RETRY_NAME_RE.search(name):
                return True
            if current.type in CALLBACK_TYPES and _passed_to_retry_call(current):
                return True
        if current.type in LOOP_TYPES:
            return True
        if current.type == CALL and _is_recursive_call(current):
            return True
    return False


# ── Actions ───────────────────────────────────────────────


def is_likely_valid_without_assertion(
    action_name: str,
    selector: str | None,
    lines: Sequence[str],
    action_line: int,
) -> bool:
    """Setup, navigation and teardown actions that rarely need a follow-up check."""
    if action_name in _SETUP_ACTIONS:
        return True
    for text in lines[max(0, action_line - 10):min(len(lines), action_line + 5)]:
        lowered = text.lower()
        if any(marker in lowered for marker in _SETUP_MARKERS):
            return True
        if any(marker in lowered for marker in _SETUP_COMMENTS):
            return True
    return bool(selector and _NAVIGATION_SELECTOR_RE.search(selector))


# ── Command chains ────────────────────────────────────────


def _calls_library(call, root_identifier: str) -> bool:
    callee = call_callee(call)
    if callee is None:
        return False
    if callee.type == MEMBER:
        owner = identifier_name(member_object(callee))
        if owner is None:
            return False
        return owner == root_identifier or owner.lower() in _HELPER_NAMESPACES
    name = identifier_name(callee)
    if not name:
        return False
    return bool(_HELPER_VERB_RE.search(name) or _HELPER_PREFIX_RE.search(name))


def contains_library_calls(node, root_identifier: str = ROOT_IDENTIFIER) -> bool:
    """Does this subtree call the automation library or a helper that likely wraps it?"""
    return any(_calls_library(call, root_identifier) for call in iter_calls(node))


def _walk_own_scope(node):
    """Pre-order walk that does not enter nested function bodies."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(
            child for child in reversed(current.children) if child.type not in FUNCTION_TYPES
        )


def has_return_in_callback(body) -> bool:
    return any(node.type == RETURN for node in _walk_own_scope(body))


def is_library_chain(node, root_identifier: str = ROOT_IDENTIFIER) -> bool:
    """True when *node* is a call chain rooted at ``<root_identifier>.<method>(...)``."""
    node = unwrap_parens(node)
    while node is not None and node.type == CALL:
        callee = call_callee(node)
        if callee is None or callee.type != MEMBER:
            return False
        target = unwrap_parens(member_object(callee))
        if identifier_name(target) == root_identifier:
            return True
        node = target
    return False


def has_return_with_chain(body, root_identifier: str = ROOT_IDENTIFIER) -> bool:
    for node in _walk_own_scope(body):
        if node.type != RETURN:
            continue
        returned = return_argument(node)
        if returned is not None and is_library_chain(returned, root_identifier):
            return True
    return False


__all__ = [
    "RETRY_HELPER_NAME_RE",
    "RETRY_NAME_RE",
    "alias_wait_value",
    "contains_library_calls",
    "has_consecutive_waits",
    "has_explanatory_comment",
    "has_related_assertion",
    "has_return_in_callback",
    "has_return_with_chain",
    "is_exempt_hard_wait",
    "is_library_chain",
    "is_likely_valid_without_assertion",
    "is_part_of_retry_mechanism",
    "selectors_related",
]
