"""Callbacks and helpers that run Cypress commands without returning the chain."""

from __future__ import annotations

from testcopilot.checkers.context import AnalysisContext
from testcopilot.engine.predicates import (
    RETRY_HELPER_NAME_RE,
    contains_library_calls,
    has_return_in_callback,
    has_return_with_chain,
)
from testcopilot.engine.treesitter._nodes import (
    ASSIGNMENT,
    CALL,
    CALLBACK_TYPES,
    FUNCTION_DECLARATION_TYPES,
    VARIABLE_DECLARATOR,
    ancestors,
    binding_parent,
    bound_name,
    call_arguments,
    callee_identifier,
    function_body,
    has_block_body,
    method_name,
    walk,
)
from testcopilot.enums import Severity

TEST_SCOPE_CALLS = frozenset({
    "it", "test", "describe", "context", "beforeEach", "afterEach", "before", "after",
})
ANONYMOUS = "anonymous function"


def _check_then_callback(ctx: AnalysisContext, call) -> None:
    args = call_arguments(call)
    if not args:
        return
    callback = args[0]
    if callback.type not in CALLBACK_TYPES or not has_block_body(callback):
        return
    body = function_body(callback)
    if not contains_library_calls(body) or has_return_in_callback(body):
        return
    ctx.report(
        "Callback in .then() contains Cypress commands but doesn't return — this "
        "breaks the command chain and can cause race conditions.",
        Severity.MEDIUM,
        ctx.location_of(callback),
        plain_explanation=(
            "When you use Cypress commands inside a .then() callback, you need to "
            "return them to maintain the command chain. Without return, subsequent "
            "commands might run before these complete."
        ),
        fix=(
            "Add 'return' before the Cypress commands in this .then() callback, or "
            "use .should() for assertions instead."
        ),
    )


def _is_custom_function(node) -> bool:
    if node.type in FUNCTION_DECLARATION_TYPES:
        return True
    if node.type not in CALLBACK_TYPES:
        return False
    parent = binding_parent(node)
    return parent is not None and parent.type in (VARIABLE_DECLARATOR, ASSIGNMENT)


def in_test_scope(node) -> bool:
    """Inside the callback of ``it``/``describe``/hooks, at any depth."""
    return any(
        ancestor.type == CALL and callee_identifier(ancestor) in TEST_SCOPE_CALLS
        for ancestor in ancestors(node)
    )


def _check_custom_function(ctx: AnalysisContext, fn) -> None:
    if in_test_scope(fn) or not has_block_body(fn):
        return
    body = function_body(fn)
    if not contains_library_calls(body):
        return
    name = bound_name(fn) or ANONYMOUS
    if RETRY_HELPER_NAME_RE.search(name):
        return
    if has_return_with_chain(body):
        return
    ctx.report(
        f'Function "{name}" contains Cypress commands but doesn\'t return them — this '
        "can break command chaining and cause race conditions.",
        Severity.MEDIUM,
        ctx.location_of(fn),
        plain_explanation=(
            "Custom functions that contain Cypress commands should return the command "
            "chain so that calling code can properly wait for completion."
        ),
        fix=(
            "Add 'return' before the Cypress commands in this function, or wrap "
            "multiple commands in a .then() block and return it."
        ),
    )


def check_chains(ctx: AnalysisContext) -> None:
    """One pre-order walk: ``.then()`` callbacks and custom functions, in source order."""
    for node in walk(ctx.root):
        if node.type == CALL and method_name(node) == "then":
            _check_then_callback(ctx, node)
        elif _is_custom_function(node):
            _check_custom_function(ctx, node)
