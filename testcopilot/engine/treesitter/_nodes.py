"""Node-kind tags and small accessors over the JavaScript/TypeScript grammars.

Only the kinds listed here are inspected by the analysis; every other kind is
walked through without interpretation.
"""

from __future__ import annotations

from collections.abc import Iterator

CALL = "call_expression"
MEMBER = "member_expression"
IDENTIFIER = "identifier"
STRING = "string"
NUMBER = "number"
ARGUMENTS = "arguments"
BLOCK = "statement_block"
RETURN = "return_statement"
EXPRESSION_STATEMENT = "expression_statement"
VARIABLE_DECLARATOR = "variable_declarator"
ASSIGNMENT = "assignment_expression"
PARENTHESIZED = "parenthesized_expression"
COMMENT = "comment"

ARROW_FUNCTION = "arrow_function"
# "function" is the pre-0.21 grammar name for a function expression.
FUNCTION_EXPRESSION_TYPES = frozenset({"function_expression", "function", "generator_function"})
FUNCTION_DECLARATION_TYPES = frozenset({"function_declaration", "generator_function_declaration"})
FUNCTION_TYPES = FUNCTION_EXPRESSION_TYPES | FUNCTION_DECLARATION_TYPES | {ARROW_FUNCTION}
CALLBACK_TYPES = FUNCTION_EXPRESSION_TYPES | {ARROW_FUNCTION}

LOOP_TYPES = frozenset({"for_statement", "while_statement", "do_statement"})

_PROPERTY_TYPES = frozenset({"property_identifier", "private_property_identifier", IDENTIFIER})


def node_text(node) -> str:
    """Get text from a node as a str."""
    text = node.text
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="replace")
    return str(text)


def walk(node) -> Iterator:
    """Pre-order, source-order traversal of *node* and all its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        # Reversed so the first child is popped first.
        stack.extend(reversed(current.children))


def ancestors(node) -> Iterator:
    parent = node.parent
    while parent is not None:
        yield parent
        parent = parent.parent


def start_line(node) -> int:
    return node.start_point[0] + 1


def end_line(node) -> int:
    return node.end_point[0] + 1


def meaningful_children(node) -> list:
    """Named children minus comments (comments may appear anywhere in the tree)."""
    return [child for child in node.named_children if child.type != COMMENT]


def unwrap_parens(node):
    while node is not None and node.type == PARENTHESIZED:
        inner = meaningful_children(node)
        node = inner[0] if inner else None
    return node


# ── Calls and member access ───────────────────────────────


def call_callee(call):
    return call.child_by_field_name("function")


def call_arguments(call) -> list:
    args = call.child_by_field_name("arguments")
    if args is None or args.type != ARGUMENTS:
        return []
    return meaningful_children(args)


def member_object(member):
    return member.child_by_field_name("object")


def member_property_name(member) -> str | None:
    prop = member.child_by_field_name("property")
    if prop is None or prop.type not in _PROPERTY_TYPES:
        return None
    return node_text(prop)


def identifier_name(node) -> str | None:
    if node is not None and node.type == IDENTIFIER:
        return node_text(node)
    return None


def method_name(call) -> str | None:
    """``obj.name(...)`` -> ``"name"``; anything else -> None."""
    callee = call_callee(call)
    if callee is None or callee.type != MEMBER:
        return None
    return member_property_name(callee)


def callee_identifier(call) -> str | None:
    """``name(...)`` -> ``"name"``; anything else -> None."""
    return identifier_name(call_callee(call))


def is_member_call_on(call, object_name: str, method: str | None = None) -> bool:
    """True for ``<object_name>.<method>(...)`` (any method when *method* is None)."""
    if call.type != CALL:
        return False
    callee = call_callee(call)
    if callee is None or callee.type != MEMBER:
        return False
    if identifier_name(member_object(callee)) != object_name:
        return False
    return method is None or member_property_name(callee) == method


# ── Literals ──────────────────────────────────────────────


def string_value(node) -> str | None:
    """Value of a quoted string literal (template literals are not strings)."""
    if node is None or node.type != STRING:
        return None
    return node_text(node)[1:-1]


def number_value(node) -> int | float | None:
    """Value of a numeric literal; integral values come back as int."""
    if node is None or node.type != NUMBER:
        return None
    text = node_text(node).replace("_", "")
    try:
        return int(text, 0)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return None
    return int(value) if value.is_integer() else value


# ── Functions ─────────────────────────────────────────────


def function_body(fn):
    return fn.child_by_field_name("body")


def has_block_body(fn) -> bool:
    body = function_body(fn)
    return body is not None and body.type == BLOCK


def binding_parent(fn):
    """Parent of *fn* with any wrapping parentheses skipped."""
    parent = fn.parent
    while parent is not None and parent.type == PARENTHESIZED:
        parent = parent.parent
    return parent


def bound_name(fn) -> str:
    """Name of a function.

    Declarations use their own id. Expressions use the variable they
    initialise, else their own id when they have one.
    """
    own = fn.child_by_field_name("name")
    if fn.type in FUNCTION_DECLARATION_TYPES:
        return node_text(own) if own is not None else ""
    parent = binding_parent(fn)
    if parent is not None and parent.type == VARIABLE_DECLARATOR:
        name = identifier_name(parent.child_by_field_name("name"))
        if name:
            return name
    return node_text(own) if own is not None else ""


def return_argument(ret):
    """Returned expression of a return statement, or None for a bare return."""
    children = meaningful_children(ret)
    return unwrap_parens(children[0]) if children else None
