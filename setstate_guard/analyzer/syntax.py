"""Shape matchers and ancestor walking over tree-sitter JS/TS nodes.

Every component of the checker answers its questions by walking parent links
upward from a node. `ascend` is the single primitive for that walk; the
`match_*` functions turn raw nodes into small typed variants so callers never
inspect optional fields themselves.
"""
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple, TypeVar
from tree_sitter import Node

T = TypeVar('T')

# (start_byte, end_byte, type) identifies a node within one tree
NodeKey = Tuple[int, int, str]

FUNCTION_TYPES = {
    'function_declaration',
    'generator_function_declaration',
    'function_expression',
    'function',
    'generator_function',
    'arrow_function',
    'method_definition',
}

CLASS_TYPES = {'class_declaration', 'class', 'abstract_class_declaration'}

IDENTIFIER_TYPES = {'identifier', 'shorthand_property_identifier'}

# Property name node types that carry a plain, statically known name
PLAIN_NAME_TYPES = {'property_identifier', 'identifier', 'private_property_identifier'}


@dataclass(frozen=True)
class StateUpdateCall:
    """A `this.setState(...)` invocation."""
    node: Node
    arguments: Optional[Node]
    first_argument: Optional[Node]


@dataclass(frozen=True)
class NamedFunction:
    """A method or function that can be referenced by name (name may be None)."""
    node: Node
    name: Optional[str]


@dataclass(frozen=True)
class Declarator:
    """A `variable_declarator`: `name = value`."""
    node: Node
    name: Optional[Node]
    value: Optional[Node]


def node_key(node: Node) -> NodeKey:
    return (node.start_byte, node.end_byte, node.type)


def same_node(a: Optional[Node], b: Optional[Node]) -> bool:
    if a is None or b is None:
        return False
    return node_key(a) == node_key(b)


def node_text(node: Node) -> str:
    return node.text.decode('utf-8', errors='ignore')


def contains(outer: Node, inner: Node) -> bool:
    """True if `inner` lies within the byte range of `outer`."""
    return outer.start_byte <= inner.start_byte and inner.end_byte <= outer.end_byte


def traverse(node: Node) -> Iterator[Node]:
    """Iteratively yield all nodes in pre-order, left to right."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        # Reverse so the leftmost child is popped first
        stack.extend(reversed(current.children))


def ancestors(node: Node, include_self: bool = False) -> Iterator[Node]:
    current = node if include_self else node.parent
    while current is not None:
        yield current
        current = current.parent


def ascend(node: Node, predicate: Callable[[Node], Optional[T]],
           include_self: bool = False) -> Optional[T]:
    """Walk parent links until `predicate` returns a truthy value.

    Args:
        node: Starting node
        predicate: Called on each ancestor; the first truthy result is returned
        include_self: Also test `node` itself before its parent

    Returns:
        The first truthy predicate result, or None once the root is passed
    """
    for current in ancestors(node, include_self):
        result = predicate(current)
        if result:
            return result
    return None


def arguments_of(call: Node) -> List[Node]:
    """Return the call's argument expressions, without punctuation or comments."""
    args_node = call.child_by_field_name('arguments')
    if args_node is None:
        return []
    return [child for child in args_node.named_children if child.type != 'comment']


def is_this(node: Optional[Node]) -> bool:
    return node is not None and node.type == 'this'


def property_name(node: Optional[Node]) -> Optional[str]:
    """Name of a property key, or None when it is computed or a literal."""
    if node is not None and node.type in PLAIN_NAME_TYPES:
        return node_text(node)
    return None


def is_this_member(node: Node, name: str) -> bool:
    """True for a non-computed `this.<name>` member access."""
    if node.type != 'member_expression':
        return False
    prop = node.child_by_field_name('property')
    return (
        is_this(node.child_by_field_name('object'))
        and prop is not None
        and prop.type == 'property_identifier'
        and node_text(prop) == name
    )


def is_state_read(node: Node) -> bool:
    """True for `this.state` used as a value (assignment targets are writes)."""
    if not is_this_member(node, 'state'):
        return False
    parent = node.parent
    if parent is not None and parent.type in ('assignment_expression', 'augmented_assignment_expression'):
        return not same_node(parent.child_by_field_name('left'), node)
    return True


def match_state_update_call(node: Node) -> Optional[StateUpdateCall]:
    if node.type != 'call_expression':
        return None
    callee = node.child_by_field_name('function')
    if callee is None or not is_this_member(callee, 'setState'):
        return None
    args = arguments_of(node)
    return StateUpdateCall(
        node=node,
        arguments=node.child_by_field_name('arguments'),
        first_argument=args[0] if args else None,
    )


def in_first_argument(call: StateUpdateCall, node: Node) -> bool:
    """True if `node` is the first argument of `call`, or nested inside it.

    Ascends from `node` to the child of the call's `arguments` node and
    compares that child with the first argument.
    """
    if call.arguments is None or call.first_argument is None:
        return False
    current = node
    while current is not None and not same_node(current.parent, call.arguments):
        if same_node(current, call.node):
            return False
        current = current.parent
    return same_node(current, call.first_argument)


def containing_state_update(node: Node) -> Optional[StateUpdateCall]:
    """Nearest `this.setState` call whose first argument contains `node`."""
    def predicate(current: Node) -> Optional[StateUpdateCall]:
        call = match_state_update_call(current)
        if call is not None and in_first_argument(call, node):
            return call
        return None

    return ascend(node, predicate)


def _binding_name(node: Optional[Node]) -> Optional[str]:
    if node is not None and node.type == 'identifier':
        return node_text(node)
    return None


def match_named_function(node: Node) -> Optional[NamedFunction]:
    """Classify `node` as a named method/function definition.

    Methods and function declarations always match, with their name or None.
    Function and arrow expressions match only where their surroundings give
    them a name: an object pair (function expressions only), a class field, a
    variable initializer or a `this.x = ...` assignment. Other anonymous
    functions do not match.
    """
    # The `function` keyword token shares its type name with the old expression node
    if not node.is_named or node.type not in FUNCTION_TYPES:
        return None

    if node.type == 'method_definition':
        return NamedFunction(node, property_name(node.child_by_field_name('name')))

    if node.type in ('function_declaration', 'generator_function_declaration'):
        return NamedFunction(node, _binding_name(node.child_by_field_name('name')))

    parent = node.parent
    if parent is None:
        return None

    # An arrow as a pair value stays transparent: `{ cb: () => this.state.x }`
    if (parent.type == 'pair' and node.type != 'arrow_function'
            and same_node(parent.child_by_field_name('value'), node)):
        return NamedFunction(node, property_name(parent.child_by_field_name('key')))

    if parent.type == 'field_definition' and same_node(parent.child_by_field_name('value'), node):
        return NamedFunction(node, property_name(parent.child_by_field_name('property')))

    if parent.type == 'public_field_definition' and same_node(parent.child_by_field_name('value'), node):
        return NamedFunction(node, property_name(parent.child_by_field_name('name')))

    if parent.type == 'variable_declarator' and same_node(parent.child_by_field_name('value'), node):
        name = _binding_name(parent.child_by_field_name('name'))
        if name is not None:
            return NamedFunction(node, name)

    if parent.type == 'assignment_expression' and same_node(parent.child_by_field_name('right'), node):
        left = parent.child_by_field_name('left')
        if left is not None and left.type == 'member_expression' and is_this(left.child_by_field_name('object')):
            return NamedFunction(node, property_name(left.child_by_field_name('property')))

    return None


def match_declarator(node: Node) -> Optional[Declarator]:
    if node.type != 'variable_declarator':
        return None
    return Declarator(
        node=node,
        name=node.child_by_field_name('name'),
        value=node.child_by_field_name('value'),
    )


def callee_name(call: Node) -> Optional[str]:
    """Simple name of the invoked function.

    `helper()` and `this.helper()` resolve to 'helper'; computed or foreign
    member callees (`obj.helper()`, `this[name]()`) are unresolvable.
    """
    callee = call.child_by_field_name('function')
    if callee is None:
        return None
    if callee.type == 'identifier':
        return node_text(callee)
    if callee.type == 'member_expression' and is_this(callee.child_by_field_name('object')):
        return property_name(callee.child_by_field_name('property'))
    return None


def bound_names(pattern: Optional[Node]) -> List[Tuple[str, Node]]:
    """Identifiers bound by a declaration target, with their nodes.

    Handles plain identifiers and object/array destructuring, including
    defaults (`{ a = 1 }`), renames (`{ a: b }`) and rest elements.
    """
    if pattern is None:
        return []
    kind = pattern.type
    if kind in ('identifier', 'shorthand_property_identifier_pattern'):
        return [(node_text(pattern), pattern)]
    if kind == 'pair_pattern':
        return bound_names(pattern.child_by_field_name('value'))
    if kind in ('object_assignment_pattern', 'assignment_pattern'):
        return bound_names(pattern.child_by_field_name('left'))
    if kind in ('object_pattern', 'array_pattern', 'rest_pattern'):
        names = []
        for child in pattern.named_children:
            names.extend(bound_names(child))
        return names
    # TypeScript parameters wrap the binding in a `pattern` field
    if kind in ('required_parameter', 'optional_parameter'):
        return bound_names(pattern.child_by_field_name('pattern'))
    return []
