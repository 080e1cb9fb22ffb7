"""Detection of React component definitions around a node.

Recognizes ES6 classes extending a configured base (`Component`,
`React.PureComponent`, ...) and ES5 object literals passed to
`createReactClass` / `React.createClass`.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Optional
from tree_sitter import Node

from .syntax import CLASS_TYPES, NodeKey, arguments_of, node_key, node_text, same_node


@dataclass(frozen=True)
class ComponentDefinition:
    """A component found around a node."""
    node: Node
    name: Optional[str]
    kind: str  # 'es6' or 'es5'

    @property
    def key(self) -> NodeKey:
        return node_key(self.node)


class ComponentDetector:
    """Answers "is this node inside a component?" for one tree."""

    def __init__(self, pragma: str = "React", create_class: str = "createReactClass",
                 component_bases: Iterable[str] = ("Component", "PureComponent")):
        self.pragma = pragma
        self.create_class = create_class
        self.base_names = set()
        for base in component_bases:
            self.base_names.add(base)
            self.base_names.add(f"{pragma}.{base}")
        self.factory_names = {create_class, f"{pragma}.createClass"}
        self._cache: Dict[NodeKey, Optional[ComponentDefinition]] = {}

    @classmethod
    def from_config(cls, config) -> 'ComponentDetector':
        return cls(
            pragma=config.pragma,
            create_class=config.create_class,
            component_bases=config.component_bases,
        )

    def is_component_node(self, node: Node) -> bool:
        return self.component_of(node) is not None

    def component_of(self, node: Node) -> Optional[ComponentDefinition]:
        """Return the nearest enclosing component definition, if any.

        The nearest class decides: a plain class nested inside a component
        is not a component.
        """
        key = node_key(node)
        if key in self._cache:
            return self._cache[key]

        result = None
        current = node.parent
        while current is not None:
            if current.type in CLASS_TYPES and current.is_named:
                result = self._match_es6_class(current)
                break
            if current.type == 'object':
                component = self._match_es5_object(current)
                if component is not None:
                    result = component
                    break
            current = current.parent

        self._cache[key] = result
        return result

    def _match_es6_class(self, class_node: Node) -> Optional[ComponentDefinition]:
        superclass = self._superclass(class_node)
        if superclass is None:
            return None
        # TypeScript generics: React.Component<Props, State>
        base = node_text(superclass).split('<')[0].strip()
        if base not in self.base_names:
            return None
        name_node = class_node.child_by_field_name('name')
        return ComponentDefinition(
            node=class_node,
            name=node_text(name_node) if name_node is not None else None,
            kind='es6',
        )

    def _superclass(self, class_node: Node) -> Optional[Node]:
        for child in class_node.children:
            if child.type != 'class_heritage':
                continue
            for heritage_child in child.named_children:
                # TypeScript wraps the superclass in an extends_clause
                if heritage_child.type == 'extends_clause':
                    return heritage_child.child_by_field_name('value')
                if heritage_child.type not in ('implements_clause', 'comment'):
                    return heritage_child
        return None

    def _match_es5_object(self, object_node: Node) -> Optional[ComponentDefinition]:
        args_node = object_node.parent
        if args_node is None or args_node.type != 'arguments':
            return None
        call = args_node.parent
        if call is None or call.type != 'call_expression':
            return None
        callee = call.child_by_field_name('function')
        if callee is None or node_text(callee) not in self.factory_names:
            return None
        args = arguments_of(call)
        if not args or not same_node(args[0], object_node):
            return None

        name = None
        declarator = call.parent
        if declarator is not None and declarator.type == 'variable_declarator':
            name_node = declarator.child_by_field_name('name')
            if name_node is not None and name_node.type == 'identifier':
                name = node_text(name_node)
        return ComponentDefinition(node=object_node, name=name, kind='es5')
