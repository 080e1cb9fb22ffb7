"""Alias Tracker: local bindings that hold the component's state.

Bindings are recorded as VarFacts, either by the State-Read Locator
(`const s = this.state`) or here (`const { state } = this`). Identifier uses
in an object-ish position inside a `this.setState` first argument are
remembered and matched against VarFacts by name and declaring scope once
traversal has finished.
"""
from dataclasses import dataclass
from typing import List
from tree_sitter import Node

from .context import AnalysisContext
from .scopes import ScopeId
from .syntax import (
    bound_names,
    containing_state_update,
    is_this,
    match_declarator,
    node_text,
    property_name,
    same_node,
)


@dataclass
class PendingUse:
    name: str
    scope: ScopeId
    node: Node


class AliasTracker:

    def __init__(self, context: AnalysisContext):
        self.context = context
        self.pending: List[PendingUse] = []

    def visit_declarator(self, node: Node) -> None:
        """Record `const { state } = this` style destructuring of the instance."""
        declarator = match_declarator(node)
        if declarator is None or not is_this(declarator.value):
            return
        if declarator.name is None or declarator.name.type != 'object_pattern':
            return
        if not self.context.components.is_component_node(node):
            return

        for prop in declarator.name.named_children:
            key, target = self._state_property(prop)
            if key is None:
                continue
            for name, binding in bound_names(target):
                self.context.facts.add_var_fact(key, self.context.scopes.scope_of(binding), name)

    def _state_property(self, prop: Node):
        """Split a destructured property into (key node, binding target) if it is `state`."""
        if prop.type == 'shorthand_property_identifier_pattern':
            if node_text(prop) == 'state':
                return prop, prop
        elif prop.type == 'pair_pattern':
            key = prop.child_by_field_name('key')
            if property_name(key) == 'state':
                return key, prop.child_by_field_name('value')
        elif prop.type == 'object_assignment_pattern':
            left = prop.child_by_field_name('left')
            if left is not None and left.type == 'shorthand_property_identifier_pattern' and node_text(left) == 'state':
                return left, left
        return None, None

    def visit_identifier(self, node: Node) -> None:
        """Handle an identifier or object shorthand (`{ s }`) use."""
        current = node
        while current.parent is not None and current.parent.type == 'binary_expression':
            current = current.parent
        if not self._in_object_position(current):
            return
        if containing_state_update(current) is None:
            return
        self.pending.append(PendingUse(
            name=node_text(node),
            scope=self.context.scopes.scope_of(node),
            node=node,
        ))

    def _in_object_position(self, node: Node) -> bool:
        """Value of a key/value pair, a shorthand property, or object of a member access."""
        if node.type == 'shorthand_property_identifier':
            return True
        parent = node.parent
        if parent is None:
            return False
        if parent.type == 'pair':
            return same_node(parent.child_by_field_name('value'), node)
        if parent.type == 'member_expression':
            return same_node(parent.child_by_field_name('object'), node)
        return False

    def resolve(self) -> None:
        for use in self.pending:
            for fact in self.context.facts.var_facts_for(use.scope, use.name):
                self.context.reporter.report(fact.node, site=use.node)
