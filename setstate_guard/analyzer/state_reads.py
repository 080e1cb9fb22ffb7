"""State-Read Locator: classifies every `this.state` read inside a component."""
from typing import Optional, Union
from tree_sitter import Node

from .context import AnalysisContext
from .syntax import (
    Declarator,
    NamedFunction,
    StateUpdateCall,
    ascend,
    bound_names,
    contains,
    in_first_argument,
    is_state_read,
    match_declarator,
    match_named_function,
    match_state_update_call,
)

Placement = Union[StateUpdateCall, NamedFunction, Declarator]


class StateReadLocator:
    """Reports direct reads and records MethodFacts/VarFacts for the rest."""

    def __init__(self, context: AnalysisContext):
        self.context = context

    def visit(self, node: Node) -> None:
        """Handle a member_expression; ignores anything but a component's `this.state`."""
        if not is_state_read(node):
            return
        component = self.context.components.component_of(node)
        if component is None:
            return

        placement = ascend(node, lambda current: self._placement(node, current))

        if isinstance(placement, StateUpdateCall):
            self.context.reporter.report(node)
        elif isinstance(placement, NamedFunction):
            self.context.facts.add_method_fact(component.key, placement.name, node)
        elif isinstance(placement, Declarator):
            for name, binding in bound_names(placement.name):
                self.context.facts.add_var_fact(node, self.context.scopes.scope_of(binding), name)
        # No placement: a read at the top of a class body or program is inert

    def _placement(self, read: Node, current: Node) -> Optional[Placement]:
        """First matching role of `current` for `read`, checked in priority order."""
        call = match_state_update_call(current)
        if call is not None and in_first_argument(call, read):
            return call

        function = match_named_function(current)
        if function is not None:
            return function

        declarator = match_declarator(current)
        if declarator is not None and declarator.value is not None and contains(declarator.value, read):
            return declarator

        return None
