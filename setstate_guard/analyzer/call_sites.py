"""Call-Site Correlator: follows state reads through helper method calls.

During traversal every call inside a component contributes an edge
`enclosing method -> callee` to the component's call graph, and calls that
sit in a `this.setState` first argument are remembered. Once the fact tables
are closed over the call graph, `resolve` reports each remembered call
against every MethodFact of its callee.
"""
from dataclasses import dataclass
from typing import List
from tree_sitter import Node

from .context import AnalysisContext
from .syntax import NodeKey, ascend, callee_name, containing_state_update, match_named_function


@dataclass
class PendingCall:
    component: NodeKey
    callee: str
    node: Node


class CallSiteCorrelator:

    def __init__(self, context: AnalysisContext):
        self.context = context
        self.pending: List[PendingCall] = []

    def visit(self, node: Node) -> None:
        """Handle a call_expression."""
        component = self.context.components.component_of(node)
        if component is None:
            return
        name = callee_name(node)
        if name is None:
            return

        enclosing = ascend(node, match_named_function)
        if enclosing is not None and enclosing.name is not None:
            self.context.facts.add_call_edge(component.key, enclosing.name, name)

        if containing_state_update(node) is not None:
            self.pending.append(PendingCall(component=component.key, callee=name, node=node))

    def resolve(self) -> None:
        """Report remembered calls; run after FactTables.close_over_calls()."""
        for call in self.pending:
            for fact in self.context.facts.method_facts_for(call.component, call.callee):
                self.context.reporter.report(fact.node, site=call.node)
