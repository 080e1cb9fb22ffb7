"""Per-file fact tables shared by the checker components.

A FactTables instance is an arena for exactly one analyzed file: it is
created empty, filled during traversal, closed over the call graph, and
dropped with the analysis result.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple
import networkx as nx
from tree_sitter import Node

from .syntax import NodeKey, node_key


@dataclass(frozen=True)
class MethodFact:
    """Method `method_name` of `component` reads state (maybe transitively) at `node`."""
    component: NodeKey
    method_name: Optional[str]
    node: Node = field(compare=False, hash=False)


@dataclass(frozen=True)
class VarFact:
    """Binding `variable_name` declared in `scope` aliases state read at `node`."""
    scope: NodeKey
    variable_name: Optional[str]
    node: Node = field(compare=False, hash=False)


class FactTables:
    """MethodFacts, VarFacts and per-component call graphs for one file."""

    def __init__(self):
        self.method_facts: List[MethodFact] = []
        self.var_facts: List[VarFact] = []
        # component key -> DiGraph where edge (A, B) means "method A calls B"
        self.call_graphs: Dict[NodeKey, nx.DiGraph] = {}
        self._method_seen: Set[Tuple[NodeKey, Optional[str], NodeKey]] = set()
        self._var_seen: Set[Tuple[NodeKey, Optional[str], NodeKey]] = set()
        self._methods_by_name: Dict[Tuple[NodeKey, str], List[MethodFact]] = {}

    def add_method_fact(self, component: NodeKey, method_name: Optional[str], node: Node) -> bool:
        """Record a MethodFact unless one exists for the same method and read.

        Returns:
            True if the fact is new
        """
        key = (component, method_name, node_key(node))
        if key in self._method_seen:
            return False
        self._method_seen.add(key)

        fact = MethodFact(component=component, method_name=method_name, node=node)
        self.method_facts.append(fact)
        if method_name is not None:
            self._methods_by_name.setdefault((component, method_name), []).append(fact)
        return True

    def add_var_fact(self, node: Node, scope: NodeKey, variable_name: Optional[str]) -> bool:
        key = (scope, variable_name, node_key(node))
        if key in self._var_seen:
            return False
        self._var_seen.add(key)
        self.var_facts.append(VarFact(scope=scope, variable_name=variable_name, node=node))
        return True

    def add_call_edge(self, component: NodeKey, caller: str, callee: str) -> None:
        graph = self.call_graphs.setdefault(component, nx.DiGraph())
        graph.add_edge(caller, callee)

    def method_facts_for(self, component: NodeKey, method_name: Optional[str]) -> List[MethodFact]:
        if method_name is None:
            return []
        return list(self._methods_by_name.get((component, method_name), []))

    def var_facts_for(self, scope: NodeKey, variable_name: str) -> List[VarFact]:
        return [
            fact for fact in self.var_facts
            if fact.scope == scope and fact.variable_name == variable_name
        ]

    def close_over_calls(self) -> int:
        """Propagate MethodFacts backward along call edges to a fixed point.

        Every method that reaches a state-reading method through calls gets
        a MethodFact pointing at the original read. nx.ancestors is already
        transitive and cycle-safe, so a single sweep reaches the fixed point.

        Returns:
            Number of facts added
        """
        added = 0
        for fact in list(self.method_facts):
            graph = self.call_graphs.get(fact.component)
            if graph is None or fact.method_name is None or fact.method_name not in graph:
                continue
            for caller in nx.ancestors(graph, fact.method_name):
                if self.add_method_fact(fact.component, caller, fact.node):
                    added += 1
        return added
