"""Violation records and the per-file reporter."""
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Set, Tuple
from tree_sitter import Node

from .syntax import NodeKey, node_key, node_text

RULE_ID = 'no-access-state-in-setstate'

MESSAGES = {
    'useCallback': 'Use a callback in the state-update call when referencing the previous state.',
}


@dataclass
class Violation:
    """One reported problem, located at a state read or alias site."""
    file_path: str
    line: int  # 1-based
    column: int  # 1-based
    end_line: int
    end_column: int
    message_id: str
    message: str
    source: str  # text of the offending node
    rule: str = RULE_ID

    @classmethod
    def from_node(cls, node: Node, file_path: str, message_id: str = 'useCallback') -> 'Violation':
        return cls(
            file_path=str(file_path),
            line=node.start_point[0] + 1,
            column=node.start_point[1] + 1,
            end_line=node.end_point[0] + 1,
            end_column=node.end_point[1] + 1,
            message_id=message_id,
            message=MESSAGES[message_id],
            source=node_text(node),
        )

    def to_dict(self) -> Dict:
        return asdict(self)


class ViolationReporter:
    """Collects violations for one file, one per (read site, use site) pair."""

    def __init__(self, file_path: str):
        self.file_path = str(file_path)
        self._violations: List[Violation] = []
        self._seen: Set[Tuple[NodeKey, Optional[NodeKey]]] = set()

    def report(self, node: Node, site: Optional[Node] = None, message_id: str = 'useCallback') -> bool:
        """Report `node`; `site` is the use that made it a violation, if not `node` itself.

        Returns:
            True if this pair had not been reported yet
        """
        key = (node_key(node), node_key(site) if site is not None else None)
        if key in self._seen:
            return False
        self._seen.add(key)
        self._violations.append(Violation.from_node(node, self.file_path, message_id))
        return True

    def violations(self) -> List[Violation]:
        return sorted(self._violations, key=lambda v: (v.line, v.column, v.end_line, v.end_column))
