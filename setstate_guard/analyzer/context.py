"""Everything one file's analysis shares between checker components."""
from dataclasses import dataclass
from tree_sitter import Node

from .components import ComponentDetector
from .facts import FactTables
from .report import ViolationReporter
from .scopes import ScopeResolver


@dataclass
class AnalysisContext:
    file_path: str
    root: Node
    components: ComponentDetector
    scopes: ScopeResolver
    facts: FactTables
    reporter: ViolationReporter

    @classmethod
    def create(cls, root: Node, file_path: str, config) -> 'AnalysisContext':
        """Build a fresh context; nothing is shared with other files."""
        return cls(
            file_path=str(file_path),
            root=root,
            components=ComponentDetector.from_config(config),
            scopes=ScopeResolver(root),
            facts=FactTables(),
            reporter=ViolationReporter(file_path),
        )
