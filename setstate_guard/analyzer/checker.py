"""The no-access-state-in-setstate check.

Flags reads of `this.state` that are evaluated as part of the first argument
of `this.setState(...)`, directly or through local aliases and helper
methods. Such updates should use the updater callback form
`this.setState(prev => ...)` instead.

Analysis of one file runs in two phases:

1. Collection: one pre-order traversal feeds every node to the State-Read
   Locator, Call-Site Correlator and Alias Tracker. Direct reads are reported
   immediately; everything else becomes a fact or a pending site.
2. Resolution: MethodFacts are closed over each component's call graph, then
   pending call sites and alias uses are matched against the closed tables.

Because resolution waits for the whole file, a helper may be declared before
or after the method that calls it.
"""
from pathlib import Path
from typing import List, Optional

from ..config import get_config
from .aliases import AliasTracker
from .call_sites import CallSiteCorrelator
from .context import AnalysisContext
from .parser import LanguageParser, UnsupportedLanguageError
from .report import Violation
from .state_reads import StateReadLocator
from .syntax import IDENTIFIER_TYPES, traverse


class SetStateChecker:
    """Runs the check over parsed trees, source strings or files."""

    def __init__(self, config=None):
        self.config = config if config is not None else get_config()
        self._parsers = {}

    def analyze(self, tree, file_path: str = "<source>") -> List[Violation]:
        """Analyze one parsed file.

        Args:
            tree: tree-sitter Tree of a JS/TS source file
            file_path: Path recorded on each violation

        Returns:
            Violations sorted by position
        """
        context = AnalysisContext.create(tree.root_node, file_path, self.config)
        locator = StateReadLocator(context)
        correlator = CallSiteCorrelator(context)
        aliases = AliasTracker(context)

        for node in traverse(tree.root_node):
            kind = node.type
            if kind == 'member_expression':
                locator.visit(node)
            elif kind == 'call_expression':
                correlator.visit(node)
            elif kind in IDENTIFIER_TYPES:
                aliases.visit_identifier(node)
            elif kind == 'variable_declarator':
                aliases.visit_declarator(node)

        context.facts.close_over_calls()
        correlator.resolve()
        aliases.resolve()

        return context.reporter.violations()

    def check_source(self, source_code: str | bytes, file_path: str = "<source>.jsx",
                     language: Optional[str] = None) -> List[Violation]:
        """Parse and analyze in-memory source.

        Args:
            source_code: JS/TS source text
            file_path: Used for reporting and, without `language`, to pick the grammar
            language: 'javascript', 'typescript' or 'tsx'

        Raises:
            UnsupportedLanguageError: If no grammar matches
        """
        if language is None:
            language = LanguageParser.language_for(file_path)
            if language is None:
                raise UnsupportedLanguageError(f"Unsupported file type: {file_path}")
        tree = self._parser(language).parse_source(source_code)
        return self.analyze(tree, file_path)

    def check_file(self, file_path: str | Path) -> Optional[List[Violation]]:
        """Parse and analyze a file on disk.

        Returns:
            Violations, or None if the file type is unsupported or unreadable
        """
        file_path = Path(file_path)
        language = LanguageParser.language_for(file_path)
        if language is None:
            return None
        tree = self._parser(language).parse_file(file_path)
        if tree is None:
            return None
        return self.analyze(tree, str(file_path))

    def _parser(self, language: str) -> LanguageParser:
        if language not in self._parsers:
            self._parsers[language] = LanguageParser(language)
        return self._parsers[language]
