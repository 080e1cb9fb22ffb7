"""Tree-sitter parser for JavaScript and TypeScript component sources."""
from pathlib import Path
from typing import Optional
from tree_sitter import Language, Parser, Tree
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript


class UnsupportedLanguageError(ValueError):
    """Raised when a language or file extension has no grammar."""


class LanguageParser:
    """JS/TS parser using the tree-sitter v0.22+ API."""

    SUPPORTED_LANGUAGES = {
        '.js': 'javascript',
        '.jsx': 'javascript',
        '.mjs': 'javascript',
        '.cjs': 'javascript',
        '.ts': 'typescript',
        '.tsx': 'tsx',
    }

    def __init__(self, language: str):
        """Initialize parser for given language.

        Args:
            language: One of 'javascript', 'typescript', 'tsx'

        Raises:
            UnsupportedLanguageError: If language is not supported
        """
        self.language = language
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Build a Parser bound to the grammar for self.language.

        JSX is part of the JavaScript grammar; TypeScript ships two grammars
        because `<T>expr` casts and JSX elements are ambiguous.
        """
        if self.language == 'javascript':
            lang = Language(tsjavascript.language())
        elif self.language == 'typescript':
            lang = Language(tstypescript.language_typescript())
        elif self.language == 'tsx':
            lang = Language(tstypescript.language_tsx())
        else:
            raise UnsupportedLanguageError(f"Unsupported language: {self.language}")

        return Parser(lang)

    def parse_source(self, source_code: str | bytes) -> Tree:
        """Parse in-memory source and return the tree-sitter Tree."""
        if isinstance(source_code, str):
            source_code = source_code.encode('utf-8')
        return self.parser.parse(source_code)

    def parse_file(self, file_path: str | Path) -> Optional[Tree]:
        """Parse file and return tree-sitter Tree.

        Args:
            file_path: Path to source file to parse

        Returns:
            Parsed Tree object, or None if the file could not be read
        """
        file_path = Path(file_path)

        if not file_path.exists():
            return None

        try:
            with open(file_path, 'rb') as f:
                source_code = f.read()
            return self.parser.parse(source_code)
        except (UnicodeDecodeError, OSError):
            return None

    @classmethod
    def language_for(cls, file_path: str | Path) -> Optional[str]:
        """Grammar name for a file path, or None if its extension is unsupported."""
        return cls.SUPPORTED_LANGUAGES.get(Path(file_path).suffix.lower())

    @classmethod
    def is_supported(cls, file_path: str | Path) -> bool:
        return cls.language_for(file_path) is not None
