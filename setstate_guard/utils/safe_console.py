"""Rich Console wrapper used for all CLI output.

Sanitizes glyphs on terminals without UTF-8 support and carries the
verbosity switch for diagnostic messages.
"""
from rich.console import Console
from rich.markup import escape
from typing import Any
from .logger import sanitize_for_terminal, is_utf8_capable


class SafeConsole(Console):
    """Console that sanitizes Unicode output and supports verbose-only messages."""

    def __init__(self, *args, verbose: bool = False, **kwargs):
        """Initialize SafeConsole with UTF-8 capability detection.

        Args:
            verbose: Emit messages passed to debug()
            *args, **kwargs: Passed through to Rich's Console
        """
        self._needs_sanitization = not is_utf8_capable()
        self.verbose = verbose

        if self._needs_sanitization:
            kwargs['legacy_windows'] = True

        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        """Print with automatic Unicode sanitization of string arguments."""
        if self._needs_sanitization:
            objects = tuple(
                sanitize_for_terminal(obj, utf8=False) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)

    def debug(self, message: str) -> None:
        """Print a dim diagnostic line when verbose mode is on."""
        if self.verbose:
            self.print(f"[dim]{message}[/dim]")

    def error(self, message: str) -> None:
        """Print an error line; `message` is escaped, not parsed as markup."""
        self.print(f"[bold red]Error:[/bold red] {escape(message)}")
