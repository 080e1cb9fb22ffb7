"""Configuration management for setstate-guard.

Loads environment variables (optionally from a .env file) and provides
centralized config access.
"""
import os
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

__version__ = "1.0.0"

DEFAULT_PRAGMA = "React"
DEFAULT_CREATE_CLASS = "createReactClass"
DEFAULT_COMPONENT_BASES = ["Component", "PureComponent"]

VENDORED_DIRS = {'node_modules', 'bower_components', 'vendor', 'third_party'}

# Directories never worth linting: dependencies, build output, VCS metadata
DEFAULT_EXCLUDED_DIRS = VENDORED_DIRS | {
    'dist', 'build', 'coverage', 'out', '.next', '.nuxt',
    '.git', '.hg', '.svn', '.cache',
    'venv', '.venv', '__pycache__',
}


def _split_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: Optional[Path] = None):
        """Initialize config by loading a .env file.

        Args:
            env_path: Explicit .env location. Defaults to ./.env in the
                      current working directory; a missing file is fine.
        """
        if env_path is None:
            env_path = Path.cwd() / ".env"
        load_dotenv(env_path)

    @property
    def pragma(self) -> str:
        """Get the React namespace identifier (e.g. `React` in `React.Component`).

        Returns:
            Pragma identifier string
        """
        return os.getenv("SETSTATE_GUARD_PRAGMA") or DEFAULT_PRAGMA

    @property
    def create_class(self) -> str:
        """Get the ES5 component factory name.

        Returns:
            Function name used as `createReactClass({...})`
        """
        return os.getenv("SETSTATE_GUARD_CREATE_CLASS") or DEFAULT_CREATE_CLASS

    @property
    def component_bases(self) -> List[str]:
        """Get class names that mark an ES6 class as a component.

        Priority:
        1. SETSTATE_GUARD_COMPONENT_BASES (comma separated)
        2. Component, PureComponent

        Returns:
            List of base class names, without the pragma prefix
        """
        return _split_list(os.getenv("SETSTATE_GUARD_COMPONENT_BASES")) or list(DEFAULT_COMPONENT_BASES)

    @property
    def excluded_dirs(self) -> set[str]:
        """Get directory names skipped during file discovery.

        Returns:
            Built-in exclusions plus SETSTATE_GUARD_EXCLUDED_DIRS entries
        """
        return DEFAULT_EXCLUDED_DIRS | set(_split_list(os.getenv("SETSTATE_GUARD_EXCLUDED_DIRS")))


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached Config so the next get_config() re-reads the environment."""
    global _config
    _config = None
