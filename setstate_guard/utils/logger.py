"""Terminal-safe text for CLI output.

Detects whether the terminal can render UTF-8 and maps the glyphs used in
report output to ASCII when it cannot (legacy Windows consoles, CI logs
captured as cp1252).
"""
import sys
import locale


# Glyphs emitted by the CLI and their ASCII fallbacks
ICON_MAP = {
    '✓': '[OK]',
    '✗': '[FAIL]',
    '⚠': '[WARN]',
    '→': '->',
    '…': '...',
    '•': '*',
    '│': '|',
    '─': '-',
}

UTF8_ENCODINGS = {'utf-8', 'utf8', 'utf_8'}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding.

    Returns:
        str: Encoding name, lowercased ('utf-8', 'cp1252', 'ascii', ...)
    """
    encoding = getattr(sys.stdout, 'encoding', None)
    if encoding:
        return encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (ValueError, LookupError):
        return 'ascii'


def is_utf8_capable() -> bool:
    return detect_terminal_encoding() in UTF8_ENCODINGS


def sanitize_for_terminal(text: str, utf8: bool = None) -> str:
    """Replace known glyphs with ASCII equivalents on non-UTF-8 terminals.

    Args:
        text: Text potentially containing glyphs from ICON_MAP
        utf8: Override terminal detection (mainly for tests)

    Returns:
        str: Text safe for the current terminal
    """
    if utf8 is None:
        utf8 = is_utf8_capable()
    if utf8:
        return text

    for glyph, ascii_replacement in ICON_MAP.items():
        text = text.replace(glyph, ascii_replacement)
    return text
