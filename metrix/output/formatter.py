"""
Output formatting for MetriX.

Handles ASCII tables, colors, and CLI output formatting.
"""

import os
import re
import sys
from typing import List, Optional, Any, Union

from metrix.models.entities import ConnectivityState

# Enable ANSI colors on Windows
if sys.platform == 'win32':
    os.system('')  # Triggers VT100 emulation

ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'


STATE_LABELS = {
    ConnectivityState.CONNECTED: ("LIVE CONNECTION", Colors.GREEN),
    ConnectivityState.DEMO: ("DEMO MODE", Colors.YELLOW),
    ConnectivityState.DISCONNECTED: ("NO DATA CONNECTION", Colors.RED),
}


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Apply color if enabled."""
    if not enabled:
        return text
    return f"{color}{text}{Colors.RESET}"


def bold(text: str, enabled: bool = True) -> str:
    """Make text bold."""
    if not enabled:
        return text
    return f"{Colors.BOLD}{text}{Colors.RESET}"


def dim(text: str, enabled: bool = True) -> str:
    if not enabled:
        return text
    return f"{Colors.DIM}{text}{Colors.RESET}"


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return ANSI_ESCAPE.sub('', text)


def format_number(value: Union[int, float], decimals: int = 0) -> str:
    """Format number with thousands separator."""
    if decimals > 0:
        return f"{value:,.{decimals}f}"
    return f"{int(value):,}"


def format_latency(ms: Union[int, float]) -> str:
    """Latency in ms, switching to seconds from 1000 ms."""
    if ms >= 1000:
        return f"{ms / 1000:.2f}s"
    return f"{int(ms)}ms"


def format_status_code(code: int, color_enabled: bool = True) -> str:
    """HTTP status colored by class."""
    if 200 <= code < 300:
        color = Colors.GREEN
    elif 300 <= code < 400:
        color = Colors.CYAN
    elif 400 <= code < 500:
        color = Colors.YELLOW
    else:
        color = Colors.RED
    return colorize(str(code), color, color_enabled)


def connectivity_badge(state: ConnectivityState, color_enabled: bool = True) -> str:
    """Bracketed, colored label for a connectivity state."""
    label, color = STATE_LABELS[state]
    return colorize(f"[{label}]", color, color_enabled)


def create_bar(value: float, max_value: float, width: int = 20) -> str:
    """Create ASCII progress bar."""
    if max_value <= 0:
        return ' ' * width

    ratio = min(1.0, value / max_value)
    filled = int(ratio * width)

    return '█' * filled + '░' * (width - filled)


def format_table(
    headers: List[str],
    rows: List[List[Any]],
    alignments: Optional[List[str]] = None,
    color_enabled: bool = True
) -> str:
    """
    Format data as an ASCII table.

    Args:
        headers: Column headers
        rows: List of row tuples/lists
        alignments: List of 'l' or 'r' for each column
        color_enabled: Whether to bold the header row
    """
    if not rows:
        return "No data to display."

    str_rows = [[str(cell) for cell in row] for row in rows]
    alignments = alignments or ['l'] * len(headers)

    col_widths = [len(h) for h in headers]
    for row in str_rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(strip_ansi(cell)))

    def align_cell(text: str, width: int, align: str) -> str:
        padding = ' ' * (width - len(strip_ansi(text)))
        return padding + text if align == 'r' else text + padding

    header_line = ' │ '.join(
        align_cell(h, col_widths[i], alignments[i]) for i, h in enumerate(headers)
    )
    lines = [bold(header_line, color_enabled)]
    lines.append('─┼─'.join('─' * w for w in col_widths))

    for row in str_rows:
        lines.append(' │ '.join(
            align_cell(cell, col_widths[i], alignments[i]) for i, cell in enumerate(row)
        ))

    return '\n'.join(lines)


def print_header(text: str, char: str = '=') -> str:
    """Create a header block."""
    line = char * 60
    return f"{line}\n  {text}\n{line}"


def print_section(title: str, color_enabled: bool = True) -> str:
    """Create a section header."""
    return f"\n{bold(title, color_enabled)}\n{'-' * len(title)}"
