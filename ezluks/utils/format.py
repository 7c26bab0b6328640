"""
Formatting utilities.

This module provides consistent terminal output formatting and
rendering of command lines for log and error messages.
"""
import shlex
from typing import Sequence


# ANSI Terminal Colors
class TermColors:
    """ANSI color codes for terminal output"""
    INFO = '\033[94m'     # Blue for informational messages
    SUCCESS = '\033[92m'  # Green for success messages 
    WARNING = '\033[93m'  # Yellow for warnings
    ERROR = '\033[91m'    # Red for errors
    SIM = '\033[96m'      # Cyan for simulation messages
    BOLD = '\033[1m'      # Bold text
    ENDC = '\033[0m'      # End color


def colorize(message: str, color: str, enabled: bool = True) -> str:
    """
    Add color to a message if color output is enabled.
    
    Args:
        message: The message to colorize
        color: The color to use (from TermColors)
        enabled: Whether colorization is enabled
        
    Returns:
        Colorized message or original message if colors disabled
    """
    if not enabled:
        return message
    return f"{color}{message}{TermColors.ENDC}"


def format_command(cmd: Sequence[str]) -> str:
    """
    Render an argv list as a single shell-quoted command line.

    Empty arguments stay visible as '' so a blank mapper label can be
    spotted in error output.
    """
    return shlex.join(str(part) for part in cmd)
