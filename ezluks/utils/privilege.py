"""
Privilege policy utilities.

ezluks either expects to be started as root, or prefixes every mutating
command with an elevation tool found on the system.
"""
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from ezluks.core.exceptions import PrivilegeError

logger = logging.getLogger('ezluks')

# Probed in order, first existing path wins
ELEVATION_TOOLS = ("/usr/bin/doas", "/usr/bin/sudo")


class PrivilegeMode(Enum):
    """How collaborator commands obtain root privileges"""
    ROOT = "root"        # Process already runs with euid 0
    ELEVATE = "elevate"  # Each command is run through doas/sudo


def is_root() -> bool:
    """Return True when the effective user id is the privileged id."""
    return os.geteuid() == 0


def require_root() -> None:
    """
    Check once that the process already has root privileges.

    Raises:
        PrivilegeError: If the effective user id is not 0
    """
    if not is_root():
        raise PrivilegeError("Not running as root, aborting..")


def find_elevation_tool(candidates: Optional[Sequence[str]] = None) -> str:
    """
    Locate a privilege elevation tool by probing well-known paths.

    Args:
        candidates: Paths to probe, defaults to ELEVATION_TOOLS

    Returns:
        Path of the first tool that exists

    Raises:
        PrivilegeError: If none of the candidates exists
    """
    candidates = ELEVATION_TOOLS if candidates is None else candidates
    for tool in candidates:
        if Path(tool).exists():
            logger.debug(f"Using {tool} for privilege elevation")
            return tool
    raise PrivilegeError(
        f"Could not find a privilege elevation tool (tried {', '.join(candidates)}), aborting.."
    )
