"""
Validation utilities.

This module provides the filesystem-level checks run right before any
mutating action, and the startup prerequisite check.
"""
import logging
import os
from pathlib import Path
from typing import Union

from ezluks.config import Settings
from ezluks.core.exceptions import PreconditionError
from ezluks.utils.privilege import PrivilegeMode, require_root

logger = logging.getLogger('ezluks')

PathLike = Union[str, Path]


def exists(path: PathLike) -> bool:
    return Path(path).exists()


def is_empty_dir(path: PathLike) -> bool:
    """
    Check whether path is an existing directory without entries.

    Args:
        path: Directory to inspect

    Returns:
        True only for an existing, empty directory

    Raises:
        PreconditionError: If the directory cannot be listed
    """
    path = Path(path)
    if not path.is_dir():
        return False
    try:
        with os.scandir(path) as entries:
            return next(entries, None) is None
    except OSError as e:
        raise PreconditionError(f"Could not read directory {path}: {e}")


def tool_available(path: PathLike) -> bool:
    """Check that a tool is installed at its fixed location."""
    return Path(path).exists()


def require_path(path: PathLike) -> None:
    """
    Raises:
        PreconditionError: If path does not exist
    """
    if not exists(path):
        raise PreconditionError(f"Could not find path '{path}', aborting..")


def check_prerequisites(settings: Settings) -> None:
    """
    Check for the encryption tool and, when required, root privileges.

    Args:
        settings: Active settings

    Raises:
        PreconditionError: If the encryption tool is missing
        PrivilegeError: If running as root is expected but the euid is not 0
    """
    if not tool_available(settings.cryptsetup):
        raise PreconditionError(f"Could not find cryptsetup at {settings.cryptsetup}, aborting..")

    if settings.privilege == PrivilegeMode.ROOT:
        if settings.simulate:
            logger.info("Root privileges would be checked")
        else:
            require_root()
