"""
Base exceptions for ezluks.

This module defines the hierarchy of exceptions used by ezluks.
"""
from typing import List, Optional


class EzluksError(Exception):
    """Base exception for ezluks errors"""
    pass


class ConfigurationError(EzluksError):
    """Exception raised when settings are invalid or incomplete"""
    pass


class PreconditionError(EzluksError):
    """Exception raised when a path, tool or directory state check fails"""
    pass


class PrivilegeError(PreconditionError):
    """Exception raised when commands cannot be run with elevated privileges"""
    pass


class ConfirmationError(EzluksError):
    """Exception raised when the user does not confirm a destructive action"""
    pass


class CommandError(EzluksError):
    """
    Exception raised when an external command fails.

    Attributes:
        command: The argv that was attempted
        returncode: Exit status of the command, None if it could not be started
    """
    def __init__(self, message: str, command: Optional[List[str]] = None,
                 returncode: Optional[int] = None):
        super().__init__(message)
        self.command = list(command) if command else []
        self.returncode = returncode


class EncryptionError(CommandError):
    """Exception raised when the encryption tool fails"""
    pass


class FilesystemError(CommandError):
    """Exception raised when there's an error in filesystem creation"""
    pass


class MountError(CommandError):
    """Exception raised when there's an error in mounting or unmounting"""
    pass
