"""
Filesystem creation module.

This module resolves mkfs formatters by filesystem type and creates
filesystems on opened mapper devices.
"""
import logging
import subprocess
from typing import Optional

from ezluks.config import Settings
from ezluks.utils.command import CommandRunner
from ezluks.utils.format import TermColors, colorize, format_command
from ezluks.utils.prompt import InputFunc, ask_until_valid
from ezluks.utils.validation import tool_available
from ezluks.core.exceptions import FilesystemError

logger = logging.getLogger('ezluks')


def resolve_formatter(answer: str, settings: Settings) -> Optional[str]:
    """
    Turn a filesystem type answer into an installed formatter path.

    Args:
        answer: Raw user input, blank selects the default filesystem
        settings: Active settings

    Returns:
        Path of the mkfs formatter, or None if it is not installed
    """
    filesystem_type = answer.strip() or settings.default_filesystem
    formatter = settings.formatter_path(filesystem_type)
    if not tool_available(formatter):
        logger.error(colorize(f"Could not find {formatter}, please try again.",
                              TermColors.ERROR, settings.colored_output))
        return None
    return formatter


def choose_formatter(settings: Settings, input_func: InputFunc = input) -> str:
    """Ask for a filesystem type until one with an installed formatter is given."""
    return ask_until_valid(
        "What file system would you like this drive to have?\n"
        f"(default = {settings.default_filesystem}): ",
        lambda answer: resolve_formatter(answer, settings),
        input_func,
    )


def create_filesystem(formatter: str, device: str, cmd_runner: CommandRunner) -> None:
    """
    Create a filesystem on a device.

    Args:
        formatter: Path of the mkfs executable
        device: Device path to create the filesystem on
        cmd_runner: CommandRunner instance for executing commands

    Raises:
        FilesystemError: If the formatter fails
    """
    cmd = [formatter, device]
    logger.info(f"Running '{format_command(cmd)}'")
    try:
        cmd_runner.run(cmd)
    except subprocess.CalledProcessError as e:
        raise FilesystemError(
            f"Command '{format_command(cmd)}' failed", command=cmd, returncode=e.returncode
        )
