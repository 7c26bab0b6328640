"""
Disk encryption module.

This module wraps the cryptsetup commands used to initialise, open and
close LUKS volumes. cryptsetup talks to the terminal directly, so it asks
for passphrases and its own confirmation without our involvement.
"""
import logging
import subprocess
from typing import List

from ezluks.config import Settings
from ezluks.utils.command import CommandRunner
from ezluks.utils.format import format_command
from ezluks.core.exceptions import EncryptionError

logger = logging.getLogger('ezluks')


def run_cryptsetup_cmd(args: List[str], settings: Settings, cmd_runner: CommandRunner) -> None:
    """
    Run a cryptsetup subcommand.

    Args:
        args: Arguments following the cryptsetup executable
        settings: Active settings, provides the cryptsetup path
        cmd_runner: CommandRunner instance for executing commands

    Raises:
        EncryptionError: If the command fails
    """
    cmd = [settings.cryptsetup] + args
    try:
        cmd_runner.run(cmd)
    except subprocess.CalledProcessError as e:
        raise EncryptionError(
            f"Command '{format_command(cmd)}' failed", command=cmd, returncode=e.returncode
        )


def luks_format(device: str, settings: Settings, cmd_runner: CommandRunner) -> None:
    """Initialise device as a new LUKS volume."""
    logger.info(f"Running 'cryptsetup luksFormat {device}'..")
    run_cryptsetup_cmd(["luksFormat", device], settings, cmd_runner)


def open_mapper(device: str, label: str, settings: Settings, cmd_runner: CommandRunner) -> None:
    """Open the LUKS volume on device as /dev/mapper/<label>."""
    logger.info(f"Running 'cryptsetup open {device} {label}'")
    run_cryptsetup_cmd(["open", device, label], settings, cmd_runner)


def close_mapper(label: str, settings: Settings, cmd_runner: CommandRunner) -> None:
    logger.info(f"Using cryptsetup to close mapper label '{label}'")
    run_cryptsetup_cmd(["close", label], settings, cmd_runner)
