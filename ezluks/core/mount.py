"""
Filesystem mounting module.

This module prepares mount points and mounts/unmounts mapper devices.
"""
import logging
import subprocess
from pathlib import Path

from ezluks.utils.command import CommandRunner
from ezluks.utils.format import format_command
from ezluks.utils.privilege import PrivilegeMode
from ezluks.utils.validation import exists, is_empty_dir
from ezluks.core.exceptions import MountError, PreconditionError

logger = logging.getLogger('ezluks')


def _run_mount_cmd(cmd, cmd_runner: CommandRunner) -> None:
    try:
        cmd_runner.run(cmd)
    except subprocess.CalledProcessError as e:
        raise MountError(
            f"Command '{format_command(cmd)}' failed", command=cmd, returncode=e.returncode
        )


def _create_directory(path: Path, cmd_runner: CommandRunner) -> None:
    """
    Create directory with its parents or log that it would be created in simulation mode.

    Args:
        path: Directory path to create
        cmd_runner: CommandRunner instance for executing commands
    """
    if cmd_runner.simulating:
        logger.info(f"Would create directory: {path}")
    elif cmd_runner.privilege_mode == PrivilegeMode.ELEVATE:
        _run_mount_cmd(["mkdir", "-p", str(path)], cmd_runner)
    else:
        path.mkdir(exist_ok=True, parents=True)
        logger.debug(f"Created directory: {path}")


def prepare_mount_point(mount_point: Path, cmd_runner: CommandRunner) -> None:
    """
    Make sure mount_point is usable: created when missing, otherwise required to be empty.

    Args:
        mount_point: Directory to mount onto
        cmd_runner: CommandRunner instance for executing commands

    Raises:
        PreconditionError: If mount_point exists and is not an empty directory
    """
    if exists(mount_point):
        if not is_empty_dir(mount_point):
            raise PreconditionError(f"{mount_point} already exists and is not empty")
    else:
        _create_directory(mount_point, cmd_runner)


def mount_mapper(mapper_device: str, mount_point: Path, cmd_runner: CommandRunner) -> None:
    """
    Raises:
        MountError: If mount command fails
    """
    logger.info(f"Mounting {mapper_device} to {mount_point}")
    _run_mount_cmd(["mount", mapper_device, str(mount_point)], cmd_runner)


def unmount(mount_point: Path, cmd_runner: CommandRunner) -> None:
    """
    Raises:
        MountError: If umount command fails
    """
    logger.info(f"Unmounting {mount_point}")
    _run_mount_cmd(["umount", str(mount_point)], cmd_runner)
