"""
Volume lifecycle module.

This module drives the open, close and format workflows. Each step is
checked right before it runs and the first failure aborts the workflow
by raising. Once a mapper has been opened, a later failure closes it
again before the error propagates.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ezluks.config import Settings
from ezluks.utils.command import CommandRunner
from ezluks.utils.format import TermColors, colorize
from ezluks.utils.prompt import InputFunc, ask, confirm_destructive
from ezluks.utils.validation import exists, require_path
from ezluks.core.encryption import close_mapper, luks_format, open_mapper
from ezluks.core.exceptions import EzluksError, PreconditionError
from ezluks.core.filesystem import choose_formatter, create_filesystem
from ezluks.core.mount import mount_mapper, prepare_mount_point, unmount

logger = logging.getLogger('ezluks')


class VolumeController:
    """
    Runs the ezluks workflows against one set of settings.

    Args:
        settings: Path conventions and policies
        cmd_runner: CommandRunner instance for executing commands
        input_func: Line reader used for every prompt, defaults to input()
    """
    def __init__(self, settings: Settings, cmd_runner: CommandRunner,
                 input_func: Optional[InputFunc] = None):
        self.settings = settings
        self.cmd_runner = cmd_runner
        self.input_func = input_func or input

    def _success(self, message: str) -> None:
        logger.info(colorize(message, TermColors.SUCCESS, self.settings.colored_output))

    @contextmanager
    def _close_on_failure(self, label: str) -> Iterator[None]:
        """Close the mapper for label if the wrapped steps raise."""
        try:
            yield
        except EzluksError:
            logger.error(f"Closing '{label}' with cryptsetup and aborting..")
            try:
                close_mapper(label, self.settings, self.cmd_runner)
            except EzluksError as close_error:
                logger.error(f"Could not close mapper '{label}': {close_error}")
            raise

    def _mount_opened(self, label: str, mount_point: Path) -> None:
        mapper_device = self.settings.mapper_device(label)
        prepare_mount_point(mount_point, self.cmd_runner)
        mount_mapper(mapper_device, mount_point, self.cmd_runner)

    def close_volume(self, label: str) -> Path:
        """
        Unmount and close a volume.

        Args:
            label: Mapper label of the open volume

        Returns:
            The mount point that was unmounted

        Raises:
            PreconditionError: If the mount point does not exist
            MountError: If unmounting fails, the mapper is left open
            EncryptionError: If closing the mapper fails
        """
        mount_point = self.settings.mount_point(label)
        if not exists(mount_point):
            raise PreconditionError(f"Could not find path {mount_point}, aborting..")

        unmount(mount_point, self.cmd_runner)
        close_mapper(label, self.settings, self.cmd_runner)
        self._success(f"Successfully closed {label}!")
        return mount_point

    def open_volume(self, device: str, label: str) -> Path:
        """
        Open an existing LUKS volume and mount it.

        Args:
            device: Block device holding the LUKS volume
            label: Mapper label to open it under

        Returns:
            The mount point

        Raises:
            PreconditionError: If the device is missing or the mount point is not empty
            EncryptionError: If cryptsetup fails
            MountError: If mounting fails
        """
        require_path(device)
        mount_point = self.settings.mount_point(label)

        open_mapper(device, label, self.settings, self.cmd_runner)
        with self._close_on_failure(label):
            self._mount_opened(label, mount_point)

        self._success(f"Successfully decrypted and mounted drive to {mount_point}!")
        return mount_point

    def format_device(self, device: str) -> Path:
        """
        Wipe a block device into a new LUKS volume with a filesystem, and mount it.

        The user confirms the wipe, names the mapper label and picks the
        filesystem type interactively.

        Args:
            device: Block device to format

        Returns:
            The mount point of the new volume

        Raises:
            PreconditionError: If the device is missing or the mount point is not empty
            ConfirmationError: If the wipe is not confirmed
            EncryptionError: If cryptsetup fails
            FilesystemError: If the formatter fails
            MountError: If mounting fails
        """
        require_path(device)
        confirm_destructive(device, self.input_func)
        print("\ncryptsetup will also ask you to reconfirm this in a moment..")

        luks_format(device, self.settings, self.cmd_runner)

        label = ask("Give your new luks volume a mapper label: ", self.input_func).strip()
        mount_point = self.settings.mount_point(label)

        open_mapper(device, label, self.settings, self.cmd_runner)
        with self._close_on_failure(label):
            formatter = choose_formatter(self.settings, self.input_func)
            create_filesystem(formatter, self.settings.mapper_device(label), self.cmd_runner)
            self._mount_opened(label, mount_point)

        self._success(f"Successfully formatted your new drive and mounted to {mount_point}!")
        return mount_point
