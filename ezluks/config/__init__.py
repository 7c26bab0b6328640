"""
Runtime settings for ezluks.

This module gathers every path convention and policy choice in one
Settings object. Values come from command-line options, then EZLUKS_*
environment variables, then the defaults below.
"""
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

from ezluks.core.exceptions import ConfigurationError
from ezluks.utils.privilege import PrivilegeMode

logger = logging.getLogger('ezluks')

# Constants
DEFAULT_CRYPTSETUP = "/usr/bin/cryptsetup"
DEFAULT_MKFS_DIR = "/usr/bin"
DEFAULT_FILESYSTEM = "ext4"
DEFAULT_MAPPER_ROOT = "/dev/mapper"
DEFAULT_MEDIA_ROOT = "/run/media"
DEFAULT_MOUNT_ROOT = "/mnt"


class MountLayout(Enum):
    """Where mount points are created"""
    USER = "user"    # <media_root>/<username>/<label>
    FIXED = "fixed"  # <mount_root>/<label>


@dataclass
class Settings:
    """Paths and policies used by a single ezluks invocation"""
    cryptsetup: str = DEFAULT_CRYPTSETUP
    mkfs_dir: str = DEFAULT_MKFS_DIR
    default_filesystem: str = DEFAULT_FILESYSTEM
    mapper_root: str = DEFAULT_MAPPER_ROOT
    mount_layout: MountLayout = MountLayout.USER
    media_root: str = DEFAULT_MEDIA_ROOT
    mount_root: str = DEFAULT_MOUNT_ROOT
    username: Optional[str] = None
    privilege: PrivilegeMode = PrivilegeMode.ROOT
    simulate: bool = False
    colored_output: bool = True

    def mount_point(self, label: str) -> Path:
        """
        Derive the mount point of a mapper label.

        The label is appended as text, so an absolute label stays under the root.

        Raises:
            ConfigurationError: If the user layout is used without a username
        """
        if self.mount_layout == MountLayout.FIXED:
            return Path(f"{self.mount_root}/{label}")
        if not self.username:
            raise ConfigurationError("Failed to get username from $USER")
        return Path(f"{self.media_root}/{self.username}/{label}")

    def mapper_device(self, label: str) -> str:
        return f"{self.mapper_root}/{label}"

    def formatter_path(self, filesystem_type: str) -> str:
        return str(Path(self.mkfs_dir) / f"mkfs.{filesystem_type}")


def _pick(cli_value: Any, environ: Mapping[str, str], env_key: str, default: Any) -> Any:
    if cli_value is not None:
        return cli_value
    if environ.get(env_key):
        return environ[env_key]
    return default


def _enum_value(enum_cls, value: Any, option: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(f"Invalid {option} '{value}' (expected one of: {choices})")


def load_settings(args: Any = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from parsed command-line arguments and the environment.

    Args:
        args: argparse Namespace, attributes that are missing or None are ignored
        environ: Environment mapping, defaults to os.environ

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If a policy value is not recognised
    """
    environ = os.environ if environ is None else environ

    def opt(name: str) -> Any:
        return getattr(args, name, None) if args is not None else None

    settings = Settings(
        cryptsetup=_pick(None, environ, "EZLUKS_CRYPTSETUP", DEFAULT_CRYPTSETUP),
        mkfs_dir=_pick(None, environ, "EZLUKS_MKFS_DIR", DEFAULT_MKFS_DIR),
        mount_layout=_enum_value(
            MountLayout, _pick(opt("layout"), environ, "EZLUKS_LAYOUT", MountLayout.USER), "layout"
        ),
        media_root=_pick(opt("media_root"), environ, "EZLUKS_MEDIA_ROOT", DEFAULT_MEDIA_ROOT),
        mount_root=_pick(opt("mount_root"), environ, "EZLUKS_MOUNT_ROOT", DEFAULT_MOUNT_ROOT),
        username=environ.get("USER"),
        privilege=_enum_value(
            PrivilegeMode, _pick(opt("privilege"), environ, "EZLUKS_PRIVILEGE", PrivilegeMode.ROOT),
            "privilege mode"
        ),
        simulate=bool(opt("simulate")),
        colored_output=not opt("no_color"),
    )
    logger.debug(f"Settings: {settings}")
    return settings
