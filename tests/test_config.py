from pathlib import Path
from types import SimpleNamespace

import pytest

from ezluks.config import MountLayout, Settings, load_settings
from ezluks.core.exceptions import ConfigurationError
from ezluks.utils.privilege import PrivilegeMode


def test_defaults():
    settings = load_settings(None, {"USER": "alice"})

    assert settings.cryptsetup == "/usr/bin/cryptsetup"
    assert settings.mount_layout == MountLayout.USER
    assert settings.privilege == PrivilegeMode.ROOT
    assert settings.mount_point("vault") == Path("/run/media/alice/vault")
    assert settings.mapper_device("vault") == "/dev/mapper/vault"
    assert settings.formatter_path("ext4") == "/usr/bin/mkfs.ext4"
    assert not settings.simulate
    assert settings.colored_output


def test_fixed_layout_ignores_username():
    settings = Settings(mount_layout=MountLayout.FIXED)

    assert settings.mount_point("vault") == Path("/mnt/vault")


def test_user_layout_needs_username():
    with pytest.raises(ConfigurationError, match=r"\$USER"):
        load_settings(None, {}).mount_point("vault")


def test_environment_overrides():
    settings = load_settings(None, {
        "EZLUKS_LAYOUT": "fixed",
        "EZLUKS_MOUNT_ROOT": "/srv/volumes",
        "EZLUKS_PRIVILEGE": "elevate",
        "EZLUKS_MKFS_DIR": "/sbin",
        "EZLUKS_CRYPTSETUP": "/sbin/cryptsetup",
    })

    assert settings.mount_point("vault") == Path("/srv/volumes/vault")
    assert settings.privilege == PrivilegeMode.ELEVATE
    assert settings.formatter_path("xfs") == "/sbin/mkfs.xfs"
    assert settings.cryptsetup == "/sbin/cryptsetup"


def test_cli_options_beat_environment():
    args = SimpleNamespace(layout="user", media_root="/media", mount_root=None,
                           privilege="root", simulate=True, no_color=True)

    settings = load_settings(args, {"USER": "bob", "EZLUKS_LAYOUT": "fixed", "EZLUKS_PRIVILEGE": "elevate"})

    assert settings.mount_point("vault") == Path("/media/bob/vault")
    assert settings.privilege == PrivilegeMode.ROOT
    assert settings.simulate
    assert not settings.colored_output


def test_invalid_policy_value():
    with pytest.raises(ConfigurationError, match="privilege mode 'sometimes'"):
        load_settings(None, {"EZLUKS_PRIVILEGE": "sometimes"})


@pytest.mark.parametrize("layout, expected", [
    (MountLayout.FIXED, "/mnt/boot"),
    (MountLayout.USER, "/run/media/alice/boot"),
])
def test_absolute_label_stays_under_root(layout, expected):
    settings = Settings(mount_layout=layout, username="alice")

    assert settings.mount_point("/boot") == Path(expected)
    assert settings.mapper_device("/boot") == "/dev/mapper//boot"
