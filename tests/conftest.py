import logging
import subprocess
from pathlib import Path
from typing import List

import pytest

from ezluks.config import MountLayout, Settings
from ezluks.utils.command import CommandRunner, SimulationMode
from ezluks.utils.privilege import PrivilegeMode

CRYPTSETUP = "/usr/bin/cryptsetup"


class FakeSubprocess:
    """Stands in for subprocess.run, recording every argv."""

    def __init__(self):
        self.calls: List[List[str]] = []
        self.kwargs: List[dict] = []
        self.failing: List[tuple] = []

    def fail_on(self, *prefix):
        self.failing.append(tuple(prefix))

    def __call__(self, cmd, check=True, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        self.kwargs.append(kwargs)
        rc = 1 if any(tuple(cmd[:len(p)]) == p for p in self.failing) else 0
        if check and rc:
            raise subprocess.CalledProcessError(rc, cmd)
        return subprocess.CompletedProcess(cmd, rc)

    def programs(self):
        return [cmd[0] for cmd in self.calls]


class ScriptedInput:
    """Answers prompts from a fixed list, EOF once exhausted."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, prompt=""):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def fake_subprocess(monkeypatch):
    fake = FakeSubprocess()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def mkfs_dir(tmp_path):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    (bin_dir / "mkfs.ext4").touch()
    (bin_dir / "mkfs.btrfs").touch()
    return bin_dir


@pytest.fixture
def settings(tmp_path, mkfs_dir):
    return Settings(
        cryptsetup=CRYPTSETUP,
        mkfs_dir=str(mkfs_dir),
        mount_layout=MountLayout.FIXED,
        mount_root=str(tmp_path / "mnt"),
        colored_output=False,
    )


@pytest.fixture
def runner():
    return CommandRunner(SimulationMode.DISABLED, PrivilegeMode.ROOT, colored_output=False)


@pytest.fixture
def device(tmp_path) -> Path:
    dev = tmp_path / "sdX1"
    dev.touch()
    return dev


@pytest.fixture
def ezluks_log(caplog):
    caplog.set_level(logging.INFO, logger="ezluks")
    return caplog


@pytest.fixture
def scripted():
    return ScriptedInput
