import subprocess

import pytest

from ezluks import cli
from ezluks.utils import privilege

CS_ENV = "EZLUKS_CRYPTSETUP"


@pytest.fixture
def environment(tmp_path, monkeypatch, mkfs_dir):
    tool = tmp_path / "cryptsetup"
    tool.touch()
    monkeypatch.setenv(CS_ENV, str(tool))
    monkeypatch.setenv("EZLUKS_MKFS_DIR", str(mkfs_dir))
    monkeypatch.setenv("EZLUKS_LAYOUT", "fixed")
    monkeypatch.setenv("EZLUKS_MOUNT_ROOT", str(tmp_path / "mnt"))
    monkeypatch.delenv("EZLUKS_PRIVILEGE", raising=False)
    monkeypatch.setattr(privilege.os, "geteuid", lambda: 0)
    return tool


def test_parse_open():
    args = cli.parse_arguments(["open", "/dev/sda1", "vault"])

    assert (args.command, args.device, args.label) == ("open", "/dev/sda1", "vault")


def test_parse_global_options():
    args = cli.parse_arguments(["--layout", "fixed", "--privilege", "elevate", "-s", "close", "vault"])

    assert args.layout == "fixed"
    assert args.privilege == "elevate"
    assert args.simulate


@pytest.mark.parametrize("argv", [[], ["close"], ["open", "/dev/sda1"], ["format"], ["mount", "x"],
                                  ["close", "a", "b"]])
def test_bad_usage_prints_usage_and_exits_1(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_arguments(argv)

    assert excinfo.value.code == 1
    assert "open [block device" in capsys.readouterr().err


def test_main_close(environment, fake_subprocess, tmp_path):
    (tmp_path / "mnt" / "vault").mkdir(parents=True)

    assert cli.main(["--no-color", "close", "vault"]) == 0
    assert fake_subprocess.calls == [
        ["umount", str(tmp_path / "mnt" / "vault")],
        [str(environment), "close", "vault"],
    ]


def test_main_failure_exits_1(environment, fake_subprocess, ezluks_log):
    assert cli.main(["--no-color", "close", "vault"]) == 1
    assert "Could not find path" in ezluks_log.text
    assert fake_subprocess.calls == []


def test_main_without_cryptsetup(environment, fake_subprocess, tmp_path, device):
    environment.unlink()

    assert cli.main(["open", str(device), "vault"]) == 1
    assert fake_subprocess.calls == []


def test_main_requires_root(environment, fake_subprocess, monkeypatch, device):
    monkeypatch.setattr(privilege.os, "geteuid", lambda: 1000)

    assert cli.main(["open", str(device), "vault"]) == 1
    assert fake_subprocess.calls == []


def test_main_command_failure(environment, fake_subprocess, device, ezluks_log):
    fake_subprocess.fail_on(str(environment), "open")

    assert cli.main(["--no-color", "open", str(device), "vault"]) == 1
    assert f"open {device} vault' failed" in ezluks_log.text


def test_main_format_simulation(environment, fake_subprocess, device, monkeypatch, capsys, tmp_path):
    answers = iter(["YES", "vault", ""])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    assert cli.main(["--simulate", "--no-color", "format", str(device)]) == 0

    out = capsys.readouterr().out
    assert "SIMULATION COMPLETE" in out
    assert f"luksFormat {device}" in out
    assert "Total commands simulated: 4" in out
    assert fake_subprocess.calls == []
    assert not (tmp_path / "mnt").exists()


def test_main_interrupted(environment, monkeypatch, device):
    def interrupt(*args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(subprocess, "run", interrupt)

    assert cli.main(["open", str(device), "vault"]) == 130


def test_main_reports_compensated_failure_once(environment, fake_subprocess, device, tmp_path, ezluks_log):
    mount_point = tmp_path / "mnt" / "vault"
    mount_point.mkdir(parents=True)
    (mount_point / "leftover").touch()

    assert cli.main(["--no-color", "open", str(device), "vault"]) == 1
    assert ezluks_log.text.count("already exists and is not empty") == 1
    assert fake_subprocess.calls[-1] == [str(environment), "close", "vault"]
