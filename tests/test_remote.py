"""Production-side commands: ssh probe, export, scp, rsync."""

from pathlib import Path

import pytest

from modules import remote
from modules.errors import ConnectivityError, FatalCommandError


def test_check_connection_passes(runner, cfg):
    remote.check_connection(cfg)
    argv = runner.calls[0]
    assert argv[0] == "ssh"
    assert "ConnectTimeout=5" in argv
    assert argv[-2:] == ["deploy@prod.example.com", "exit"]


def test_check_connection_failure_names_host_port_key(runner, cfg):
    runner.fail_when("ssh", code=255)
    with pytest.raises(ConnectivityError) as exc:
        remote.check_connection(cfg)
    err = exc.value
    assert "prod.example.com" in str(err)
    assert "2222" in str(err)
    assert "/home/dev/.ssh/prod_ed25519" in str(err)
    assert err.remediation == (
        "ssh -i /home/dev/.ssh/prod_ed25519 -p 2222 deploy@prod.example.com"
    )


def test_export_excludes_users_table(runner, cfg):
    remote.export_database(cfg)
    remote_cmd = runner.calls[0][-1]
    assert remote_cmd.startswith("cd /var/www/example && wp db export")
    assert "--exclude_tables=wp_users" in remote_cmd
    assert remote_cmd.endswith("dump.sql")


def test_export_failure_is_fatal(runner, cfg):
    runner.fail_when("wp db export", code=1)
    with pytest.raises(FatalCommandError):
        remote.export_database(cfg)


def test_fetch_dump_uses_scp_port_flag(runner, cfg, tmp_path):
    target = tmp_path / "dump.sql"
    remote.fetch_dump(cfg, target)
    assert runner.calls[0] == [
        "scp",
        "-P",
        "2222",
        "-i",
        "/home/dev/.ssh/prod_ed25519",
        "deploy@prod.example.com:/var/www/example/dump.sql",
        str(target),
    ]


def test_remove_remote_dump_is_best_effort(runner, cfg):
    runner.fail_when("rm -f", code=1)
    assert remote.remove_remote_dump(cfg) is False


def test_rsync_mirrors_with_delete_and_excludes(cfg):
    argv = remote.rsync_argv(cfg, Path("wp-content"))
    assert argv[:3] == ["rsync", "-av", "--delete"]
    assert argv[3:5] == ["-e", "ssh -i /home/dev/.ssh/prod_ed25519 -p 2222"]
    assert "--exclude=uploads/backwpup" in argv
    assert argv[-2:] == [
        "deploy@prod.example.com:/var/www/example/wp-content/",
        "wp-content",
    ]


def test_rsync_custom_excludes(cfg):
    argv = remote.rsync_argv(cfg, Path("wp-content"), ["cache", "uploads/*.zip"])
    assert [a for a in argv if a.startswith("--exclude=")] == [
        "--exclude=cache",
        "--exclude=uploads/*.zip",
    ]


def test_mirror_is_same_command_on_rerun(runner, cfg):
    remote.mirror_content(cfg, Path("wp-content"))
    remote.mirror_content(cfg, Path("wp-content"))
    assert runner.calls[0] == runner.calls[1]


def test_mirror_failure_is_fatal(runner, cfg):
    runner.fail_when("rsync", code=23)
    with pytest.raises(FatalCommandError) as exc:
        remote.mirror_content(cfg, Path("wp-content"))
    assert exc.value.returncode == 23
