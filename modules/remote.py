"""Production-side operations over ssh, scp and rsync.

SRP: this module only talks to the production host. Local WP-CLI work
lives in modules.wordpress.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from config import EXCLUDED_TABLES, RSYNC_EXCLUDES, SSH_CONNECT_TIMEOUT
from modules.errors import ConnectivityError
from modules.settings import SyncConfig
from modules.utils import log, run_cmd


def _ssh_argv(cfg: SyncConfig, remote_cmd: str, *extra: str) -> list[str]:
    return ["ssh", *extra, *cfg.ssh_options, cfg.ssh_target, remote_cmd]


def check_connection(cfg: SyncConfig) -> None:
    argv = _ssh_argv(
        cfg,
        "exit",
        "-q",
        "-o",
        f"ConnectTimeout={SSH_CONNECT_TIMEOUT}",
        "-o",
        "BatchMode=yes",
    )
    # ConnectTimeout covers the handshake; the outer timeout covers a hung session
    proc = run_cmd(argv, check=False, capture=True, timeout=SSH_CONNECT_TIMEOUT * 3)
    if proc.returncode != 0:
        raise ConnectivityError(
            cfg.production_host,
            cfg.production_ssh_port,
            cfg.production_ssh_key,
            target=cfg.ssh_target,
        )
    log(f"PASS: ssh {cfg.ssh_target} reachable")


def export_command(cfg: SyncConfig) -> str:
    tables = ",".join(EXCLUDED_TABLES)
    return (
        f"cd {shlex.quote(cfg.production_dir)} && "
        f"wp db export --exclude_tables={shlex.quote(tables)} "
        f"{shlex.quote(Path(cfg.remote_dump_path).name)}"
    )


def export_database(cfg: SyncConfig) -> None:
    run_cmd(_ssh_argv(cfg, export_command(cfg)))


def fetch_dump(cfg: SyncConfig, local_path: Path) -> None:
    argv = [
        "scp",
        "-P",
        cfg.production_ssh_port,
        "-i",
        cfg.production_ssh_key,
        f"{cfg.ssh_target}:{cfg.remote_dump_path}",
        str(local_path),
    ]
    run_cmd(argv)


def remove_remote_dump(cfg: SyncConfig) -> bool:
    proc = run_cmd(
        _ssh_argv(cfg, f"rm -f {shlex.quote(cfg.remote_dump_path)}"), check=False
    )
    if proc.returncode != 0:
        logging.warning(
            "Could not remove %s on %s (exit=%s)",
            cfg.remote_dump_path,
            cfg.production_host,
            proc.returncode,
        )
        return False
    return True


def rsync_argv(cfg: SyncConfig, local_dir: Path, excludes: list[str] | None = None) -> list[str]:
    if excludes is None:
        excludes = RSYNC_EXCLUDES
    ssh_cmd = " ".join(["ssh"] + [shlex.quote(o) for o in cfg.ssh_options])
    argv = ["rsync", "-av", "--delete", "-e", ssh_cmd]
    argv += [f"--exclude={pattern}" for pattern in excludes]
    argv += [f"{cfg.ssh_target}:{cfg.remote_content_path}", str(local_dir)]
    return argv


def mirror_content(cfg: SyncConfig, local_dir: Path, excludes: list[str] | None = None) -> None:
    run_cmd(rsync_argv(cfg, local_dir, excludes))
