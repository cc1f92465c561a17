#!/usr/bin/env python3
"""CLI to pull a production WordPress site into the local wp-env sandbox.

Inputs: .env (or --env-file=PATH) plus environment overrides.
Side effects: exports the production database over ssh, copies it down
with scp, mirrors wp-content with rsync --delete, imports into wp-env,
rewrites URLs, reassigns authors, flushes rewrite rules and caches, and
deactivates production-only plugins. tmp/dump.sql is removed on every
exit path.
"""
import signal
import sys
from pathlib import Path

from config import ENV_FILE, LOCAL_ADMIN_LOGIN, LOCAL_ADMIN_PASS
from modules.errors import (
    ConnectivityError,
    FatalCommandError,
    MissingConfiguration,
    SyncError,
)
from modules.settings import load_config
from modules.sync import run_sync
from modules.utils import init_logging, log_path, status_fail, status_info, status_pass

# ─── CONFIG ──────────────────────────────────────────────────────────────
FLAG_ENV_FILE = "--env-file"
FLAG_ROOT = "--root"
USAGE = f"usage: prodsync.py [{FLAG_ENV_FILE}=PATH] [{FLAG_ROOT}=DIR]"


# ─── CLI ──────────────────────────────────────────────────────────────
def parse_args(argv: list[str]) -> dict[str, str] | None:
    opts = {"env_file": ENV_FILE, "root": "."}
    for a in argv:
        if a.startswith(f"{FLAG_ENV_FILE}="):
            opts["env_file"] = a.split("=", 1)[1]
            continue
        if a.startswith(f"{FLAG_ROOT}="):
            opts["root"] = a.split("=", 1)[1]
            continue
        return None
    return opts


def _terminate(signum, frame):
    # Turn SIGTERM into SystemExit so the dump cleanup still runs
    raise SystemExit(1)


def report_missing(err: MissingConfiguration) -> None:
    status_fail(str(err))
    status_fail("Please create .env file with the following variables:")
    for key in err.missing:
        print(f"  {key}=<value>", file=sys.stderr)


def report_command_failure(err: FatalCommandError) -> None:
    status_fail(f"{err}; see log {log_path()}")
    for line in err.stderr.splitlines():
        print(f"  {line}", file=sys.stderr)


def report_success(local_url: str) -> None:
    status_pass("Setup complete!")
    print("")
    status_info(f"Local site URL: {local_url}")
    status_info(f"Login URL: {local_url}/wp-login.php")
    status_info(f"Default credentials: {LOCAL_ADMIN_LOGIN} / {LOCAL_ADMIN_PASS}")


def main(argv: list[str]) -> int:
    init_logging(None)
    opts = parse_args(argv)
    if opts is None:
        status_fail(USAGE)
        return 2

    root = Path(opts["root"])
    env_file = Path(opts["env_file"])
    if not env_file.is_absolute():
        env_file = root / env_file

    try:
        cfg = load_config(env_file)
    except MissingConfiguration as err:
        report_missing(err)
        return 1

    previous = signal.signal(signal.SIGTERM, _terminate)
    try:
        run_sync(cfg, root)
    except ConnectivityError as err:
        status_fail(f"Cannot connect to server: {err}")
        status_fail(f"SSH Key: {err.key_path}")
        status_fail(f"SSH Port: {err.port}")
        status_info(f"If this is your first connection, please run: {err.remediation}")
        return 1
    except FatalCommandError as err:
        report_command_failure(err)
        return 1
    except SyncError as err:
        status_fail(f"{err}; see log {log_path()}")
        return 1
    finally:
        signal.signal(signal.SIGTERM, previous)
    report_success(cfg.local_url)
    return 0


def _console_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
