"""Local wp-env sandbox and working directories."""

from __future__ import annotations

import logging
from pathlib import Path

from config import LOCAL_CONTENT_DIR, LOCAL_TMP_DIR, WP_ENV_CMD
from modules.utils import log, run_cmd


def ensure_dir(path: Path) -> bool:
    """Create path if absent. Returns True when it had to be created."""
    if path.is_dir():
        return False
    log(f"Directory '{path}' does not exist. Creating...")
    path.mkdir(parents=True, exist_ok=True)
    return True


def ensure_local_dirs(root: Path) -> list[Path]:
    created = []
    for name in (LOCAL_CONTENT_DIR, LOCAL_TMP_DIR):
        path = root / name
        if ensure_dir(path):
            created.append(path)
    return created


def restart_local_env() -> None:
    # Stopping a sandbox that is not running is fine
    proc = run_cmd([*WP_ENV_CMD, "stop"], check=False, capture=True)
    if proc.returncode != 0:
        logging.warning("wp-env stop exit=%s (ignored)", proc.returncode)
    run_cmd([*WP_ENV_CMD, "start"])
