"""Production -> local sync pipeline.

Stages run in a fixed order; the first failure aborts the rest. The local
dump file is held by dump_guard for the whole run and removed on every
exit path.
"""

from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from config import DUMP_NAME, LOCAL_CONTENT_DIR, LOCAL_TMP_DIR
from modules import remote
from modules.settings import SyncConfig
from modules.utils import log, status_fail, status_info, status_pass
from modules.wordpress import db, env, site


class SyncState(enum.Enum):
    UNCONFIGURED = "unconfigured"
    VALIDATED = "validated"
    CONNECTED = "connected"
    LOCAL_READY = "local-ready"
    EXPORTED = "exported"
    TRANSFERRED = "transferred"
    IMPORTED = "imported"
    TRANSFORMED = "transformed"
    CLEANED_UP = "cleaned-up"
    FAILED = "failed"


def remove_dump(path: Path) -> bool:
    if not path.exists():
        return False
    log(f"Cleaning up {path}")
    path.unlink()
    return True


@contextmanager
def dump_guard(path: Path) -> Iterator[Path]:
    """Yield the local dump path; delete the file however the block exits."""
    try:
        yield path
    except BaseException:
        status_fail("Error occurred. Cleaning up...")
        remove_dump(path)
        raise
    if remove_dump(path):
        status_pass("SQL file cleaned up")


class SyncRun:
    """One pass of the pipeline for a validated SyncConfig."""

    def __init__(self, cfg: SyncConfig, root: Path):
        self.cfg = cfg
        self.root = root
        self.state = SyncState.UNCONFIGURED
        self.history = [self.state]
        # cfg is a built SyncConfig, so validation already happened
        self._reach(SyncState.VALIDATED)

    @property
    def dump_path(self) -> Path:
        return self.root / LOCAL_TMP_DIR / DUMP_NAME

    @property
    def content_dir(self) -> Path:
        return self.root / LOCAL_CONTENT_DIR

    def _reach(self, state: SyncState) -> None:
        log(f"STATE: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def step_connect(self) -> None:
        status_info("Checking SSH connection...")
        remote.check_connection(self.cfg)
        status_pass("SSH connection successful")
        self._reach(SyncState.CONNECTED)

    def step_local_env(self) -> None:
        env.ensure_local_dirs(self.root)
        status_info("Starting local environment...")
        env.restart_local_env()
        status_pass("Local environment started")
        self._reach(SyncState.LOCAL_READY)

    def step_export(self) -> None:
        status_info("Exporting database on production server...")
        remote.export_database(self.cfg)
        status_pass("Database exported on production server")
        self._reach(SyncState.EXPORTED)

    def step_transfer(self) -> None:
        status_info("Copying SQL dump file from production server...")
        remote.fetch_dump(self.cfg, self.dump_path)
        status_pass("SQL dump file copied to local")
        status_info("Syncing wp-content from production server...")
        remote.mirror_content(self.cfg, self.content_dir)
        status_pass("wp-content sync completed")
        # only once both copies are down
        if remote.remove_remote_dump(self.cfg):
            status_pass("Remote SQL dump removed")
        self._reach(SyncState.TRANSFERRED)

    def step_import(self) -> None:
        status_info("Importing database into wp-env...")
        db.import_dump()
        status_pass("Database import completed")
        self._reach(SyncState.IMPORTED)

    def step_transform(self) -> None:
        status_info("Replacing URLs in the database...")
        db.replace_urls(self.cfg)
        status_pass("URL replacement completed")

        status_info("Reassigning authors for posts and pages to admin...")
        db.reassign_post_authors()
        status_pass("Author reassignment completed")

        status_info("Flushing rewrite rules...")
        site.flush_rewrite_rules()
        status_pass("Rewrite rules flushed")

        status_info("Clearing caches and transients...")
        if not site.clear_caches():
            status_info("Object cache flush failed; continuing")
        status_pass("Caches and transients cleared")

        status_info("Disabling production-only plugins...")
        disabled = site.disable_local_plugins()
        if disabled:
            status_pass(f"Production-only plugins disabled: {', '.join(disabled)}")
        else:
            status_pass("No production-only plugins were active")
        self._reach(SyncState.TRANSFORMED)

    def run(self) -> SyncState:
        with dump_guard(self.dump_path):
            try:
                self.step_connect()
                self.step_local_env()
                self.step_export()
                self.step_transfer()
                self.step_import()
                self.step_transform()
            except BaseException:
                logging.error("Sync aborted after state %s", self.state.value)
                self._reach(SyncState.FAILED)
                raise
        self._reach(SyncState.CLEANED_UP)
        return self.state


def run_sync(cfg: SyncConfig, root: Path) -> SyncState:
    status_info("Starting sync from production server...")
    return SyncRun(cfg, root).run()
