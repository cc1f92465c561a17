"""Utility helpers kept dependency-free.

- init_logging: configure console + file logging with run-id.
- status_info/status_pass/status_fail: console status lines (with run-id).
- run_cmd: wrapper over subprocess.run that raises FatalCommandError.
- log: debug-level logger for normal status lines (file-oriented).
- fmt_cmd: printable form of an argv list.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
import uuid
from logging.handlers import RotatingFileHandler
from typing import Sequence

from modules.errors import FatalCommandError

_RUN_ID = ""
_LOG_FILE = ""

COLOR_RED = "\033[31m"
COLOR_GREEN = "\033[32m"
COLOR_BLUE = "\033[34m"
COLOR_RESET = "\033[0m"


def _gen_run_id() -> str:
    return uuid.uuid4().hex[:8]


def init_logging(run_id: str | None = None) -> str:
    """Initialize logging with console + rotating file handlers.

    - Console: minimal, CRITICAL only; status lines are printed directly.
    - File: DEBUG+, rich format, written to log/prodsync-<rid>.log
    Returns the run-id used.
    """
    global _RUN_ID, _LOG_FILE
    if _RUN_ID:
        return _RUN_ID

    rid = run_id or os.environ.get("PRODSYNC_RID") or _gen_run_id()
    _RUN_ID = rid

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Project root = parent of 'modules'
    root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
    log_dir = os.path.join(root_dir, "log")
    try:
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, f"prodsync-{rid}.log")
    except OSError:
        logfile = os.path.abspath(f"prodsync-{rid}.log")
    _LOG_FILE = logfile

    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setLevel(logging.CRITICAL)

    has_file = any(
        isinstance(h, RotatingFileHandler)
        and getattr(h, "baseFilename", "").endswith(os.path.basename(logfile))
        for h in root.handlers
    )
    if not has_file:
        fh = RotatingFileHandler(logfile, maxBytes=5 * 1024 * 1024, backupCount=3)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        root.addHandler(fh)

    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        ch = logging.StreamHandler()
        ch.setLevel(logging.CRITICAL)
        ch.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root.addHandler(ch)

    logging.debug("Logging initialized. run_id=%s file=%s", rid, logfile)
    os.environ["PRODSYNC_RID"] = rid
    return rid


def log_path() -> str:
    return _LOG_FILE


def _rid() -> str:
    return _RUN_ID or os.environ.get("PRODSYNC_RID", "--------")


def _paint(mark: str, color: str, stream) -> str:
    if getattr(stream, "isatty", None) and stream.isatty():
        return f"{color}{mark}{COLOR_RESET}"
    return mark


def status_info(msg: str) -> None:
    logging.info(msg)
    print(f"{_paint('ℹ', COLOR_BLUE, sys.stdout)} {msg} [{_rid()}]", flush=True)


def status_pass(msg: str) -> None:
    logging.info("PASS: %s", msg)
    print(f"{_paint('✓', COLOR_GREEN, sys.stdout)} {msg} [{_rid()}]", flush=True)


def status_fail(msg: str) -> None:
    logging.error("FAIL: %s", msg)
    print(f"{_paint('✗', COLOR_RED, sys.stderr)} {msg} [{_rid()}]", file=sys.stderr, flush=True)


def log(msg: str) -> None:
    # File-oriented normal progress; stays out of console noise.
    logging.debug(msg)


def fmt_cmd(args: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(a)) for a in args)


def run_cmd(
    args: Sequence[str],
    check: bool = True,
    capture: bool = False,
    timeout: float | None = None,
) -> subprocess.CompletedProcess:
    """Run a command, streaming output unless capture is set.

    A non-zero exit raises FatalCommandError when check is set; otherwise
    the completed process is returned for the caller to inspect.
    """
    argv = [str(a) for a in args]
    log(f"RUN: {fmt_cmd(argv)}")
    try:
        proc = subprocess.run(
            argv,
            text=True,
            capture_output=capture,
            timeout=timeout,
        )
    except FileNotFoundError as err:
        logging.error("command not found: %s (%s)", argv[0], err)
        if check:
            raise FatalCommandError(argv, 127, str(err)) from err
        return subprocess.CompletedProcess(argv, 127, "", str(err))
    except subprocess.TimeoutExpired as err:
        logging.error("%s timeout after %ss", fmt_cmd(argv), timeout)
        if check:
            raise FatalCommandError(argv, 124, f"timeout after {timeout}s") from err
        return subprocess.CompletedProcess(argv, 124, "", f"timeout after {timeout}s")

    if proc.returncode == 0:
        log(f"PASS: {fmt_cmd(argv)}")
        return proc
    stderr = (proc.stderr or "").strip() if capture else ""
    if not check:
        # caller decides whether this is an error
        log(f"EXIT {proc.returncode}: {fmt_cmd(argv)}")
        return proc
    logging.error("%s exit=%s\nSTDERR: %s", fmt_cmd(argv), proc.returncode, stderr)
    raise FatalCommandError(argv, proc.returncode, stderr)
