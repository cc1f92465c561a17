# cli.py
# Invariants:
# - All local WP-CLI access goes through these wrappers; callers pass wp
#   arguments only, never the wp-env prefix.
# - Commands run inside the wp-env "cli" container: npx wp-env run cli wp ...
# - Accept commands with or without a leading "wp"; duplicates are dropped.
# - Logs: one PASS/FAIL per call; console stays minimal; file logs keep details.
# - wp_cmd raises FatalCommandError; wp_check returns a bool and never raises.

from __future__ import annotations

import logging
import re
import shlex
import time
from typing import Sequence, Tuple

from config import WP_ENV_CMD
from modules.errors import FatalCommandError
from modules.utils import log, run_cmd

# ── Noise filters ───────────────────────────────────────────────────────────────
ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
NOISE_PREFIXES = (
    "PHP Warning:", "PHP Notice:", "PHP Deprecated:",
    "Warning:", "Notice:", "Deprecated:",
)
NOISE_PATTERNS = (
    re.compile(r"^#\d+:"),               # stack frames
    re.compile(r"^ℹ Starting '"),        # wp-env run banner
    re.compile(r"^✔ Ran `"),             # wp-env run footer
)


def _strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


def _drop_noise_lines(text: str) -> list[str]:
    out: list[str] = []
    for ln in _strip_ansi(text).splitlines():
        ln = ln.strip()
        if not ln:
            continue
        if any(ln.startswith(p) for p in NOISE_PREFIXES):
            continue
        if any(p.search(ln) for p in NOISE_PATTERNS):
            continue
        out.append(ln)
    return out


def _normalize_wp_parts(command: str | Sequence[str]) -> list[str]:
    """Normalize command into argv parts.

    Accepts str (parsed with shlex) or a sequence of strings.
    """
    if isinstance(command, str):
        parts = shlex.split(command.strip())
    else:
        parts = [str(p) for p in command]
    # drop any leading 'wp' tokens (repeat to be safe)
    while parts and parts[0] == "wp":
        parts = parts[1:]
    if not parts:
        raise ValueError("empty wp command")
    return parts


def wp_argv(command: str | Sequence[str]) -> list[str]:
    return [*WP_ENV_CMD, "run", "cli", "wp", *_normalize_wp_parts(command)]


def _fmt_cmd_for_log(parts: list[str]) -> str:
    return "wp " + " ".join(shlex.quote(p) for p in parts)


def wp_run(command: str | Sequence[str]) -> Tuple[bool, str, str, int]:
    parts = _normalize_wp_parts(command)
    args = wp_argv(parts)

    t0 = time.monotonic()
    proc = run_cmd(args, check=False, capture=True)
    dt = time.monotonic() - t0

    ok = proc.returncode == 0
    if ok:
        log(f"PASS: {_fmt_cmd_for_log(parts)} ({dt:.1f}s)")
    else:
        clean_err = "\n".join(_drop_noise_lines(proc.stderr or ""))
        logging.error(
            "%s exit=%s\nSTDERR: %s",
            _fmt_cmd_for_log(parts),
            proc.returncode,
            clean_err.strip(),
        )
    if proc.stdout:
        logging.debug("Stdout (len %d): %s", len(proc.stdout), _drop_noise_lines(proc.stdout)[:3])
    return ok, (proc.stdout or ""), (proc.stderr or ""), proc.returncode


def wp_cmd(command: str | Sequence[str]) -> str:
    """Run a required wp command; return stdout or raise FatalCommandError."""
    ok, out, err, code = wp_run(command)
    if not ok:
        clean_err = "\n".join(_drop_noise_lines(err))
        raise FatalCommandError(wp_argv(command), code, clean_err)
    return out


def wp_check(command: str | Sequence[str]) -> bool:
    """Run a wp command whose exit status is the answer (is-active, etc.)."""
    ok, _, _, _ = wp_run(command)
    return ok
