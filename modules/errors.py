"""Error types raised by sync stages.

Every stage raises a SyncError subclass; prodsync.main turns any of them
into a FAIL line and exit code 1.
"""

from __future__ import annotations

from typing import Sequence


class SyncError(Exception):
    """Base for every failure that aborts a sync run."""


class MissingConfiguration(SyncError):
    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__(
            "Missing required environment variables: " + " ".join(self.missing)
        )


class ConnectivityError(SyncError):
    def __init__(self, host: str, port: str, key_path: str, target: str = ""):
        self.host = host
        self.port = port
        self.key_path = key_path
        self.target = target or host
        super().__init__(
            f"Cannot connect to {host} on port {port} using key {key_path}"
        )

    @property
    def remediation(self) -> str:
        return f"ssh -i {self.key_path} -p {self.port} {self.target}"


def _display(argv: Sequence[str]) -> str:
    return " ".join(str(a) for a in argv)


class FatalCommandError(SyncError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr or ""
        super().__init__(f"{_display(self.argv)} exit={returncode}")


class ToleratedCommandError(SyncError):
    """A command failure a stage logs and moves past.

    Never propagated out of the stage that tolerates it.
    """

    def __init__(self, argv: Sequence[str], returncode: int):
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(f"{_display(self.argv)} exit={returncode} (ignored)")
