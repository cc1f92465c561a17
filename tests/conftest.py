"""Pytest configuration and fixtures.

No real ssh, scp, rsync or npx runs: subprocess.run is replaced by a
recorder that answers with scripted exit codes.
"""

import os
import subprocess

import pytest

os.environ.setdefault("PRODSYNC_RID", "testrun0")

from modules.settings import SyncConfig  # noqa: E402


class FakeRunner:
    """Records argv lists and fails the ones matching a rule."""

    def __init__(self):
        self.calls = []
        self.rules = []
        self.on_call = None

    def fail_when(self, *tokens, code=1, stderr="", exact=False):
        self.rules.append((tokens, code, stderr, exact))

    def __call__(self, args, **kwargs):
        argv = [str(a) for a in args]
        self.calls.append(argv)
        if self.on_call is not None:
            self.on_call(argv)
        for tokens, code, stderr, exact in self.rules:
            if exact:
                hit = all(t in argv for t in tokens)
            else:
                hit = all(any(t in part for part in argv) for t in tokens)
            if hit:
                return subprocess.CompletedProcess(argv, code, "", stderr)
        return subprocess.CompletedProcess(argv, 0, "", "")

    def find(self, *tokens):
        return [c for c in self.calls if all(any(t in p for p in c) for t in tokens)]

    def index(self, *tokens):
        for i, c in enumerate(self.calls):
            if all(any(t in p for p in c) for t in tokens):
                return i
        return -1


@pytest.fixture
def runner(monkeypatch):
    fake = FakeRunner()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def cfg():
    return SyncConfig(
        production_user="deploy",
        production_host="prod.example.com",
        production_ssh_port="2222",
        production_ssh_key="/home/dev/.ssh/prod_ed25519",
        production_dir="/var/www/example",
        production_url="https://www.example.com",
        local_url="http://localhost:8888",
    )


@pytest.fixture
def full_env():
    return {
        "PRODUCTION_USER": "deploy",
        "PRODUCTION_HOST": "prod.example.com",
        "PRODUCTION_SSH_PORT": "2222",
        "PRODUCTION_SSH_KEY": "/home/dev/.ssh/prod_ed25519",
        "PRODUCTION_DIR": "/var/www/example",
        "PRODUCTION_URL": "https://www.example.com",
    }
