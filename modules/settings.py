"""Site configuration record built once per run.

Values come from an optional KEY=VALUE file (.env by default) overlaid by
the process environment. The resulting SyncConfig is passed to every stage;
nothing downstream reads os.environ for site settings.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values

from config import DEFAULT_LOCAL_URL, DUMP_NAME, LOCAL_CONTENT_DIR
from modules.errors import MissingConfiguration
from modules.utils import log, status_info

REQUIRED_KEYS = (
    "PRODUCTION_USER",
    "PRODUCTION_HOST",
    "PRODUCTION_SSH_PORT",
    "PRODUCTION_SSH_KEY",
    "PRODUCTION_DIR",
    "PRODUCTION_URL",
)


@dataclass(frozen=True)
class SyncConfig:
    production_user: str
    production_host: str
    production_ssh_port: str
    production_ssh_key: str
    production_dir: str
    production_url: str
    local_url: str = DEFAULT_LOCAL_URL

    @property
    def ssh_target(self) -> str:
        return f"{self.production_user}@{self.production_host}"

    @property
    def ssh_options(self) -> list[str]:
        return ["-i", self.production_ssh_key, "-p", self.production_ssh_port]

    @property
    def remote_dump_path(self) -> str:
        return f"{self.production_dir.rstrip('/')}/{DUMP_NAME}"

    @property
    def remote_content_path(self) -> str:
        return f"{self.production_dir.rstrip('/')}/{LOCAL_CONTENT_DIR}/"


def read_sources(
    env_file: str | Path | None, environ: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Merge the env file (if present) with the environment; non-empty environment values win."""
    values: dict[str, str] = {}
    if env_file is not None:
        path = Path(env_file)
        if path.is_file():
            status_info(f"Loading configuration from {path}")
            for key, value in dotenv_values(path).items():
                if value is not None:
                    values[key] = value
        else:
            log(f"INFO: no config file at {path} (skip)")
    if environ is None:
        environ = os.environ
    for key in REQUIRED_KEYS + ("LOCAL_URL",):
        # set-but-empty variables do not mask the file value
        if (environ.get(key) or "").strip():
            values[key] = environ[key]
    return values


def build_config(values: Mapping[str, str]) -> SyncConfig:
    missing = [k for k in REQUIRED_KEYS if not (values.get(k) or "").strip()]
    if missing:
        logging.error("Missing required keys: %s", ", ".join(missing))
        raise MissingConfiguration(missing)
    local_url = (values.get("LOCAL_URL") or "").strip() or DEFAULT_LOCAL_URL
    cfg = SyncConfig(
        production_user=values["PRODUCTION_USER"].strip(),
        production_host=values["PRODUCTION_HOST"].strip(),
        production_ssh_port=values["PRODUCTION_SSH_PORT"].strip(),
        production_ssh_key=os.path.expanduser(values["PRODUCTION_SSH_KEY"].strip()),
        production_dir=values["PRODUCTION_DIR"].strip(),
        production_url=values["PRODUCTION_URL"].strip(),
        local_url=local_url,
    )
    log(
        f"Config: {cfg.ssh_target}:{cfg.production_ssh_port} "
        f"{cfg.production_url} -> {cfg.local_url}"
    )
    return cfg


def load_config(
    env_file: str | Path | None, environ: Mapping[str, str] | None = None
) -> SyncConfig:
    return build_config(read_sources(env_file, environ))
