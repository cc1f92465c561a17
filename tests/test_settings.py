"""Configuration loading and validation."""

import pytest

from config import DEFAULT_LOCAL_URL
from modules.errors import MissingConfiguration
from modules.settings import REQUIRED_KEYS, build_config, load_config, read_sources


def test_build_config_defaults_local_url(full_env):
    cfg = build_config(full_env)
    assert cfg.local_url == DEFAULT_LOCAL_URL
    assert cfg.ssh_target == "deploy@prod.example.com"
    assert cfg.ssh_options == ["-i", "/home/dev/.ssh/prod_ed25519", "-p", "2222"]


def test_missing_keys_are_all_reported():
    with pytest.raises(MissingConfiguration) as exc:
        build_config({"PRODUCTION_USER": "deploy", "PRODUCTION_DIR": "  "})
    missing = exc.value.missing
    assert missing == [
        "PRODUCTION_HOST",
        "PRODUCTION_SSH_PORT",
        "PRODUCTION_SSH_KEY",
        "PRODUCTION_DIR",
        "PRODUCTION_URL",
    ]
    for key in missing:
        assert key in str(exc.value)


def test_empty_source_reports_every_required_key():
    with pytest.raises(MissingConfiguration) as exc:
        build_config({})
    assert exc.value.missing == list(REQUIRED_KEYS)


def test_env_file_values_overridden_by_environment(tmp_path, full_env):
    env_file = tmp_path / ".env"
    lines = [f"{k}={v}" for k, v in full_env.items()]
    lines.append("LOCAL_URL=http://site.test")
    env_file.write_text("\n".join(lines) + "\n")

    cfg = load_config(env_file, environ={"PRODUCTION_HOST": "other.example.com"})

    assert cfg.production_host == "other.example.com"
    assert cfg.production_url == "https://www.example.com"
    assert cfg.local_url == "http://site.test"


def test_missing_env_file_uses_environment_only(tmp_path, full_env):
    values = read_sources(tmp_path / "absent.env", environ=full_env)
    assert values == full_env


def test_unrelated_environment_keys_are_ignored(full_env):
    environ = dict(full_env, HOME="/root", PATH="/usr/bin")
    values = read_sources(None, environ=environ)
    assert "HOME" not in values
    assert "PATH" not in values


def test_derived_remote_paths(full_env):
    full_env["PRODUCTION_DIR"] = "/var/www/example/"
    cfg = build_config(full_env)
    assert cfg.remote_dump_path == "/var/www/example/dump.sql"
    assert cfg.remote_content_path == "/var/www/example/wp-content/"


def test_empty_environment_value_does_not_mask_env_file(tmp_path, full_env):
    env_file = tmp_path / ".env"
    env_file.write_text("\n".join(f"{k}={v}" for k, v in full_env.items()) + "\n")

    cfg = load_config(env_file, environ={"PRODUCTION_HOST": "", "PRODUCTION_URL": "  "})

    assert cfg.production_host == "prod.example.com"
    assert cfg.production_url == "https://www.example.com"
