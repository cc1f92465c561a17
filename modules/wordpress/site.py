"""Post-import site upkeep: rewrite rules, caches, local-unsafe plugins."""

from __future__ import annotations

import logging

from config import PLUGINS_TO_DISABLE
from modules.errors import FatalCommandError, ToleratedCommandError
from modules.utils import log, status_pass
from .cli import wp_check, wp_cmd


def flush_rewrite_rules() -> None:
    wp_cmd(["rewrite", "flush", "--hard"])


def _flush_object_cache() -> None:
    try:
        wp_cmd(["cache", "flush"])
    except FatalCommandError as err:
        raise ToleratedCommandError(err.argv, err.returncode) from err


def clear_caches() -> bool:
    """Flush object cache and transients.

    Returns False when the object-cache flush failed; that failure is
    logged and skipped. Transient deletion and the eval flush are required.
    """
    flushed = True
    try:
        _flush_object_cache()
    except ToleratedCommandError as err:
        logging.warning("%s", err)
        flushed = False
    wp_cmd(["transient", "delete", "--all"])
    wp_cmd(["eval", "wp_cache_flush(); delete_transient('doing_cron');"])
    return flushed


def plugin_is_active(slug: str) -> bool:
    # is-active exits 1 for inactive and for not-installed plugins alike
    return wp_check(["plugin", "is-active", slug])


def disable_local_plugins(plugins: list[str] | None = None) -> list[str]:
    if plugins is None:
        plugins = PLUGINS_TO_DISABLE
    deactivated: list[str] = []
    for slug in plugins:
        if not plugin_is_active(slug):
            log(f"SKIP: {slug} not active")
            continue
        wp_cmd(["plugin", "deactivate", slug])
        status_pass(f"{slug} plugin deactivated")
        deactivated.append(slug)
    return deactivated
