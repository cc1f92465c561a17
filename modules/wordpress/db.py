"""Database steps run against the local wp-env install."""

from __future__ import annotations

from config import (
    CONTAINER_ROOT,
    DUMP_NAME,
    LOCAL_ADMIN_LOGIN,
    LOCAL_TMP_DIR,
    REASSIGN_POST_TYPES,
    TABLE_PREFIX,
)
from modules.settings import SyncConfig
from .cli import wp_cmd

CONTAINER_DUMP_PATH = f"{CONTAINER_ROOT}/{LOCAL_TMP_DIR}/{DUMP_NAME}"


def import_dump(path: str = CONTAINER_DUMP_PATH) -> None:
    wp_cmd(["db", "import", path])


def replace_urls(cfg: SyncConfig) -> None:
    # --precise forces PHP-side replacement so serialized lengths are rewritten;
    # no --regex, so only exact occurrences of production_url match.
    wp_cmd(
        [
            "search-replace",
            cfg.production_url,
            cfg.local_url,
            "--precise",
            "--recurse-objects",
            "--all-tables-with-prefix",
        ]
    )


def reassign_sql(
    login: str = LOCAL_ADMIN_LOGIN,
    post_types: list[str] | None = None,
    prefix: str = TABLE_PREFIX,
) -> str:
    if post_types is None:
        post_types = REASSIGN_POST_TYPES
    types = ", ".join(f"'{t}'" for t in post_types)
    return (
        f"UPDATE {prefix}posts SET post_author = "
        f"(SELECT ID FROM {prefix}users WHERE user_login = '{login}' LIMIT 1) "
        f"WHERE post_type IN ({types});"
    )


def reassign_post_authors(login: str = LOCAL_ADMIN_LOGIN) -> None:
    wp_cmd(["db", "query", reassign_sql(login)])
