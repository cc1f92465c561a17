"""Shared configuration constants for prodsync.

Centralizes local paths, wp-env wiring and the cleanup lists used by
modules. Site credentials are not here; they come from .env via
modules.settings.
"""

ENV_FILE = ".env"
DEFAULT_LOCAL_URL = "http://localhost:8888"

LOCAL_CONTENT_DIR = "wp-content"
LOCAL_TMP_DIR = "tmp"
DUMP_NAME = "dump.sql"
# wp-env mounts the project root at /var/www/html inside the cli container
CONTAINER_ROOT = "/var/www/html"

WP_ENV_CMD = ["npx", "wp-env"]
SSH_CONNECT_TIMEOUT = 5

TABLE_PREFIX = "wp_"
EXCLUDED_TABLES = [f"{TABLE_PREFIX}users"]
RSYNC_EXCLUDES = ["uploads/backwpup"]
PLUGINS_TO_DISABLE = ["cloudsecure-wp-security"]

LOCAL_ADMIN_LOGIN = "admin"
LOCAL_ADMIN_PASS = "password"
REASSIGN_POST_TYPES = ["post", "page"]
