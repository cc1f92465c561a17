"""Local WordPress (wp-env) steps of the sync.

Submodules:
- cli: WP-CLI wrappers (npx wp-env run cli wp ...)
- env: local directories and sandbox restart
- db: import, URL replacement, author reassignment
- site: rewrite rules, caches, plugin deactivation
"""

# Intentionally minimal; logic lives in submodules.
