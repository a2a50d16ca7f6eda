"""
Hook Name Constants

Centralised list of hook names the update blocker registers on or exposes.
Hook names follow the `category.action` convention.
"""

from __future__ import annotations

# ── Host HTTP client ──────────────────────────────────────────────────────────
HOOK_PRE_HTTP_REQUEST = "http.pre_request"
HOOK_HTTP_REQUEST_ARGS = "http.request_args"

# ── Host transient cache ──────────────────────────────────────────────────────
HOOK_PRE_UPDATE_CORE = "transient.pre_update_core"

# ── Lifecycle ─────────────────────────────────────────────────────────────────
HOOK_ACTIVATED = "update_blocker.activated"
HOOK_DEACTIVATED = "update_blocker.deactivated"

# ── Extension points ──────────────────────────────────────────────────────────
HOOK_BLOCKED_SETTINGS = "update_blocker.blocked"
HOOK_FILTER_PLUGINS = "update_blocker.plugins"
HOOK_FILTER_THEMES = "update_blocker.themes"

# ── Transient keys invalidated on activation/deactivation ─────────────────────
TRANSIENT_UPDATE_PLUGINS = "update_plugins"
TRANSIENT_UPDATE_THEMES = "update_themes"

# ── Master list ───────────────────────────────────────────────────────────────
ALL_HOOKS: list[str] = [
    HOOK_PRE_HTTP_REQUEST,
    HOOK_HTTP_REQUEST_ARGS,
    HOOK_PRE_UPDATE_CORE,
    HOOK_ACTIVATED,
    HOOK_DEACTIVATED,
    HOOK_BLOCKED_SETTINGS,
    HOOK_FILTER_PLUGINS,
    HOOK_FILTER_THEMES,
]
