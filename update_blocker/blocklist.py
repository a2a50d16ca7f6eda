"""
Blocklist Evaluator

Decides per plugin or theme whether it must be hidden from the update check:
either it is listed explicitly, or its install directory is a version-control
working copy (one of the configured marker files sits directly inside it).

Filesystem probes are synchronous, one per (item, marker) pair at most.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping
from pathlib import Path, PurePosixPath
from typing import Any

from update_blocker.exceptions import FilesystemProbeFailure, MalformedPayload

logger = logging.getLogger(__name__)


def _probe(path: Path) -> bool:
    try:
        return path.exists()
    except (OSError, ValueError) as exc:
        raise FilesystemProbeFailure(str(path), str(exc)) from exc


def has_marker_file(directory: Path, marker_files: Iterable[str]) -> bool:
    """Return True if any marker file exists directly inside ``directory``."""
    for marker in marker_files:
        try:
            if _probe(directory / marker):
                return True
        except FilesystemProbeFailure as exc:
            # Fail open: an unreadable location never blocks an update.
            logger.warning("Marker probe failed, treating as absent: %s", exc.message)
    return False


def is_blocked(
    identifier: str,
    install_directory: Path | None,
    explicit_blocklist: Collection[str],
    marker_files: Iterable[str],
) -> bool:
    """
    Return True if the item is explicitly blocked or is a development checkout.

    Args:
        identifier:         Plugin file path or theme slug (exact, case-sensitive).
        install_directory:  Directory to probe for markers; None skips the probe.
        explicit_blocklist: Configured identifiers to block.
        marker_files:       Filenames marking a version-control working copy.
    """
    if identifier in explicit_blocklist:
        return True
    if install_directory is None:
        return False
    return has_marker_file(install_directory, marker_files)


def plugin_directory(plugin_dir: Path, plugin_file: str) -> Path | None:
    """
    Install directory of a plugin, e.g. ``akismet/akismet.php`` -> ``<plugin_dir>/akismet``.

    Single-file plugins live in the plugins root itself, which they share with
    every other plugin, so they have no directory of their own: returns None.
    """
    parent = PurePosixPath(plugin_file).parent
    if str(parent) in ("", "."):
        return None
    return plugin_dir / parent


def theme_directory(theme_root: Path, slug: str) -> Path:
    return theme_root / slug


def _item_map(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    items = payload.get(key, {})
    if isinstance(items, list) and not items:
        return {}
    if not isinstance(items, Mapping):
        raise MalformedPayload(f"'{key}' must be a mapping, got {type(items).__name__}")
    return items


def filter_plugins(
    payload: dict[str, Any],
    plugin_dir: Path,
    blocked: Collection[str],
    marker_files: Iterable[str],
) -> dict[str, Any]:
    """
    Remove blocked plugins from a plugin update payload in place.

    Blocked plugin files disappear from both ``plugins`` and ``active``; the
    two containers are rebuilt first and only then assigned back.
    """
    markers = tuple(marker_files)
    plugins = _item_map(payload, "plugins")
    removed = {
        file
        for file in plugins
        if is_blocked(str(file), plugin_directory(plugin_dir, str(file)), blocked, markers)
    }
    if not removed:
        return payload

    kept_plugins = {file: meta for file, meta in plugins.items() if file not in removed}

    active = payload.get("active", [])
    entries = active.values() if isinstance(active, Mapping) else active if isinstance(active, list) else []
    for file in entries:
        if not isinstance(file, (str, int)):
            raise MalformedPayload(f"'active' entries must be plugin files, got {type(file).__name__}")

    if isinstance(active, Mapping):
        kept_active: Any = {key: file for key, file in active.items() if file not in removed}
    elif isinstance(active, list):
        kept_active = [file for file in active if file not in removed]
    else:
        raise MalformedPayload(f"'active' must be a list, got {type(active).__name__}")

    payload["plugins"] = kept_plugins
    if "active" in payload:
        payload["active"] = kept_active

    logger.debug("Filtered plugins from update check: %s", sorted(map(str, removed)))
    return payload


def filter_themes(
    payload: dict[str, Any],
    theme_root: Path,
    blocked: Collection[str],
    marker_files: Iterable[str],
) -> dict[str, Any]:
    """Remove blocked themes from a theme update payload in place."""
    markers = tuple(marker_files)
    themes = _item_map(payload, "themes")
    removed = {
        slug
        for slug in themes
        if is_blocked(str(slug), theme_directory(theme_root, str(slug)), blocked, markers)
    }
    if not removed:
        return payload

    payload["themes"] = {slug: meta for slug, meta in themes.items() if slug not in removed}
    logger.debug("Filtered themes from update check: %s", sorted(map(str, removed)))
    return payload
