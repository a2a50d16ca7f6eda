"""
Update Blocker Loader

Startup initialisation: read settings, set up logging, construct the filter
and install it on the host's hook registry.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from update_blocker.cache import InMemoryTransientStore, TransientStore
from update_blocker.config import BlockerSettings
from update_blocker.filter import UpdateFilter
from update_blocker.log_config import configure_logging

if TYPE_CHECKING:
    from update_blocker.registry import HookRegistry

logger = logging.getLogger(__name__)


def initialize_update_blocker(
    registry: HookRegistry,
    plugin_dir: Path,
    theme_root: Path,
    platform_version: str,
    transients: TransientStore | None = None,
    settings: BlockerSettings | None = None,
) -> UpdateFilter:
    """
    Build the update filter and install it on ``registry``.

    Settings default to what the environment and ``.env`` provide; the
    transient store defaults to a process-local one.
    """
    settings = settings or BlockerSettings()
    configure_logging(settings)

    update_filter = UpdateFilter(
        settings,
        plugin_dir=plugin_dir,
        theme_root=theme_root,
        platform_version=platform_version,
        transients=transients if transients is not None else InMemoryTransientStore(),
    )
    update_filter.install(registry)

    logger.info("Update blocker initialisation complete (platform %s)", platform_version)
    return update_filter
