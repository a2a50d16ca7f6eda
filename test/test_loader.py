"""
Tests for startup initialisation and logging setup
"""

import json
import logging

import pytest

from update_blocker.cache import InMemoryTransientStore
from update_blocker.config import BlockerSettings
from update_blocker.filter import FilterState
from update_blocker.hooks import HOOK_HTTP_REQUEST_ARGS, HOOK_PRE_HTTP_REQUEST, TRANSIENT_UPDATE_PLUGINS
from update_blocker.loader import initialize_update_blocker
from update_blocker.log_config import LOGGER_NAME, StructuredFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


class TestInitializeUpdateBlocker:
    def test_installs_active_filter(self, wp_content, registry):
        update_filter = initialize_update_blocker(
            registry,
            plugin_dir=wp_content / "plugins",
            theme_root=wp_content / "themes",
            platform_version="6.4.2",
            settings=BlockerSettings(plugins=["foo/foo.php"]),
        )
        assert update_filter.state is FilterState.ACTIVE
        assert registry.has_filter(HOOK_HTTP_REQUEST_ARGS)
        assert not registry.has_filter(HOOK_PRE_HTTP_REQUEST)

    def test_uses_given_transient_store(self, wp_content, registry):
        store = InMemoryTransientStore()
        store.set(TRANSIENT_UPDATE_PLUGINS, {"checked": {}})
        update_filter = initialize_update_blocker(
            registry,
            plugin_dir=wp_content / "plugins",
            theme_root=wp_content / "themes",
            platform_version="6.4.2",
            transients=store,
            settings=BlockerSettings(),
        )
        update_filter.on_activate()
        assert store.get(TRANSIENT_UPDATE_PLUGINS) is None


class TestLogging:
    def test_configure_logging_sets_level(self):
        logger = configure_logging(BlockerSettings(log_level="debug"))
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG

    def test_configure_logging_replaces_own_handler(self):
        configure_logging(BlockerSettings())
        logger = configure_logging(BlockerSettings(log_json=True))
        own = [h for h in logger.handlers if getattr(h, "_update_blocker", False)]
        assert len(own) == 1
        assert isinstance(own[0].formatter, StructuredFormatter)

    def test_structured_formatter_includes_context(self):
        record = logging.LogRecord(
            name="update_blocker.filter",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Update check body left untouched: %s",
            args=("bad",),
            exc_info=None,
        )
        record.url = "https://api.wordpress.org/plugins/update-check/1.1/"
        record.kind = "plugins"

        data = json.loads(StructuredFormatter().format(record))
        assert data["level"] == "WARNING"
        assert data["logger"] == "update_blocker.filter"
        assert data["message"] == "Update check body left untouched: bad"
        assert data["url"].endswith("/update-check/1.1/")
        assert data["kind"] == "plugins"
        assert "identifier" not in data
