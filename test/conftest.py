"""
Pytest configuration and fixtures for update blocker tests
"""

import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120

from update_blocker.cache import InMemoryTransientStore  # noqa: E402
from update_blocker.config import BlockerSettings  # noqa: E402
from update_blocker.filter import UpdateFilter  # noqa: E402
from update_blocker.registry import HookRegistry  # noqa: E402

FIXED_TIME = 1_700_000_000.75
PLATFORM_VERSION = "6.4.2"


@pytest.fixture
def wp_content(tmp_path: Path) -> Path:
    """
    A wp-content style tree:

        plugins/foo/foo.php
        plugins/bar/bar.php
        plugins/dev/dev.php + plugins/dev/.git
        plugins/hello.php
        themes/twenty/
        themes/devtheme/.hg
    """
    plugins = tmp_path / "plugins"
    for name in ("foo", "bar", "dev"):
        (plugins / name).mkdir(parents=True)
        (plugins / name / f"{name}.php").write_text("<?php\n")
    (plugins / "dev" / ".git").mkdir()
    (plugins / "hello.php").write_text("<?php\n")

    themes = tmp_path / "themes"
    (themes / "twenty").mkdir(parents=True)
    (themes / "devtheme").mkdir()
    (themes / "devtheme" / ".hg").mkdir()
    return tmp_path


@pytest.fixture
def registry() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def transients() -> InMemoryTransientStore:
    return InMemoryTransientStore()


@pytest.fixture
def make_filter(wp_content, transients):
    """Factory building an unconfigured UpdateFilter over the wp_content tree."""

    def _make(**overrides) -> UpdateFilter:
        return UpdateFilter(
            BlockerSettings(**overrides),
            plugin_dir=wp_content / "plugins",
            theme_root=wp_content / "themes",
            platform_version=PLATFORM_VERSION,
            transients=transients,
            clock=lambda: FIXED_TIME,
        )

    return _make
