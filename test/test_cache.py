"""
Tests for transient stores.
"""

import json
from unittest.mock import MagicMock, patch

import redis

from update_blocker.cache import InMemoryTransientStore, RedisTransientStore


class TestInMemoryTransientStore:
    """Tests for the in-memory store."""

    def test_basic_get_set(self):
        store = InMemoryTransientStore()
        store.set("update_plugins", {"checked": {"a/a.php": "1.0"}})
        assert store.get("update_plugins") == {"checked": {"a/a.php": "1.0"}}

    def test_get_missing_key(self):
        assert InMemoryTransientStore().get("missing") is None

    def test_delete(self):
        store = InMemoryTransientStore()
        store.set("key1", "value1")
        assert store.delete("key1") is True
        assert store.get("key1") is None
        assert store.delete("key1") is False

    def test_ttl_expiry(self):
        now = [1000.0]
        store = InMemoryTransientStore(clock=lambda: now[0])
        store.set("key1", "value1", ttl=60)
        now[0] += 59
        assert store.get("key1") == "value1"
        now[0] += 2
        assert store.get("key1") is None
        assert len(store) == 0

    def test_contains_none_value(self):
        """A transient holding None is still present"""
        store = InMemoryTransientStore()
        store.set("update_core", None)
        assert "update_core" in store
        assert "missing" not in store

    def test_contains_respects_expiry(self):
        now = [1000.0]
        store = InMemoryTransientStore(clock=lambda: now[0])
        store.set("key1", None, ttl=10)
        assert "key1" in store
        now[0] += 11
        assert "key1" not in store

    def test_max_size_eviction(self):
        store = InMemoryTransientStore(max_size=2)
        store.set("key1", "value1")
        store.set("key2", "value2")
        store.get("key1")
        store.set("key3", "value3")  # evicts key2, the least recently used

        assert store.get("key2") is None
        assert store.get("key1") == "value1"
        assert "key3" in store


class TestRedisTransientStore:
    """Tests for the Redis-backed store with a mocked client."""

    def test_delete_uses_prefixed_key(self):
        client = MagicMock()
        client.delete.return_value = 1
        store = RedisTransientStore(client)

        assert store.delete("update_plugins") is True
        client.delete.assert_called_once_with("transient:site:update_plugins")

    def test_delete_missing_key(self):
        client = MagicMock()
        client.delete.return_value = 0
        assert RedisTransientStore(client).delete("update_themes") is False

    def test_delete_connection_error(self, caplog):
        client = MagicMock()
        client.delete.side_effect = redis.ConnectionError("down")
        assert RedisTransientStore(client).delete("update_themes") is False
        assert "Transient delete error" in caplog.text

    def test_set_with_ttl(self):
        client = MagicMock()
        RedisTransientStore(client, prefix="t:").set("update_core", {"updates": []}, ttl=43200)
        client.setex.assert_called_once_with("t:update_core", 43200, json.dumps({"updates": []}))

    def test_set_without_ttl(self):
        client = MagicMock()
        RedisTransientStore(client).set("k", [1])
        client.set.assert_called_once_with("transient:site:k", "[1]")

    def test_get_decodes_json(self):
        client = MagicMock()
        client.get.return_value = '{"checked": {}}'
        assert RedisTransientStore(client).get("update_plugins") == {"checked": {}}

    def test_get_missing(self):
        client = MagicMock()
        client.get.return_value = None
        assert RedisTransientStore(client).get("update_plugins") is None

    def test_from_url(self):
        with patch("update_blocker.cache.redis.Redis.from_url") as from_url:
            store = RedisTransientStore.from_url("redis://localhost:6379/0")
        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)
        store.delete("x")
        from_url.return_value.delete.assert_called_once_with("transient:site:x")

    def test_filter_invalidates_through_redis(self, wp_content):
        """The update filter works against any TransientStore"""
        from update_blocker.config import BlockerSettings
        from update_blocker.filter import UpdateFilter

        client = MagicMock()
        update_filter = UpdateFilter(
            BlockerSettings(),
            plugin_dir=wp_content / "plugins",
            theme_root=wp_content / "themes",
            platform_version="6.4.2",
            transients=RedisTransientStore(client),
        )
        update_filter.on_activate()

        deleted = [call.args[0] for call in client.delete.call_args_list]
        assert deleted == ["transient:site:update_plugins", "transient:site:update_themes"]
