"""
Update Filter

Hooks the host's outbound request lifecycle and keeps blocked plugins,
themes and (optionally) core updates out of update checks.

Two modes, fixed when the filter is configured:
  - full block (``all``): matching update-check requests never leave the host;
  - selective: matching request bodies are decoded, stripped of blocked
    items, and re-encoded before transmission.

Lifecycle: INERT --configure()--> CONFIGURED --register()--> ACTIVE.
"""

from __future__ import annotations

import copy
import enum
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from update_blocker.base import ExtensionMeta, RequestInterceptor
from update_blocker.blocklist import filter_plugins, filter_themes
from update_blocker.cache import TransientStore
from update_blocker.codec import decode, encode
from update_blocker.config import BlockerSettings
from update_blocker.endpoints import EndpointDescriptor, EndpointKind, match_endpoint
from update_blocker.exceptions import ConfigurationError, InvalidStateTransitionError, MalformedPayload
from update_blocker.hooks import (
    HOOK_ACTIVATED,
    HOOK_BLOCKED_SETTINGS,
    HOOK_DEACTIVATED,
    HOOK_FILTER_PLUGINS,
    HOOK_FILTER_THEMES,
    HOOK_HTTP_REQUEST_ARGS,
    HOOK_PRE_HTTP_REQUEST,
    HOOK_PRE_UPDATE_CORE,
    TRANSIENT_UPDATE_PLUGINS,
    TRANSIENT_UPDATE_THEMES,
)
from update_blocker.registry import HookRegistry

logger = logging.getLogger(__name__)

EXTENSION_VERSION = "1.0.0"


class FilterState(str, enum.Enum):
    INERT = "inert"
    CONFIGURED = "configured"
    ACTIVE = "active"


class ShortCircuit(enum.Enum):
    """Returned by the pre-send hook in place of a response."""

    REQUEST_NOT_PERFORMED = "request_not_performed"


REQUEST_NOT_PERFORMED = ShortCircuit.REQUEST_NOT_PERFORMED


@dataclass
class CoreUpdateResult:
    """Synthetic "no core updates available" answer."""

    last_checked: int
    version_checked: str
    updates: list[Any] = field(default_factory=list)
    translations: list[Any] = field(default_factory=list)


_KIND_HOOKS = {
    EndpointKind.PLUGINS: HOOK_FILTER_PLUGINS,
    EndpointKind.THEMES: HOOK_FILTER_THEMES,
}


class UpdateFilter(RequestInterceptor):
    """
    Filter suppressing update checks for blocked plugins, themes and core.

    Constructed explicitly by the host integration layer, which passes its
    HookRegistry to install(); nothing is registered globally.
    """

    def __init__(
        self,
        settings: BlockerSettings,
        plugin_dir: Path,
        theme_root: Path,
        platform_version: str,
        transients: TransientStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._initial_settings = settings
        self._settings: BlockerSettings | None = None
        self._plugin_dir = Path(plugin_dir)
        self._theme_root = Path(theme_root)
        self._platform_version = platform_version
        self._transients = transients
        self._clock = clock
        self._registry: HookRegistry | None = None
        self.state = FilterState.INERT

    @property
    def meta(self) -> ExtensionMeta:
        hooks = [HOOK_ACTIVATED, HOOK_DEACTIVATED]
        if self._settings is not None:
            hooks.append(HOOK_PRE_HTTP_REQUEST if self._settings.all else HOOK_HTTP_REQUEST_ARGS)
            if self.blocks_core:
                hooks.append(HOOK_PRE_UPDATE_CORE)
        return ExtensionMeta(
            name="update-blocker",
            version=EXTENSION_VERSION,
            description="Keeps selected plugins, themes and core out of update checks",
            hooks=hooks,
        )

    @property
    def settings(self) -> BlockerSettings:
        if self._settings is None:
            raise InvalidStateTransitionError(self.state.value, FilterState.CONFIGURED.value)
        return self._settings

    @property
    def blocks_core(self) -> bool:
        return self.settings.all or self.settings.core

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def _transition(self, expected: FilterState, target: FilterState) -> None:
        if self.state is not expected:
            raise InvalidStateTransitionError(self.state.value, target.value)
        self.state = target

    def configure(self, registry: HookRegistry) -> BlockerSettings:
        """
        Resolve the effective settings through the configuration extension point.

        Callbacks on ``update_blocker.blocked`` receive the settings as a dict
        and return the (possibly changed) dict; the result is validated once.

        Raises:
            InvalidStateTransitionError: the filter was already configured.
            ConfigurationError: the transformed settings are invalid.
        """
        if self.state is not FilterState.INERT:
            raise InvalidStateTransitionError(self.state.value, FilterState.CONFIGURED.value)

        resolved = registry.apply_filters(HOOK_BLOCKED_SETTINGS, self._initial_settings.model_dump())
        if isinstance(resolved, BlockerSettings):
            settings = resolved
        elif isinstance(resolved, Mapping):
            try:
                settings = BlockerSettings(**resolved)
            except ValidationError as exc:
                raise ConfigurationError(errors=exc.errors()) from exc
        else:
            raise ConfigurationError(f"Configuration transform returned {type(resolved).__name__}")

        self._settings = settings
        self._transition(FilterState.INERT, FilterState.CONFIGURED)
        logger.info(
            "Update blocker configured: mode=%s core=%s markers=%s",
            "full" if settings.all else "selective",
            self.blocks_core,
            list(settings.files),
        )
        return settings

    def register(self, registry: HookRegistry) -> None:
        """Register the filter's callbacks for the configured mode."""
        if self.state is not FilterState.CONFIGURED:
            raise InvalidStateTransitionError(self.state.value, FilterState.ACTIVE.value)

        registry.add_action(HOOK_ACTIVATED, self.on_activate, accepted_args=0)
        registry.add_action(HOOK_DEACTIVATED, self.on_deactivate, accepted_args=0)
        if self.settings.all:
            registry.add_filter(HOOK_PRE_HTTP_REQUEST, self.on_before_send, accepted_args=3)
        else:
            registry.add_filter(HOOK_HTTP_REQUEST_ARGS, self.on_rewrite_body, accepted_args=2)
        if self.blocks_core:
            registry.add_filter(HOOK_PRE_UPDATE_CORE, self.on_core_update_query, accepted_args=0)

        self._registry = registry
        self._transition(FilterState.CONFIGURED, FilterState.ACTIVE)
        logger.info("Update blocker registered on %d hooks", len(self.meta.hooks))

    def install(self, registry: HookRegistry) -> UpdateFilter:
        """configure() then register() on the same registry."""
        self.configure(registry)
        self.register(registry)
        return self

    def delete_update_transients(self) -> None:
        for key in (TRANSIENT_UPDATE_PLUGINS, TRANSIENT_UPDATE_THEMES):
            self._transients.delete(key)
        logger.info("Update check transients invalidated")

    def on_activate(self) -> None:
        self.delete_update_transients()

    def on_deactivate(self) -> None:
        self.delete_update_transients()

    # ── Request hooks ─────────────────────────────────────────────────────────

    def endpoint(self, url: str) -> EndpointDescriptor | None:
        return match_endpoint(url, self.settings.api_host)

    def on_before_send(self, default: Any, request_args: dict[str, Any], url: str) -> Any:
        """Cancel update-check requests outright (full-block mode)."""
        if self.endpoint(url) is None:
            return default
        logger.info("Update check blocked before sending", extra={"url": url})
        return REQUEST_NOT_PERFORMED

    def on_rewrite_body(self, request_args: dict[str, Any], url: str) -> dict[str, Any]:
        """
        Strip blocked items from an update-check request body (selective mode).

        Returns a copy of ``request_args`` with the rewritten body, or
        ``request_args`` itself when the URL does not match or the body cannot
        be processed.
        """
        api = self.endpoint(url)
        if api is None:
            return request_args

        body = request_args.get("body")
        if not isinstance(body, Mapping) or api.kind.value not in body:
            logger.debug("Update check without %s field, left untouched", api.kind.value, extra={"url": url})
            return request_args

        raw = body[api.kind.value]
        try:
            encoded = self.filter_payload(raw, api)
        except MalformedPayload as exc:
            logger.warning(
                "Update check body left untouched: %s",
                exc.message,
                extra={"url": url, "kind": api.kind.value},
            )
            return request_args

        rewritten = copy.copy(request_args)
        rewritten["body"] = {**body, api.kind.value: encoded.decode("utf-8") if isinstance(raw, str) else encoded}
        return rewritten

    def filter_payload(self, raw: bytes | str, api: EndpointDescriptor) -> bytes:
        """
        Decode, filter, run the per-kind extension point and re-encode a body field.

        Raises:
            MalformedPayload: any stage failed; the caller keeps the original body.
        """
        data = decode(raw, api.serialization)
        if api.is_plugin:
            data = filter_plugins(data, self._plugin_dir, self.settings.plugins, self.settings.files)
        else:
            data = filter_themes(data, self._theme_root, self.settings.themes, self.settings.files)

        if self._registry is not None:
            data = self._registry.apply_filters(_KIND_HOOKS[api.kind], data)
        return encode(data, api.serialization, api.kind)

    # ── Core updates ──────────────────────────────────────────────────────────

    def on_core_update_query(self) -> CoreUpdateResult:
        """Answer the core update check locally with "nothing available"."""
        return CoreUpdateResult(
            last_checked=int(self._clock()),
            version_checked=self._platform_version,
        )
