"""
Hook Registry

HookRegistry: the host-side hook mechanism the update filter registers on.
Filters transform a value through every callback in priority order; actions
just notify.

A callback that raises is logged and skipped: the value passes on unchanged,
so a misbehaving extension never blocks the host's request processing.
"""

from __future__ import annotations

import itertools
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


@dataclass(order=True)
class _Subscription:
    priority: int
    sequence: int
    callback: Callable[..., Any] = field(compare=False)
    accepted_args: int = field(default=1, compare=False)


def _callback_name(callback: Callable[..., Any]) -> str:
    return getattr(callback, "__qualname__", repr(callback))


class HookRegistry:
    """
    In-process registry of filter and action callbacks keyed by hook name.

    Callbacks run by ascending priority, then in registration order.
    ``accepted_args`` caps how many of (value, *args) a callback receives,
    so zero-argument callbacks can be registered too.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[_Subscription]] = defaultdict(list)
        self._sequence = itertools.count()

    # ── Registration ──────────────────────────────────────────────────────────

    def add_filter(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = 1,
    ) -> None:
        """Subscribe a callback to a hook."""
        subscriptions = self._subscriptions[hook_name]
        subscriptions.append(_Subscription(priority, next(self._sequence), callback, accepted_args))
        subscriptions.sort()
        logger.debug("Hook %s: added %s (priority %d)", hook_name, _callback_name(callback), priority)

    add_action = add_filter

    def remove_filter(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        """Unsubscribe a callback; returns True if it was subscribed."""
        subscriptions = self._subscriptions.get(hook_name, [])
        kept = [sub for sub in subscriptions if sub.callback != callback]
        if len(kept) == len(subscriptions):
            return False
        self._subscriptions[hook_name] = kept
        return True

    remove_action = remove_filter

    # ── Lookup ────────────────────────────────────────────────────────────────

    def has_filter(self, hook_name: str, callback: Callable[..., Any] | None = None) -> bool:
        """Return True if the hook has any subscriber (or the given one)."""
        subscriptions = self._subscriptions.get(hook_name, [])
        if callback is None:
            return bool(subscriptions)
        return any(sub.callback == callback for sub in subscriptions)

    has_action = has_filter

    # ── Dispatch ──────────────────────────────────────────────────────────────

    def apply_filters(self, hook_name: str, value: Any, *args: Any) -> Any:
        """
        Pass a value through every callback subscribed to the hook.

        Args:
            hook_name: Hook constant from update_blocker.hooks.
            value:     Initial value; each callback's return replaces it.
            *args:     Extra context passed to callbacks after the value.

        Returns:
            The value returned by the last callback (``value`` if none).
        """
        for sub in list(self._subscriptions.get(hook_name, [])):
            call_args = (value, *args)[: sub.accepted_args]
            try:
                value = sub.callback(*call_args)
            except Exception as exc:
                logger.warning(
                    "Hook %s callback %s raised: %s",
                    hook_name,
                    _callback_name(sub.callback),
                    exc,
                )
        return value

    def do_action(self, hook_name: str, *args: Any) -> None:
        """Notify every callback subscribed to the hook; return values are ignored."""
        for sub in list(self._subscriptions.get(hook_name, [])):
            try:
                sub.callback(*args[: sub.accepted_args])
            except Exception as exc:
                logger.warning(
                    "Hook %s callback %s raised: %s",
                    hook_name,
                    _callback_name(sub.callback),
                    exc,
                )
