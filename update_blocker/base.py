"""
Interceptor Base Classes

ExtensionMeta: declarative metadata for an extension hooked into the host.
RequestInterceptor: the interface the host's HTTP and update subsystems call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ExtensionMeta:
    """
    Declarative metadata describing a host extension.

    Attributes:
        name:        Machine-readable slug, e.g. "update-blocker".
        version:     Semver string, e.g. "1.0.0".
        description: Human-readable description.
        author:      Extension author.
        hooks:       Hook names the extension registers callbacks on.
    """

    name: str
    version: str
    description: str
    author: str = "Update Blocker Team"
    hooks: list[str] = field(default_factory=list)


class RequestInterceptor(ABC):
    """
    Interface between the host and an update-check interceptor.

    The request hooks have pass-through defaults so subclasses only override
    what they need; the host invokes them through its hook registry.
    """

    @property
    @abstractmethod
    def meta(self) -> ExtensionMeta:
        """Return the interceptor's metadata."""
        ...

    def on_before_send(self, default: Any, request_args: dict[str, Any], url: str) -> Any:
        """
        Called before a request is transmitted.

        Returns:
            ``default`` to let the request go out, or a short-circuit value
            the host returns in place of a response.
        """
        return default

    def on_rewrite_body(self, request_args: dict[str, Any], url: str) -> dict[str, Any]:
        """Called with the outgoing request arguments; returns the arguments to send."""
        return request_args

    def on_core_update_query(self) -> Any:
        """Called when the host reads cached core updates; None means "ask the cache"."""
        return None
