"""
Endpoint Matcher

Classifies outgoing request URLs as plugin or theme update-check endpoints
of the package repository and picks the body serialization for them.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

DEFAULT_API_HOST = "api.wordpress.org"

_VERSION_PREFIX = re.compile(r"\d*(?:\.\d+)?")


class EndpointKind(str, enum.Enum):
    """Update-check endpoint family; the value doubles as the body field name."""

    PLUGINS = "plugins"
    THEMES = "themes"


class Serialization(str, enum.Enum):
    LEGACY = "legacy"
    JSON = "json"


@dataclass(frozen=True)
class EndpointDescriptor:
    kind: EndpointKind
    api_version: str
    serialization: Serialization

    @property
    def uses_legacy_serialization(self) -> bool:
        return self.serialization is Serialization.LEGACY

    @property
    def is_plugin(self) -> bool:
        return self.kind is EndpointKind.PLUGINS

    @property
    def is_theme(self) -> bool:
        return self.kind is EndpointKind.THEMES


def _endpoint_pattern(host: str) -> re.Pattern[str]:
    return re.compile(
        r"://" + re.escape(host) + r"/(?P<kind>plugins|themes)/update-check/(?P<version>[0-9.]+)/"
    )


_DEFAULT_PATTERN = _endpoint_pattern(DEFAULT_API_HOST)


def version_number(version: str) -> float:
    """Numeric value of the leading ``digits[.digits]`` run, 0.0 if there is none."""
    prefix = _VERSION_PREFIX.match(version).group(0)
    if not prefix or prefix == ".":
        return 0.0
    return float(prefix)


def match_endpoint(url: str, host: str = DEFAULT_API_HOST) -> EndpointDescriptor | None:
    """
    Match a request URL against the repository update-check pattern.

    Returns:
        An EndpointDescriptor, or None when the URL is not an update-check
        endpoint (callers pass such requests through).
    """
    pattern = _DEFAULT_PATTERN if host == DEFAULT_API_HOST else _endpoint_pattern(host)
    match = pattern.search(url)
    if match is None:
        return None

    version = match.group("version")
    serialization = Serialization.LEGACY if version_number(version) == 1.0 else Serialization.JSON
    return EndpointDescriptor(
        kind=EndpointKind(match.group("kind")),
        api_version=version,
        serialization=serialization,
    )
