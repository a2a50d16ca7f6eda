"""
Update Blocker

Keeps selected plugins, themes and core out of a CMS installation's update
checks against the package repository.

Public API:
    BlockerSettings       - resolved configuration (pydantic-settings)
    UpdateFilter          - the request/response filter
    HookRegistry          - host hook registry the filter installs on
    UpdateFilterTransport - httpx transport running the registry's request hooks
    match_endpoint        - update-check URL classifier
    initialize_update_blocker - startup helper building and installing the filter
"""

from .config import BlockerSettings
from .endpoints import EndpointDescriptor, EndpointKind, Serialization, match_endpoint
from .filter import (
    EXTENSION_VERSION,
    REQUEST_NOT_PERFORMED,
    CoreUpdateResult,
    FilterState,
    UpdateFilter,
)
from .loader import initialize_update_blocker
from .registry import HookRegistry
from .transport import RequestNotPerformed, UpdateFilterTransport

__version__ = EXTENSION_VERSION

__all__ = [
    "BlockerSettings",
    "CoreUpdateResult",
    "EndpointDescriptor",
    "EndpointKind",
    "FilterState",
    "HookRegistry",
    "REQUEST_NOT_PERFORMED",
    "RequestNotPerformed",
    "Serialization",
    "UpdateFilter",
    "UpdateFilterTransport",
    "initialize_update_blocker",
    "match_endpoint",
]
