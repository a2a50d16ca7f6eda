"""
Payload Codec

Converts update-check request bodies between bytes and mappings. API 1.0
endpoints carry PHP-serialized data; later versions carry JSON.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from phpserialize import dumps as php_dumps
from phpserialize import loads as php_loads
from phpserialize import phpobject

from update_blocker.endpoints import EndpointKind, Serialization
from update_blocker.exceptions import MalformedPayload

# Class name the repository expects for the serialized plugins object
PLUGIN_OBJECT_CLASS = "stdClass"


def _php_array(items: list[tuple[Any, Any]]) -> list[Any] | dict[Any, Any]:
    """PHP arrays with keys 0..n-1 become lists, everything else a dict."""
    keys = [key for key, _ in items]
    if keys and keys == list(range(len(keys))):
        return [value for _, value in items]
    return dict(items)


def _php_object(name: str, members: dict[Any, Any]) -> dict[Any, Any]:
    return members


def decode(raw: bytes | str, serialization: Serialization) -> dict[Any, Any]:
    """
    Decode a request body field into a mapping.

    Raises:
        MalformedPayload: the input is not valid in the selected format or
            does not hold a mapping.
    """
    if isinstance(raw, str):
        raw = raw.encode("utf-8")

    try:
        if serialization is Serialization.LEGACY:
            data = php_loads(raw, decode_strings=True, object_hook=_php_object, array_hook=_php_array)
        else:
            data = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as exc:
        raise MalformedPayload(f"Cannot decode {serialization.value} payload: {exc}", serialization.value) from exc

    if not isinstance(data, Mapping):
        raise MalformedPayload(
            f"Decoded {serialization.value} payload is {type(data).__name__}, not a mapping",
            serialization.value,
        )
    return dict(data)


def encode(data: Mapping[Any, Any], serialization: Serialization, kind: EndpointKind) -> bytes:
    """
    Encode a mapping back into a request body field.

    Legacy plugin payloads are written as an object, legacy theme payloads as
    a plain array; both shapes match what the repository sends and expects.

    Raises:
        MalformedPayload: the mapping holds values the format cannot represent.
    """
    if not isinstance(data, Mapping):
        raise MalformedPayload(f"Cannot encode {type(data).__name__}, expected a mapping", serialization.value)

    try:
        if serialization is Serialization.LEGACY:
            value = phpobject(PLUGIN_OBJECT_CLASS, dict(data)) if kind is EndpointKind.PLUGINS else dict(data)
            return php_dumps(value)
        return json.dumps(dict(data)).encode("utf-8")
    except (ValueError, TypeError, RecursionError) as exc:
        raise MalformedPayload(f"Cannot encode {serialization.value} payload: {exc}", serialization.value) from exc
