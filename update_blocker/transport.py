"""
httpx Integration

UpdateFilterTransport runs the host's request hooks on every request an
httpx.Client sends, the same way the host HTTP layer would:

    registry = HookRegistry()
    UpdateFilter(...).install(registry)
    client = httpx.Client(transport=UpdateFilterTransport(registry))

Form-encoded bodies are exposed to the hooks as ``request_args["body"]``
(a field -> value dict); other bodies are passed through as bytes.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qsl, urlencode

import httpx

from update_blocker.filter import REQUEST_NOT_PERFORMED
from update_blocker.hooks import HOOK_HTTP_REQUEST_ARGS, HOOK_PRE_HTTP_REQUEST
from update_blocker.registry import HookRegistry

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class RequestNotPerformed(httpx.TransportError):
    """Raised instead of sending a request a pre-send hook cancelled."""


def _is_form(request: httpx.Request) -> bool:
    return request.headers.get("content-type", "").split(";")[0].strip() == FORM_CONTENT_TYPE


def request_args_from(request: httpx.Request) -> dict[str, Any]:
    content = request.read()
    body: Any = content
    if _is_form(request):
        try:
            body = dict(parse_qsl(content.decode("utf-8"), keep_blank_values=True))
        except UnicodeDecodeError:
            logger.debug("Form body is not UTF-8, passed to hooks as bytes", extra={"url": str(request.url)})
    return {
        "method": request.method,
        "headers": dict(request.headers),
        "body": body,
    }


def _rebuild(request: httpx.Request, request_args: dict[str, Any]) -> httpx.Request:
    body = request_args.get("body")
    content = urlencode(body).encode("utf-8") if isinstance(body, dict) else body
    headers = {
        name: value
        for name, value in request_args.get("headers", request.headers).items()
        if name.lower() != "content-length"
    }
    return httpx.Request(
        request_args.get("method", request.method),
        request.url,
        headers=headers,
        content=content,
        extensions=request.extensions,
    )


class UpdateFilterTransport(httpx.BaseTransport):
    """Transport wrapper applying pre-send and request-args hooks before delegating."""

    def __init__(self, registry: HookRegistry, transport: httpx.BaseTransport | None = None) -> None:
        self._registry = registry
        self._transport = transport or httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        request_args = request_args_from(request)

        pre = self._registry.apply_filters(HOOK_PRE_HTTP_REQUEST, False, request_args, url)
        if pre is REQUEST_NOT_PERFORMED:
            raise RequestNotPerformed(f"Request to {url} was not performed", request=request)
        if isinstance(pre, httpx.Response):
            return pre

        filtered = self._registry.apply_filters(HOOK_HTTP_REQUEST_ARGS, request_args, url)
        if filtered is not request_args:
            logger.debug("Request arguments rewritten by hooks", extra={"url": url})
            request = _rebuild(request, filtered)
        return self._transport.handle_request(request)

    def close(self) -> None:
        self._transport.close()
