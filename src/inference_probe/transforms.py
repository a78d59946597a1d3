"""Request transforms applied to every outgoing call of the typed client."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

import httpx

logger = logging.getLogger(__name__)

RequestTransform = Callable[[httpx.Request], httpx.Request]


def inject_headers(api_key: str) -> RequestTransform:
    """Return a transform that sets auth and content type, replacing any present."""

    def _inject(request: httpx.Request) -> httpx.Request:
        request.headers["Authorization"] = f"Bearer {api_key}"
        request.headers["Content-Type"] = "application/json"
        return request

    return _inject


def log_request(request: httpx.Request) -> httpx.Request:
    """Log method, URL, headers and the buffered body of *request*."""
    logger.info("%s %s", request.method, request.url)
    for name, value in request.headers.items():
        logger.info("%s: %s", name, value)

    buffered = isinstance(request.stream, httpx.ByteStream)
    logger.info(
        "[Content-Type: %s, Content-Length: %s] buffered=%s",
        request.headers.get("Content-Type"),
        request.headers.get("Content-Length"),
        buffered,
    )
    body = request.read()
    logger.info("%s", body.decode("utf-8", errors="replace"))
    return request


class TransformingTransport(httpx.BaseTransport):
    """Apply *transforms* in order, then hand the request to *wrapped*."""

    def __init__(self, transforms: Sequence[RequestTransform], wrapped: httpx.BaseTransport) -> None:
        self._transforms = list(transforms)
        self._wrapped = wrapped

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        for transform in self._transforms:
            request = transform(request)
        return self._wrapped.handle_request(request)

    def close(self) -> None:
        self._wrapped.close()
