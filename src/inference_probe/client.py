"""Typed client for the text-generation endpoint."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar
from urllib.parse import urlsplit, urlunsplit

import httpx

from .config import ProbeCfg
from .models import GenerationRequest, first_generated_text
from .transforms import TransformingTransport, inject_headers, log_request

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_url(base_url: object, target: str) -> str:
    """Resolve *target* the same way for every call path.

    A target with a scheme and host is used verbatim (a bare host gets the
    root path). Anything else is a model id appended to *base_url* with a
    single ``/`` between them.
    """
    target = target.strip()
    parts = urlsplit(target)
    if parts.scheme and parts.netloc:
        if not parts.path:
            parts = parts._replace(path="/")
        return urlunsplit(parts)
    return str(base_url).rstrip("/") + "/" + target.lstrip("/")


def build_timeout(cfg: ProbeCfg) -> httpx.Timeout:
    return httpx.Timeout(cfg.connect_timeout, read=cfg.read_timeout)


def log_failure(exc: BaseException) -> None:
    """Log *exc* with its traceback (which includes any chained cause) and name the cause."""
    logger.error("Call failed: %s", exc, exc_info=exc)
    cause = exc.__cause__
    if cause is not None:
        logger.error("Error caused by: %r", cause)


class TextGenerationClient:
    """Client with a pooled :class:`httpx.Client` and header/logging transforms."""

    def __init__(self, cfg: ProbeCfg) -> None:
        self._cfg = cfg
        limits = httpx.Limits(
            max_keepalive_connections=cfg.max_keepalive_connections,
            keepalive_expiry=cfg.keepalive_expiry,
        )
        wrapped = httpx.HTTPTransport(limits=limits)
        self._client = httpx.Client(
            transport=TransformingTransport([inject_headers(cfg.api_key), log_request], wrapped),
            timeout=build_timeout(cfg),
        )

    def __enter__(self) -> "TextGenerationClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def resolve(self, target: str) -> str:
        return resolve_url(self._cfg.base_url, target)

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def text_generation(self, target: str, request: GenerationRequest) -> str:
        """Return the first generated text for the first prompt of *request*.

        *target* is either a model id, resolved against the configured base
        URL, or a full URL used as-is.
        """

        def _send() -> str:
            resp = self._client.post(self.resolve(target), content=request.to_bytes())
            resp.raise_for_status()
            return first_generated_text(resp.content)

        return self._call_api(_send)

    def _call_api(self, call: Callable[[], T]) -> T:
        try:
            return call()
        except Exception as exc:
            log_failure(exc)
            raise
