"""Errors raised by the probe on top of httpx's own exception hierarchy.

Transport failures surface as :class:`httpx.TransportError` and non-2xx
responses as :class:`httpx.HTTPStatusError`; both are re-raised unchanged.
"""

from __future__ import annotations


class ProbeError(Exception):
    """Base class for probe specific failures."""


class MalformedResponseError(ProbeError, ValueError):
    """The endpoint answered, but not with ``[[{"generated_text": ...}]]``."""

    def __init__(self, message: str, payload: object = None) -> None:
        super().__init__(message)
        self.payload = payload
