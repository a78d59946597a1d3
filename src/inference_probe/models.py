"""Request and response shapes of the text-generation endpoint."""

from __future__ import annotations

import json
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import MalformedResponseError


class GenerationRequest(BaseModel):
    """Prompts sent to the endpoint, serialized as ``{"inputs": [...]}``."""

    inputs: List[str] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)

    def to_bytes(self) -> bytes:
        return self.to_json().encode("utf-8")


class GenerationResult(BaseModel):
    """One generated candidate; unknown fields sent by the endpoint are ignored."""

    model_config = ConfigDict(extra="ignore")

    generated_text: str


_RESPONSE_ADAPTER: TypeAdapter[List[List[GenerationResult]]] = TypeAdapter(List[List[GenerationResult]])


def parse_generation_response(payload: Any) -> List[List[GenerationResult]]:
    """Validate *payload* (decoded JSON or raw bytes/str) as a generation response.

    The outer list holds one entry per prompt and each inner list one entry per
    candidate. Both the outer list and the first inner list must be non-empty.
    """
    if isinstance(payload, (bytes, str)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(f"Response body is not JSON: {exc}", payload) from exc

    try:
        results = _RESPONSE_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise MalformedResponseError(f"Unexpected response shape: {exc}", payload) from exc

    if not results:
        raise MalformedResponseError("Response contains no result sets", payload)
    if not results[0]:
        raise MalformedResponseError("First result set contains no candidates", payload)
    return results


def first_generated_text(payload: Any) -> str:
    """Return the first candidate's text for the first prompt."""
    return parse_generation_response(payload)[0][0].generated_text
