"""Runs the direct-call path and the typed-client path against one endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .client import TextGenerationClient, build_timeout, log_failure, resolve_url
from .config import ProbeCfg
from .models import GenerationRequest

logger = logging.getLogger(__name__)

_RULE = "---------------"


def _pretty(data: bytes) -> str:
    """Return a prettified string representation of *data* if it's JSON."""
    try:
        obj = json.loads(data.decode("utf-8"))
    except ValueError:
        return data.decode("utf-8", errors="replace")
    return json.dumps(obj, indent=2, ensure_ascii=False)


class InferenceProbe:
    """Sends one prompt through both call paths and logs what happens."""

    def __init__(self, cfg: ProbeCfg) -> None:
        self._cfg = cfg

    @property
    def cfg(self) -> ProbeCfg:
        return self._cfg

    def _request(self) -> GenerationRequest:
        return GenerationRequest(inputs=[self._cfg.prompt])

    def direct_url(self) -> str:
        return resolve_url(self._cfg.base_url, str(self._cfg.endpoint))

    def run_direct(self) -> Any:
        """POST to the configured endpoint with a scoped client and log the exchange.

        Returns the decoded JSON body. A non-2xx status raises
        :class:`httpx.HTTPStatusError` after the response has been logged.
        """
        url = self.direct_url()
        logger.info("---[direct httpx.Client with URL: %s]------------", url)

        try:
            with httpx.Client(timeout=build_timeout(self._cfg)) as client:
                request = client.build_request(
                    "POST",
                    url,
                    headers={
                        "Authorization": f"Bearer {self._cfg.api_key}",
                        "Content-Type": "application/json",
                    },
                    content=self._request().to_bytes(),
                )

                logger.info("%s %s HTTP/1.1", request.method, request.url)
                for name, value in request.headers.items():
                    logger.info("%s: %s", name, value)
                logger.info("%s", request.content.decode("utf-8"))

                resp = client.send(request)
                logger.info("%s %s %s", resp.http_version, resp.status_code, resp.reason_phrase)
                logger.info(_RULE)
                logger.info("%s", _pretty(resp.content))
                logger.info(_RULE)

                resp.raise_for_status()
                return resp.json()
        except Exception as exc:
            log_failure(exc)
            raise

    def run_typed(self, target: str | None = None) -> str:
        """Call the endpoint through :class:`TextGenerationClient` and log the text."""
        target = target or self._cfg.typed_target()
        logger.info("---[TextGenerationClient with target: %s]------------", target)

        with TextGenerationClient(self._cfg) as cli:
            text = cli.text_generation(target, self._request())

        logger.info("%s", text)
        logger.info(_RULE)
        return text

    def run(self) -> None:
        """Run the direct path, then the typed path."""
        self.run_direct()
        self.run_typed()
