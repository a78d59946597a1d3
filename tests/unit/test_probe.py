import logging

import httpx
import pytest
from pytest_httpx import HTTPXMock

from inference_probe.config import ProbeCfg
from inference_probe.probe import InferenceProbe

RESPONSE = [[{"generated_text": "Alan Turing was a mathematician"}]]


def _cfg(**overrides: object) -> ProbeCfg:
    data: dict[str, object] = {
        "endpoint": "https://mock.endpoint",
        "base_url": "https://api.mock/models/",
        "auth": {"key": "secret-token"},
    }
    data.update(overrides)
    return ProbeCfg(**data)


def test_run_direct(httpx_mock: HTTPXMock, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="inference_probe")
    httpx_mock.add_response(method="POST", url="https://mock.endpoint/", json=RESPONSE)

    assert InferenceProbe(_cfg()).run_direct() == RESPONSE

    req = httpx_mock.get_requests()[0]
    assert req.headers["Authorization"] == "Bearer secret-token"
    assert req.headers["Content-Type"] == "application/json"
    assert req.content == b'{"inputs":["Alan Turing was"]}'

    assert "POST https://mock.endpoint/ HTTP/1.1" in caplog.text
    assert "200 OK" in caplog.text
    assert '"generated_text": "Alan Turing was a mathematician"' in caplog.text


def test_run_direct_status_error_logs_body(httpx_mock: HTTPXMock, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="inference_probe")
    httpx_mock.add_response(status_code=401, json={"error": "Authorization header is invalid"})

    with pytest.raises(httpx.HTTPStatusError):
        InferenceProbe(_cfg()).run_direct()

    assert "401 Unauthorized" in caplog.text
    assert '"error": "Authorization header is invalid"' in caplog.text


def test_run_direct_transport_error(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_exception(httpx.ConnectError("refused"))

    with pytest.raises(httpx.ConnectError):
        InferenceProbe(_cfg()).run_direct()


@pytest.mark.parametrize("endpoint", ["https://mock.endpoint", "https://mock.endpoint/generate"])
def test_absolute_target_matches_direct_url(httpx_mock: HTTPXMock, endpoint: str) -> None:
    httpx_mock.add_response(json=RESPONSE)
    httpx_mock.add_response(json=RESPONSE)

    probe = InferenceProbe(_cfg(endpoint=endpoint))
    probe.run_direct()
    assert probe.run_typed() == "Alan Turing was a mathematician"

    direct, typed = httpx_mock.get_requests()
    assert direct.url == typed.url
    assert str(direct.url) == probe.direct_url()


def test_run_typed_relative_target(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url="https://api.mock/models/gpt2", json=RESPONSE)

    assert InferenceProbe(_cfg()).run_typed("gpt2") == "Alan Turing was a mathematician"


def test_run_order(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url="https://mock.endpoint/", json=RESPONSE)
    httpx_mock.add_response(url="https://api.mock/models/gpt2", json=RESPONSE)

    InferenceProbe(_cfg(target="gpt2")).run()

    urls = [str(r.url) for r in httpx_mock.get_requests()]
    assert urls == ["https://mock.endpoint/", "https://api.mock/models/gpt2"]


def test_run_stops_on_direct_failure(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(status_code=500, text="oops")

    with pytest.raises(httpx.HTTPStatusError):
        InferenceProbe(_cfg()).run()

    assert len(httpx_mock.get_requests()) == 1
