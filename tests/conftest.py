"""
Shared fixtures for the exchange CLI tests.

HTTP is never touched: the client gets a FakeSession that answers from a
handler function and records every URL it was asked for.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from exchange_cli.api.api_clients import ExchangeRateApiClient
from exchange_cli.api.config import ClientConfig, StaticKeySource

JSON = dict[str, Any]

BASE_URL = "https://v6.exchangerate-api.com/v6"
API_KEY = "test-key"

_NO_BODY = object()


class FakeResponse:
    def __init__(self, status: int = 200, payload: Any = _NO_BODY) -> None:
        self.status_code = status
        self._payload = payload

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is _NO_BODY:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    def __init__(self, handler: Callable[[str], FakeResponse]) -> None:
        self.handler = handler
        self.urls: list[str] = []
        self.timeouts: list[float | None] = []
        self.closed = False

    def get(self, url: str, timeout: float | None = None, **kwargs: Any) -> FakeResponse:
        self.urls.append(url)
        self.timeouts.append(timeout)
        return self.handler(url)

    def close(self) -> None:
        self.closed = True


def info_fields() -> JSON:
    return {
        "result": "success",
        "documentation": "https://www.exchangerate-api.com/docs",
        "terms_of_use": "https://www.exchangerate-api.com/terms",
        "time_last_update_unix": 1585267200,
        "time_last_update_utc": "Fri, 27 Mar 2020 00:00:00 +0000",
        "time_next_update_unix": 1585353700,
        "time_next_update_utc": "Sat, 28 Mar 2020 00:00:00 +0000",
    }


def latest_payload(base: str, rates: dict[str, float] | None = None) -> JSON:
    return {
        **info_fields(),
        "base_code": base,
        "conversion_rates": rates or {base: 1, "EUR": 0.9013, "GBP": 0.7679},
    }


def pair_payload(base: str, target: str, rate: float = 0.8412) -> JSON:
    return {
        **info_fields(),
        "base_code": base,
        "target_code": target,
        "conversion_rate": rate,
    }


def conversion_payload(
    base: str, target: str, amount: float, rate: float = 0.8412
) -> JSON:
    return {**pair_payload(base, target, rate), "conversion_result": amount * rate}


def error_payload(code: str) -> JSON:
    return {"result": "error", "error-type": code}


SUPPORTED = {"USD", "EUR", "GBP", "JPY"}


def fake_service(url: str) -> FakeResponse:
    """Behaves like the real service for a handful of currencies."""
    parts = url[len(BASE_URL) + 1 :].split("/")
    key, kind, codes = parts[0], parts[1], parts[2:]
    if key != API_KEY:
        return FakeResponse(403, error_payload("invalid-key"))
    if kind == "latest":
        if codes[0] not in SUPPORTED:
            return FakeResponse(404, error_payload("unsupported-code"))
        return FakeResponse(200, latest_payload(codes[0]))
    if kind == "pair":
        frm, to = codes[0], codes[1]
        if frm not in SUPPORTED or to not in SUPPORTED:
            return FakeResponse(404, error_payload("unsupported-code"))
        if len(codes) == 3:
            return FakeResponse(200, conversion_payload(frm, to, float(codes[2])))
        return FakeResponse(200, pair_payload(frm, to))
    return FakeResponse(400, error_payload("malformed-request"))


@pytest.fixture
def cfg(tmp_path) -> ClientConfig:
    return ClientConfig(
        EXCHANGERATE_API_URL=BASE_URL,
        KEY_FILE_PATH=str(tmp_path / "config.json"),
        REQUEST_TIMEOUT=10.0,
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession(fake_service)


@pytest.fixture
def client(cfg: ClientConfig, session: FakeSession) -> ExchangeRateApiClient:
    return ExchangeRateApiClient(cfg, StaticKeySource(API_KEY), session=session)  # type: ignore[arg-type]
