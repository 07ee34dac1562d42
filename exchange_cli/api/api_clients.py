from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, Final, Mapping, TypeVar

import requests

from ..core.exceptions import (
    ApiRequestError,
    InactiveAccountError,
    InputError,
    InvalidApiKeyError,
    MalformedRequestError,
    QuotaReachedError,
    ServiceError,
    UnsupportedCurrencyError,
)
from ..core.models import ConversionResult, MultiRateResult, PairRateResult
from ..core.utils import format_amount
from ..decorators import log_action
from ..logging_config import LOGGER_NAME
from .config import ApiKeySource, ClientConfig

_logger = logging.getLogger(LOGGER_NAME)

T = TypeVar("T")

ERROR_CODES: Final[dict[str, type[ServiceError]]] = {
    "unsupported-code": UnsupportedCurrencyError,
    "malformed-request": MalformedRequestError,
    "invalid-key": InvalidApiKeyError,
    "inactive-account": InactiveAccountError,
    "quota-reached": QuotaReachedError,
}


def error_from_code(code: str | None) -> ServiceError:
    """Map a service error-type to its exception; unknown codes are malformed."""
    return ERROR_CODES.get(str(code or ""), MalformedRequestError)()


class ExchangeRateApiClient:
    """Client for ExchangeRate-API v6.

    The API key is resolved from ``key_source`` on every call, right before
    the request URL is built. One session is reused for all calls; the
    client is meant to be used by one command at a time.
    """

    SOURCE = "ExchangeRate-API"

    def __init__(
        self,
        cfg: ClientConfig,
        key_source: ApiKeySource,
        session: requests.Session | None = None,
    ) -> None:
        self.cfg = cfg
        self.key_source = key_source
        self.session = session or requests.Session()

    def __enter__(self) -> "ExchangeRateApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    @log_action("FETCH_ALL_RATES")
    def fetch_all_rates(self, base_currency: str) -> MultiRateResult:
        """Return every rate quoted against ``base_currency``."""
        return self._get(("latest", base_currency), MultiRateResult.from_payload)

    @log_action("FETCH_PAIR_RATE")
    def fetch_pair_rate(self, from_currency: str, to_currency: str) -> PairRateResult:
        """Return the rate for one currency pair."""
        return self._get(
            ("pair", from_currency, to_currency), PairRateResult.from_payload
        )

    @log_action("CONVERT_AMOUNT")
    def convert_amount(
        self, from_currency: str, to_currency: str, amount: Decimal | float | int
    ) -> ConversionResult:
        """Convert ``amount`` of ``from_currency`` into ``to_currency``.

        Raises:
            InputError: if the amount is negative, not finite or outside
                the range of a double
        """
        amount_s = format_amount(amount)
        if amount_s.startswith("-"):
            raise InputError("'amount' must not be negative")
        return self._get(
            ("pair", from_currency, to_currency, amount_s),
            ConversionResult.from_payload,
        )

    def _build_url(self, api_key: str, segments: tuple[str, ...]) -> str:
        return "/".join([self.cfg.EXCHANGERATE_API_URL, api_key, *segments])

    def _get(
        self,
        segments: tuple[str, ...],
        parse: Callable[[Mapping[str, Any]], T],
    ) -> T:
        api_key = self.key_source.get_api_key()
        url = self._build_url(api_key, segments)
        _logger.debug("GET %s", self._build_url("***", segments))
        try:
            resp = self.session.get(url, timeout=self.cfg.REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as exc:
            reason = str(exc).replace(api_key, "***")
            raise ApiRequestError(f"Network error ({self.SOURCE}): {reason}") from exc

        status = resp.status_code
        if not resp.ok:
            raise self._error_from_response(resp)

        try:
            data = resp.json()
        except ValueError as exc:
            raise ApiRequestError(
                f"Malformed {self.SOURCE} response: body is not JSON"
            ) from exc
        if not isinstance(data, dict):
            raise ApiRequestError(
                f"Malformed {self.SOURCE} response: expected an object"
            )
        if data.get("result") == "error":
            # The service signals some failures in a 200 body
            raise error_from_code(data.get("error-type"))
        try:
            return parse(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiRequestError(
                f"Malformed {self.SOURCE} response (HTTP {status}): {exc!r}"
            ) from exc

    def _error_from_response(self, resp: requests.Response) -> Exception:
        try:
            data = resp.json()
            code = data["error-type"]
        except (ValueError, KeyError, TypeError):
            return ApiRequestError(f"{self.SOURCE} HTTP {resp.status_code}")
        _logger.debug("%s error-type=%s", self.SOURCE, code)
        return error_from_code(code)
