"""Request and response value types for the exchange CLI.

Queries describe what the user asked for; results mirror the JSON bodies
returned by ExchangeRate-API v6. All of them live for a single command.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping


@dataclass(frozen=True)
class RateQuery:
    base_currency: str


@dataclass(frozen=True)
class PairQuery:
    from_currency: str
    to_currency: str


@dataclass(frozen=True)
class ConversionQuery:
    from_currency: str
    to_currency: str
    amount: Decimal


@dataclass(frozen=True)
class UpdateInfo:
    """Metadata shared by every successful response."""

    result: str
    documentation: str
    terms_of_use: str
    time_last_update_unix: int
    time_last_update_utc: str
    time_next_update_unix: int
    time_next_update_utc: str

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "UpdateInfo":
        return cls(
            result=str(data["result"]),
            documentation=str(data["documentation"]),
            terms_of_use=str(data["terms_of_use"]),
            time_last_update_unix=int(data["time_last_update_unix"]),
            time_last_update_utc=str(data["time_last_update_utc"]),
            time_next_update_unix=int(data["time_next_update_unix"]),
            time_next_update_utc=str(data["time_next_update_utc"]),
        )


@dataclass(frozen=True)
class MultiRateResult:
    base_code: str
    conversion_rates: dict[str, float]
    info: UpdateInfo = field(repr=False)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "MultiRateResult":
        rates = data["conversion_rates"]
        if not isinstance(rates, Mapping):
            raise TypeError("conversion_rates must be an object")
        return cls(
            base_code=str(data["base_code"]),
            conversion_rates={str(k): float(v) for k, v in rates.items()},
            info=UpdateInfo.from_payload(data),
        )


@dataclass(frozen=True)
class PairRateResult:
    base_code: str
    target_code: str
    conversion_rate: float
    info: UpdateInfo = field(repr=False)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "PairRateResult":
        return cls(
            base_code=str(data["base_code"]),
            target_code=str(data["target_code"]),
            conversion_rate=float(data["conversion_rate"]),
            info=UpdateInfo.from_payload(data),
        )


@dataclass(frozen=True)
class ConversionResult:
    base_code: str
    target_code: str
    conversion_rate: float
    conversion_result: float
    info: UpdateInfo = field(repr=False)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "ConversionResult":
        return cls(
            base_code=str(data["base_code"]),
            target_code=str(data["target_code"]),
            conversion_rate=float(data["conversion_rate"]),
            conversion_result=float(data["conversion_result"]),
            info=UpdateInfo.from_payload(data),
        )
