"""Rate service package.

Client for ExchangeRate-API v6 plus the API key sources it resolves the key
from on every request.

Public entry points:
- api_clients.ExchangeRateApiClient: fetch_all_rates, fetch_pair_rate, convert_amount
- config.load_client_config / config.default_key_source
"""

from __future__ import annotations

__all__ = [
    "config",
    "api_clients",
    "storage",
]
