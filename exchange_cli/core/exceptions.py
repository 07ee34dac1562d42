"""Error taxonomy for the exchange CLI.

Service errors form a closed set: one class per error code the
ExchangeRate-API reports, each with a fixed message. Transport, configuration
and input failures are kept outside that set so the CLI can tell them apart.
"""


class ExchangeCliError(Exception):
    """Base class for every error the CLI reports to the user."""


class ServiceError(ExchangeCliError):
    """Error reported by the rate service itself."""

    message = "Service error."

    def __init__(self) -> None:
        super().__init__(self.message)


class UnsupportedCurrencyError(ServiceError):
    """One or both currency codes are not recognized by the service."""

    message = "Unsupported currency."


class MalformedRequestError(ServiceError):
    """Request rejected by the service, or an unrecognized error code."""

    message = "Malformed request."


class InvalidApiKeyError(ServiceError):
    """The configured API key was rejected."""

    message = "Invalid API key."


class InactiveAccountError(ServiceError):
    """The account behind the API key is inactive."""

    message = "Inactive account."


class QuotaReachedError(ServiceError):
    """The account's request quota is exhausted."""

    message = "Quota reached."


class ApiRequestError(ExchangeCliError):
    """Network failure or a response body that could not be parsed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Error while calling the rate service: {reason}")


class ConfigError(ExchangeCliError):
    """No API key is available."""


class InputError(ExchangeCliError):
    """Invalid user input, e.g. an amount that is not a number."""
