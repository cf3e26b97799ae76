from __future__ import annotations

"""Currency conversion tools.

Includes:
1) CurrencyConversionTool: live rates from exchangerate-api.com.
2) StaticCurrencyTool: offline conversion from a fixed rate table.

Both share the same pipeline: look up a rate, convert, round half-up
to 2 decimals, and return a normalized conversion payload.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tools.base import ToolPlugin
from tools.errors import ExternalServiceError, UnsupportedCurrencyError
from tools.http import JsonHttpClient, decode_payload
from tools.progress import ProgressReporter

DEFAULT_PROVIDER = "Exchange Rate API"

# Offline rates; source currency -> target currency -> multiplier.
STATIC_RATES: dict[str, dict[str, float]] = {
    "USD": {
        "EUR": 0.93,
        "GBP": 0.79,
        "JPY": 151.72,
        "CAD": 1.38,
        "AUD": 1.52,
        "CHF": 0.89,
        "CNY": 7.21,
        "INR": 83.45,
    },
    "EUR": {
        "USD": 1.08,
        "GBP": 0.85,
        "JPY": 163.85,
        "CAD": 1.49,
        "AUD": 1.64,
        "CHF": 0.96,
        "CNY": 7.79,
        "INR": 90.13,
    },
    "GBP": {
        "USD": 1.27,
        "EUR": 1.17,
        "JPY": 191.90,
        "CAD": 1.74,
        "AUD": 1.92,
        "CHF": 1.13,
        "CNY": 9.12,
        "INR": 105.48,
    },
}

STATIC_CURRENCIES = ["USD", "EUR", "GBP", "JPY", "CAD", "AUD", "CHF", "CNY", "INR"]


def round_half_up(value: Decimal, places: int = 2) -> float:
    return float(value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def convert_amount(amount: float, rate: float) -> float:
    """Multiply in decimal so 2-place rounding is exact half-up.

    Example:
        convert_amount(123.45, 0.8537) -> 105.39
    """
    return round_half_up(Decimal(repr(amount)) * Decimal(repr(rate)))


def format_number(value: float) -> str:
    """Render a number in shortest form, JavaScript style.

    Examples:
        100.0 -> "100", 0.00001 -> "0.00001", 1e-07 -> "1e-7", 1.5e21 -> "1.5e+21"
    """
    number = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    if not number.is_finite():
        return str(value)
    if number.is_zero():
        return "0"

    sign, digit_tuple, exponent = number.normalize().as_tuple()
    digits = "".join(str(digit) for digit in digit_tuple)
    prefix = "-" if sign else ""
    # Position of the decimal point relative to the first digit.
    point = exponent + len(digits)

    if len(digits) <= point <= 21:
        return prefix + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return f"{prefix}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"

    mantissa = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
    power = point - 1
    return f"{prefix}{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def iso_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# --- Request ---------------------------------------------------------------


class CurrencyRequest(BaseModel):
    """Validated tool arguments (fromCurrency/toCurrency on the wire)."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    amount: float = Field(strict=True, allow_inf_nan=False)
    from_currency: str = Field(min_length=1)
    to_currency: str = Field(min_length=1)


# --- Rate lookup -----------------------------------------------------------


class RateQuote(BaseModel):
    rate: float
    provider: str
    last_updated: float | None = None


class RateSource(Protocol):
    description: str

    def quote(self, from_currency: str, to_currency: str) -> RateQuote:
        ...


class ExchangeRateResponse(BaseModel):
    base: str | None = None
    rates: dict[str, float] | None = None
    time_last_updated: float | None = None
    provider: str | None = None


class LiveRateSource:
    """Rate table from exchangerate-api.com (v4, no key)."""

    description = "Fetching current exchange rates..."

    def __init__(self, http: JsonHttpClient, base_url: str) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    def quote(self, from_currency: str, to_currency: str) -> RateQuote:
        try:
            payload = self._http.get_json(f"{self._base_url}/latest/{from_currency}", service="exchange-rate")
        except ExternalServiceError as exc:
            if _is_unsupported_code(exc.details):
                raise UnsupportedCurrencyError(f"Unsupported currency: {from_currency}", details=exc.details) from exc
            raise

        if _is_unsupported_code(payload):
            raise UnsupportedCurrencyError(f"Unsupported currency: {from_currency}", details=payload)

        response = decode_payload(ExchangeRateResponse, payload, "exchange-rate")
        if not response.rates:
            raise ExternalServiceError("Failed to fetch exchange rates")

        rate = response.rates.get(to_currency)
        if rate is None:
            raise UnsupportedCurrencyError(f"Conversion to {to_currency} is not supported")

        return RateQuote(
            rate=rate,
            provider=response.provider or DEFAULT_PROVIDER,
            last_updated=response.time_last_updated,
        )


def _is_unsupported_code(body: Any) -> bool:
    return isinstance(body, dict) and body.get("error-type") == "unsupported-code"


class StaticRateSource:
    """Offline lookup in a nested source -> target table."""

    description = "Looking up exchange rates..."

    def __init__(self, rates: dict[str, dict[str, float]] | None = None) -> None:
        self._rates = STATIC_RATES if rates is None else rates

    def quote(self, from_currency: str, to_currency: str) -> RateQuote:
        targets = self._rates.get(from_currency)
        if targets is None:
            raise UnsupportedCurrencyError(f"Unsupported currency: {from_currency}")

        rate = targets.get(to_currency)
        if rate is None:
            raise UnsupportedCurrencyError(f"Conversion to {to_currency} is not supported")

        return RateQuote(rate=rate, provider="Static rate table")


# --- Normalized output -----------------------------------------------------


class CurrencyConversion(BaseModel):
    """Normalized output schema for one conversion."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    amount: float
    from_currency: str
    to_currency: str
    rate: float
    equivalent_string: str
    timestamp: str
    last_updated: str | None = None
    provider: str


def build_conversion(request: CurrencyRequest, quote: RateQuote, now: datetime | None = None) -> CurrencyConversion:
    """Convert and attach metadata.

    The equivalence string uses the unrounded input amount and the
    rounded output amount: "100 USD = 85 EUR".
    """
    converted = convert_amount(request.amount, quote.rate)
    last_updated = None
    if quote.last_updated is not None:
        last_updated = iso_timestamp(datetime.fromtimestamp(quote.last_updated, tz=timezone.utc))

    return CurrencyConversion(
        amount=converted,
        from_currency=request.from_currency,
        to_currency=request.to_currency,
        rate=quote.rate,
        equivalent_string=(
            f"{format_number(request.amount)} {request.from_currency} = "
            f"{format_number(converted)} {request.to_currency}"
        ),
        timestamp=iso_timestamp(now or datetime.now(timezone.utc)),
        last_updated=last_updated,
        provider=quote.provider,
    )


class CurrencyConversionTool(ToolPlugin):
    """Currency conversion tool.

    Expected model call example:
        {"amount": 100, "fromCurrency": "USD", "toCurrency": "EUR"}
    """

    name = "convert-currency"
    description = "Convert an amount from one currency to another using current exchange rates"
    logger_name = "tools.currency"
    fallback_message = "Failed to convert currency"
    request_model = CurrencyRequest
    result_model = CurrencyConversion

    def __init__(self, rate_source: RateSource) -> None:
        super().__init__()
        self._rate_source = rate_source

    def _currency_property(self) -> dict[str, Any]:
        return {"type": "string"}

    def parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "amount": {
                    "type": "number",
                    "description": "The amount of money to convert",
                },
                "fromCurrency": {
                    **self._currency_property(),
                    "description": "The source currency code (e.g., USD, EUR, GBP)",
                },
                "toCurrency": {
                    **self._currency_property(),
                    "description": "The target currency code (e.g., USD, EUR, GBP)",
                },
            },
            "required": ["amount", "fromCurrency", "toCurrency"],
            "additionalProperties": False,
        }

    def run(self, request: CurrencyRequest, progress: ProgressReporter) -> CurrencyConversion:
        progress.report(25, self._rate_source.description)

        quote = self._rate_source.quote(request.from_currency, request.to_currency)
        self._logger.info(
            "Rate resolved: %s -> %s rate=%s provider=%s",
            request.from_currency,
            request.to_currency,
            quote.rate,
            quote.provider,
        )

        progress.report(
            75,
            f"Converting {format_number(request.amount)} {request.from_currency} to {request.to_currency}...",
        )
        conversion = build_conversion(request, quote)

        progress.report(100, "Conversion complete!")
        return conversion


class StaticCurrencyTool(CurrencyConversionTool):
    """Offline variant restricted to the currencies in the rate table."""

    name = "convertCurrency"

    def __init__(self, rate_source: RateSource | None = None) -> None:
        super().__init__(rate_source or StaticRateSource())

    def _currency_property(self) -> dict[str, Any]:
        return {"type": "string", "enum": list(STATIC_CURRENCIES)}
