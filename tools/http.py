from __future__ import annotations

"""JSON-over-HTTP client shared by the provider integrations.

Every request:
- has a bounded timeout,
- raises `ExternalServiceError` on transport failure, timeout or non-2xx,
- attaches the provider error body as `details` when one is returned.
"""

import logging
from typing import Any, TypeVar

import requests
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tools.errors import ExternalServiceError

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonHttpClient:
    """Thin wrapper over `requests.get` returning decoded JSON."""

    def __init__(self, timeout: float = 10.0) -> None:
        self._timeout = timeout
        self._logger = logging.getLogger("tools.http")

    @property
    def timeout(self) -> float:
        return self._timeout

    def get_json(self, url: str, params: dict[str, Any] | None = None, service: str = "provider") -> Any:
        """Issue one GET request and return the parsed JSON body.

        Example:
            client.get_json("https://api.open-meteo.com/v1/forecast", {"latitude": 1.0}, service="weather")
        """
        self._logger.info("%s request: url=%s params=%s", service, url, params)

        try:
            response = requests.get(url, params=params, timeout=self._timeout)
        except requests.Timeout as exc:
            raise ExternalServiceError(f"Request to {service} timed out after {self._timeout:g}s") from exc
        except requests.RequestException as exc:
            raise ExternalServiceError(str(exc) or f"Request to {service} failed") from exc

        self._logger.info("%s response: status=%s", service, response.status_code)

        if not 200 <= response.status_code < 300:
            raise ExternalServiceError(
                f"Request failed with status code {response.status_code}",
                details=_error_body(response),
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceError(f"{service} returned non-JSON response") from exc


def _error_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        text = response.text.strip()
        return text or None


def decode_payload(model: type[ModelT], payload: Any, service: str) -> ModelT:
    """Decode an untrusted provider payload into a typed model.

    Missing required fields and wrong types surface as `ExternalServiceError`
    here, before any normalization touches the data.
    """
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        fields = sorted({".".join(str(part) for part in error["loc"]) or "body" for error in exc.errors()})
        raise ExternalServiceError(
            f"Unexpected {service} response: invalid or missing {', '.join(fields)}",
            details=payload if isinstance(payload, (dict, list)) else None,
        ) from exc
