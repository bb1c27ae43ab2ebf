from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response

from ..config import LookupConfig
from ..errors import QuotaExceeded, TransportError


@dataclass
class RequestConfig:
    timeout: float = 10.0


class OpenWeatherClient:
    """Base class for OpenWeather endpoints: credential, timeout, error mapping.

    No retries are attempted; the first failure is surfaced as
    :class:`TransportError`.
    """

    def __init__(
        self,
        config: LookupConfig,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.config = config
        self.request_config = request_config or RequestConfig(timeout=config.timeout)
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def _get(self, url: str, params: dict) -> Any:
        params = dict(params, appid=self.config.api_key)
        response = self._request("GET", url, params=params)
        return self._json(response)

    def _handle_response(self, response: Response) -> Response:
        if response.status_code == 429:
            self._log.warning("Quota exceeded: %s", response.text)
            raise QuotaExceeded(_upstream_message(response), status_code=429)
        if response.status_code >= 400:
            self._log.error("Provider returned %s: %s", response.status_code, response.text)
            raise TransportError(_upstream_message(response), status_code=response.status_code)
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise TransportError("Request timed out") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise TransportError() from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise TransportError("Invalid response from weather service") from exc


def _upstream_message(response: Response) -> Optional[str]:
    """Pull the ``message`` field out of an OpenWeather error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if message:
            return str(message)
    return None


def _safe_float(value: Optional[object]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Optional[object]) -> Optional[int]:
    number = _safe_float(value)
    if number is None:
        return None
    try:
        return int(number)
    except (OverflowError, ValueError):
        return None


def _safe_text(value: Optional[object]) -> Optional[str]:
    if value is None:
        return None
    return str(value)


__all__ = ["OpenWeatherClient", "RequestConfig"]
