from __future__ import annotations

import hashlib
import hmac
import logging
import os
import re
import threading
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, TypeVar
from urllib.parse import quote, urlencode

import httpx

from btce_client.exchange.base import (
    ApiError,
    ApiResponse,
    ConfigurationError,
    InvalidParameterError,
    InvalidResponseError,
    OrderDirection,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://btc-e.com"
DEFAULT_USER_AGENT = "btce-client/0.1 (python-httpx)"
TRADE_PATH = "/tapi/"
PUBLIC_PATH = "/api/3/"

# Nonce errors look like "invalid nonce parameter; on key:654321, you sent:12"
_SERVER_NONCE_RE = re.compile(r":([0-9]+),")

_T = TypeVar("_T")


def _to_bool(value: Any) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default: _T, cast: Callable[[str], _T]) -> _T:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {name}: {raw!r}") from exc


def extract_server_nonce(message: str) -> int | None:
    match = _SERVER_NONCE_RE.search(message or "")
    if match:
        return int(match.group(1))
    return None


def _decode_object(response: httpx.Response) -> dict[str, Any] | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and payload:
        return payload
    return None


def _to_decimal_text(value: Any) -> Any:
    if isinstance(value, (float, Decimal)):
        return format(Decimal(str(value)).normalize(), "f")
    return value


def _pair_path(endpoint: str, pair: str) -> str:
    return f"{endpoint}/{quote(str(pair), safe='-_')}"


def _coerce_direction(direction: Any) -> OrderDirection:
    try:
        return OrderDirection(direction)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(
            f"Expected OrderDirection.BUY or OrderDirection.SELL. Found: {direction!r}"
        ) from exc


@dataclass
class BtceClient:
    """
    Client for the BTC-e public (API v3) and trade (tapi) endpoints.

    Authenticated calls carry a nonce that must grow with every request. The
    counter lives on the instance and is guarded by a lock, so one client may
    be shared between threads.
    """

    api_key: str
    api_secret: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    nonce: int | None = None
    public_timeout_seconds: float = 10.0
    trade_timeout_seconds: float = 30.0
    verify_tls: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    transport: httpx.BaseTransport | None = field(default=None, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.api_key = (self.api_key or "").strip()
        self.api_secret = (self.api_secret or "").strip()
        if not self.api_key or not self.api_secret:
            raise ConfigurationError("Missing BTCE_API_KEY/BTCE_API_SECRET")
        if self.nonce is None:
            self.nonce = int(time.time())
        if not self.verify_tls:
            logger.warning("TLS certificate verification is disabled for %s", self.base_url)

    @classmethod
    def from_env(cls) -> "BtceClient":
        return cls(
            api_key=(os.getenv("BTCE_API_KEY") or "").strip(),
            api_secret=(os.getenv("BTCE_API_SECRET") or "").strip(),
            base_url=(os.getenv("BTCE_BASE_URL") or DEFAULT_BASE_URL).strip(),
            nonce=_env_number("BTCE_NONCE", None, int),
            public_timeout_seconds=_env_number("BTCE_PUBLIC_TIMEOUT_SECONDS", 10.0, float),
            trade_timeout_seconds=_env_number("BTCE_TRADE_TIMEOUT_SECONDS", 30.0, float),
            verify_tls=_to_bool(os.getenv("BTCE_VERIFY_TLS", "1")),
        )

    def _http_client(self, timeout_seconds: float) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_seconds),
            verify=self.verify_tls,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )

    def _next_nonce(self) -> int:
        self.nonce = int(self.nonce) + 1
        return self.nonce

    def sign(self, body: str) -> str:
        return hmac.new(
            self.api_secret.encode("utf-8"),
            body.encode("utf-8"),
            hashlib.sha512,
        ).hexdigest()

    def _post_trade(self, body: str) -> httpx.Response:
        headers = {
            "Key": self.api_key,
            "Sign": self.sign(body),
            "Content-Type": "application/x-www-form-urlencoded",
        }
        try:
            with self._http_client(self.trade_timeout_seconds) as client:
                return client.post(TRADE_PATH, content=body.encode("utf-8"), headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Could not get reply: {exc.__class__.__name__}: {exc}",
                cause=exc,
            ) from exc

    def api_query(self, method: str, params: dict[str, Any] | None = None) -> ApiResponse:
        """
        Sign and send one trade API call.

        A nonce rejection is recovered once: the exchange reports the nonce
        it last accepted, the counter jumps to it and the call is re-sent.
        Any further error is raised as ``ApiError``.
        """
        with self._lock:
            nonce_retried = False
            while True:
                payload: dict[str, Any] = dict(params or {})
                payload["method"] = method
                payload["nonce"] = self._next_nonce()
                body = urlencode(payload)
                logger.debug("BTC-e trade request method=%s nonce=%s", method, payload["nonce"])

                response = self._post_trade(body)
                result = _decode_object(response)
                if result is None:
                    raise InvalidResponseError(
                        "Invalid data received, please make sure connection is working and requested API exists",
                        status_code=response.status_code,
                        body=response.text,
                    )

                if result.get("error") is None:
                    return ApiResponse(result)

                message = str(result["error"])
                if "nonce" in message and not nonce_retried:
                    server_nonce = extract_server_nonce(message)
                    if server_nonce is None:
                        raise ApiError(
                            f"nonce error message unparseable: {message}",
                            error_message=message,
                            response=result,
                        )
                    logger.warning(
                        "Nonce we sent (%s) is invalid, retrying %s with server returned nonce (%s)",
                        self.nonce,
                        method,
                        server_nonce,
                    )
                    self.nonce = server_nonce
                    nonce_retried = True
                    continue

                raise ApiError(
                    f"API Error Message: {message}",
                    error_message=message,
                    response=result,
                )

    def _retrieve_json(self, path: str) -> Any:
        url = PUBLIC_PATH + path
        try:
            with self._http_client(self.public_timeout_seconds) as client:
                response = client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("BTC-e public request failed url=%s: %s: %s", url, exc.__class__.__name__, exc)
            return None
        if not (200 <= response.status_code < 300):
            logger.warning("BTC-e public request failed url=%s: HTTP %s", url, response.status_code)
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning("BTC-e public response is not valid JSON url=%s", url)
            return None

    def get_market_info(self) -> Any:
        return self._retrieve_json("info")

    def get_pair_fee(self, pair: str) -> Any:
        return self._retrieve_json(_pair_path("fee", pair))

    def get_ticker(self, pair: str) -> Any:
        return self._retrieve_json(_pair_path("ticker", pair))

    def get_trades(self, pair: str) -> Any:
        return self._retrieve_json(_pair_path("trades", pair))

    def get_depth(self, pair: str) -> Any:
        return self._retrieve_json(_pair_path("depth", pair))

    def make_order(self, amount: Any, pair: str, direction: OrderDirection | str, price: Any) -> ApiResponse:
        side = _coerce_direction(direction)
        return self.api_query(
            "Trade",
            {
                "pair": pair,
                "type": side.value,
                "rate": _to_decimal_text(price),
                "amount": _to_decimal_text(amount),
            },
        )

    def cancel_order(self, order_id: int | str) -> ApiResponse:
        return self.api_query("CancelOrder", {"order_id": order_id})

    def check_past_order(self, order_id: int | str) -> ApiResponse:
        """Look up a completed (non-active) order by id."""
        data = self.api_query(
            "OrderList",
            {
                "from_id": order_id,
                "to_id": order_id,
                "active": 0,
            },
        )
        if data.success == 0:
            raise ApiError(f"Error: {data.error}", error_message=data.error, response=data)
        return data
