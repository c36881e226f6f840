from __future__ import annotations

from enum import Enum
from typing import Any


class OrderDirection(str, Enum):
    BUY = "buy"
    SELL = "sell"


class ApiResponse(dict):
    """
    Decoded trade API response.

    The field set varies by method, so the payload stays a plain mapping.
    Accessors cover only the fields the trading operations read.
    """

    @property
    def success(self) -> int | None:
        raw = self.get("success")
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None

    @property
    def error(self) -> str | None:
        raw = self.get("error")
        return None if raw is None else str(raw)

    @property
    def result(self) -> Any:
        return self.get("return")


class ExchangeError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        retriable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.retriable = retriable
        self.details = details or {}


class ConfigurationError(ExchangeError):
    pass


class InvalidParameterError(ExchangeError):
    pass


class TransportError(ExchangeError):
    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(
            message,
            retriable=True,
            details={"cause": f"{cause.__class__.__name__}: {cause}"} if cause is not None else None,
        )
        self.cause = cause


class InvalidResponseError(ExchangeError):
    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message, details={"status_code": status_code, "body": body})
        self.status_code = status_code
        self.body = body


class ApiError(ExchangeError):
    def __init__(
        self,
        message: str,
        *,
        error_message: str | None = None,
        response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details={"error": error_message, "response": response})
        self.error_message = error_message
        self.response = response or {}
