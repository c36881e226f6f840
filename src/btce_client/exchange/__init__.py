from btce_client.exchange.base import (
    ApiError,
    ApiResponse,
    ConfigurationError,
    ExchangeError,
    InvalidParameterError,
    InvalidResponseError,
    OrderDirection,
    TransportError,
)
from btce_client.exchange.btce import BtceClient

__all__ = [
    "ApiError",
    "ApiResponse",
    "BtceClient",
    "ConfigurationError",
    "ExchangeError",
    "InvalidParameterError",
    "InvalidResponseError",
    "OrderDirection",
    "TransportError",
]
