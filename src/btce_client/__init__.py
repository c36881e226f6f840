from btce_client.exchange import (
    ApiError,
    ApiResponse,
    BtceClient,
    ConfigurationError,
    ExchangeError,
    InvalidParameterError,
    InvalidResponseError,
    OrderDirection,
    TransportError,
)

__version__ = "0.1.0"

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
