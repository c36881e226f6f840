from __future__ import annotations

import hashlib
import hmac
from urllib.parse import parse_qsl

import httpx

from btce_client.exchange.btce import BtceClient


def _client(handler, **kwargs) -> BtceClient:  # type: ignore[no-untyped-def]
    return BtceClient(
        api_key="key-1",
        api_secret="secret-1",
        nonce=1000,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_sign_matches_independent_hmac_sha512() -> None:
    client = _client(lambda request: httpx.Response(200, json={"success": 1}))
    body = "pair=btc_usd&type=buy&rate=250&amount=1&method=Trade&nonce=1001"
    expected = hmac.new(b"secret-1", body.encode("utf-8"), hashlib.sha512).hexdigest()
    assert client.sign(body) == expected
    assert client.sign(body) == client.sign(body)
    assert client.sign(body) == client.sign(body).lower()


def test_trade_request_is_signed_over_exact_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": 1, "return": {}})

    client = _client(handler)
    client.api_query("Trade", {"pair": "btc_usd", "type": "buy", "rate": 250, "amount": 1})

    request = seen[0]
    body = request.content.decode("utf-8")
    assert request.method == "POST"
    assert request.url.path == "/tapi/"
    assert body == "pair=btc_usd&type=buy&rate=250&amount=1&method=Trade&nonce=1001"
    assert request.headers["Key"] == "key-1"
    assert request.headers["Sign"] == hmac.new(b"secret-1", request.content, hashlib.sha512).hexdigest()
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_params_keep_caller_order_and_are_form_encoded() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": 1})

    client = _client(handler)
    client.api_query("OrderList", {"to_id": 7, "from_id": 5, "note": "a b&c"})

    pairs = parse_qsl(seen[0].content.decode("utf-8"))
    assert [key for key, _ in pairs] == ["to_id", "from_id", "note", "method", "nonce"]
    assert dict(pairs)["note"] == "a b&c"


def test_caller_params_are_not_mutated() -> None:
    client = _client(lambda request: httpx.Response(200, json={"success": 1}))
    params = {"order_id": 42}
    client.api_query("CancelOrder", params)
    assert params == {"order_id": 42}
