import hashlib
import hmac

from obiex.signing import Credentials, RequestSigner, sign

TIMESTAMP = 1700000000000


def test_sign_matches_known_vector():
    signed = sign("GET", "/v1/currencies", "secret123", timestamp=TIMESTAMP)
    assert signed.timestamp == TIMESTAMP
    assert signed.signature == "7332570bd07a72d0beae2ebce467dcd04a2bf5c5ced149ce7e996329b8922931"


def test_sign_uppercases_method():
    lower = sign("post", "/v1/trades/quote", "secret123", timestamp=TIMESTAMP)
    assert lower.signature == "622694a1b08ee0cb020d8e7a07c6da3583f2a8025329d61f52ee419fd2723a68"


def test_sign_covers_query_string():
    signed = sign(
        "GET",
        "/v1/transactions/me?page=2&pageSize=10&category=SWAP",
        "secret123",
        timestamp=TIMESTAMP,
    )
    assert signed.signature == "b79a22c9fbd8fd7e0fa8498383db74b03c9c78b176317b2ac266d0f211f2e24d"


def test_sign_is_deterministic_and_sensitive_to_each_input():
    base = sign("GET", "/v1/currencies", "secret123", timestamp=TIMESTAMP)
    assert sign("GET", "/v1/currencies", "secret123", timestamp=TIMESTAMP) == base
    assert sign("PUT", "/v1/currencies", "secret123", timestamp=TIMESTAMP) != base
    assert sign("GET", "/v1/currencies/1", "secret123", timestamp=TIMESTAMP) != base
    assert sign("GET", "/v1/currencies", "other", timestamp=TIMESTAMP) != base
    assert sign("GET", "/v1/currencies", "secret123", timestamp=TIMESTAMP + 1) != base


def test_sign_uses_current_time_in_millis(mocker):
    mocker.patch("obiex.signing.time.time", return_value=1700000000.0)
    signed = sign("GET", "/v1/currencies", "secret123")
    assert signed.timestamp == TIMESTAMP
    assert signed.signature == "7332570bd07a72d0beae2ebce467dcd04a2bf5c5ced149ce7e996329b8922931"


def test_headers_carry_signed_timestamp(mocker):
    mocker.patch("obiex.signing.time.time", return_value=1700000000.0)
    signer = RequestSigner(Credentials("key-1", "secret123"))

    headers = signer.headers("GET", "/v1/currencies")

    assert headers == {
        "x-api-key": "key-1",
        "x-api-timestamp": "1700000000000",
        "x-api-signature": "7332570bd07a72d0beae2ebce467dcd04a2bf5c5ced149ce7e996329b8922931",
    }
    expected = hmac.new(
        b"secret123",
        ("GET/v1/currencies" + headers["x-api-timestamp"]).encode(),
        hashlib.sha256,
    ).hexdigest()
    assert headers["x-api-signature"] == expected


def test_headers_add_content_type_for_body():
    signer = RequestSigner(Credentials("key-1", "secret123"))
    headers = signer.headers("POST", "/v1/trades/quote", has_body=True)
    assert headers["Content-Type"] == "application/json"


def test_credentials_repr_hides_secret():
    assert "secret123" not in repr(Credentials("key-1", "secret123"))
