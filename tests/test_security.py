import time

from venue_booking_api.app.core import security
from venue_booking_api.app.core.config import settings
from venue_booking_api.app.core.security import (
    create_access_token,
    create_principal_token,
    decode_access_token,
    hash_password,
    sign_webhook_payload,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = hash_password("Str0ng!Pass")
    assert "$" in hashed
    assert verify_password("Str0ng!Pass", hashed)
    assert not verify_password("wrong", hashed)


def test_password_hashes_are_salted():
    assert hash_password("Str0ng!Pass") != hash_password("Str0ng!Pass")


def test_verify_password_rejects_malformed_hash():
    assert verify_password("anything", "not-a-hash") is False


def test_principal_token_claims():
    token = create_principal_token(7, "jane@example.com", "user")
    payload = decode_access_token(token)
    assert payload["sub"] == "jane@example.com"
    assert payload["user_id"] == 7
    assert payload["role"] == "user"
    assert payload["exp"] > time.time()


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "jane@example.com"}, expires_delta=-10)
    assert decode_access_token(token) is None


def test_tampered_token_is_rejected():
    token = create_principal_token(1, "jane@example.com", "user")
    header, payload, signature = token.split(".")
    forged = create_principal_token(1, "jane@example.com", "organizer").split(".")[1]
    assert decode_access_token(f"{header}.{forged}.{signature}") is None
    assert decode_access_token("garbage") is None


def test_token_signed_with_other_secret_is_rejected(monkeypatch):
    token = create_principal_token(1, "jane@example.com", "user")
    monkeypatch.setattr(settings, "secret_key", "rotated")
    assert security.decode_access_token(token) is None


def test_webhook_signature_is_hex_hmac():
    signature = sign_webhook_payload("CARD1", "success", "secret")
    assert len(signature) == 64
    assert signature == sign_webhook_payload("CARD1", "success", "secret")
    assert signature != sign_webhook_payload("CARD1", "failed", "secret")
