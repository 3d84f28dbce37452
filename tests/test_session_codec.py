"""
Tests for the signed-cookie session codec.
"""

import base64
import time

import pytest
from cryptography.fernet import Fernet

from core.security.encryption import TokenEncryption
from core.security.session import Session, SessionCodec, SessionUser

USER = SessionUser(id=7, login="octocat", avatar_url="https://avatars.example.com/u/7")


def test_round_trip_anonymous(codec):
    session = Session(csrf_secret="abc123")

    decoded = codec.decode(codec.encode(session))

    assert decoded == session
    assert not decoded.is_authenticated


def test_round_trip_with_user_and_state(codec):
    session = Session(csrf_secret="abc123", user=USER, oauth_state="state-1")

    decoded = codec.decode(codec.encode(session))

    assert decoded.user == USER
    assert decoded.oauth_state == "state-1"


def test_same_inputs_give_same_cookie(codec):
    session = Session(csrf_secret="abc123", created_at=1000)

    assert codec.encode(session, now=2000) == codec.encode(session, now=2000)


def test_tampered_cookie_is_rejected(codec):
    value = codec.encode(Session(csrf_secret="abc123", user=USER))
    header, payload, signature = value.split(".")
    tampered_sig = signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")

    assert codec.decode(f"{header}.{payload}.{tampered_sig}") is None


def test_any_change_to_signed_part_is_rejected(codec):
    value = codec.encode(Session(csrf_secret="abc123", user=USER))
    signed, signature = value.rsplit(".", 1)

    for i, char in enumerate(signed):
        if char == ".":
            continue
        mutated = signed[:i] + ("A" if char != "A" else "B") + signed[i + 1:]
        assert codec.decode(f"{mutated}.{signature}") is None, i


def test_encrypted_cookie_bit_flips_are_rejected():
    key = Fernet.generate_key().decode()
    codec = SessionCodec("s" * 40, ttl_seconds=60, encryption=TokenEncryption(key))
    raw = base64.urlsafe_b64decode(codec.encode(Session(csrf_secret="abc123", user=USER)))

    for i in range(len(raw)):
        flipped = raw[:i] + bytes([raw[i] ^ 0x01]) + raw[i + 1:]
        assert codec.decode(base64.urlsafe_b64encode(flipped).decode()) is None, i


def test_cookie_signed_with_other_secret_is_rejected(codec):
    other = SessionCodec("another-secret-that-is-also-long-enough-123", ttl_seconds=3600)

    assert codec.decode(other.encode(Session(user=USER))) is None


def test_expired_cookie_is_rejected(codec):
    issued = int(time.time()) - 7200

    assert codec.decode(codec.encode(Session(user=USER), now=issued)) is None


@pytest.mark.parametrize("value", [None, "", "garbage", "a.b.c", "x" * 500])
def test_malformed_values_decode_to_none(codec, value):
    assert codec.decode(value) is None


def test_login_keeps_csrf_secret_and_clears_state():
    session = Session(csrf_secret="abc123", oauth_state="pending")

    signed_in = session.login(USER)

    assert signed_in.csrf_secret == "abc123"
    assert signed_in.oauth_state is None
    assert signed_in.is_authenticated
    assert session.user is None


def test_encrypted_cookie_hides_payload():
    key = Fernet.generate_key().decode()
    codec = SessionCodec("s" * 40, ttl_seconds=60, encryption=TokenEncryption(key))

    value = codec.encode(Session(csrf_secret="abc123", user=USER))

    assert "octocat" not in value
    assert value.count(".") == 0
    assert codec.decode(value).user == USER


def test_encrypted_codec_rejects_plain_jwt():
    key = Fernet.generate_key().decode()
    plain = SessionCodec("s" * 40, ttl_seconds=60)
    encrypted = SessionCodec("s" * 40, ttl_seconds=60, encryption=TokenEncryption(key))

    assert encrypted.decode(plain.encode(Session(user=USER))) is None


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        SessionCodec("", ttl_seconds=60)
