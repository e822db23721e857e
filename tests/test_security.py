import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.core.security import compute_signature, verify_signature

NOW = 1_700_000_000
SECRET = "8f742231b10e8888abcd99yyyzzz85a5"
BODY = '{"type":"event_callback","event":{"type":"message","text":"hej"}}'


def sign(timestamp=NOW, body=BODY, secret=SECRET):
    return compute_signature(str(timestamp), body, secret)


def test_valid_signature_accepted():
    assert verify_signature(str(NOW), BODY, sign(), SECRET, now=NOW)


def test_signature_format():
    signature = sign()
    assert signature.startswith("v0=")
    assert len(signature) == 3 + 64


@pytest.mark.parametrize("body", [BODY + " ", BODY.replace("hej", "hek"), ""])
def test_tampered_body_rejected(body):
    assert not verify_signature(str(NOW), body, sign(), SECRET, now=NOW)


def test_tampered_timestamp_rejected():
    assert not verify_signature(str(NOW + 1), BODY, sign(), SECRET, now=NOW)


def test_wrong_secret_rejected():
    assert not verify_signature(str(NOW), BODY, sign(), SECRET + "x", now=NOW)


def test_missing_timestamp_rejected():
    assert not verify_signature(None, BODY, sign(), SECRET, now=NOW)


def test_missing_signature_rejected():
    assert not verify_signature(str(NOW), BODY, None, SECRET, now=NOW)


def test_non_numeric_timestamp_rejected():
    assert not verify_signature("yesterday", BODY, sign(), SECRET, now=NOW)


@pytest.mark.parametrize("skew", [301, -301, 3600, -86400])
def test_stale_or_future_timestamp_rejected_even_if_signed(skew):
    timestamp = NOW + skew
    assert not verify_signature(str(timestamp), BODY, sign(timestamp=timestamp), SECRET, now=NOW)


@pytest.mark.parametrize("skew", [300, -300, 0])
def test_timestamp_at_window_edge_accepted(skew):
    timestamp = NOW + skew
    assert verify_signature(str(timestamp), BODY, sign(timestamp=timestamp), SECRET, now=NOW)


def test_verification_override_accepts_anything():
    assert verify_signature(None, BODY, None, SECRET, now=NOW, enabled=False)


def test_verification_cannot_be_disabled_in_production():
    with pytest.raises(ValidationError):
        Settings(ENVIRONMENT="production", VERIFY_SIGNATURES=False)


def test_verification_can_be_disabled_in_development():
    assert Settings(ENVIRONMENT="development", VERIFY_SIGNATURES=False).VERIFY_SIGNATURES is False
