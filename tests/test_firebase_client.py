import base64
import json

import pytest
from google.auth import exceptions as google_exceptions
from google.oauth2 import id_token

from notepad.core.config import Settings, settings
from notepad.infrastructure.http import firebase_client
from notepad.infrastructure.http.firebase_client import IdentityVerificationError


ISSUER = "https://securetoken.google.com/notepad-test"


@pytest.fixture
def project(monkeypatch):
    monkeypatch.setattr(settings, "firebase_project_id", "notepad-test")
    return "notepad-test"


def _stub(monkeypatch, claims=None, error=None):
    seen = {}

    def fake(token, request, audience=None, clock_skew_in_seconds=0):
        seen.update(token=token, audience=audience, skew=clock_skew_in_seconds)
        if error is not None:
            raise error
        return claims

    monkeypatch.setattr(id_token, "verify_firebase_token", fake)
    return seen


def test_valid_token(monkeypatch, project):
    seen = _stub(monkeypatch, {"iss": ISSUER, "sub": "abc", "user_id": "abc", "email": "Ana@Example.com", "name": "Ana"})

    verified = firebase_client.verify_id_token("tok")

    assert verified.uid == "abc"
    assert verified.email == "ana@example.com"
    assert verified.name == "Ana"
    assert seen == {"token": "tok", "audience": "notepad-test", "skew": settings.identity_clock_skew_seconds}


@pytest.mark.parametrize(
    "error",
    [
        ValueError("Token expired, 1700000000 < 1700000300"),
        google_exceptions.TransportError("certs unreachable"),
    ],
)
def test_verifier_errors_are_wrapped(monkeypatch, project, error):
    _stub(monkeypatch, error=error)

    with pytest.raises(IdentityVerificationError):
        firebase_client.verify_id_token("tok")


def test_token_without_email_is_rejected(monkeypatch, project):
    _stub(monkeypatch, {"iss": ISSUER, "sub": "abc", "user_id": "abc", "phone_number": "+5215555555555"})

    with pytest.raises(IdentityVerificationError, match="email"):
        firebase_client.verify_id_token("tok")


@pytest.mark.parametrize(
    "iss",
    [None, "https://securetoken.google.com/other-project", "https://accounts.google.com"],
)
def test_foreign_issuer_is_rejected(monkeypatch, project, iss):
    _stub(monkeypatch, {"iss": iss, "sub": "abc", "email": "ana@example.com"})

    with pytest.raises(IdentityVerificationError, match="Emisor"):
        firebase_client.verify_id_token("tok")


@pytest.mark.parametrize("sub", [None, ""])
def test_token_without_sub_is_rejected(monkeypatch, project, sub):
    # user_id presente no sustituye a sub
    _stub(monkeypatch, {"iss": ISSUER, "sub": sub, "user_id": "abc", "email": "ana@example.com"})

    with pytest.raises(IdentityVerificationError, match="sub"):
        firebase_client.verify_id_token("tok")


def test_not_configured(monkeypatch):
    monkeypatch.setattr(settings, "firebase_project_id", None)
    monkeypatch.setattr(settings, "firebase_service_account_key_b64", None)

    with pytest.raises(IdentityVerificationError, match="no configurado"):
        firebase_client.verify_id_token("tok")


def test_project_id_from_service_account():
    account = {"type": "service_account", "project_id": "leopad-notes", "client_email": "x@leopad.iam"}
    b64 = base64.b64encode(json.dumps(account).encode()).decode()

    s = Settings(firebase_service_account_key_b64=b64, firebase_project_id=None)

    assert s.firebase_project == "leopad-notes"
    assert s.identity_configured


def test_bad_service_account_is_ignored():
    s = Settings(firebase_service_account_key_b64="%%%not-base64%%%", firebase_project_id=None)

    assert s.firebase_service_account is None
    assert not s.identity_configured
