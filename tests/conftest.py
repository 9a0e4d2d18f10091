"""Fixtures comunes: Mongo en memoria, verificador de tokens y mailer falsos."""
from typing import Dict, List

import mongomock
import pytest
from fastapi.testclient import TestClient

from notepad.infrastructure.db import mongo
from notepad.infrastructure.db.bootstrap import ensure_collections
from notepad.infrastructure.email import email_client
from notepad.infrastructure.http import firebase_client
from notepad.infrastructure.http.firebase_client import IdentityVerificationError, VerifiedToken

ALICE = VerifiedToken(uid="uid-alice", email="alice@example.com", name="Alice")
BOB = VerifiedToken(uid="uid-bob", email="bob@example.com", name="Bob")


@pytest.fixture
def db():
    client = mongomock.MongoClient()
    mongo.init_mongo(client=client)
    ensure_collections()
    yield mongo.get_db()
    client.close()


@pytest.fixture
def tokens(monkeypatch) -> Dict[str, VerifiedToken]:
    """Token -> identidad; cualquier otro token es inválido."""
    known: Dict[str, VerifiedToken] = {"token-alice": ALICE, "token-bob": BOB}

    def _verify(token: str) -> VerifiedToken:
        if token not in known:
            raise IdentityVerificationError("Firebase ID token has expired")
        return known[token]

    monkeypatch.setattr(firebase_client, "verify_id_token", _verify)
    return known


@pytest.fixture
def outbox(monkeypatch) -> List[dict]:
    """Registra los envíos en lugar de llamar al proveedor."""
    sent: List[dict] = []

    def _send(to_email: str, title: str, content: str) -> None:
        sent.append({"to": to_email, "title": title, "content": content})

    monkeypatch.setattr(email_client, "send_note_email", _send)
    return sent


@pytest.fixture
def client(db, tokens, outbox):
    from notepad.main import app

    with TestClient(app) as c:
        yield c