import os
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from flashcards import models  # noqa: E402
from flashcards.api import deps  # noqa: E402
from flashcards.database import Base, enable_sqlite_foreign_keys  # noqa: E402
from flashcards.main import app  # noqa: E402

PASSWORD = "TestPass123!"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Register through the API and return the response body."""

    def _register(email: str = "alpha@example.com", display_name: str = "Alpha", password: str = PASSWORD):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password, "displayName": display_name},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def auth_headers(register_user):
    """Bearer headers for a freshly registered user."""

    def _headers(email: str = "alpha@example.com", display_name: str = "Alpha"):
        body = register_user(email=email, display_name=display_name)
        return {"Authorization": f"Bearer {body['tokens']['accessToken']}"}, body["user"]["id"]

    return _headers


@pytest.fixture
def make_deck(session_factory):
    """Insert a deck with cards directly; returns (deck_id, [card_ids])."""

    def _make_deck(
        user_id: str,
        cards: list[tuple[str, str | None]] = (("Front 1", "Back 1"), ("Front 2", "Back 2"), ("Front 3", "Back 3")),
        deck_type: models.DeckType = models.DeckType.STUDY,
        name: str = "Biology",
    ):
        session = session_factory()
        try:
            deck = models.Deck(user_id=user_id, name=name, deck_type=deck_type.value)
            session.add(deck)
            session.flush()
            card_rows = [models.Card(deck_id=deck.id, front_text=front, back_text=back) for front, back in cards]
            session.add_all(card_rows)
            session.commit()
            return deck.id, [card.id for card in card_rows]
        finally:
            session.close()

    return _make_deck
