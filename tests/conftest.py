"""Pytest configuration and fixtures for formation tests."""

import os
import random

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("FORMATION_API_URL", "http://testserver")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.formation.authorization import TeamAccess  # noqa: E402
from app.formation.layout import PlayerRef  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Player, Team, User  # noqa: E402

OWNER_ID = 1
CAPTAIN_ID = 2
AUTHORIZED_ID = 3
MEMBER_ID = 4
OUTSIDER_ID = 5


class RecordingNotifier:
    """Collects notify() calls instead of showing toasts."""

    def __init__(self):
        self.calls = []

    def notify(self, kind, title, message):
        self.calls.append((kind, title, message))

    @property
    def kinds(self):
        return [kind for kind, _, _ in self.calls]


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def players():
    return [
        PlayerRef(id=i, user_id=100 + i, full_name=f"Giocatore {i}", username=f"g{i}")
        for i in range(1, 9)
    ]


@pytest.fixture
def team_access():
    return TeamAccess(
        id=1,
        created_by=OWNER_ID,
        captain_id=CAPTAIN_ID,
        authorized_members=[AUTHORIZED_ID],
        team_size=8,
        name="Amatori",
    )


@pytest.fixture
def db():
    """Clean in-memory database per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_team(db):
    """Team 1 (size 8): owner, captain, authorized member, plain member; user 5 is an outsider."""
    users = [
        User(id=OWNER_ID, username="owner", full_name="Mario Rossi"),
        User(id=CAPTAIN_ID, username="capitano", full_name="Luca Bianchi"),
        User(id=AUTHORIZED_ID, username="vice", full_name="Paolo Verdi"),
        User(id=MEMBER_ID, username="membro", full_name="Andrea Neri"),
        User(id=OUTSIDER_ID, username="esterno", full_name="Gianni Gialli"),
    ]
    db.add_all(users)
    db.flush()
    team = Team(
        id=1,
        name="Amatori",
        created_by=OWNER_ID,
        captain_id=CAPTAIN_ID,
        team_size=8,
        authorized_members=[AUTHORIZED_ID],
    )
    db.add(team)
    db.flush()
    roster = [
        Player(id=10 + user_id, user_id=user_id, team_id=1)
        for user_id in (OWNER_ID, CAPTAIN_ID, AUTHORIZED_ID, MEMBER_ID)
    ]
    db.add_all(roster)
    db.commit()
    return team


@pytest.fixture
def client(db):
    return TestClient(app)


def headers(user_id):
    return {"X-User-Id": str(user_id)}
