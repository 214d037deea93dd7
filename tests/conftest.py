"""
Shared fixtures: two eleven-player squads, a match with the toss done, and
an innings with openers a1/a2 facing b1.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from scorebook.database import Base
from scorebook.engine.innings import start_innings
from scorebook.engine.state import InningsContext, MatchState, TeamSide


@pytest.fixture
def batting_squad():
    return [f"a{i}" for i in range(1, 12)]


@pytest.fixture
def bowling_squad():
    return [f"b{i}" for i in range(1, 12)]


@pytest.fixture
def context(batting_squad, bowling_squad):
    """Twenty overs, forced retirement switched off"""
    return InningsContext(
        batting_squad=batting_squad,
        bowling_squad=bowling_squad,
        overs_limit=20,
        retire_after=0,
    )


@pytest.fixture
def match_state(batting_squad, bowling_squad):
    return MatchState(
        team1=batting_squad,
        team2=bowling_squad,
        format="T20",
        toss_winner=TeamSide.TEAM1,
        toss_choice="bat",
    )


@pytest.fixture
def state(match_state):
    return start_innings(match_state, "a1", "a2", "b1").scoring


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    from scorebook.models import match, user  # noqa
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = Session(engine)
    yield session
    session.close()
    engine.dispose()
