"""
Match store.

Every scoring write is one UPDATE guarded by the row version the caller read,
so a scorer working from a stale copy is rejected instead of overwriting a
newer ball. Reads always go back to the database.
"""
import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from scorebook.engine.state import MatchState, MatchStatus
from scorebook.models.match import Match

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """The store could not complete a read or write"""


class StaleWriteError(PersistenceError):
    """The match changed since it was read"""


class MatchNotFoundError(LookupError):
    pass


class MatchStore:
    def __init__(self, session: Session):
        self.session = session

    def load(self, match_id: int) -> Match:
        """Fresh read of the match row, never served from the identity map"""
        try:
            self.session.expire_all()
            match = self.session.execute(select(Match).where(Match.id == match_id)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.exception("Failed to read match %s", match_id)
            raise PersistenceError(f"Could not read match {match_id}") from exc
        if match is None:
            raise MatchNotFoundError(f"Match {match_id} not found")
        return match

    def create(
        self,
        team1: List[str],
        team2: List[str],
        format: str = "40 Overs",
        captain1_id: Optional[str] = None,
        captain2_id: Optional[str] = None,
        venue: Optional[str] = None,
    ) -> Match:
        match = Match(
            team1=list(team1),
            team2=list(team2),
            format=format,
            captain1_id=captain1_id,
            captain2_id=captain2_id,
            venue=venue,
            status=MatchStatus.SCHEDULED,
            innings=[],
            checked_in_players=[],
            on_my_way_players=[],
            version=0,
        )
        try:
            self.session.add(match)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to create match")
            raise PersistenceError("Could not create match") from exc
        return self.load(match.id)

    def _write(self, match_id: int, expected_version: int, values: dict) -> Match:
        stmt = (
            update(Match)
            .where(Match.id == match_id, Match.version == expected_version)
            .values(version=Match.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            if result.rowcount == 0:
                self.session.rollback()
                logger.warning("Stale write to match %s at version %s", match_id, expected_version)
                raise StaleWriteError(f"Match {match_id} was updated by someone else, reload and retry")
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to write match %s", match_id)
            raise PersistenceError(f"Could not save match {match_id}") from exc
        return self.load(match_id)

    def save_state(self, match_id: int, expected_version: int, state: MatchState) -> Match:
        """Persist the engine-owned fields of a match in one statement"""
        values = {
            "scoring": state.scoring.to_document() if state.scoring else None,
            "innings": [innings.to_document() for innings in state.innings],
            "status": state.status,
            "winner": state.winner.value if state.winner else None,
            "result_summary": state.result_summary,
        }
        return self._write(match_id, expected_version, values)

    def save_toss(self, match_id: int, expected_version: int, winner: str, choice: str) -> Match:
        return self._write(match_id, expected_version, {"toss_winner": winner, "toss_choice": choice})
