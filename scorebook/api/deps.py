"""
Shared route helpers: service wiring, error translation, response building
"""
from contextlib import contextmanager

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from scorebook.api.schemas import MatchResponse, ScoreSummary
from scorebook.database import get_db
from scorebook.engine.errors import IllegalStateError, InvalidEventError
from scorebook.engine.innings import overs_limit
from scorebook.engine.state import ScoringState
from scorebook.models.match import Match
from scorebook.config import settings
from scorebook.services.scoring import ScoringService
from scorebook.store import MatchNotFoundError, MatchStore, PersistenceError, StaleWriteError


def get_store(db: Session = Depends(get_db)) -> MatchStore:
    return MatchStore(db)


def get_service(store: MatchStore = Depends(get_store)) -> ScoringService:
    return ScoringService(store)


@contextmanager
def translate_errors():
    """Map store and engine failures onto HTTP responses"""
    try:
        yield
    except MatchNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except InvalidEventError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except (IllegalStateError, StaleWriteError) as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


def _summary(state: ScoringState) -> ScoreSummary:
    runs_needed = None
    if state.target is not None:
        runs_needed = max(state.target - state.total_runs, 0)
    return ScoreSummary(
        innings=state.current_innings,
        batting_team=state.batting_team.value,
        bowling_team=state.bowling_team.value,
        runs=state.total_runs,
        wickets=state.total_wickets,
        overs=state.overs_display,
        run_rate=round(state.run_rate, 2),
        this_over=[token.label for token in state.this_over],
        target=state.target,
        runs_needed=runs_needed,
        striker_id=state.striker_id,
        non_striker_id=state.non_striker_id,
        bowler_id=state.current_bowler_id,
        extras=state.extras.total,
    )


def match_response(match: Match) -> MatchResponse:
    state = match.to_state()
    return MatchResponse(
        id=match.id,
        team1=state.team1,
        team2=state.team2,
        captain1_id=match.captain1_id,
        captain2_id=match.captain2_id,
        format=match.format,
        overs_limit=overs_limit(match.format, settings.DEFAULT_OVERS),
        venue=match.venue,
        toss_winner=match.toss_winner,
        toss_choice=match.toss_choice,
        status=match.status.value,
        winner=match.winner,
        result_summary=match.result_summary,
        version=match.version,
        summary=_summary(state.scoring) if state.scoring else None,
        scoring=match.scoring,
        innings=list(match.innings or []),
    )
