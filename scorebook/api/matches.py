from fastapi import APIRouter, Depends

from scorebook.api.deps import get_service, get_store, match_response, translate_errors
from scorebook.api.schemas import MatchCreate, MatchResponse, TossRequest
from scorebook.auth import ensure_scorer, get_current_user, require_admin
from scorebook.models.user import User
from scorebook.services.scoring import ScoringService
from scorebook.store import MatchStore

router = APIRouter(prefix="/matches", tags=["Matches"])


@router.post("", response_model=MatchResponse)
def create_match(
    request: MatchCreate,
    store: MatchStore = Depends(get_store),
    admin: User = Depends(require_admin),
):
    """Schedule a match between two squads"""
    with translate_errors():
        match = store.create(
            team1=request.team1,
            team2=request.team2,
            format=request.format,
            captain1_id=request.captain1_id,
            captain2_id=request.captain2_id,
            venue=request.venue,
        )
    return match_response(match)


@router.get("/{match_id}", response_model=MatchResponse)
def get_match(match_id: int, store: MatchStore = Depends(get_store)):
    with translate_errors():
        match = store.load(match_id)
    return match_response(match)


@router.post("/{match_id}/toss", response_model=MatchResponse)
def record_toss(
    match_id: int,
    request: TossRequest,
    service: ScoringService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    with translate_errors():
        ensure_scorer(service.store.load(match_id), current_user)
        match = service.record_toss(
            match_id, request.winner.value, request.choice.value, request.expected_version
        )
    return match_response(match)
