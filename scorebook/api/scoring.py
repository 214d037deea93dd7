from fastapi import APIRouter, Depends

from scorebook.api.deps import get_service, match_response, translate_errors
from scorebook.api.schemas import (
    BallRequest, BallResultResponse, EligiblePlayersResponse, MatchResponse,
    PlayerRequest, StartInningsRequest, VersionedRequest,
)
from scorebook.auth import ensure_scorer, get_current_user
from scorebook.engine.ball_processor import BallEvent, Dismissal
from scorebook.models.user import User
from scorebook.services.scoring import ScoringService

router = APIRouter(prefix="/matches/{match_id}/scoring", tags=["Live Scoring"])


def _authorize(service: ScoringService, match_id: int, user: User):
    ensure_scorer(service.store.load(match_id), user)


@router.post("/start", response_model=MatchResponse)
def start_innings(
    match_id: int,
    request: StartInningsRequest,
    service: ScoringService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    """Seat the openers and the opening bowler"""
    with translate_errors():
        _authorize(service, match_id, current_user)
        match = service.start_innings(
            match_id, request.striker_id, request.non_striker_id, request.bowler_id, request.expected_version
        )
    return match_response(match)


@router.post("/ball", response_model=BallResultResponse)
def record_ball(
    match_id: int,
    request: BallRequest,
    service: ScoringService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    dismissal = None
    if request.dismissal:
        dismissal = Dismissal(
            type=request.dismissal.type,
            who=request.dismissal.who,
            fielder=request.dismissal.fielder,
            fielder2=request.dismissal.fielder2,
        )
    event = BallEvent(runs=request.runs, extra=request.extra, is_wicket=request.is_wicket, dismissal=dismissal)

    with translate_errors():
        _authorize(service, match_id, current_user)
        match, signals = service.record_ball(match_id, event, request.expected_version)

    return BallResultResponse(
        wicket_fallen=signals.wicket_fallen,
        over_complete=signals.over_complete,
        innings_complete=signals.innings_complete,
        dismissed_id=signals.dismissed_id,
        match=match_response(match),
    )


@router.post("/undo", response_model=MatchResponse)
def undo_last_ball(
    match_id: int,
    request: VersionedRequest = VersionedRequest(),
    service: ScoringService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    with translate_errors():
        _authorize(service, match_id, current_user)
        match = service.undo(match_id, request.expected_version)
    return match_response(match)


@router.post("/reset-over", response_model=MatchResponse)
def reset_over(
    match_id: int,
    request: VersionedRequest = VersionedRequest(),
    service: ScoringService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    """Wipe every ball of the current over"""
    with translate_errors():
        _authorize(service, match_id, current_user)
        match = service.reset_over(match_id, request.expected_version)
    return match_response(match)


@router.post("/batsman", response_model=MatchResponse)
def new_batsman(
    match_id: int,
    request: PlayerRequest,
    service: ScoringService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    with translate_errors():
        _authorize(service, match_id, current_user)
        match = service.seat_batsman(match_id, request.player_id, request.expected_version)
    return match_response(match)


@router.post("/bowler", response_model=MatchResponse)
def new_bowler(
    match_id: int,
    request: PlayerRequest,
    service: ScoringService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    with translate_errors():
        _authorize(service, match_id, current_user)
        match = service.change_bowler(match_id, request.player_id, request.expected_version)
    return match_response(match)


@router.post("/end-innings", response_model=MatchResponse)
def end_innings(
    match_id: int,
    request: VersionedRequest = VersionedRequest(),
    service: ScoringService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    """Close the current innings; closing the second one completes the match"""
    with translate_errors():
        _authorize(service, match_id, current_user)
        match = service.end_innings(match_id, request.expected_version)
    return match_response(match)


@router.get("/eligible", response_model=EligiblePlayersResponse)
def eligible_players(match_id: int, service: ScoringService = Depends(get_service)):
    with translate_errors():
        players = service.eligible_players(match_id)
    return EligiblePlayersResponse(**players)
