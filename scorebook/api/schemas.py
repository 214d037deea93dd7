"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum

from scorebook.engine.state import DismissalType, ExtraKind


# Enums
class TeamSideEnum(str, Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"


class TossChoiceEnum(str, Enum):
    BAT = "bat"
    BOWL = "bowl"


# Match Schemas
class MatchCreate(BaseModel):
    team1: List[str]
    team2: List[str]
    format: str = "40 Overs"
    captain1_id: Optional[str] = None
    captain2_id: Optional[str] = None
    venue: Optional[str] = None


class TossRequest(BaseModel):
    winner: TeamSideEnum
    choice: TossChoiceEnum
    expected_version: Optional[int] = None


class ScoreSummary(BaseModel):
    innings: int
    batting_team: str
    bowling_team: str
    runs: int
    wickets: int
    overs: str  # "12.3"
    run_rate: float
    this_over: List[str]
    target: Optional[int] = None
    runs_needed: Optional[int] = None
    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None
    extras: int = 0


class MatchResponse(BaseModel):
    id: int
    team1: List[str]
    team2: List[str]
    captain1_id: Optional[str] = None
    captain2_id: Optional[str] = None
    format: str
    overs_limit: int
    venue: Optional[str] = None
    toss_winner: Optional[str] = None
    toss_choice: Optional[str] = None
    status: str
    winner: Optional[str] = None
    result_summary: Optional[str] = None
    version: int
    summary: Optional[ScoreSummary] = None
    scoring: Optional[dict] = None  # full scoring document
    innings: List[dict] = []


# Scoring Schemas
class VersionedRequest(BaseModel):
    """Optional optimistic-concurrency check against the version the client last saw"""
    expected_version: Optional[int] = None


class StartInningsRequest(VersionedRequest):
    striker_id: str
    non_striker_id: str
    bowler_id: str


class DismissalRequest(BaseModel):
    type: DismissalType
    who: Optional[str] = None  # defaults to the striker
    fielder: Optional[str] = None
    fielder2: Optional[str] = None


class BallRequest(VersionedRequest):
    runs: int = Field(default=0, ge=0, le=6)
    extra: ExtraKind = ExtraKind.NONE
    is_wicket: bool = False
    dismissal: Optional[DismissalRequest] = None


class PlayerRequest(VersionedRequest):
    player_id: str


class BallResultResponse(BaseModel):
    wicket_fallen: bool
    over_complete: bool
    innings_complete: bool
    dismissed_id: Optional[str] = None
    match: MatchResponse


class EligiblePlayersResponse(BaseModel):
    batsmen: List[str]
    bowlers: List[str]
