"""
Scoring state for one innings.

The dataclasses here are the in-memory model. `to_document` / `from_document`
convert to the camelCase dict stored on the match row under `scoring`.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import enum


OVER_BALLS = 6


class TeamSide(str, enum.Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"

    @property
    def other(self) -> "TeamSide":
        return TeamSide.TEAM2 if self is TeamSide.TEAM1 else TeamSide.TEAM1


class ExtraKind(str, enum.Enum):
    NONE = "none"
    WIDE = "wide"
    NO_BALL = "noball"
    BYE = "bye"
    LEG_BYE = "legbye"


class TokenKind(str, enum.Enum):
    RUN = "run"
    WIDE = "wide"
    NO_BALL = "noball"
    BYE = "bye"
    LEG_BYE = "legbye"
    WICKET = "wicket"
    RETIRED = "retired"


class DismissalType(str, enum.Enum):
    BOWLED = "Bowled"
    CAUGHT = "Caught"
    RUN_OUT = "Run Out"
    LBW = "LBW"
    STUMPED = "Stumped"
    HIT_WICKET = "Hit Wicket"
    RETIRED = "Retired"

    @property
    def credits_bowler(self) -> bool:
        return self not in (DismissalType.RUN_OUT, DismissalType.RETIRED)

    @property
    def counts_as_wicket(self) -> bool:
        return self is not DismissalType.RETIRED


@dataclass
class WicketInfo:
    """How and when a batsman was dismissed"""
    type: DismissalType
    bowler_id: Optional[str] = None  # credited bowler, None for run outs / retirements
    fielder_id: Optional[str] = None
    fielder2_id: Optional[str] = None
    over: int = 0
    ball: int = 1
    was_striker: bool = True  # on strike when the ball was bowled

    def to_document(self) -> dict:
        return {
            "type": self.type.value,
            "bowlerId": self.bowler_id,
            "fielderId": self.fielder_id,
            "fielderId2": self.fielder2_id,
            "over": self.over,
            "ball": self.ball,
            "wasStriker": self.was_striker,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "WicketInfo":
        return cls(
            type=DismissalType(doc["type"]),
            bowler_id=doc.get("bowlerId"),
            fielder_id=doc.get("fielderId"),
            fielder2_id=doc.get("fielderId2"),
            over=doc.get("over", 0),
            ball=doc.get("ball", 1),
            was_striker=doc.get("wasStriker", True),
        )


@dataclass
class BatsmanStats:
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    wicket_info: Optional[WicketInfo] = None

    @property
    def is_out(self) -> bool:
        return self.wicket_info is not None

    @property
    def strike_rate(self) -> float:
        if self.balls == 0:
            return 0.0
        return (self.runs / self.balls) * 100

    def to_document(self) -> dict:
        doc = {"runs": self.runs, "balls": self.balls, "fours": self.fours, "sixes": self.sixes}
        if self.wicket_info:
            doc["wicketInfo"] = self.wicket_info.to_document()
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "BatsmanStats":
        info = doc.get("wicketInfo")
        return cls(
            runs=doc.get("runs", 0),
            balls=doc.get("balls", 0),
            fours=doc.get("fours", 0),
            sixes=doc.get("sixes", 0),
            wicket_info=WicketInfo.from_document(info) if info else None,
        )


@dataclass
class BowlerStats:
    balls: int = 0  # legal deliveries
    runs: int = 0
    wickets: int = 0

    @property
    def overs_display(self) -> str:
        return f"{self.balls // OVER_BALLS}.{self.balls % OVER_BALLS}"

    @property
    def economy(self) -> float:
        if self.balls == 0:
            return 0.0
        return (self.runs / self.balls) * OVER_BALLS

    def to_document(self) -> dict:
        return {"balls": self.balls, "runs": self.runs, "wickets": self.wickets}

    @classmethod
    def from_document(cls, doc: dict) -> "BowlerStats":
        return cls(balls=doc.get("balls", 0), runs=doc.get("runs", 0), wickets=doc.get("wickets", 0))


@dataclass
class Extras:
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0

    @property
    def total(self) -> int:
        return self.wides + self.no_balls + self.byes + self.leg_byes

    def to_document(self) -> dict:
        return {"wides": self.wides, "noBalls": self.no_balls, "byes": self.byes, "legByes": self.leg_byes}

    @classmethod
    def from_document(cls, doc: Optional[dict]) -> "Extras":
        doc = doc or {}
        return cls(
            wides=doc.get("wides", 0),
            no_balls=doc.get("noBalls", 0),
            byes=doc.get("byes", 0),
            leg_byes=doc.get("legByes", 0),
        )


@dataclass
class BallToken:
    """One delivery of the current over, with enough context to invert it"""
    kind: TokenKind
    runs: int  # runs physically run / hit, penalty excluded
    extra: ExtraKind
    batsman_id: str  # striker when the ball was bowled
    bowler_id: str
    dismissed_id: Optional[str] = None
    replacement_id: Optional[str] = None  # batsman seated after this dismissal

    @property
    def is_legal(self) -> bool:
        return self.extra not in (ExtraKind.WIDE, ExtraKind.NO_BALL)

    @property
    def penalty(self) -> int:
        return 0 if self.is_legal else 1

    @property
    def total_runs(self) -> int:
        return self.runs + self.penalty

    @property
    def batsman_runs(self) -> int:
        if self.extra in (ExtraKind.NONE, ExtraKind.NO_BALL):
            return self.runs
        return 0

    @property
    def faced(self) -> bool:
        return self.extra is not ExtraKind.WIDE

    @property
    def bowler_runs(self) -> int:
        if self.extra in (ExtraKind.BYE, ExtraKind.LEG_BYE):
            return 0
        return self.total_runs

    @property
    def label(self) -> str:
        """Short scoreboard label, e.g. 4, W, R, 1WD, NB"""
        if self.kind is TokenKind.WICKET:
            return "W"
        if self.kind is TokenKind.RETIRED:
            return "R"
        suffix = {
            ExtraKind.NONE: "",
            ExtraKind.WIDE: "WD",
            ExtraKind.NO_BALL: "NB",
            ExtraKind.BYE: "B",
            ExtraKind.LEG_BYE: "LB",
        }[self.extra]
        if not suffix:
            return str(self.runs)
        return f"{self.runs}{suffix}" if self.runs else suffix

    def to_document(self) -> dict:
        return {
            "kind": self.kind.value,
            "runs": self.runs,
            "extra": self.extra.value,
            "batsmanId": self.batsman_id,
            "bowlerId": self.bowler_id,
            "dismissedId": self.dismissed_id,
            "replacementId": self.replacement_id,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "BallToken":
        return cls(
            kind=TokenKind(doc["kind"]),
            runs=doc.get("runs", 0),
            extra=ExtraKind(doc.get("extra", ExtraKind.NONE.value)),
            batsman_id=doc["batsmanId"],
            bowler_id=doc["bowlerId"],
            dismissed_id=doc.get("dismissedId"),
            replacement_id=doc.get("replacementId"),
        )


@dataclass
class ScoringState:
    """Current state of an innings"""
    batting_team: TeamSide
    bowling_team: TeamSide
    current_innings: int = 1
    total_runs: int = 0
    total_wickets: int = 0
    total_overs: int = 0  # completed overs
    this_over: List[BallToken] = field(default_factory=list)

    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    current_bowler_id: Optional[str] = None
    previous_bowler_id: Optional[str] = None
    over_bowler_id: Optional[str] = None  # bowler who started the current over
    relief_bowler_ids: List[str] = field(default_factory=list)  # stats entries first seeded mid-over

    batsmen_stats: Dict[str, BatsmanStats] = field(default_factory=dict)
    bowler_stats: Dict[str, BowlerStats] = field(default_factory=dict)
    extras: Extras = field(default_factory=Extras)
    target: Optional[int] = None

    @property
    def legal_balls_in_over(self) -> int:
        return sum(1 for token in self.this_over if token.is_legal)

    @property
    def awaiting_bowler(self) -> bool:
        """Six legal balls are on the board and nobody has taken the next over"""
        return self.legal_balls_in_over >= OVER_BALLS or self.current_bowler_id is None

    @property
    def has_vacancy(self) -> bool:
        return self.striker_id is None or self.non_striker_id is None

    @property
    def legal_balls(self) -> int:
        # a completed over stays on the board until the next bowler is seated
        in_over = self.legal_balls_in_over % OVER_BALLS
        return self.total_overs * OVER_BALLS + in_over

    @property
    def overs_display(self) -> str:
        return f"{self.total_overs}.{self.legal_balls_in_over % OVER_BALLS}"

    @property
    def run_rate(self) -> float:
        if self.legal_balls == 0:
            return 0.0
        return (self.total_runs / self.legal_balls) * OVER_BALLS

    @property
    def is_started(self) -> bool:
        return bool(self.batsmen_stats)

    def swap_ends(self):
        self.striker_id, self.non_striker_id = self.non_striker_id, self.striker_id

    def to_document(self) -> dict:
        return {
            "currentInnings": self.current_innings,
            "battingTeam": self.batting_team.value,
            "bowlingTeam": self.bowling_team.value,
            "totalRuns": self.total_runs,
            "totalWickets": self.total_wickets,
            "totalOvers": self.total_overs,
            "thisOver": [token.to_document() for token in self.this_over],
            "strikerId": self.striker_id,
            "nonStrikerId": self.non_striker_id,
            "currentBowlerId": self.current_bowler_id,
            "previousBowlerId": self.previous_bowler_id,
            "overBowlerId": self.over_bowler_id,
            "reliefBowlerIds": list(self.relief_bowler_ids),
            "batsmenStats": {pid: s.to_document() for pid, s in self.batsmen_stats.items()},
            "bowlerStats": {pid: s.to_document() for pid, s in self.bowler_stats.items()},
            "extras": self.extras.to_document(),
            "target": self.target,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "ScoringState":
        return cls(
            current_innings=doc.get("currentInnings", 1),
            batting_team=TeamSide(doc["battingTeam"]),
            bowling_team=TeamSide(doc["bowlingTeam"]),
            total_runs=doc.get("totalRuns", 0),
            total_wickets=doc.get("totalWickets", 0),
            total_overs=doc.get("totalOvers", 0),
            this_over=[BallToken.from_document(t) for t in doc.get("thisOver") or []],
            striker_id=doc.get("strikerId"),
            non_striker_id=doc.get("nonStrikerId"),
            current_bowler_id=doc.get("currentBowlerId"),
            previous_bowler_id=doc.get("previousBowlerId"),
            over_bowler_id=doc.get("overBowlerId"),
            relief_bowler_ids=list(doc.get("reliefBowlerIds") or []),
            batsmen_stats={pid: BatsmanStats.from_document(s) for pid, s in (doc.get("batsmenStats") or {}).items()},
            bowler_stats={pid: BowlerStats.from_document(s) for pid, s in (doc.get("bowlerStats") or {}).items()},
            extras=Extras.from_document(doc.get("extras")),
            target=doc.get("target"),
        )

    def __repr__(self):
        return f"<ScoringState inn{self.current_innings} {self.total_runs}/{self.total_wickets} ({self.overs_display})>"


@dataclass
class InningsContext:
    """Match facts the engine needs but does not own"""
    batting_squad: List[str]
    bowling_squad: List[str]
    overs_limit: int = 40
    retire_after: int = 11  # balls faced before forced retirement, 0 disables

    @property
    def squad_size(self) -> int:
        return len(self.batting_squad)

    @property
    def max_wickets(self) -> int:
        return max(self.squad_size - 1, 1)


class MatchStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass
class MatchState:
    """The parts of a match document the engine reads and writes"""
    team1: List[str]
    team2: List[str]
    format: str = "40 Overs"
    toss_winner: Optional[TeamSide] = None
    toss_choice: Optional[str] = None  # "bat" or "bowl"
    status: MatchStatus = MatchStatus.SCHEDULED
    scoring: Optional[ScoringState] = None
    innings: List[ScoringState] = field(default_factory=list)
    winner: Optional[TeamSide] = None
    result_summary: Optional[str] = None

    def squad(self, side: TeamSide) -> List[str]:
        return self.team1 if side is TeamSide.TEAM1 else self.team2
