from typing import Optional, List
from sqlalchemy import String, Integer, Enum, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from scorebook.database import Base
from scorebook.engine.state import MatchState, MatchStatus, ScoringState, TeamSide


class Match(Base):
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Squads, ordered lists of user ids
    team1: Mapped[List[str]] = mapped_column(JSON, default=list)
    team2: Mapped[List[str]] = mapped_column(JSON, default=list)
    captain1_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    captain2_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    # Match info
    format: Mapped[str] = mapped_column(String(40), default="40 Overs")
    venue: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    match_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Toss
    toss_winner: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # "team1" or "team2"
    toss_choice: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # "bat" or "bowl"

    status: Mapped[MatchStatus] = mapped_column(Enum(MatchStatus), default=MatchStatus.SCHEDULED)

    # Scoring documents
    scoring: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    innings: Mapped[list] = mapped_column(JSON, default=list)

    # Attendance, read only for scoring
    checked_in_players: Mapped[List[str]] = mapped_column(JSON, default=list)
    on_my_way_players: Mapped[List[str]] = mapped_column(JSON, default=list)

    # Result
    winner: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    result_summary: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Bumped on every write, compared on every scoring write
    version: Mapped[int] = mapped_column(Integer, default=0)

    def to_state(self) -> MatchState:
        return MatchState(
            team1=list(self.team1 or []),
            team2=list(self.team2 or []),
            format=self.format,
            toss_winner=TeamSide(self.toss_winner) if self.toss_winner else None,
            toss_choice=self.toss_choice,
            status=self.status,
            scoring=ScoringState.from_document(self.scoring) if self.scoring else None,
            innings=[ScoringState.from_document(doc) for doc in self.innings or []],
            winner=TeamSide(self.winner) if self.winner else None,
            result_summary=self.result_summary,
        )

    def is_captain(self, user_id: str) -> bool:
        return user_id in (self.captain1_id, self.captain2_id)

    def __repr__(self):
        return f"<Match {self.id} {self.status.value} v{self.version}>"
