from scorebook.engine.ball_processor import BallEvent, BallSignals, Dismissal, apply_ball, is_innings_complete
from scorebook.engine.reversal import reset_over, undo_last_ball
from scorebook.engine.innings import (
    change_bowler, end_innings, innings_context, overs_limit, seat_batsman, start_innings,
)
from scorebook.engine.rotation import eligible_batsmen, eligible_bowlers
from scorebook.engine.errors import IllegalStateError, InvalidEventError, ScoringError

__all__ = [
    "BallEvent",
    "BallSignals",
    "Dismissal",
    "apply_ball",
    "is_innings_complete",
    "undo_last_ball",
    "reset_over",
    "start_innings",
    "seat_batsman",
    "change_bowler",
    "end_innings",
    "innings_context",
    "overs_limit",
    "eligible_batsmen",
    "eligible_bowlers",
    "ScoringError",
    "InvalidEventError",
    "IllegalStateError",
]
