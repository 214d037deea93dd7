"""
Who may walk out to bat next, and who may bowl the next over.
"""
from typing import List, Optional

from scorebook.engine.state import OVER_BALLS, ScoringState


def eligible_batsmen(state: ScoringState, squad: List[str]) -> List[str]:
    """Squad members who have not batted and are not at the crease, in squad order"""
    at_crease = {state.striker_id, state.non_striker_id}
    return [pid for pid in squad if pid not in state.batsmen_stats and pid not in at_crease]


def blocked_bowler(state: ScoringState) -> Optional[str]:
    """Bowler of the immediately completed over"""
    if state.legal_balls_in_over >= OVER_BALLS:
        # the finished over is still on the board
        return state.current_bowler_id
    return state.previous_bowler_id


def eligible_bowlers(state: ScoringState, squad: List[str]) -> List[str]:
    blocked = blocked_bowler(state)
    return [pid for pid in squad if pid != blocked]
