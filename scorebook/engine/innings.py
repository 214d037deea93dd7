"""
Innings Transition Controller.

Starting an innings, seating replacement batsmen and bowlers, closing an
innings out and deciding the match result.
"""
import copy
import re
from typing import Optional, Tuple

from scorebook.engine.ball_processor import is_innings_complete
from scorebook.engine.errors import IllegalStateError, InvalidEventError
from scorebook.engine.rotation import blocked_bowler, eligible_batsmen
from scorebook.engine.state import (
    OVER_BALLS, BatsmanStats, BowlerStats, InningsContext, MatchState,
    MatchStatus, ScoringState, TeamSide,
)

DEFAULT_OVERS = 40

_LEADING_NUMBER = re.compile(r"^\s*(\d+)")


def overs_limit(format_label: Optional[str], default: int = DEFAULT_OVERS) -> int:
    """Overs per innings implied by a format label like "T20" or "35 Overs" """
    if not format_label:
        return default
    label = format_label.strip().upper()
    if label == "T20":
        return 20
    match = _LEADING_NUMBER.match(label)
    if match and int(match.group(1)) > 0:
        return int(match.group(1))
    return default


def first_batting_side(match: MatchState) -> TeamSide:
    if match.toss_winner is None or match.toss_choice not in ("bat", "bowl"):
        raise IllegalStateError("Toss has not been recorded")
    if match.toss_choice == "bat":
        return match.toss_winner
    return match.toss_winner.other


def innings_context(match: MatchState, retire_after: int = 11, default_overs: int = DEFAULT_OVERS) -> InningsContext:
    if match.scoring is None:
        raise IllegalStateError("No innings in progress")
    return InningsContext(
        batting_squad=list(match.squad(match.scoring.batting_team)),
        bowling_squad=list(match.squad(match.scoring.bowling_team)),
        overs_limit=overs_limit(match.format, default_overs),
        retire_after=retire_after,
    )


def ensure_mutable(match: MatchState):
    if match.status is MatchStatus.COMPLETED:
        raise IllegalStateError("Match is completed, scoring is closed")


def start_innings(match: MatchState, striker_id: str, non_striker_id: str, bowler_id: str) -> MatchState:
    """Seat the openers and the opening bowler"""
    ensure_mutable(match)
    if match.scoring is not None and match.scoring.is_started:
        raise IllegalStateError("Innings already started")
    if striker_id == non_striker_id:
        raise InvalidEventError("Striker and non-striker cannot be the same player")

    new = copy.deepcopy(match)
    if new.scoring is None:
        batting = first_batting_side(new)
        new.scoring = ScoringState(batting_team=batting, bowling_team=batting.other, current_innings=1)
    state = new.scoring

    batting_squad = new.squad(state.batting_team)
    bowling_squad = new.squad(state.bowling_team)
    for pid in (striker_id, non_striker_id):
        if pid not in batting_squad:
            raise InvalidEventError(f"Player {pid} is not in the batting squad")
    if bowler_id not in bowling_squad:
        raise InvalidEventError(f"Player {bowler_id} is not in the bowling squad")

    state.striker_id = striker_id
    state.non_striker_id = non_striker_id
    state.current_bowler_id = bowler_id
    state.over_bowler_id = bowler_id
    state.batsmen_stats[striker_id] = BatsmanStats()
    state.batsmen_stats[non_striker_id] = BatsmanStats()
    state.bowler_stats.setdefault(bowler_id, BowlerStats())
    new.status = MatchStatus.ACTIVE
    return new


def seat_batsman(state: ScoringState, player_id: str, context: InningsContext) -> ScoringState:
    """Fill the vacant crease slot left by a dismissal or retirement"""
    if not state.has_vacancy:
        raise IllegalStateError("Both batsmen are at the crease")
    if state.striker_id is None and state.non_striker_id is None:
        raise IllegalStateError("Innings has not started")
    if is_innings_complete(state, context):
        raise IllegalStateError("Innings is complete")
    if player_id not in eligible_batsmen(state, context.batting_squad):
        raise IllegalStateError(f"Player {player_id} is not available to bat")

    new = copy.deepcopy(state)
    if new.striker_id is None:
        new.striker_id = player_id
    else:
        new.non_striker_id = player_id
    new.batsmen_stats[player_id] = BatsmanStats()

    for token in reversed(new.this_over):
        if token.dismissed_id is not None:
            if token.replacement_id is None:
                token.replacement_id = player_id
            break
    return new


def change_bowler(state: ScoringState, player_id: str, context: InningsContext) -> ScoringState:
    """Hand the ball to a new bowler; a completed over is cleared off the board"""
    if player_id not in context.bowling_squad:
        raise InvalidEventError(f"Player {player_id} is not in the bowling squad")
    if state.has_vacancy and state.is_started:
        raise IllegalStateError("Select the new batsman first")
    if is_innings_complete(state, context):
        raise IllegalStateError("Innings is complete")
    if player_id == blocked_bowler(state):
        raise IllegalStateError(f"Player {player_id} bowled the previous over")

    new = copy.deepcopy(state)
    if new.legal_balls_in_over >= OVER_BALLS:
        new.previous_bowler_id = new.current_bowler_id
        new.this_over = []
        new.over_bowler_id = player_id
        new.relief_bowler_ids = []
    elif player_id == new.current_bowler_id:
        raise IllegalStateError(f"Player {player_id} is already bowling")
    elif not new.this_over:
        new.over_bowler_id = player_id
    elif player_id not in new.bowler_stats:
        new.relief_bowler_ids.append(player_id)
    new.current_bowler_id = player_id
    new.bowler_stats.setdefault(player_id, BowlerStats())
    return new


def archive(state: ScoringState) -> ScoringState:
    """Frozen copy of a finished innings, a part-played over counts as a full one"""
    archived = copy.deepcopy(state)
    if archived.legal_balls_in_over % OVER_BALLS:
        archived.total_overs += 1
    archived.this_over = []
    return archived


def _count(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


def match_result(first: ScoringState, second: ScoringState, squad_size: int) -> Tuple[Optional[TeamSide], str]:
    target = first.total_runs + 1
    if second.total_runs >= target:
        margin = max(squad_size - 1, 1) - second.total_wickets
        return second.batting_team, f"{second.batting_team.value} won by {_count(margin, 'wicket')}"
    if second.total_runs < target - 1:
        margin = (target - 1) - second.total_runs
        return first.batting_team, f"{first.batting_team.value} won by {_count(margin, 'run')}"
    return None, "Match tied"


def end_innings(match: MatchState) -> MatchState:
    ensure_mutable(match)
    if match.scoring is None:
        raise IllegalStateError("No innings in progress")

    new = copy.deepcopy(match)
    state = new.scoring
    if state.current_innings == 1:
        new.innings.append(archive(state))
        new.scoring = ScoringState(
            batting_team=state.bowling_team,
            bowling_team=state.batting_team,
            current_innings=2,
            target=state.total_runs + 1,
        )
        return new

    first = new.innings[0] if new.innings else None
    if first is not None:
        squad_size = len(new.squad(state.batting_team))
        new.winner, new.result_summary = match_result(first, archive(state), squad_size)
    new.status = MatchStatus.COMPLETED
    return new
