"""
Reversal Engine: undo the last ball, or wind back the whole current over.

Each token is inverted in the opposite order to the way `apply_ball` applied
it: end-of-over rotation, run rotation, dismissal, then the counters.
"""
import copy
import logging
from dataclasses import dataclass

from scorebook.engine.errors import IllegalStateError
from scorebook.engine.state import OVER_BALLS, BallToken, ExtraKind, ScoringState

logger = logging.getLogger(__name__)


@dataclass
class ReversalSummary:
    balls: int = 0
    legal_balls: int = 0
    runs: int = 0
    wickets: int = 0


def _restore_victim(state: ScoringState, token: BallToken):
    victim = token.dismissed_id
    stats = state.batsmen_stats[victim]
    info = stats.wicket_info
    if info is None:
        raise IllegalStateError(f"No dismissal on record for {victim}")

    slot = "striker_id" if info.was_striker else "non_striker_id"
    occupant = getattr(state, slot)
    if token.replacement_id is not None:
        if occupant != token.replacement_id:
            raise IllegalStateError(
                f"Expected {token.replacement_id} in the {slot} slot, found {occupant}"
            )
        replacement = state.batsmen_stats.get(token.replacement_id)
        if replacement is not None and (replacement.balls or replacement.runs or replacement.is_out):
            raise IllegalStateError(f"Replacement {token.replacement_id} has already batted")
        state.batsmen_stats.pop(token.replacement_id, None)
    elif occupant is not None:
        raise IllegalStateError(f"The {slot} slot is not vacant")
    setattr(state, slot, victim)

    if info.type.counts_as_wicket:
        state.total_wickets -= 1
    if info.bowler_id:
        state.bowler_stats[info.bowler_id].wickets -= 1
    stats.wicket_info = None


def _invert(state: ScoringState, summary: ReversalSummary):
    """Pop the newest token off `this_over` and reverse every effect it had"""
    token = state.this_over[-1]

    if token.is_legal and state.legal_balls_in_over == OVER_BALLS:
        state.total_overs -= 1
        state.swap_ends()

    if token.runs % 2 == 1:
        state.swap_ends()

    if token.dismissed_id is not None:
        _restore_victim(state, token)
        summary.wickets += 1

    if state.striker_id != token.batsman_id:
        raise IllegalStateError(
            f"Ball was faced by {token.batsman_id} but {state.striker_id} is on strike"
        )

    batsman = state.batsmen_stats[token.batsman_id]
    batsman.runs -= token.batsman_runs
    if token.faced:
        batsman.balls -= 1
    if token.batsman_runs == 4:
        batsman.fours -= 1
    elif token.batsman_runs == 6:
        batsman.sixes -= 1

    spell = state.bowler_stats[token.bowler_id]
    spell.runs -= token.bowler_runs
    if token.is_legal:
        spell.balls -= 1

    state.total_runs -= token.total_runs
    if token.extra is ExtraKind.WIDE:
        state.extras.wides -= token.total_runs
    elif token.extra is ExtraKind.NO_BALL:
        state.extras.no_balls -= token.penalty
    elif token.extra is ExtraKind.BYE:
        state.extras.byes -= token.runs
    elif token.extra is ExtraKind.LEG_BYE:
        state.extras.leg_byes -= token.runs

    state.this_over.pop()
    summary.balls += 1
    summary.runs += token.total_runs
    if token.is_legal:
        summary.legal_balls += 1


def undo_last_ball(state: ScoringState) -> ScoringState:
    """Return the state as it was before the newest ball of this over"""
    if not state.this_over:
        return state
    new = copy.deepcopy(state)
    _invert(new, ReversalSummary())
    return new


def reset_over(state: ScoringState) -> ScoringState:
    """Return the state as it was before the current over began"""
    if not state.this_over:
        return state
    new = copy.deepcopy(state)
    summary = ReversalSummary()
    while new.this_over:
        _invert(new, summary)

    # hand the ball back to whoever opened the over
    if new.over_bowler_id is not None:
        new.current_bowler_id = new.over_bowler_id
    for pid in new.relief_bowler_ids:
        new.bowler_stats.pop(pid, None)
    new.relief_bowler_ids = []

    logger.debug(
        "Reset over %s: %d balls (%d legal), -%d runs, -%d wickets",
        new.total_overs + 1, summary.balls, summary.legal_balls, summary.runs, summary.wickets,
    )
    return new
