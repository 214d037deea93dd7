"""
Ball Processor: applies one delivery to the scoring state.

`apply_ball` never mutates its input. It validates the event against the
current state first and raises before touching anything, then works on a deep
copy and returns it together with the signals the scorer has to act on.
"""
import copy
from dataclasses import dataclass
from typing import Optional, Tuple

from scorebook.engine.errors import IllegalStateError, InvalidEventError
from scorebook.engine.state import (
    OVER_BALLS, BallToken, DismissalType, ExtraKind, InningsContext,
    ScoringState, TokenKind, WicketInfo,
)
from scorebook.engine.rotation import eligible_batsmen


@dataclass
class Dismissal:
    type: DismissalType
    who: Optional[str] = None  # defaults to the striker
    fielder: Optional[str] = None
    fielder2: Optional[str] = None


@dataclass
class BallEvent:
    """What the scorer recorded for one delivery"""
    runs: int = 0
    extra: ExtraKind = ExtraKind.NONE
    is_wicket: bool = False
    dismissal: Optional[Dismissal] = None


@dataclass
class BallSignals:
    wicket_fallen: bool = False  # a crease slot is vacant, pick a batsman
    over_complete: bool = False  # pick a bowler
    innings_complete: bool = False
    dismissed_id: Optional[str] = None


def _validate(state: ScoringState, event: BallEvent, context: InningsContext):
    if not isinstance(event.runs, int) or not 0 <= event.runs <= 6:
        raise InvalidEventError(f"Runs must be between 0 and 6, got {event.runs!r}")
    if not isinstance(event.extra, ExtraKind):
        raise InvalidEventError(f"Unknown extra kind {event.extra!r}")

    if event.is_wicket:
        if event.dismissal is None or not isinstance(event.dismissal.type, DismissalType):
            raise InvalidEventError("A wicket needs a dismissal type")
        who = event.dismissal.who or state.striker_id
        if who is None:
            raise InvalidEventError("A wicket needs the dismissed batsman")
        if who not in (state.striker_id, state.non_striker_id):
            raise InvalidEventError(f"Player {who} is not at the crease")
        for fielder in (event.dismissal.fielder, event.dismissal.fielder2):
            if fielder and fielder not in context.bowling_squad:
                raise InvalidEventError(f"Fielder {fielder} is not in the fielding squad")
    elif event.dismissal is not None:
        raise InvalidEventError("Dismissal details given for a ball that is not a wicket")

    if state.current_bowler_id is None:
        raise IllegalStateError("No bowler is seated")
    if state.has_vacancy:
        raise IllegalStateError("Select the new batsman before the next ball")
    if state.legal_balls_in_over >= OVER_BALLS:
        raise IllegalStateError("Over complete, select the next bowler")
    if is_innings_complete(state, context):
        raise IllegalStateError("Innings is already complete")


def is_innings_complete(state: ScoringState, context: InningsContext) -> bool:
    if state.total_wickets >= context.max_wickets:
        return True
    if context.overs_limit and state.total_overs >= context.overs_limit:
        return True
    if state.target is not None and state.total_runs >= state.target:
        return True
    if state.is_started and state.has_vacancy and not eligible_batsmen(state, context.batting_squad):
        return True
    return False


def _token_kind(event: BallEvent, dismissal_type: Optional[DismissalType]) -> TokenKind:
    if dismissal_type is DismissalType.RETIRED:
        return TokenKind.RETIRED
    if dismissal_type is not None:
        return TokenKind.WICKET
    return TokenKind(event.extra.value) if event.extra is not ExtraKind.NONE else TokenKind.RUN


def apply_ball(
    state: ScoringState,
    event: BallEvent,
    context: InningsContext,
) -> Tuple[ScoringState, BallSignals]:
    _validate(state, event, context)

    new = copy.deepcopy(state)
    striker_id = new.striker_id
    bowler_id = new.current_bowler_id
    over_index = new.total_overs
    ball_in_over = new.legal_balls_in_over + 1

    token = BallToken(
        kind=TokenKind.RUN,
        runs=event.runs,
        extra=event.extra,
        batsman_id=striker_id,
        bowler_id=bowler_id,
    )

    # Team total and extras
    new.total_runs += token.total_runs
    if event.extra is ExtraKind.WIDE:
        new.extras.wides += token.total_runs
    elif event.extra is ExtraKind.NO_BALL:
        new.extras.no_balls += token.penalty
    elif event.extra is ExtraKind.BYE:
        new.extras.byes += event.runs
    elif event.extra is ExtraKind.LEG_BYE:
        new.extras.leg_byes += event.runs

    # Striker
    batsman = new.batsmen_stats[striker_id]
    batsman.runs += token.batsman_runs
    if token.faced:
        batsman.balls += 1
    if token.batsman_runs == 4:
        batsman.fours += 1
    elif token.batsman_runs == 6:
        batsman.sixes += 1

    # Bowler
    spell = new.bowler_stats[bowler_id]
    spell.runs += token.bowler_runs
    if token.is_legal:
        spell.balls += 1

    # Dismissal, forced retirement supersedes whatever the scorer entered
    dismissal = event.dismissal if event.is_wicket else None
    if context.retire_after and batsman.balls >= context.retire_after:
        dismissal = Dismissal(type=DismissalType.RETIRED, who=striker_id)

    signals = BallSignals()
    if dismissal is not None:
        victim = dismissal.who or striker_id
        credited = bowler_id if dismissal.type.credits_bowler else None
        new.batsmen_stats[victim].wicket_info = WicketInfo(
            type=dismissal.type,
            bowler_id=credited,
            fielder_id=dismissal.fielder,
            fielder2_id=dismissal.fielder2,
            over=over_index,
            ball=ball_in_over,
            was_striker=victim == striker_id,
        )
        if dismissal.type.counts_as_wicket:
            new.total_wickets += 1
        if credited:
            spell.wickets += 1

        if victim == new.striker_id:
            new.striker_id = None
        else:
            new.non_striker_id = None

        token.dismissed_id = victim
        signals.wicket_fallen = True
        signals.dismissed_id = victim

    token.kind = _token_kind(event, dismissal.type if dismissal else None)

    if event.runs % 2 == 1:
        new.swap_ends()

    new.this_over.append(token)

    if token.is_legal and new.legal_balls_in_over == OVER_BALLS:
        new.total_overs += 1
        new.swap_ends()
        signals.over_complete = True

    signals.innings_complete = is_innings_complete(new, context)
    return new, signals
