"""
Scoring service: read the match, run one engine transition, write it back.

Every operation re-reads the row right before mutating it and commits the
whole transition as one versioned update, so a failed or stale write leaves
the stored match exactly as it was.
"""
import logging
from typing import Callable, Dict, List, Optional, Tuple

from scorebook.config import settings
from scorebook.engine import ball_processor, innings, reversal, rotation
from scorebook.engine.errors import IllegalStateError, InvalidEventError
from scorebook.engine.state import MatchState, TeamSide
from scorebook.models.match import Match
from scorebook.store import MatchStore, StaleWriteError

logger = logging.getLogger(__name__)


class ScoringService:
    def __init__(self, store: MatchStore, retire_after: Optional[int] = None, default_overs: Optional[int] = None):
        self.store = store
        self.retire_after = settings.AUTO_RETIRE_BALLS if retire_after is None else retire_after
        self.default_overs = settings.DEFAULT_OVERS if default_overs is None else default_overs

    def _read(self, match_id: int, expected_version: Optional[int]) -> Match:
        row = self.store.load(match_id)
        if expected_version is not None and row.version != expected_version:
            raise StaleWriteError(
                f"Match {match_id} is at version {row.version}, request was based on {expected_version}"
            )
        return row

    def _context(self, state: MatchState):
        return innings.innings_context(state, self.retire_after, self.default_overs)

    def _transition(
        self,
        match_id: int,
        expected_version: Optional[int],
        action: str,
        fn: Callable[[MatchState], MatchState],
    ) -> Match:
        row = self._read(match_id, expected_version)
        state = row.to_state()
        new_state = fn(state)
        saved = self.store.save_state(match_id, row.version, new_state)
        logger.info("Match %s v%s: %s -> %r", match_id, saved.version, action, new_state.scoring)
        return saved

    def _scoring_transition(self, match_id, expected_version, action, fn) -> Match:
        """Transition on the current innings only"""
        def run(state: MatchState) -> MatchState:
            innings.ensure_mutable(state)
            if state.scoring is None:
                raise IllegalStateError("No innings in progress")
            state.scoring = fn(state.scoring, self._context(state))
            return state
        return self._transition(match_id, expected_version, action, run)

    def record_toss(self, match_id: int, winner: str, choice: str, expected_version: Optional[int] = None) -> Match:
        try:
            side = TeamSide(winner)
        except ValueError:
            raise InvalidEventError(f"Toss winner must be team1 or team2, got {winner!r}")
        if choice not in ("bat", "bowl"):
            raise InvalidEventError(f"Toss choice must be bat or bowl, got {choice!r}")
        row = self._read(match_id, expected_version)
        if row.scoring is not None:
            raise IllegalStateError("Toss cannot change once scoring has started")
        return self.store.save_toss(match_id, row.version, side.value, choice)

    def start_innings(
        self,
        match_id: int,
        striker_id: str,
        non_striker_id: str,
        bowler_id: str,
        expected_version: Optional[int] = None,
    ) -> Match:
        return self._transition(
            match_id, expected_version, "start innings",
            lambda state: innings.start_innings(state, striker_id, non_striker_id, bowler_id),
        )

    def record_ball(
        self,
        match_id: int,
        event: ball_processor.BallEvent,
        expected_version: Optional[int] = None,
    ) -> Tuple[Match, ball_processor.BallSignals]:
        signals = ball_processor.BallSignals()

        def apply(scoring, context):
            nonlocal signals
            new, signals = ball_processor.apply_ball(scoring, event, context)
            return new

        saved = self._scoring_transition(match_id, expected_version, "ball", apply)
        return saved, signals

    def undo(self, match_id: int, expected_version: Optional[int] = None) -> Match:
        def run(scoring, context):
            if not scoring.this_over:
                raise IllegalStateError("Nothing to undo in the current over")
            return reversal.undo_last_ball(scoring)
        return self._scoring_transition(match_id, expected_version, "undo", run)

    def reset_over(self, match_id: int, expected_version: Optional[int] = None) -> Match:
        def run(scoring, context):
            if not scoring.this_over:
                raise IllegalStateError("Current over has no balls to reset")
            return reversal.reset_over(scoring)
        return self._scoring_transition(match_id, expected_version, "reset over", run)

    def seat_batsman(self, match_id: int, player_id: str, expected_version: Optional[int] = None) -> Match:
        return self._scoring_transition(
            match_id, expected_version, f"new batsman {player_id}",
            lambda scoring, context: innings.seat_batsman(scoring, player_id, context),
        )

    def change_bowler(self, match_id: int, player_id: str, expected_version: Optional[int] = None) -> Match:
        return self._scoring_transition(
            match_id, expected_version, f"new bowler {player_id}",
            lambda scoring, context: innings.change_bowler(scoring, player_id, context),
        )

    def end_innings(self, match_id: int, expected_version: Optional[int] = None) -> Match:
        return self._transition(match_id, expected_version, "end innings", innings.end_innings)

    def eligible_players(self, match_id: int) -> Dict[str, List[str]]:
        state = self.store.load(match_id).to_state()
        if state.scoring is None:
            raise IllegalStateError("No innings in progress")
        context = self._context(state)
        return {
            "batsmen": rotation.eligible_batsmen(state.scoring, context.batting_squad),
            "bowlers": rotation.eligible_bowlers(state.scoring, context.bowling_squad),
        }

    def innings_complete(self, match: Match) -> bool:
        state = match.to_state()
        if state.scoring is None:
            return False
        return ball_processor.is_innings_complete(state.scoring, self._context(state))
