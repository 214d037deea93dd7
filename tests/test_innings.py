"""
Tests for innings transitions, player changes and the match result.
"""
import pytest

from scorebook.engine.ball_processor import BallEvent, apply_ball
from scorebook.engine.errors import IllegalStateError, InvalidEventError
from scorebook.engine.innings import (
    archive, change_bowler, end_innings, ensure_mutable, innings_context,
    match_result, overs_limit, seat_batsman, start_innings,
)
from scorebook.engine.state import (
    BatsmanStats, BallToken, ExtraKind, MatchStatus, ScoringState, TeamSide, TokenKind,
)


def finished_first_innings(match_state, runs=180, wickets=6, overs=40, legal_in_over=0):
    state = ScoringState(batting_team=TeamSide.TEAM1, bowling_team=TeamSide.TEAM2, current_innings=1)
    state.total_runs = runs
    state.total_wickets = wickets
    state.total_overs = overs
    state.striker_id, state.non_striker_id, state.current_bowler_id = "a7", "a8", "b3"
    state.batsmen_stats = {"a7": BatsmanStats(runs=runs), "a8": BatsmanStats()}
    state.this_over = [
        BallToken(kind=TokenKind.RUN, runs=0, extra=ExtraKind.NONE, batsman_id="a7", bowler_id="b3")
        for _ in range(legal_in_over)
    ]
    match_state.scoring = state
    match_state.status = MatchStatus.ACTIVE
    return match_state


class TestOversLimit:
    @pytest.mark.parametrize("label,expected", [
        ("T20", 20),
        ("t20", 20),
        ("35 Overs", 35),
        ("50", 50),
        ("Test", 40),
        ("", 40),
        (None, 40),
    ])
    def test_labels(self, label, expected):
        assert overs_limit(label) == expected

    def test_custom_default(self):
        assert overs_limit("Friendly", default=25) == 25

    def test_context_uses_match_format(self, match_state):
        match = start_innings(match_state, "a1", "a2", "b1")
        ctx = innings_context(match, retire_after=11)
        assert ctx.overs_limit == 20
        assert ctx.retire_after == 11
        assert ctx.max_wickets == 10


class TestStartInnings:
    def test_toss_winner_bats(self, match_state):
        match = start_innings(match_state, "a1", "a2", "b1")
        state = match.scoring
        assert state.batting_team is TeamSide.TEAM1
        assert state.current_innings == 1
        assert (state.striker_id, state.non_striker_id, state.current_bowler_id) == ("a1", "a2", "b1")
        assert set(state.batsmen_stats) == {"a1", "a2"}
        assert set(state.bowler_stats) == {"b1"}
        assert match.status is MatchStatus.ACTIVE
        assert match_state.scoring is None

    def test_toss_winner_bowls(self, match_state):
        match_state.toss_winner = TeamSide.TEAM2
        match_state.toss_choice = "bowl"
        match = start_innings(match_state, "a1", "a2", "b1")
        assert match.scoring.batting_team is TeamSide.TEAM1

    def test_needs_toss(self, match_state):
        match_state.toss_winner = None
        with pytest.raises(IllegalStateError):
            start_innings(match_state, "a1", "a2", "b1")

    def test_same_opener_twice(self, match_state):
        with pytest.raises(InvalidEventError):
            start_innings(match_state, "a1", "a1", "b1")

    def test_players_from_wrong_squad(self, match_state):
        with pytest.raises(InvalidEventError):
            start_innings(match_state, "b1", "a2", "b3")
        with pytest.raises(InvalidEventError):
            start_innings(match_state, "a1", "a2", "a3")

    def test_cannot_restart(self, match_state):
        match = start_innings(match_state, "a1", "a2", "b1")
        with pytest.raises(IllegalStateError):
            start_innings(match, "a3", "a4", "b2")


class TestPlayerChanges:
    def test_seat_requires_vacancy(self, state, context):
        with pytest.raises(IllegalStateError):
            seat_batsman(state, "a3", context)

    def test_seat_rejects_batsman_who_has_batted(self, state, context):
        from scorebook.engine.ball_processor import Dismissal
        from scorebook.engine.state import DismissalType
        out = BallEvent(is_wicket=True, dismissal=Dismissal(type=DismissalType.BOWLED))
        new, _ = apply_ball(state, out, context)
        with pytest.raises(IllegalStateError):
            seat_batsman(new, "a1", context)
        with pytest.raises(IllegalStateError):
            seat_batsman(new, "b5", context)

    def test_bowler_cannot_bowl_consecutive_overs(self, state, context):
        for _ in range(6):
            state, _ = apply_ball(state, BallEvent(), context)
        with pytest.raises(IllegalStateError):
            change_bowler(state, "b1", context)

        state = change_bowler(state, "b2", context)
        for _ in range(6):
            state, _ = apply_ball(state, BallEvent(), context)
        state = change_bowler(state, "b1", context)
        assert state.current_bowler_id == "b1"
        assert state.previous_bowler_id == "b2"

    def test_mid_over_change(self, state, context):
        state, _ = apply_ball(state, BallEvent(runs=2), context)
        new = change_bowler(state, "b4", context)
        assert new.current_bowler_id == "b4"
        assert len(new.this_over) == 1
        assert new.previous_bowler_id is None

        new, _ = apply_ball(new, BallEvent(), context)
        assert new.this_over[-1].bowler_id == "b4"
        assert new.bowler_stats["b4"].balls == 1

    def test_mid_over_change_to_same_bowler(self, state, context):
        with pytest.raises(IllegalStateError):
            change_bowler(state, "b1", context)

    def test_bowler_from_batting_side(self, state, context):
        with pytest.raises(InvalidEventError):
            change_bowler(state, "a5", context)

    def test_no_changes_once_overs_are_up(self, state, context):
        from scorebook.engine.ball_processor import Dismissal
        from scorebook.engine.reversal import undo_last_ball
        from scorebook.engine.state import DismissalType
        context.overs_limit = 1
        for _ in range(5):
            state, _ = apply_ball(state, BallEvent(), context)
        out = BallEvent(is_wicket=True, dismissal=Dismissal(type=DismissalType.BOWLED))
        last, signals = apply_ball(state, out, context)
        assert signals.innings_complete

        with pytest.raises(IllegalStateError):
            seat_batsman(last, "a3", context)
        with pytest.raises(IllegalStateError):
            change_bowler(last, "b2", context)
        # the final ball is still on the board and can be taken back
        assert undo_last_ball(last) == state

    def test_no_bowler_change_after_target_reached(self, state, context):
        state.target = 4
        state, signals = apply_ball(state, BallEvent(runs=4), context)
        assert signals.innings_complete
        with pytest.raises(IllegalStateError):
            change_bowler(state, "b2", context)


class TestEndInnings:
    def test_first_innings_archived_and_sides_swap(self, match_state):
        match = finished_first_innings(match_state)

        new = end_innings(match)

        first = new.innings[0]
        assert (first.total_runs, first.total_wickets, first.total_overs) == (180, 6, 40)
        assert first.this_over == []

        second = new.scoring
        assert second.current_innings == 2
        assert second.batting_team is TeamSide.TEAM2
        assert second.bowling_team is TeamSide.TEAM1
        assert second.total_runs == 0
        assert second.total_wickets == 0
        assert second.total_overs == 0
        assert second.batsmen_stats == {}
        assert second.bowler_stats == {}
        assert second.this_over == []
        assert second.striker_id is None
        assert second.current_bowler_id is None
        assert second.target == 181
        assert new.status is MatchStatus.ACTIVE

    def test_part_played_over_rounds_up(self, match_state):
        match = finished_first_innings(match_state, overs=38, legal_in_over=3)
        new = end_innings(match)
        assert new.innings[0].total_overs == 39

    def test_second_innings_starts_from_pending_state(self, match_state):
        match = end_innings(finished_first_innings(match_state))
        match = start_innings(match, "b1", "b2", "a1")
        assert match.scoring.batting_team is TeamSide.TEAM2
        assert match.scoring.target == 181
        assert set(match.scoring.batsmen_stats) == {"b1", "b2"}

    def test_second_innings_completes_match(self, match_state):
        match = end_innings(finished_first_innings(match_state))
        match = start_innings(match, "b1", "b2", "a1")
        match.scoring.total_runs = 150
        match.scoring.total_wickets = 10

        done = end_innings(match)

        assert done.status is MatchStatus.COMPLETED
        assert done.winner is TeamSide.TEAM1
        assert done.result_summary == "team1 won by 30 runs"
        assert len(done.innings) == 1
        assert done.scoring.current_innings == 2

        with pytest.raises(IllegalStateError):
            end_innings(done)
        with pytest.raises(IllegalStateError):
            ensure_mutable(done)

    def test_end_without_innings(self, match_state):
        with pytest.raises(IllegalStateError):
            end_innings(match_state)


class TestMatchResult:
    def _innings(self, side, runs, wickets=0):
        state = ScoringState(batting_team=side, bowling_team=side.other)
        state.total_runs = runs
        state.total_wickets = wickets
        return state

    def test_chase_successful(self):
        winner, summary = match_result(
            self._innings(TeamSide.TEAM1, 180), self._innings(TeamSide.TEAM2, 181, 4), 11
        )
        assert winner is TeamSide.TEAM2
        assert summary == "team2 won by 6 wickets"

    def test_total_defended(self):
        winner, summary = match_result(
            self._innings(TeamSide.TEAM1, 180), self._innings(TeamSide.TEAM2, 140, 10), 11
        )
        assert winner is TeamSide.TEAM1
        assert summary == "team1 won by 40 runs"

    def test_tie(self):
        winner, summary = match_result(
            self._innings(TeamSide.TEAM1, 180), self._innings(TeamSide.TEAM2, 180, 7), 11
        )
        assert winner is None
        assert summary == "Match tied"

    def test_single_margins_are_singular(self):
        _, by_run = match_result(
            self._innings(TeamSide.TEAM1, 180), self._innings(TeamSide.TEAM2, 179, 10), 11
        )
        _, by_wicket = match_result(
            self._innings(TeamSide.TEAM1, 180), self._innings(TeamSide.TEAM2, 181, 9), 11
        )
        assert by_run == "team1 won by 1 run"
        assert by_wicket == "team2 won by 1 wicket"


def test_archive_leaves_complete_over_alone(state):
    state.total_overs = 12
    archived = archive(state)
    assert archived.total_overs == 12
    assert archived is not state
