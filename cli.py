#!/usr/bin/env python3
"""
Operator CLI for Scorebook
"""
import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from scorebook.auth import create_access_token
from scorebook.database import init_db, get_session
from scorebook.engine.state import ScoringState
from scorebook.models import Match, User
from scorebook.store import MatchNotFoundError, MatchStore

console = Console()


@click.group()
def cli():
    """Scorebook - club cricket live scoring"""
    pass


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.argument("user_id")
def token(user_id: str):
    """Issue an access token for an existing user"""
    session = get_session()
    try:
        user = session.query(User).filter_by(id=user_id).first()
        if not user:
            console.print(f"[red]No user with id {user_id}[/red]")
            raise SystemExit(1)
        console.print(create_access_token(user.id))
    finally:
        session.close()


def _names(session) -> dict:
    return {u.id: u.name for u in session.query(User).all()}


def print_innings(state: ScoringState, names: dict, title: str):
    """Print innings scorecard"""
    console.print(Panel(
        f"[bold]{title}[/bold]  {state.batting_team.value}  "
        f"{state.total_runs}/{state.total_wickets} ({state.overs_display} ov)  "
        f"RR {state.run_rate:.2f}"
    ))

    # Batting
    bat_table = Table(title="Batting")
    bat_table.add_column("Batter", style="cyan")
    bat_table.add_column("Dismissal")
    bat_table.add_column("R", justify="right")
    bat_table.add_column("B", justify="right")
    bat_table.add_column("4s", justify="right")
    bat_table.add_column("6s", justify="right")
    bat_table.add_column("SR", justify="right")

    for player_id, stats in state.batsmen_stats.items():
        info = stats.wicket_info
        if info is None:
            dismissal = "not out"
        else:
            dismissal = info.type.value
            if info.fielder_id:
                dismissal += f" ({names.get(info.fielder_id, info.fielder_id)})"
            if info.bowler_id:
                dismissal += f" b {names.get(info.bowler_id, info.bowler_id)}"
        bat_table.add_row(
            names.get(player_id, player_id),
            dismissal,
            str(stats.runs),
            str(stats.balls),
            str(stats.fours),
            str(stats.sixes),
            f"{stats.strike_rate:.1f}",
        )

    console.print(bat_table)
    extras = state.extras
    console.print(
        f"Extras {extras.total} (wd {extras.wides}, nb {extras.no_balls}, b {extras.byes}, lb {extras.leg_byes})"
    )

    # Bowling
    bowl_table = Table(title="Bowling")
    bowl_table.add_column("Bowler", style="magenta")
    bowl_table.add_column("O", justify="right")
    bowl_table.add_column("R", justify="right")
    bowl_table.add_column("W", justify="right")
    bowl_table.add_column("Econ", justify="right")

    for player_id, spell in state.bowler_stats.items():
        bowl_table.add_row(
            names.get(player_id, player_id),
            spell.overs_display,
            str(spell.runs),
            str(spell.wickets),
            f"{spell.economy:.1f}",
        )

    console.print(bowl_table)

    if state.this_over:
        console.print("This over: " + " ".join(token.label for token in state.this_over))


@cli.command()
@click.argument("match_id", type=int)
def scorecard(match_id: int):
    """Print the scorecard of a match"""
    session = get_session()
    try:
        match: Match = MatchStore(session).load(match_id)
    except MatchNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        session.close()
        raise SystemExit(1)

    state = match.to_state()
    names = _names(session)
    session.close()

    console.print(f"[bold]Match {match.id}[/bold] - {match.format} - [yellow]{match.status.value}[/yellow]")
    for number, innings in enumerate(state.innings, start=1):
        print_innings(innings, names, f"Innings {number}")
    if state.scoring and state.scoring.is_started:
        print_innings(state.scoring, names, f"Innings {state.scoring.current_innings}")
    if match.result_summary:
        console.print(f"[green]{match.result_summary}[/green]")


if __name__ == "__main__":
    cli()
