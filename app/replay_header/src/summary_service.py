import logging
from datetime import datetime

from pydantic import BaseModel, Field

from ..schemas.repcore import format_duration
from ..schemas.schemas import Header, Player
from .extract_replay_header import extract_header_from_file

logger = logging.getLogger(__name__)


class PlayerSummary(BaseModel):
    name: str
    team: int
    race: str
    kind: str
    color: str


class HeaderSummary(BaseModel):
    title: str
    map: str
    map_size: str
    host: str
    engine: str
    speed: str
    game_type: str
    start_time: datetime
    duration_seconds: float
    duration: str
    matchup: str
    player_names: str
    players: list[PlayerSummary] = Field(default_factory=list)


def _summarize_player(player: Player) -> PlayerSummary:
    return PlayerSummary(
        name=player.name,
        team=player.team,
        race=player.race.display_name,
        kind=player.kind.display_name,
        color=player.color.display_name,
    )


def summarize_header(header: Header) -> HeaderSummary:
    """Build the summary view of a header, players in team order."""
    duration = header.duration()
    return HeaderSummary(
        title=header.title,
        map=header.map,
        map_size=header.map_size(),
        host=header.host,
        engine=header.engine.display_name,
        speed=header.speed.display_name,
        game_type=header.game_type.display_name,
        start_time=header.start_time,
        duration_seconds=duration.total_seconds(),
        duration=format_duration(duration),
        matchup=header.matchup(),
        player_names=header.player_names(),
        players=[_summarize_player(p) for p in header.team_players()],
    )


def format_summary_text(header: Header) -> str:
    """Render a plain-text report of the header."""
    lines = [
        f"Title:     {header.title}",
        f"Map:       {header.map} ({header.map_size()})",
        f"Engine:    {header.engine.display_name}",
        f"Type:      {header.game_type.display_name}",
        f"Speed:     {header.speed.display_name}",
        f"Host:      {header.host}",
        f"Started:   {header.start_time.isoformat()}",
        f"Duration:  {format_duration(header.duration())}",
        f"Matchup:   {header.matchup()}",
        f"Players:   {header.player_names()}",
    ]

    prev_team: int | None = None
    for player in header.team_players():
        if player.team != prev_team:
            lines.append(f"Team {player.team}:")
            prev_team = player.team
        lines.append(f"  {player.name} ({player.race.display_name}, {player.color.display_name})")

    return "\n".join(lines) + "\n"


def summarize_file(path: str) -> HeaderSummary:
    """Load a header dump file and summarize it."""
    logger.info("Summarizing header dump: %s", path)
    summary = summarize_header(extract_header_from_file(path))
    logger.info("Summarized %s: %s on %s", path, summary.matchup or "-", summary.map)
    return summary
