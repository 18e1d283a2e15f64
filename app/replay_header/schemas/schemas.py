from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from .repcore import Color, Engine, GameType, PlayerType, Race, Speed, frames_to_duration


class Player(BaseModel):
    """A player of the game, or an unused/open/closed lobby slot."""

    model_config = ConfigDict(frozen=True)

    slot_id: int = 0
    id: int = 0
    kind: PlayerType = PlayerType.INACTIVE
    race: Race = Race.ZERG
    team: int = 0
    name: str = ""
    color: Color = Color.RED

    @field_validator("kind", mode="before")
    @classmethod
    def _parse_kind(cls, value):
        return PlayerType.parse(value)

    @field_validator("race", mode="before")
    @classmethod
    def _parse_race(cls, value):
        return Race.parse(value)

    @field_validator("color", mode="before")
    @classmethod
    def _parse_color(cls, value):
        return Color.parse(value)

    # Slot membership is by identity: two empty slots must not match each other
    def __eq__(self, other: object) -> bool:
        return self is other

    __hash__ = object.__hash__


class Header(BaseModel):
    """Replay header: game level metadata and the players of the game.

    A Header is filled once by the populator and read afterwards. The
    populator guarantees that every entry of ``players`` is also (the same
    object) in ``slots`` and that ``frames`` is non-negative; neither is
    checked here.
    """

    engine: Engine = Engine.BROOD_WAR
    # ~23.81 frames per second, 1 frame = 0.042 s
    frames: int = 0
    start_time: datetime = Field(default_factory=lambda: datetime.fromtimestamp(0, tz=timezone.utc))
    title: str = ""
    map_width: int = 0
    map_height: int = 0
    avail_slots_count: int = 0
    speed: Speed = Speed.FASTEST
    game_type: GameType = GameType.MELEE
    # Size of the "home" team, e.g. 3 in a 3v5 game
    sub_type: int = 0
    host: str = ""
    map: str = ""
    # All lobby slots including open/closed ones; never serialized
    slots: list[Player] = Field(default_factory=list, exclude=True)
    # Actual players in populator order
    players: list[Player] = Field(default_factory=list)

    _team_players: tuple[Player, ...] | None = PrivateAttr(default=None)

    @field_validator("engine", mode="before")
    @classmethod
    def _parse_engine(cls, value):
        return Engine.parse(value)

    @field_validator("speed", mode="before")
    @classmethod
    def _parse_speed(cls, value):
        return Speed.parse(value)

    @field_validator("game_type", mode="before")
    @classmethod
    def _parse_game_type(cls, value):
        return GameType.parse(value)

    @field_validator("start_time")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def model_copy(self, *, update=None, deep: bool = False) -> "Header":
        """Copy the header; the copy orders its own players on first use."""
        copied = super().model_copy(update=update, deep=deep)
        copied._team_players = None
        return copied

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Header):
            return NotImplemented
        return self.model_dump() == other.model_dump() and [s.model_dump() for s in self.slots] == [
            s.model_dump() for s in other.slots
        ]

    def duration(self) -> timedelta:
        """Return the game duration."""
        return frames_to_duration(self.frames)

    def map_size(self) -> str:
        """Return the map size in widthxheight format, e.g. "64x64"."""
        return f"{self.map_width}x{self.map_height}"

    def team_players(self) -> tuple[Player, ...]:
        """Return the actual players in team order.

        Computed on first call; later changes to ``players`` are not reflected.
        """
        if self._team_players is None:
            self._team_players = tuple(sorted(self.players, key=lambda p: p.team))
        return self._team_players

    def matchup(self) -> str:
        """Return the race letters in team order with 'v' between teams, e.g. "PTZvZTP"."""
        letters: list[str] = []
        prev_team: int | None = None
        for i, player in enumerate(self.team_players()):
            if i > 0 and player.team != prev_team:
                letters.append("v")
            letters.append(player.race.letter)
            prev_team = player.team
        return "".join(letters)

    def player_names(self) -> str:
        """Return the player names in team order, ", " within a team and " VS " between teams."""
        parts: list[str] = []
        prev_team: int | None = None
        for i, player in enumerate(self.team_players()):
            if i > 0:
                parts.append(" VS " if player.team != prev_team else ", ")
            parts.append(player.name)
            prev_team = player.team
        return "".join(parts)
