from __future__ import annotations

from datetime import timedelta
from enum import IntEnum
from typing import Any

FRAME_DURATION = timedelta(milliseconds=42)


def frames_to_duration(frames: int) -> timedelta:
    """Convert a frame count to elapsed time (1 frame = 42 ms)."""
    return FRAME_DURATION * int(frames)


def duration_to_frames(duration: timedelta) -> int:
    """Convert elapsed time to whole frames, rounding down."""
    return duration // FRAME_DURATION


def format_duration(duration: timedelta) -> str:
    """Format a duration as MM:SS, or H:MM:SS from one hour up."""
    total = max(0, int(duration.total_seconds()))
    hours, rest = divmod(total, 3600)
    mins, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins:02d}:{secs:02d}"


def _normalize_name(text: str) -> str:
    return " ".join(text.replace("_", " ").split()).casefold()


class RepEnum(IntEnum):
    """Integer-backed replay enumeration with a human-readable name."""

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()

    @classmethod
    def _extra_aliases(cls, member: RepEnum) -> tuple[str, ...]:
        return ()

    @classmethod
    def parse(cls, value: Any):
        """Resolve a member from itself, its id or one of its names."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            wanted = _normalize_name(text)
            for member in cls:
                names = (member.name, member.display_name, *cls._extra_aliases(member))
                if wanted in {_normalize_name(n) for n in names}:
                    return member
        raise ValueError(f"Unknown {cls.__name__}: {value!r}")


_ENGINE_NAMES = {0: ("StarCraft", "SC"), 1: ("Brood War", "BW")}


class Engine(RepEnum):
    STARCRAFT = 0
    BROOD_WAR = 1

    @property
    def display_name(self) -> str:
        return _ENGINE_NAMES[self.value][0]

    @property
    def short_name(self) -> str:
        return _ENGINE_NAMES[self.value][1]

    @classmethod
    def _extra_aliases(cls, member: RepEnum) -> tuple[str, ...]:
        return (_ENGINE_NAMES[member.value][1],)


class Speed(RepEnum):
    SLOWEST = 0
    SLOWER = 1
    SLOW = 2
    NORMAL = 3
    FAST = 4
    FASTER = 5
    FASTEST = 6


_GAME_TYPE_SHORT_NAMES = {
    0x00: "None",
    0x01: "Custom",
    0x02: "Melee",
    0x03: "FFA",
    0x04: "1on1",
    0x05: "CTF",
    0x06: "Greed",
    0x07: "Slaughter",
    0x08: "Sudden Death",
    0x09: "Ladder",
    0x0A: "UMS",
    0x0B: "Team Melee",
    0x0C: "Team FFA",
    0x0D: "Team CTF",
    0x0F: "TvB",
    0x10: "Iron Man Ladder",
}


class GameType(RepEnum):
    NONE = 0x00
    CUSTOM = 0x01
    MELEE = 0x02
    FREE_FOR_ALL = 0x03
    ONE_ON_ONE = 0x04
    CAPTURE_THE_FLAG = 0x05
    GREED = 0x06
    SLAUGHTER = 0x07
    SUDDEN_DEATH = 0x08
    LADDER = 0x09
    USE_MAP_SETTINGS = 0x0A
    TEAM_MELEE = 0x0B
    TEAM_FREE_FOR_ALL = 0x0C
    TEAM_CAPTURE_THE_FLAG = 0x0D
    TOP_VS_BOTTOM = 0x0F
    IRON_MAN_LADDER = 0x10

    @property
    def display_name(self) -> str:
        # "Top Vs Bottom" reads badly, keep the connective lowercase
        return super().display_name.replace(" Vs ", " vs ")

    @property
    def short_name(self) -> str:
        return _GAME_TYPE_SHORT_NAMES[self.value]

    @classmethod
    def _extra_aliases(cls, member: RepEnum) -> tuple[str, ...]:
        return (_GAME_TYPE_SHORT_NAMES[member.value],)


class PlayerType(RepEnum):
    INACTIVE = 0
    COMPUTER = 1
    HUMAN = 2
    RESCUE_PASSIVE = 3
    UNUSED = 4
    COMPUTER_CONTROLLED = 5
    OPEN = 6
    NEUTRAL = 7
    CLOSED = 8

    @property
    def is_participant(self) -> bool:
        """Whether a slot of this type takes part in the game."""
        return self in (PlayerType.HUMAN, PlayerType.COMPUTER)


_RACE_LETTERS = {0: "Z", 1: "T", 2: "P", 6: "R"}


class Race(RepEnum):
    ZERG = 0
    TERRAN = 1
    PROTOSS = 2
    RANDOM = 6

    @property
    def letter(self) -> str:
        return _RACE_LETTERS[self.value]

    @classmethod
    def _extra_aliases(cls, member: RepEnum) -> tuple[str, ...]:
        return (_RACE_LETTERS[member.value],)


_COLOR_RGB = {
    0x00: 0xF40404,
    0x01: 0x0C48CC,
    0x02: 0x2CB494,
    0x03: 0x88409C,
    0x04: 0xF88C14,
    0x05: 0x703014,
    0x06: 0xCCE0D0,
    0x07: 0xFCFC38,
    0x08: 0x088008,
    0x09: 0xFCFC7C,
    0x0A: 0xECC4B0,
    0x0B: 0x4068D4,
    0x0C: 0x74A47C,
    0x0D: 0x9090B8,
    0x0E: 0x00E4FC,
    0x0F: 0x000000,
}


class Color(RepEnum):
    RED = 0x00
    BLUE = 0x01
    TEAL = 0x02
    PURPLE = 0x03
    ORANGE = 0x04
    BROWN = 0x05
    WHITE = 0x06
    YELLOW = 0x07
    GREEN = 0x08
    PALE_YELLOW = 0x09
    TAN = 0x0A
    AQUA = 0x0B
    PALE_GREEN = 0x0C
    BLUEISH_GREY = 0x0D
    CYAN = 0x0E
    BLACK = 0x0F

    @property
    def rgb(self) -> int:
        """24-bit RGB value of the color."""
        return _COLOR_RGB[self.value]
