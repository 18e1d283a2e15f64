import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..schemas.repcore import Color, Engine, GameType, PlayerType, Race, Speed
from ..schemas.schemas import Header, Player
from .core import HeaderDataError
from .parser_utils import _ensure_str, load_header_dump

logger = logging.getLogger(__name__)


def _enum_value(value: Any) -> Any:
    """Unwrap enum objects written by the decoder as {"ID": ..., "Name": ...}."""
    if isinstance(value, Mapping):
        if "ID" in value:
            return value["ID"]
        if "Name" in value:
            return _ensure_str(value["Name"])
        raise HeaderDataError(f"Cannot read enum value from {dict(value)!r}")
    if isinstance(value, (bytes, bytearray)):
        return _ensure_str(value)
    return value


def _as_list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key) or []
    if not isinstance(value, (list, tuple)):
        raise HeaderDataError(f"Expected a list for {key!r}, got {type(value).__name__}")
    return list(value)


def _build_player(data: Any) -> Player:
    if not isinstance(data, Mapping):
        raise HeaderDataError(f"Expected a dict for a player, got {type(data).__name__}")

    return Player(
        slot_id=data.get("SlotID", 0),
        id=data.get("ID", 0),
        kind=_enum_value(data.get("Type", PlayerType.INACTIVE)),
        race=_enum_value(data.get("Race", Race.ZERG)),
        team=data.get("Team", 0),
        name=_ensure_str(data.get("Name", "")),
        color=_enum_value(data.get("Color", Color.RED)),
    )


def _collect_players(data: Mapping[str, Any]) -> tuple[list[Player], list[Player]]:
    """Build (slots, players) so that every player is the same object as its slot."""
    slots = [_build_player(entry) for entry in _as_list(data, "Slots")]

    if "Players" not in data:
        return slots, [slot for slot in slots if slot.kind.is_participant]

    by_slot_id = {slot.slot_id: slot for slot in slots}
    players: list[Player] = []
    for entry in _as_list(data, "Players"):
        player = _build_player(entry)
        existing = by_slot_id.get(player.slot_id)
        if existing is None:
            slots.append(player)
            by_slot_id[player.slot_id] = player
            existing = player
        players.append(existing)
    return slots, players


def build_header(data: Mapping[str, Any]) -> Header:
    """Build a Header from a decoded header dump."""
    if not isinstance(data, Mapping):
        raise HeaderDataError(f"Expected a dict for the header, got {type(data).__name__}")

    try:
        slots, players = _collect_players(data)

        fields: dict[str, Any] = {
            "engine": _enum_value(data.get("Engine", Engine.BROOD_WAR)),
            "frames": data.get("Frames", 0),
            "title": _ensure_str(data.get("Title", "")),
            "map_width": data.get("MapWidth", 0),
            "map_height": data.get("MapHeight", 0),
            "avail_slots_count": data.get("AvailSlotsCount", 0),
            "speed": _enum_value(data.get("Speed", Speed.FASTEST)),
            "game_type": _enum_value(data.get("Type", GameType.MELEE)),
            "sub_type": data.get("SubType", 0),
            "host": _ensure_str(data.get("Host", "")),
            "map": _ensure_str(data.get("Map", "")),
            "slots": slots,
            "players": players,
        }
        if data.get("StartTime") is not None:
            fields["start_time"] = data["StartTime"]

        return Header(**fields)
    except ValidationError as exc:
        raise HeaderDataError(f"Invalid header data: {exc}") from exc


def extract_header_from_file(path: str) -> Header:
    """Extract the replay header from a decoded header dump file."""
    header = build_header(load_header_dump(path))
    logger.debug(
        "Loaded header from %s: %d slots, %d players",
        path,
        len(header.slots),
        len(header.players),
    )
    return header
