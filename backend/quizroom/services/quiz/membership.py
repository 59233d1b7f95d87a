import logging
from dataclasses import dataclass
from typing import Optional

from quizroom.errors import GameInProgress, RoomNotFound
from quizroom.models import WAITING, Player, Room

from .registry import RoomRegistry

logger = logging.getLogger(__name__)


@dataclass
class Departure:
    room: Room
    player: Optional[Player]
    was_host: bool
    room_deleted: bool


def _display_name(name, room: Room) -> str:
    if isinstance(name, str) and name.strip():
        return name.strip()
    return f"Player {len(room.players) + 1}"


def join(registry: RoomRegistry, sid: str, room_code, player_name) -> Player:
    room = registry.get_room(room_code)
    if room is None:
        raise RoomNotFound()
    if room.state != WAITING:
        raise GameInProgress()

    player = Player(sid=sid, name=_display_name(player_name, room))
    registry.attach(sid, room.code)
    room.players.append(player)
    room.scores[sid] = 0
    logger.info(f"[player-joined] room={room.code} player={player.name!r} count={len(room.players)}")
    return player


def leave(registry: RoomRegistry, sid: str) -> Optional[Departure]:
    """Drop a connection from whatever room it was in.

    The room is deleted when the host leaves or nobody is left on the roster.
    Returns None when the connection was not in a room.
    """
    room = registry.room_for(sid)
    registry.detach(sid)
    if room is None:
        return None

    player = room.get_player(sid)
    if player is not None:
        player.connected = False
        room.players.remove(player)
        room.scores.pop(sid, None)
        room.answered.discard(sid)

    was_host = room.is_host(sid)
    room_deleted = was_host or not room.players
    if room_deleted:
        registry.delete_room(room.code)
        logger.info(f"[room-deleted] room={room.code} host_left={was_host}")
    return Departure(room=room, player=player, was_host=was_host, room_deleted=room_deleted)
