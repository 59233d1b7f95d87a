"""Event handlers for the quiz gateway.

Each handler takes ``(registry, sid, payload)`` and returns an Outcome. They
never touch a socket, so they can be exercised without a connection. Callers
hold ``registry.lock`` for the duration of the call. Handlers raise QuizError
subclasses before mutating anything.
"""

import logging
from typing import Any, Callable, Dict

from quizroom.models import ACTIVE

from . import lifecycle, membership
from .messages import Outcome
from .registry import RoomRegistry
from .scoring import build_leaderboard, record_answer

logger = logging.getLogger(__name__)

Handler = Callable[[RoomRegistry, str, Dict[str, Any]], Outcome]


def handle_create_room(registry: RoomRegistry, sid: str, payload: Dict[str, Any]) -> Outcome:
    host_name = payload.get('hostName')
    if not isinstance(host_name, str) or not host_name.strip():
        host_name = 'Host'
    room = registry.create_room(
        sid,
        host_name.strip(),
        payload.get('questions') or [],
        desired_code=payload.get('customRoomCode'),
    )
    logger.info(
        f"[room-created] room={room.code} host={room.host_name!r} questions={len(room.questions)} "
        f"custom={bool(payload.get('customRoomCode'))}"
    )
    outcome = Outcome(join_group=room.code)
    return outcome.send('room-created', {
        'roomCode': room.code,
        'questionCount': len(room.questions),
        'isHost': True,
    }, sid)


def handle_join_room(registry: RoomRegistry, sid: str, payload: Dict[str, Any]) -> Outcome:
    player = membership.join(registry, sid, payload.get('roomCode'), payload.get('playerName'))
    room = registry.room_for(sid)
    outcome = Outcome(join_group=room.code)
    outcome.send('room-joined', {
        'roomCode': room.code,
        'isHost': False,
        'players': room.roster(),
        'hostName': room.host_name,
    }, sid)
    # The joiner is in the group by the time this goes out, so they get it too
    return outcome.send('player-joined', {
        'player': player.to_dict(),
        'players': room.roster(),
        'count': len(room.players),
    }, room.code)


def handle_start_quiz(registry: RoomRegistry, sid: str, payload: Dict[str, Any]) -> Outcome:
    room = registry.get_room(payload.get('roomCode'))
    if room is None:
        return Outcome()
    return lifecycle.start_quiz(room, sid, registry.default_time_limit)


def handle_next_question(registry: RoomRegistry, sid: str, payload: Dict[str, Any]) -> Outcome:
    room = registry.get_room(payload.get('roomCode'))
    if room is None:
        return Outcome()
    return lifecycle.host_advance(room, sid, registry.default_time_limit)


def handle_submit_answer(registry: RoomRegistry, sid: str, payload: Dict[str, Any]) -> Outcome:
    room = registry.get_room(payload.get('roomCode'))
    if room is None or room.state != ACTIVE:
        return Outcome()
    if room.get_player(sid) is None:
        logger.info(f"[answer-dropped] room={room.code} sid={sid} not on roster")
        return Outcome()

    result = record_answer(
        room, sid, payload.get('answer'), payload.get('timeSpent'),
        single_answer=registry.single_answer,
    )
    outcome = Outcome()
    outcome.send('answer-result', result.to_dict(), sid)
    return outcome.send('leaderboard-update', {'leaderboard': build_leaderboard(room)}, room.code)


def handle_disconnect(registry: RoomRegistry, sid: str, payload: Dict[str, Any]) -> Outcome:
    departure = membership.leave(registry, sid)
    if departure is None:
        return Outcome()
    room = departure.room
    outcome = Outcome()
    if departure.player is not None:
        outcome.send('player-left', {
            'playerId': sid,
            'players': room.roster(),
            'count': len(room.players),
        }, room.code)
    if departure.room_deleted:
        reason = 'host-disconnected' if departure.was_host else 'empty'
        outcome.send('room-closed', {'roomCode': room.code, 'reason': reason}, room.code)
        outcome.close_group = room.code
        outcome.cancel_timer = room.code
    return outcome


def handle_question_timeout(registry: RoomRegistry, room_code: str, question_index: int) -> Outcome:
    room = registry.get_room(room_code)
    if room is None:
        return Outcome()
    return lifecycle.timer_advance(room, question_index, registry.default_time_limit)


HANDLERS: Dict[str, Handler] = {
    'create-room': handle_create_room,
    'join-room': handle_join_room,
    'start-quiz': handle_start_quiz,
    'submit-answer': handle_submit_answer,
    'next-question': handle_next_question,
}
