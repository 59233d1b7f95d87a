"""Room state machine: waiting -> active -> finished.

Every transition returns an Outcome describing what to broadcast; nothing in
here talks to a socket.
"""

import logging
import time

from quizroom.errors import NotEnoughPlayers, Unauthorized
from quizroom.models import ACTIVE, FINISHED, WAITING, Room

from .messages import Outcome
from .scoring import build_leaderboard

logger = logging.getLogger(__name__)


def time_limit_for(room: Room, default_time_limit: int) -> int:
    question = room.questions[room.cursor]
    return question.time_limit or default_time_limit


def question_payload(room: Room, time_limit: int):
    question = room.questions[room.cursor]
    payload = question.to_public_dict()
    payload.update({
        'questionNumber': room.cursor + 1,
        'totalQuestions': len(room.questions),
        'timeLimit': time_limit,
    })
    return payload


def _emit_current_question(room: Room, event: str, default_time_limit: int) -> Outcome:
    time_limit = time_limit_for(room, default_time_limit)
    room.answered.clear()
    room.question_started_at = time.time()
    outcome = Outcome(timer=(room.code, room.cursor, time_limit))
    return outcome.send(event, question_payload(room, time_limit), room.code)


def start_quiz(room: Room, sid: str, default_time_limit: int) -> Outcome:
    if not room.is_host(sid):
        raise Unauthorized()
    if room.state != WAITING:
        # Idempotent start: already running or done
        return Outcome()
    if not room.players:
        raise NotEnoughPlayers()

    room.state = ACTIVE
    room.cursor = 0
    logger.info(f"[quiz-started] room={room.code} players={len(room.players)} questions={len(room.questions)}")
    return _emit_current_question(room, 'quiz-started', default_time_limit)


def finish_quiz(room: Room) -> Outcome:
    room.state = FINISHED
    room.answered.clear()
    leaderboard = build_leaderboard(room)
    winner = leaderboard[0] if leaderboard else None
    logger.info(f"[quiz-finished] room={room.code} winner={winner['name'] if winner else None}")
    outcome = Outcome(cancel_timer=room.code)
    return outcome.send('quiz-finished', {'finalLeaderboard': leaderboard, 'winner': winner}, room.code)


def advance(room: Room, default_time_limit: int) -> Outcome:
    """Move past the current question; finish once the cursor runs out."""
    if room.state != ACTIVE:
        return Outcome()
    room.cursor += 1
    if room.cursor >= len(room.questions):
        room.cursor = len(room.questions)
        return finish_quiz(room)
    logger.info(f"[next-question] room={room.code} question={room.cursor + 1}/{len(room.questions)}")
    return _emit_current_question(room, 'next-question', default_time_limit)


def host_advance(room: Room, sid: str, default_time_limit: int) -> Outcome:
    if not room.is_host(sid):
        raise Unauthorized()
    return advance(room, default_time_limit)


def timer_advance(room: Room, question_index: int, default_time_limit: int) -> Outcome:
    """Advance on timer expiry, only if the room is still on that question."""
    if room.state != ACTIVE or room.cursor != question_index:
        logger.info(
            f"[timer-stale] room={room.code} expected_question={question_index} "
            f"actual_question={room.cursor} state={room.state}"
        )
        return Outcome()
    return advance(room, default_time_limit)
