import time
from typing import Dict, Tuple

from quizroom import rooms, socketio

from .handlers import handle_question_timeout

# room code -> (question index, deadline) of the one timer allowed to fire
_pending: Dict[str, Tuple[int, float]] = {}


def schedule_question_timer(app, room_code: str, question_index: int, duration: int) -> None:
    """Arm auto-advance for the room's current question.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - No-ops when AUTO_ADVANCE is off
    - Replaces any timer already pending for the room, so a manual advance
      makes the older timer stale
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return
    if not app.config.get('AUTO_ADVANCE', True):
        return

    key = (question_index, time.time() + duration)
    _pending[room_code] = key
    app.logger.info(f"[timer-set] room={room_code} question={question_index + 1} duration={duration}s deadline={key[1]}")
    socketio.start_background_task(_worker, app, room_code, key)


def cancel_question_timer(room_code: str) -> bool:
    return _pending.pop(room_code, None) is not None


def is_pending(room_code: str) -> bool:
    return room_code in _pending


def _worker(app, room_code: str, key: Tuple[int, float]) -> None:
    sleep_for = max(0.0, key[1] - time.time())
    if sleep_for:
        socketio.sleep(sleep_for)
    fire_question_timer(app, room_code, key)


def fire_question_timer(app, room_code: str, key: Tuple[int, float]) -> None:
    """Advance the room if this timer is still the one it is waiting on."""
    from quizroom.broadcast import publish

    with app.app_context():
        with rooms.lock:
            if _pending.get(room_code) != key:
                app.logger.info(f"[timer-abort] room={room_code} question={key[0] + 1} superseded or cancelled")
                return
            _pending.pop(room_code, None)
            app.logger.info(f"[timer-fire] room={room_code} question={key[0] + 1}")
            outcome = handle_question_timeout(rooms, room_code, key[0])
            # Same critical section as the advance, so a host advance can't
            # slip in and have its timer overwritten by this one
            publish(outcome)
