from flask import current_app, request
from flask_socketio import emit, join_room

from quizroom import rooms, socketio
from quizroom.broadcast import publish
from quizroom.errors import QuizError
from quizroom.services.quiz.handlers import HANDLERS, handle_disconnect


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data):
    return data if isinstance(data, dict) else {}


def _dispatch(event: str, handler, data) -> None:
    """Run one handler and publish what it produced, all under the registry lock.

    Publishing inside the lock keeps the order of emitted events and armed
    timers the same as the order of room mutations. Domain errors go back to
    the sender only. Anything else is logged and dropped so a bad event
    can't take the server down.
    """
    sid = _get_sid()
    with rooms.lock:
        try:
            outcome = handler(rooms, sid, _payload(data))
        except QuizError as exc:
            current_app.logger.info(f"[{exc.code.lower()}] event={event} sid={sid} message={exc.message!r}")
            if not exc.silent:
                emit(exc.event, exc.to_dict())
            return
        except Exception:
            current_app.logger.exception(f"[handler-error] event={event} sid={sid}")
            return

        # Join before anything goes out so the sender is in the group for it
        if outcome.join_group:
            join_room(outcome.join_group)
        try:
            publish(outcome)
        except Exception:
            current_app.logger.exception(f"[publish-error] event={event} sid={sid}")


def handle_connect(auth=None):
    emit('connected', {'id': _get_sid()})


def handle_disconnect_event(reason=None):
    _dispatch('disconnect', handle_disconnect, None)


def _bind(event: str, handler):
    def on_event(data=None):
        _dispatch(event, handler, data)
    on_event.__name__ = f"on_{event.replace('-', '_')}"
    return on_event


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the connection lifecycle and every quiz event on `namespace`."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect_event, namespace=namespace)
    for event, handler in HANDLERS.items():
        socketio.on_event(event, _bind(event, handler), namespace=namespace)
