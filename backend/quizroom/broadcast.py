from flask import current_app

from quizroom import rooms, socketio
from quizroom.services.quiz.messages import Outcome
from quizroom.services.quiz.scheduler import cancel_question_timer, schedule_question_timer


def publish(outcome: Outcome) -> None:
    """Send an outcome's messages, then apply its group and timer changes.

    Callers hold ``rooms.lock`` from the room mutation through to here; the
    lock is re-entrant and taken again so nothing publishes unserialised.
    Must run inside an app context. Group joins need the originating
    request and are done by the socket handler before calling this.
    """
    app = current_app._get_current_object()
    namespace = app.config.get('SOCKETIO_NAMESPACE', '/')
    with rooms.lock:
        for message in outcome.messages:
            # Use socketio.emit since this may be called from a background task
            socketio.emit(message.event, message.payload, to=message.to, namespace=namespace)
        if outcome.cancel_timer:
            cancel_question_timer(outcome.cancel_timer)
        if outcome.timer:
            schedule_question_timer(app, *outcome.timer)
        if outcome.close_group:
            socketio.close_room(outcome.close_group, namespace=namespace)
