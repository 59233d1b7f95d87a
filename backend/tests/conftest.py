import os
import sys
import threading
import pytest

# Ensure the backend root (containing the `quizroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizroom import create_app, rooms, socketio
from quizroom.services.quiz.registry import RoomRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'
    QUESTION_TIME_LIMIT_SEC = 30
    AUTO_ADVANCE = True
    ROOM_CODE_LENGTH = 6
    SINGLE_ANSWER_PER_QUESTION = True


def registry_lock_held():
    """True when any thread, this one included, holds the registry lock."""
    result = []

    def _try():
        acquired = rooms.lock.acquire(blocking=False)
        if acquired:
            rooms.lock.release()
        result.append(not acquired)

    worker = threading.Thread(target=_try)
    worker.start()
    worker.join()
    return result[0]


def make_questions(count=3):
    return [
        {
            'question': f'Question {i + 1}?',
            'options': ['A', 'B', 'C', 'D'],
            'correctAnswer': i % 4,
        }
        for i in range(count)
    ]


@pytest.fixture()
def questions():
    return make_questions(3)


@pytest.fixture()
def registry():
    return RoomRegistry()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    rooms.clear()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    """Factory for extra Socket.IO connections; all are disconnected on teardown."""
    created = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        # The connect handler tells us our connection id
        greeting = [pkt for pkt in test_client.get_received() if pkt['name'] == 'connected']
        test_client.connection_id = greeting[0]['args'][0]['id']
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except RuntimeError:
            pass


@pytest.fixture()
def sio_client(make_sio_client):
    return make_sio_client()
