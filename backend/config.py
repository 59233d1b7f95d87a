import os


def _flag(name, default):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
        ).split(',')
        if origin.strip()
    ]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Default per-question time limit (seconds) when a question has none
    QUESTION_TIME_LIMIT_SEC = int(os.environ.get('QUESTION_TIME_LIMIT_SEC', '30'))
    # Advance to the next question automatically when the time limit runs out
    AUTO_ADVANCE = _flag('AUTO_ADVANCE', 'true')
    # Length of generated room codes (custom codes may be 4-6)
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    # Reject a second answer from the same player for the same question
    SINGLE_ANSWER_PER_QUESTION = _flag('SINGLE_ANSWER_PER_QUESTION', 'true')
