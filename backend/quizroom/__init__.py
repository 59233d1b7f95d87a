import json

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from config import Config
from quizroom.services.quiz.registry import RoomRegistry

rooms = RoomRegistry()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    rooms.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from quizroom.main import main
    flask_app.register_blueprint(main)

    from quizroom.api.rooms import rooms_api
    flask_app.register_blueprint(rooms_api, url_prefix='/api/rooms')

    from quizroom.api.puzzles import puzzles_api
    flask_app.register_blueprint(puzzles_api, url_prefix='/api/puzzles')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from quizroom.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('check-questions')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def check_questions_command(path):
        """Report how many questions in a JSON file a room would accept."""
        from quizroom.models import parse_questions

        with open(path, encoding='utf-8') as fh:
            try:
                items = json.load(fh)
            except ValueError as exc:
                raise click.ClickException(f'{path} is not valid JSON: {exc}')
        if isinstance(items, dict):
            items = items.get('questions', [])
        valid = parse_questions(items)
        total = len(items) if isinstance(items, list) else 0
        click.echo(f'{len(valid)} of {total} questions are valid')
        if not valid:
            raise click.ClickException('No valid questions; a room could not be created from this file')

    flask_app.cli.add_command(check_questions_command)

    return flask_app
