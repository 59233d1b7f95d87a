from flask import Blueprint, current_app, jsonify

from quizroom import rooms
from quizroom.services.quiz.scoring import build_leaderboard

rooms_api = Blueprint('rooms', __name__)


@rooms_api.route('/<string:room_code>', methods=['GET'])
def get_room_state(room_code):
    with rooms.lock:
        room = rooms.get_room(room_code)
        if room is None:
            return jsonify({'error': 'Room not found'}), 404
        payload = room.to_dict()
        payload['leaderboard'] = build_leaderboard(room)
    # Include the default time limit so late-loading clients can show countdowns
    payload['defaultTimeLimit'] = int(current_app.config.get('QUESTION_TIME_LIMIT_SEC', 30))
    return jsonify(payload)
