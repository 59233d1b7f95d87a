from flask import Blueprint, jsonify, request

from quizroom.services.puzzles import validate_answer

puzzles_api = Blueprint('puzzles', __name__)


@puzzles_api.route('/validate', methods=['POST'])
def validate_puzzle_answer():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    puzzle_type = data.get('puzzleType')
    if not puzzle_type:
        return jsonify({'error': 'puzzleType is required'}), 400
    result = validate_answer(puzzle_type, data.get('answer'), data.get('solution'))
    return jsonify(result.to_dict())
